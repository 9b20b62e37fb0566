# simulation.py
"""
Handles the round lifecycle and the per-tick simulation step.

This module defines the RoundController class, which owns the only mutable
state of the contest (the RoundState). Each tick it moves every token,
resolves the wall and the gap, resolves pairwise collisions, puts any token
pushed into the wall back inside and then checks whether a single survivor
remains. After a winner is announced it schedules a one-shot reset that
repopulates the arena once the presentation cool-down has elapsed in
simulated time.
"""
import logging
import numpy as np
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from arena import Arena
from boundary import resolve_boundary
from collisions import resolve_collisions
from constants import DEFAULT_PLACEMENT_ATTEMPTS, DEFAULT_RESET_DELAY_MS, FPS
from placement import Placement, generate_placement
from tokens import TokenStore

# --- Data Contracts ---
#
# class RoundController:
#   - __init__(self, arena, params, rng=None, on_winner=None):
#     - Inputs:
#       - arena: validated Arena.
#       - params: the "round" section of config.json.
#         - "seed": int
#         - "placement_attempts": int
#         - "reset_delay_ms": float
#       - rng: optional numpy.random.Generator; overrides "seed".
#       - on_winner: optional Callable[[str], None].
#
#   - init_round(self, identifiers: Sequence[str]) -> Placement:
#     - Side Effects: Replaces every token, clears the winner flag, cancels
#       any pending reset.
#
#   - tick(self, dt_ms: Optional[float] = None) -> TickReport:
#     - Side Effects: Advances simulated time, moves and resolves tokens,
#       fires on_winner at most once per round, runs a due reset.
#     - Invariants: Token count never increases within a round. At the end
#       of every tick each token is within the radius, or in the gap sector
#       within radius + token_radius.


class Phase(Enum):
    RUNNING = "running"
    PRESENTING = "presenting"
    EMPTY = "empty"


class TickReport(NamedTuple):
    eliminated: List[str]
    reflections: int
    collisions: int
    winner: Optional[str] = None
    reset: bool = False


class ScheduledReset(NamedTuple):
    """A one-shot request to start the next round at `due_ms`."""
    due_ms: float
    identifiers: List[str]


class RoundState:
    """
    The mutable state of one round: active tokens and the winner bookkeeping.
    """
    def __init__(self):
        self.store = TokenStore()
        self.phase = Phase.EMPTY
        self.winner_announced = False
        self.winner: Optional[str] = None
        self.round_number = 0
        self.pending_reset: Optional[ScheduledReset] = None


def unique_identifiers(identifiers: Sequence[str]) -> List[str]:
    """Drops repeated identifiers, keeping the first occurrence."""
    seen = set()
    unique = []
    for name in identifiers:
        name = str(name)
        if name in seen:
            logging.warning(f"Duplicate contestant '{name}' ignored.")
            continue
        seen.add(name)
        unique.append(name)
    return unique


class RoundController:
    """
    Drives rounds of the contest from placement to a single survivor.
    """
    def __init__(
        self,
        arena: Arena,
        params: Optional[Dict[str, Any]] = None,
        rng: Optional[np.random.Generator] = None,
        on_winner: Optional[Callable[[str], None]] = None
    ):
        params = params if params is not None else {}
        self.arena = arena
        self.placement_attempts = int(params.get('placement_attempts', DEFAULT_PLACEMENT_ATTEMPTS))
        self.reset_delay_ms = float(params.get('reset_delay_ms', DEFAULT_RESET_DELAY_MS))
        self.frame_ms = 1000.0 / FPS
        self.on_winner = on_winner

        # All randomness is controlled by a single master seed.
        self.rng = rng if rng is not None else np.random.default_rng(params.get('seed'))

        self.state = RoundState()
        self.identifiers: List[str] = []
        self.elapsed_ms = 0.0

        logging.info(
            f"Round controller initialized (reset delay {self.reset_delay_ms:.0f} ms, "
            f"{self.placement_attempts} placement attempts)."
        )

    # --- Read-only views for the presentation layer ---

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def winner(self) -> Optional[str]:
        return self.state.winner

    @property
    def round_number(self) -> int:
        return self.state.round_number

    @property
    def tokens(self) -> TokenStore:
        return self.state.store

    def get_active_tokens(self) -> List[Dict[str, Any]]:
        return self.state.store.snapshot()

    def get_remaining_count(self) -> int:
        return self.state.store.count

    def presentation_remaining_ms(self) -> float:
        """Time left before the pending reset fires, or 0.0 if none is pending."""
        pending = self.state.pending_reset
        if pending is None:
            return 0.0
        return max(pending.due_ms - self.elapsed_ms, 0.0)

    # --- Lifecycle ---

    def init_round(self, identifiers: Sequence[str]) -> Placement:
        """
        Starts a new round with one token per identifier.
        """
        names = unique_identifiers(identifiers)
        placement = generate_placement(names, self.arena, self.rng, self.placement_attempts)

        state = self.state
        state.store.replace(placement.names, placement.positions, placement.velocities)
        state.winner_announced = False
        state.winner = None
        state.pending_reset = None
        state.round_number += 1
        state.phase = Phase.RUNNING if names else Phase.EMPTY
        self.identifiers = names

        if names:
            logging.info(f"Round {state.round_number} started with {len(names)} contestants.")
        else:
            logging.warning(f"Round {state.round_number} started with no contestants; nothing to simulate.")
        return placement

    def reset(self) -> Placement:
        """Restarts the current contestants immediately."""
        return self.init_round(self.identifiers)

    def tick(self, dt_ms: Optional[float] = None) -> TickReport:
        """
        Executes one time step of the simulation.
        """
        state = self.state
        self.elapsed_ms += self.frame_ms if dt_ms is None else float(dt_ms)

        if state.phase is Phase.EMPTY:
            return TickReport([], 0, 0)

        pending = state.pending_reset
        if pending is not None and self.elapsed_ms >= pending.due_ms:
            state.pending_reset = None
            logging.info(f"Presentation finished. Resetting arena for round {state.round_number + 1}.")
            self.init_round(pending.identifiers)
            return TickReport([], 0, 0, reset=True)

        # A round that starts with a single contestant is already decided.
        if state.phase is Phase.RUNNING and state.store.count <= 1:
            return TickReport([], 0, 0, winner=self._finish_round())

        # 1. Move every token by its velocity
        state.store.move()

        # 2. Wall reflection and gap elimination
        boundary = resolve_boundary(state.store, self.arena)

        # 3. Pairwise collisions
        collisions = resolve_collisions(state.store, self.arena)

        # 4. Pushes may have moved tokens past the wall
        contained = resolve_boundary(state.store, self.arena, outward_only=True)

        # 5. Survivor check
        winner = None
        if state.phase is Phase.RUNNING and state.store.count <= 1:
            winner = self._finish_round()

        return TickReport(
            boundary.eliminated + contained.eliminated,
            boundary.reflections + contained.reflections,
            collisions,
            winner
        )

    def _finish_round(self) -> Optional[str]:
        """
        Ends a running round: announces the survivor (or a draw) and
        schedules the one-shot reset.
        """
        state = self.state
        if state.winner_announced:
            return None

        state.winner_announced = True
        state.phase = Phase.PRESENTING
        state.pending_reset = ScheduledReset(
            self.elapsed_ms + self.reset_delay_ms, list(self.identifiers)
        )

        if state.store.count == 0:
            logging.warning(
                f"Round {state.round_number} ended with no survivors "
                f"(simultaneous elimination). No winner declared."
            )
            return None

        state.winner = state.store.names[0]
        logging.info(f"Round {state.round_number} winner: {state.winner.upper()}!")
        if self.on_winner is not None:
            self.on_winner(state.winner)
        return state.winner
