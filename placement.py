# placement.py
"""
Produces the starting layout of a round.

Positions are drawn by rejection sampling inside the arena's placement disk
so that no two tokens start overlapping. The sampling budget is bounded; when
it runs out the last candidate is kept and the token is reported as placed
with residual overlap.
"""
import logging
import math
import numpy as np
from typing import List, NamedTuple, Sequence

from arena import Arena
from constants import DEFAULT_PLACEMENT_ATTEMPTS
from geometry import TAU, sample_disk

# --- Data Contracts ---
#
# generate_placement(identifiers, arena, rng, max_attempts=50) -> Placement:
#   - Inputs:
#     - identifiers: Sequence[str], one per token.
#     - arena: Arena, provides radius, token radius, margin and speed.
#     - rng: numpy.random.Generator, the only source of randomness.
#     - max_attempts: int, candidate positions tried per token.
#   - Outputs: Placement(names, positions (N, 2), velocities (N, 2), overlapping).
#   - Invariants:
#     - Every position lies within arena.placement_radius of the center.
#     - Every velocity has magnitude arena.speed.
#     - Tokens not listed in `overlapping` are at least 2 * token_radius
#       from every token placed before them.


class Placement(NamedTuple):
    names: List[str]
    positions: np.ndarray
    velocities: np.ndarray
    overlapping: List[str]

    @property
    def clean(self) -> bool:
        """True when every token found a non-overlapping position."""
        return not self.overlapping


def random_velocity(rng: np.random.Generator, speed: float) -> np.ndarray:
    """A velocity of magnitude `speed` in a uniformly random direction."""
    angle = rng.uniform(0.0, TAU)
    return np.array([math.cos(angle) * speed, math.sin(angle) * speed])


def generate_placement(
    identifiers: Sequence[str],
    arena: Arena,
    rng: np.random.Generator,
    max_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS
) -> Placement:
    count = len(identifiers)
    positions = np.zeros((count, 2), dtype=np.float64)
    velocities = np.zeros((count, 2), dtype=np.float64)
    overlapping = []

    min_dist_sq = (2.0 * arena.token_radius) ** 2
    inset = arena.token_radius + arena.placement_margin
    attempts = max(int(max_attempts), 1)

    for i, name in enumerate(identifiers):
        placed = positions[:i]
        for _ in range(attempts):
            candidate = sample_disk(rng, arena.center, arena.radius, inset)
            delta = placed - candidate
            if not np.any(np.einsum('ij,ij->i', delta, delta) < min_dist_sq):
                break
        else:
            # Budget exhausted; the last candidate is kept.
            overlapping.append(name)

        positions[i] = candidate
        velocities[i] = random_velocity(rng, arena.speed)

    if overlapping:
        logging.warning(
            f"Placement accepted {len(overlapping)} token(s) with residual overlap "
            f"after {attempts} attempts: {', '.join(overlapping)}"
        )
    logging.debug(f"Placed {count} tokens within radius {arena.placement_radius:.1f}.")

    return Placement(list(identifiers), positions, velocities, overlapping)
