"""Pytest configuration and fixtures for arena tests."""

import numpy as np
import pytest

from arena import Arena
from simulation import RoundController


@pytest.fixture
def rng():
    """Provide a deterministic RNG for tests."""
    return np.random.default_rng(42)


@pytest.fixture
def arena():
    """The default arena: radius 220 at (300, 300), 45 degree gap at the bottom."""
    return Arena()


@pytest.fixture
def controller(arena, rng):
    """A round controller with a recorded winner callback."""
    winners = []
    ctrl = RoundController(arena, {"reset_delay_ms": 3000}, rng=rng, on_winner=winners.append)
    ctrl.winners = winners
    return ctrl


@pytest.fixture
def place():
    """
    Starts a round and overrides the placement with explicit tokens.

    Tokens are given as (name, (x, y), (vx, vy)).
    """
    def _place(controller, tokens):
        names = [t[0] for t in tokens]
        controller.init_round(names)
        controller.tokens.replace(
            names,
            [t[1] for t in tokens],
            [t[2] for t in tokens],
        )
    return _place
