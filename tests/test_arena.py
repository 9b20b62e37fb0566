"""Tests for arena configuration."""

import math

import pytest

from arena import Arena


class TestArenaConfig:

    def test_defaults_match_reference_arena(self):
        arena = Arena()
        assert arena.center == (300.0, 300.0)
        assert arena.radius == 220.0
        assert arena.token_radius == 18.0
        assert arena.speed == 4.5
        assert arena.gap_center == pytest.approx(math.pi / 2)
        assert arena.gap_width == pytest.approx(math.pi / 4)
        assert arena.exit_radius == 238.0
        assert arena.placement_radius == 197.0

    def test_from_config_converts_degrees(self):
        arena = Arena.from_config({
            "center": [100, 150],
            "radius": 90,
            "token_radius": 10,
            "gap_center_deg": 0,
            "gap_width_deg": 60,
            "speed": 2,
        })
        assert arena.center == (100.0, 150.0)
        assert arena.gap_center == pytest.approx(0.0)
        assert arena.gap_width == pytest.approx(math.pi / 3)
        assert arena.gap_start == pytest.approx(-math.pi / 6)
        assert arena.gap_end == pytest.approx(math.pi / 6)
        assert arena.placement_margin == 5.0

    def test_from_config_empty_section_uses_defaults(self):
        assert Arena.from_config({}) == Arena()

    @pytest.mark.parametrize("params", [
        {"radius": 10, "token_radius": 18},
        {"token_radius": 0},
        {"gap_width_deg": 0},
        {"gap_width_deg": 360},
        {"speed": -1},
        {"placement_margin": -2},
    ])
    def test_invalid_geometry_is_rejected(self, params):
        with pytest.raises(ValueError):
            Arena.from_config(params)

    def test_arena_is_immutable(self):
        arena = Arena()
        with pytest.raises(AttributeError):
            arena.radius = 10
