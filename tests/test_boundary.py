"""Tests for wall reflection and gap elimination.

Covers:
- Exit through the gap once the token clears radius + token_radius
- The gap's depth (in the gap sector but not yet clear)
- Specular reflection off the solid wall and the position clamp
- Containment of many tokens after a single pass
"""

import math

import numpy as np
import pytest

from arena import Arena
from boundary import reflect, resolve_boundary
from geometry import angle_in_gap, angle_of
from tokens import TokenStore


def store_with(tokens):
    store = TokenStore()
    store.replace([t[0] for t in tokens], [t[1] for t in tokens], [t[2] for t in tokens])
    return store


class TestGapElimination:

    def test_token_aimed_at_gap_exits_in_one_tick(self, arena):
        # Gap centered at pi/2, which is straight down on screen.
        store = store_with([("runner", (300.0, 300.0), (0.0, 240.0))])
        store.move()
        report = resolve_boundary(store, arena)

        assert report.eliminated == ["runner"]
        assert report.reflections == 0
        assert store.count == 0

    def test_token_in_gap_without_clearing_depth_is_untouched(self, arena):
        position = (300.0, 300.0 + arena.radius + 5.0)
        store = store_with([("lingerer", position, (0.0, 1.0))])
        report = resolve_boundary(store, arena)

        assert report.eliminated == []
        assert report.reflections == 0
        assert store.positions[0].tolist() == list(position)
        assert store.velocities[0].tolist() == [0.0, 1.0]

    def test_token_exactly_at_exit_radius_is_eliminated(self, arena):
        store = store_with([("edge", (300.0, 300.0 + arena.exit_radius), (0.0, 0.0))])
        assert resolve_boundary(store, arena).eliminated == ["edge"]

    def test_simultaneous_eliminations_keep_survivor_order(self, arena):
        far = arena.exit_radius + 10.0
        store = store_with([
            ("out1", (300.0, 300.0 + far), (0.0, 0.0)),
            ("stay1", (300.0, 300.0), (0.0, 0.0)),
            ("out2", (300.0 + 5.0, 300.0 + far), (0.0, 0.0)),
            ("stay2", (250.0, 250.0), (1.0, 0.0)),
            ("out3", (300.0 - 5.0, 300.0 + far), (0.0, 0.0)),
        ])
        report = resolve_boundary(store, arena)

        assert sorted(report.eliminated) == ["out1", "out2", "out3"]
        assert store.names == ["stay1", "stay2"]
        assert store.positions.tolist() == [[300.0, 300.0], [250.0, 250.0]]
        assert store.velocities.tolist() == [[0.0, 0.0], [1.0, 0.0]]

    def test_gap_across_angle_zero(self):
        arena = Arena(gap_center=0.0, gap_width=math.pi / 2)
        store = store_with([
            ("east", (300.0 + arena.exit_radius + 1.0, 300.0), (0.0, 0.0)),
            ("north_east", (300.0 + 230.0, 300.0 - 90.0), (0.0, 0.0)),
        ])
        report = resolve_boundary(store, arena)
        assert sorted(report.eliminated) == ["east", "north_east"]


class TestWallReflection:

    def test_token_hitting_wall_square_on_reverses(self, arena):
        # Angle 0 is 90 degrees away from the gap center.
        store = store_with([("bouncer", (300.0, 300.0), (230.0, 0.0))])
        store.move()
        report = resolve_boundary(store, arena)

        assert report.eliminated == []
        assert report.reflections == 1
        assert store.velocities[0].tolist() == pytest.approx([-230.0, 0.0])
        assert store.positions[0].tolist() == pytest.approx([300.0 + arena.radius - arena.token_radius, 300.0])

    def test_oblique_hit_mirrors_about_normal(self, arena):
        velocity = np.array([230.0, 50.0])
        store = store_with([("glancer", (300.0, 300.0), velocity)])
        store.move()
        offset = store.positions[0] - np.asarray(arena.center)
        normal = offset / np.linalg.norm(offset)
        tangent = np.array([-normal[1], normal[0]])

        resolve_boundary(store, arena)
        after = store.velocities[0]

        assert np.dot(after, normal) == pytest.approx(-np.dot(velocity, normal))
        assert np.dot(after, tangent) == pytest.approx(np.dot(velocity, tangent))
        assert np.linalg.norm(after) == pytest.approx(np.linalg.norm(velocity))
        assert np.linalg.norm(store.positions[0] - np.asarray(arena.center)) == pytest.approx(
            arena.radius - arena.token_radius
        )

    def test_token_inside_arena_is_untouched(self, arena):
        store = store_with([("inside", (300.0 + arena.radius, 300.0), (3.0, 4.0))])
        report = resolve_boundary(store, arena)
        assert report.reflections == 0
        assert store.positions[0].tolist() == [300.0 + arena.radius, 300.0]

    def test_reflect_preserves_speed(self, rng):
        velocities = rng.normal(size=(50, 2)) * 5.0
        angles = rng.uniform(0.0, 2 * math.pi, size=50)
        normals = np.column_stack([np.cos(angles), np.sin(angles)])
        reflected = reflect(velocities, normals)
        assert np.allclose(np.linalg.norm(reflected, axis=1), np.linalg.norm(velocities, axis=1))


class TestContainment:

    def test_remaining_tokens_are_contained(self, arena, rng):
        count = 300
        angles = rng.uniform(0.0, 2 * math.pi, size=count)
        radii = rng.uniform(0.0, arena.radius + 3 * arena.token_radius, size=count)
        positions = np.column_stack([
            arena.center[0] + np.cos(angles) * radii,
            arena.center[1] + np.sin(angles) * radii,
        ])
        velocities = rng.normal(size=(count, 2)) * arena.speed
        speeds_before = dict(zip([f"t{i}" for i in range(count)], np.linalg.norm(velocities, axis=1)))
        store = store_with([(f"t{i}", positions[i], velocities[i]) for i in range(count)])

        resolve_boundary(store, arena)

        offsets = store.positions - np.asarray(arena.center)
        dist = np.hypot(offsets[:, 0], offsets[:, 1])
        in_gap = angle_in_gap(angle_of(offsets[:, 0], offsets[:, 1]), arena.gap_center, arena.gap_width)
        assert np.all((dist <= arena.radius + 1e-9) | (in_gap & (dist < arena.exit_radius)))
        assert not np.isnan(store.positions).any()

        for name, velocity in zip(store.names, store.velocities):
            assert np.linalg.norm(velocity) == pytest.approx(speeds_before[name])

    def test_empty_store(self, arena):
        report = resolve_boundary(TokenStore(), arena)
        assert report.eliminated == []
        assert report.reflections == 0


class TestOutwardOnlyContainment:

    def test_inward_moving_token_is_clamped_without_mirroring(self, arena):
        store = store_with([("pushed", (300.0 + arena.radius + 10.0, 300.0), (-2.0, 1.0))])
        report = resolve_boundary(store, arena, outward_only=True)

        assert report.reflections == 0
        assert store.velocities[0].tolist() == [-2.0, 1.0]
        assert store.positions[0].tolist() == pytest.approx([300.0 + arena.radius - arena.token_radius, 300.0])

    def test_outward_moving_token_is_mirrored(self, arena):
        store = store_with([("pushed", (300.0 + arena.radius + 10.0, 300.0), (2.0, 1.0))])
        report = resolve_boundary(store, arena, outward_only=True)

        assert report.reflections == 1
        assert store.velocities[0].tolist() == pytest.approx([-2.0, 1.0])

    def test_gap_rules_are_unchanged(self, arena):
        store = store_with([
            ("shallow", (300.0, 300.0 + arena.radius + 5.0), (0.0, -1.0)),
            ("gone", (300.0, 300.0 + arena.exit_radius + 1.0), (0.0, -1.0)),
        ])
        report = resolve_boundary(store, arena, outward_only=True)

        assert report.eliminated == ["gone"]
        assert store.names == ["shallow"]
        assert store.positions[0].tolist() == [300.0, 300.0 + arena.radius + 5.0]
