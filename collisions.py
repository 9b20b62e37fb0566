# collisions.py
"""
Pairwise collision detection and resolution between tokens.

Every unordered pair is tested once per tick. Overlapping pairs are pushed
apart symmetrically to exactly touching distance and then exchange their
velocities. The pass is not iterated to convergence; overlaps created by a
push are left for the next tick.
"""
import numpy as np
from numba import jit

from arena import Arena
from constants import COINCIDENT_EPSILON
from tokens import TokenStore

# --- Data Contracts ---
#
# resolve_collisions(store: TokenStore, arena: Arena) -> int:
#   - Inputs: the store after the boundary pass of this tick.
#   - Outputs: number of overlapping pairs resolved.
#   - Side Effects: Modifies store.positions and store.velocities in place.
#   - Invariants:
#     - Token count is unchanged.
#     - For each resolved pair the multiset of velocity vectors is unchanged.
#     - No NaN is produced: coincident centers are not pushed apart.


@jit(nopython=True)
def _resolve_collisions_numba(positions, velocities, token_radius, epsilon):
    """
    Numba-jitted O(n^2) pair loop.

    Pairs are visited in index order, so a token pushed by an earlier pair is
    tested at its new position against later partners.
    """
    count = positions.shape[0]
    min_dist = 2.0 * token_radius
    resolved = 0

    for i in range(count):
        for j in range(i + 1, count):
            dx = positions[i, 0] - positions[j, 0]
            dy = positions[i, 1] - positions[j, 1]
            dist = np.sqrt(dx * dx + dy * dy)

            if dist >= min_dist:
                continue

            # Coincident centers have no separating direction.
            if dist > epsilon:
                half_overlap = (min_dist - dist) / 2.0
                nx = dx / dist
                ny = dy / dist
                positions[i, 0] += nx * half_overlap
                positions[i, 1] += ny * half_overlap
                positions[j, 0] -= nx * half_overlap
                positions[j, 1] -= ny * half_overlap

            vx = velocities[i, 0]
            vy = velocities[i, 1]
            velocities[i, 0] = velocities[j, 0]
            velocities[i, 1] = velocities[j, 1]
            velocities[j, 0] = vx
            velocities[j, 1] = vy
            resolved += 1

    return resolved


def resolve_collisions(store: TokenStore, arena: Arena) -> int:
    if store.count < 2:
        return 0
    return int(_resolve_collisions_numba(
        store.positions, store.velocities,
        float(arena.token_radius), COINCIDENT_EPSILON
    ))
