# boundary.py
"""
Containment of tokens by the circular wall and elimination through the gap.

All tokens are classified in one vectorized pass, so the outcome for a token
never depends on which other tokens were processed before it. Removals are
then applied to the store highest index first.
"""
import logging
import numpy as np
from typing import List, NamedTuple

from arena import Arena
from geometry import angle_in_gap, angle_of
from tokens import TokenStore

# --- Data Contracts ---
#
# resolve_boundary(store: TokenStore, arena: Arena, outward_only: bool = False) -> BoundaryReport:
#   - Inputs: a store whose positions have already been advanced this tick.
#   - Outputs: BoundaryReport(eliminated identifiers, number of reflections).
#   - Side Effects:
#     - Tokens in the gap sector at distance >= radius + token_radius are
#       removed from the store.
#     - Tokens beyond the radius outside the gap get their velocity mirrored
#       about the wall normal and are placed at radius - token_radius.
#       With outward_only, only those moving away from the center are
#       mirrored; every such token is still placed back inside.
#   - Invariants: After the call every remaining token is either within
#     `radius` of the center or inside the gap sector within
#     `radius + token_radius`. Reflection never changes speed.


class BoundaryReport(NamedTuple):
    eliminated: List[str]
    reflections: int


def reflect(velocities: np.ndarray, normals: np.ndarray) -> np.ndarray:
    """
    Mirrors each velocity about its wall normal: v - 2 (v . n) n.

    The tangential component is kept and the normal component inverted.
    """
    dots = np.einsum('ij,ij->i', velocities, normals)
    return velocities - 2.0 * dots[:, np.newaxis] * normals


def resolve_boundary(store: TokenStore, arena: Arena, outward_only: bool = False) -> BoundaryReport:
    """
    Reflects, clamps and eliminates tokens that are past the wall.

    With `outward_only`, tokens already heading back inside are clamped to the
    wall without having their velocity mirrored. This is the containment pass
    that follows collision pushes.
    """
    if store.count == 0:
        return BoundaryReport([], 0)

    center = np.asarray(arena.center, dtype=np.float64)
    offsets = store.positions - center
    dist = np.hypot(offsets[:, 0], offsets[:, 1])

    outside = dist > arena.radius
    if not outside.any():
        return BoundaryReport([], 0)

    in_gap = angle_in_gap(
        angle_of(offsets[:, 0], offsets[:, 1]), arena.gap_center, arena.gap_width
    )
    eliminate = outside & in_gap & (dist >= arena.exit_radius)
    clamp = outside & ~in_gap

    reflections = 0
    if clamp.any():
        # dist > radius > 0 here, so the normals are well defined.
        normals = offsets[clamp] / dist[clamp, np.newaxis]
        velocities = store.velocities[clamp]
        bounce = np.ones(len(normals), dtype=bool)
        if outward_only:
            bounce = np.einsum('ij,ij->i', velocities, normals) > 0.0
        velocities[bounce] = reflect(velocities[bounce], normals[bounce])
        store.velocities[clamp] = velocities
        store.positions[clamp] = center + normals * (arena.radius - arena.token_radius)
        reflections = int(np.count_nonzero(bounce))

    eliminated = store.remove(np.flatnonzero(eliminate))
    for name in eliminated:
        logging.info(f"Token '{name}' exited through the gap. {store.count} remaining.")

    return BoundaryReport(eliminated, reflections)
