# tokens.py
"""
Manages the state of all active tokens in the arena.

This module defines the TokenStore class, which is responsible for storing
token data (identifier, position, velocity) in parallel containers: a list
of names and NumPy arrays for the numeric state.
"""
import logging
import numpy as np
from typing import Any, Dict, Iterable, List, Sequence

# --- Data Contracts ---
#
# class TokenStore:
#   - replace(self, names, positions, velocities) -> None:
#     - Inputs:
#       - names: Sequence[str], one unique identifier per token.
#       - positions: array-like of shape (N, 2).
#       - velocities: array-like of shape (N, 2).
#     - Side Effects: Discards every existing token.
#
#   - remove(self, indices: Iterable[int]) -> List[str]:
#     - Outputs: identifiers of the removed tokens, in removal order.
#     - Side Effects: Removes tokens highest index first so earlier
#       indices stay valid while removing.
#
#   - Invariants:
#     - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#     - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#     - len(self.names) == N.


class TokenStore:
    """
    A container for all active tokens, managing their state via NumPy arrays.
    """
    def __init__(self):
        self.names: List[str] = []
        self.positions = np.zeros((0, 2), dtype=np.float64)
        self.velocities = np.zeros((0, 2), dtype=np.float64)

    def __len__(self) -> int:
        return len(self.names)

    @property
    def count(self) -> int:
        return len(self.names)

    def replace(self, names: Sequence[str], positions, velocities) -> None:
        """Replaces the entire contents of the store."""
        positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        velocities = np.array(velocities, dtype=np.float64).reshape(-1, 2)
        if not (len(names) == positions.shape[0] == velocities.shape[0]):
            raise ValueError(
                f"Token data length mismatch: {len(names)} names, "
                f"{positions.shape[0]} positions, {velocities.shape[0]} velocities."
            )
        self.names = list(names)
        self.positions = positions
        self.velocities = velocities
        logging.debug(
            f"Token store repopulated. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}"
        )

    def remove(self, indices: Iterable[int]) -> List[str]:
        """Removes the tokens at the given indices, back to front."""
        order = sorted(set(int(i) for i in indices), reverse=True)
        if not order:
            return []
        removed = [self.names.pop(i) for i in order]
        self.positions = np.delete(self.positions, order, axis=0)
        self.velocities = np.delete(self.velocities, order, axis=0)
        return removed

    def move(self) -> None:
        """Applies one tick of velocity to every position."""
        self.positions += self.velocities

    def snapshot(self) -> List[Dict[str, Any]]:
        """Read-only copy of identifiers and positions for rendering."""
        return [
            {"id": name, "x": float(pos[0]), "y": float(pos[1])}
            for name, pos in zip(self.names, self.positions)
        ]
