"""
Alignment equations for the linearized rigid-motion model.

Each measured axis of a displacement contributes one row:

    X: dx = tx - theta * y
    Y: dy = ty + theta * x

This is the small-angle approximation of a rotation by theta about the origin
plus a translation (tx, ty). It is not valid for large angles.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Tuple

import numpy as np

if TYPE_CHECKING:
    from ..displacement.displacement import Displacement


class Axis(Enum):
    X = "x"
    Y = "y"


@dataclass(frozen=True)
class AlignmentEquation:
    axis: Axis
    translation_x: float
    translation_y: float
    rotation: float
    delta: float

    @classmethod
    def for_x(cls, d: "Displacement") -> "AlignmentEquation":
        return cls(Axis.X, 1.0, 0.0, -d.y, d.dx)

    @classmethod
    def for_y(cls, d: "Displacement") -> "AlignmentEquation":
        return cls(Axis.Y, 0.0, 1.0, d.x, d.dy)

    @property
    def coefficients(self) -> Tuple[float, float, float]:
        return (self.translation_x, self.translation_y, self.rotation)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.coefficients)) and np.isfinite(self.delta))


def to_linear_system(equations: Iterable[AlignmentEquation]) -> Tuple[np.ndarray, np.ndarray]:
    """Stack equations into a design matrix (N x 3) and observation vector (N)."""
    rows: List[Tuple[float, float, float]] = []
    deltas: List[float] = []
    for eq in equations:
        rows.append(eq.coefficients)
        deltas.append(eq.delta)
    A = np.array(rows, dtype=float).reshape(-1, 3)
    b = np.array(deltas, dtype=float)
    return A, b


def solve_least_squares(A: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, int]:
    """
    Solve min ||A x - b|| with SVD based least squares.

    Columns are scaled to unit norm before solving, so that translation
    columns (ones) and rotation columns (coordinates) are balanced.

    Returns:
        Tuple of (solution, rank of A)

    Raises:
        numpy.linalg.LinAlgError: If the SVD does not converge
    """
    norms = np.linalg.norm(A, axis=0)
    norms[norms == 0.0] = 1.0
    solution, _, rank, _ = np.linalg.lstsq(A / norms, b, rcond=None)
    return solution / norms, int(rank)
