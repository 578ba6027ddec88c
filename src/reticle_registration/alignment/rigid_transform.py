"""
Rigid Transform Fitting

Least-squares estimation of translation (tx, ty) and small-angle rotation
theta from the alignment equations of a displacement selection.

Transform variants:
- SimpleRigidTransform: fitted parameters
- SkipRigidTransform: identity, returned whenever no fit is possible
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Union

import numpy as np

from ..displacement.displacement import Displacement, Selection
from ..utils.logging import setup_logger
from .equations import solve_least_squares, to_linear_system
from .spatial_distribution import Distribution, SpatialDistribution

logger = setup_logger(__name__)

_TX, _TY, _ROT = 0, 1, 2


@dataclass(frozen=True)
class SimpleRigidTransform:
    translation_x: float
    translation_y: float
    rotation: float

    @classmethod
    def of(cls, translation_x: float, translation_y: float, rotation: float) -> "SimpleRigidTransform":
        return cls(float(translation_x), float(translation_y), float(rotation))

    @property
    def skip(self) -> bool:
        return False

    @property
    def is_identity(self) -> bool:
        return False

    def apply(self, d: Displacement) -> Displacement:
        """Remove the rigid contribution from the measured coordinates of ``d``."""
        return d.correct_by(
            self.translation_x - self.rotation * d.y,
            self.translation_y + self.rotation * d.x,
        )

    def __call__(self, displacements: Iterable[Displacement]) -> List[Displacement]:
        return [self.apply(d) for d in displacements]


@dataclass(frozen=True)
class SkipRigidTransform:
    translation_x: float = 0.0
    translation_y: float = 0.0
    rotation: float = 0.0

    @property
    def skip(self) -> bool:
        return True

    @property
    def is_identity(self) -> bool:
        return True

    def apply(self, d: Displacement) -> Displacement:
        return d

    def __call__(self, displacements: Iterable[Displacement]) -> List[Displacement]:
        return list(displacements)


RigidTransform = Union[SimpleRigidTransform, SkipRigidTransform]


class RigidTransformCalculation:
    """
    Fit a RigidTransform to the selected displacements.

    The model columns (tx, ty, theta) are reduced to what the data can support:
    - tx only with X rows, ty only with Y rows
    - theta is dropped for singular layouts or rank-deficient systems

    Any failure to solve yields SkipRigidTransform.
    """

    def __call__(self, displacements: Iterable[Displacement], selection: Selection) -> RigidTransform:
        return self.calculate(displacements, selection)

    def calculate(self, displacements: Iterable[Displacement], selection: Selection) -> RigidTransform:
        selected = [d for d in displacements if selection(d)]
        equations = [eq for d in selected for eq in d.alignment_equations()]
        finite = [eq for eq in equations if eq.is_finite()]
        if len(finite) < len(equations):
            logger.debug(
                "Dropped %d alignment equations with non-finite values.",
                len(equations) - len(finite),
            )

        if not finite:
            logger.debug(
                "No alignment equations for %d selected displacements; skipping rigid transform.",
                len(selected),
            )
            return SkipRigidTransform()

        A, b = to_linear_system(finite)

        columns = [c for c in (_TX, _TY, _ROT) if np.any(A[:, c] != 0.0)]
        if _ROT in columns:
            distribution = SpatialDistribution.of(selected).classify()
            if distribution is Distribution.SINGULARITY:
                logger.debug("Singular site layout; rotation is not fitted.")
                columns.remove(_ROT)

        if not columns:
            return SkipRigidTransform()

        try:
            solution, rank = solve_least_squares(A[:, columns], b)
            if rank < len(columns) and _ROT in columns:
                logger.debug("Rank-deficient alignment system; rotation is not fitted.")
                columns.remove(_ROT)
                solution, rank = solve_least_squares(A[:, columns], b)
        except np.linalg.LinAlgError as e:
            logger.warning("Rigid transform fit failed (%s); using identity transform.", e)
            return SkipRigidTransform()

        if rank < len(columns) or not np.all(np.isfinite(solution)):
            logger.warning(
                "Rigid transform fit is not determined (rank %d of %d); using identity transform.",
                rank,
                len(columns),
            )
            return SkipRigidTransform()

        params = np.zeros(3)
        params[columns] = solution
        transform = SimpleRigidTransform.of(*params)
        logger.debug(
            "Rigid transform from %d equations: tx=%.6g, ty=%.6g, rotation=%.6g",
            len(finite),
            transform.translation_x,
            transform.translation_y,
            transform.rotation,
        )
        return transform
