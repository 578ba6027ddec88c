"""
First Order (Affine) Distortion

Scale, magnification and non-orthogonality about a pivot (cx, cy). With
x' = x - cx and y' = y - cy the model reads:

    dx = tx + scale_x * x' - ortho_x * y'
    dy = ty + scale_y * y' + ortho_y * x'

magnification is the isotropic part (scale_x + scale_y) / 2.

Transform variants:
- AffineTransform: fitted or configured parameters
- SkipAffineTransform: identity, used when every distortion term is zero
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Union

import numpy as np

from ..alignment.equations import solve_least_squares
from ..alignment.spatial_distribution import SpatialDistribution
from ..displacement.displacement import Displacement, Selection, average
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

_TX, _TY, _SX, _SY, _OX, _OY = range(6)


@dataclass(frozen=True)
class AffineTransform:
    translation_x: float = 0.0
    translation_y: float = 0.0
    scale_x: float = 0.0
    scale_y: float = 0.0
    ortho_x: float = 0.0
    ortho_y: float = 0.0
    center_x: float = 0.0
    center_y: float = 0.0
    magnification: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "magnification", 0.5 * (self.scale_x + self.scale_y))

    @property
    def skip(self) -> bool:
        return False

    @property
    def is_identity(self) -> bool:
        return False

    def contribution(self, d: Displacement) -> tuple[float, float]:
        """Systematic (dx, dy) predicted at the design position of ``d``."""
        x = d.x - self.center_x
        y = d.y - self.center_y
        return (
            self.translation_x + self.scale_x * x - self.ortho_x * y,
            self.translation_y + self.scale_y * y + self.ortho_y * x,
        )

    def apply(self, d: Displacement) -> Displacement:
        """Remove the distortion contribution from the measured coordinates of ``d``."""
        return d.correct_by(*self.contribution(d))

    def __call__(self, displacements: Iterable[Displacement]) -> List[Displacement]:
        return [self.apply(d) for d in displacements]

    def to_dict(self) -> dict:
        return {
            "translation_x": self.translation_x,
            "translation_y": self.translation_y,
            "scale_x": self.scale_x,
            "scale_y": self.scale_y,
            "magnification": self.magnification,
            "ortho_x": self.ortho_x,
            "ortho_y": self.ortho_y,
            "center_x": self.center_x,
            "center_y": self.center_y,
        }


@dataclass(frozen=True)
class SkipAffineTransform:
    translation_x: float = 0.0
    translation_y: float = 0.0
    scale_x: float = 0.0
    scale_y: float = 0.0
    ortho_x: float = 0.0
    ortho_y: float = 0.0
    center_x: float = 0.0
    center_y: float = 0.0
    magnification: float = 0.0

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


AnyAffineTransform = Union[AffineTransform, SkipAffineTransform]


class AffineTransformCalculation:
    """
    Least-squares fit of the first order model over the selected displacements.

    The pivot is the mean design position of the selection. Terms requiring an
    X spread (scale_x, ortho_y) are only fitted when the design X varies, and
    likewise for Y (scale_y, ortho_x). Underdetermined or failed fits return
    SkipAffineTransform.
    """

    def __call__(self, displacements: Iterable[Displacement], selection: Selection) -> AnyAffineTransform:
        return self.calculate(displacements, selection)

    def calculate(self, displacements: Iterable[Displacement], selection: Selection) -> AnyAffineTransform:
        selected = [d for d in displacements if selection(d)]
        distribution = SpatialDistribution.of(selected)
        if distribution.count == 0:
            logger.debug("No measured displacements in selection; skipping affine transform.")
            return SkipAffineTransform()

        cx = average(selected, Displacement.has_measurement, lambda d: d.x)
        cy = average(selected, Displacement.has_measurement, lambda d: d.y)
        cx = cx if np.isfinite(cx) else 0.0
        cy = cy if np.isfinite(cy) else 0.0

        rows = []
        deltas = []
        for d in selected:
            x = d.x - cx
            y = d.y - cy
            if np.isfinite(d.dx) and np.isfinite(y):
                rows.append((1.0, 0.0, x, 0.0, -y, 0.0))
                deltas.append(d.dx)
            if np.isfinite(d.dy) and np.isfinite(x):
                rows.append((0.0, 1.0, 0.0, y, 0.0, x))
                deltas.append(d.dy)

        if not rows:
            return SkipAffineTransform()

        A = np.array(rows, dtype=float)
        b = np.array(deltas, dtype=float)

        active = {_TX, _TY}
        if distribution.x_span.varies():
            active |= {_SX, _OY}
        if distribution.y_span.varies():
            active |= {_SY, _OX}
        columns = [c for c in sorted(active) if np.any(A[:, c] != 0.0)]

        try:
            solution, rank = solve_least_squares(A[:, columns], b)
        except np.linalg.LinAlgError as e:
            logger.warning("Affine transform fit failed (%s); using identity transform.", e)
            return SkipAffineTransform()

        if rank < len(columns) or not np.all(np.isfinite(solution)):
            logger.warning(
                "Affine transform fit is underdetermined (rank %d of %d); using identity transform.",
                rank,
                len(columns),
            )
            return SkipAffineTransform()

        params = np.zeros(6)
        params[columns] = solution
        transform = AffineTransform(
            translation_x=float(params[_TX]),
            translation_y=float(params[_TY]),
            scale_x=float(params[_SX]),
            scale_y=float(params[_SY]),
            ortho_x=float(params[_OX]),
            ortho_y=float(params[_OY]),
            center_x=float(cx),
            center_y=float(cy),
        )
        logger.debug(
            "Affine transform from %d equations (%s): %s",
            len(rows),
            distribution.classify().name,
            transform.to_dict(),
        )
        return transform
