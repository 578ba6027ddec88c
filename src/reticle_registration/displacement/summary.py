"""
Descriptive statistics over a displacement selection.

Reports mean, range and 3-sigma of dx/dy together with the alignment
(translation, rotation) and first order (scale, shear) parameters fitted over
the same selection, so that uncorrected and corrected data can be compared
side by side. Never raises on empty or unmeasured input; missing values are
reported as NaN.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable

import numpy as np

from .displacement import Displacement, Selection


def _describe(values: np.ndarray) -> dict:
    values = values[np.isfinite(values)]
    if values.size == 0:
        nan = float("nan")
        return {"mean": nan, "min": nan, "max": nan, "sigma3": nan}
    sigma3 = 3.0 * float(np.std(values, ddof=1)) if values.size > 1 else float("nan")
    return {
        "mean": float(np.mean(values)),
        "min": float(np.min(values)),
        "max": float(np.max(values)),
        "sigma3": sigma3,
    }


@dataclass(frozen=True)
class DisplacementSummary:
    count: int
    mean_x: float
    mean_y: float
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    sigma3_x: float
    sigma3_y: float
    translation_x: float
    translation_y: float
    rotation: float
    scale_x: float
    scale_y: float
    magnification: float
    ortho_x: float
    ortho_y: float

    @classmethod
    def over(cls, displacements: Iterable[Displacement], selection: Selection) -> "DisplacementSummary":
        from ..alignment.rigid_transform import RigidTransformCalculation
        from ..alignment.translate_to_center import TranslateToCenter
        from ..distortions.affine_transform import AffineTransformCalculation

        selected = [d for d in displacements if selection(d)]
        stats_x = _describe(np.array([d.dx for d in selected], dtype=float))
        stats_y = _describe(np.array([d.dy for d in selected], dtype=float))

        centered = TranslateToCenter.over(selected, Displacement.has_measurement).apply(selected)
        rigid = RigidTransformCalculation()(centered, lambda d: True)
        first_order = AffineTransformCalculation()(rigid(centered), lambda d: True)

        return cls(
            count=len(selected),
            mean_x=stats_x["mean"],
            mean_y=stats_y["mean"],
            min_x=stats_x["min"],
            max_x=stats_x["max"],
            min_y=stats_y["min"],
            max_y=stats_y["max"],
            sigma3_x=stats_x["sigma3"],
            sigma3_y=stats_y["sigma3"],
            translation_x=rigid.translation_x,
            translation_y=rigid.translation_y,
            rotation=rigid.rotation,
            scale_x=first_order.scale_x,
            scale_y=first_order.scale_y,
            magnification=first_order.magnification,
            ortho_x=first_order.ortho_x,
            ortho_y=first_order.ortho_y,
        )

    def to_dict(self) -> dict:
        return asdict(self)
