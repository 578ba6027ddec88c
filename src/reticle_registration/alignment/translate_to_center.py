"""
Centering transform for rotation fitting.

The linearized rotation model is biased by large uncorrected offsets, so the
displacements are moved so that the mean design position of the alignment
selection sits at the origin before fitting:

    centered = original - mean
    original = centered + mean

The mean is stored so that reversal is exact and does not require a re-fit.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List

from ..displacement.displacement import Displacement, Selection, average
from ..utils.logging import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class Translate:
    """Move every displacement (design and measured together) by an offset."""

    offset_x: float
    offset_y: float

    def apply(self, d: Displacement) -> Displacement:
        return d.move_by(self.offset_x, self.offset_y)

    def __call__(self, displacements: Iterable[Displacement]) -> List[Displacement]:
        return [self.apply(d) for d in displacements]


@dataclass(frozen=True)
class TranslateToCenter:
    """
    Mean design position of a selection and the means to undo centering.

    Example:
        >>> centering = TranslateToCenter.over(displacements, lambda d: True)
        >>> centered = centering.apply(displacements)
        >>> restored = centering.reverse()(centered)
    """

    mean_x: float
    mean_y: float

    @classmethod
    def over(cls, displacements: Iterable[Displacement], selection: Selection) -> "TranslateToCenter":
        """Compute the mean design position of the selected, finite displacements.

        Axes without any finite selected value are not moved.
        """
        displacements = list(displacements)
        mean_x = average(displacements, selection, lambda d: d.x)
        mean_y = average(displacements, selection, lambda d: d.y)
        if not (math.isfinite(mean_x) and math.isfinite(mean_y)):
            logger.debug(
                "No finite design coordinates in centering selection (mean=%s, %s); "
                "affected axes stay in place.",
                mean_x,
                mean_y,
            )
        return cls(
            mean_x=mean_x if math.isfinite(mean_x) else 0.0,
            mean_y=mean_y if math.isfinite(mean_y) else 0.0,
        )

    def forward(self) -> Translate:
        return Translate(-self.mean_x, -self.mean_y)

    def reverse(self) -> Translate:
        """Translation restoring the original frame of centered displacements."""
        return Translate(self.mean_x, self.mean_y)

    def apply(self, displacements: Iterable[Displacement]) -> List[Displacement]:
        return self.forward()(displacements)
