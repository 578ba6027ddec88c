"""
Spatial Distribution Classification

Classifies the geometric layout of a set of displacements from the spans of
their design coordinates:

- AREA: both X and Y vary
- HORIZONTAL: only X varies
- VERTICAL: only Y varies
- SINGULARITY: neither varies (single site, coincident sites, ...)

Only displacements with at least one measured axis contribute. The
classification is a fold over immutable accumulators, so consumption order
does not matter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce
from typing import Iterable

from ..displacement.displacement import Displacement

SPAN_TOLERANCE = 1e-11


class Distribution(Enum):
    AREA = "area"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    SINGULARITY = "singularity"


@dataclass(frozen=True)
class Span:
    """Closed [low, high] interval; empty until the first value arrives."""

    low: float = math.inf
    high: float = -math.inf

    def include(self, value: float) -> "Span":
        if not math.isfinite(value):
            return self
        return Span(min(self.low, value), max(self.high, value))

    @property
    def width(self) -> float:
        if self.high < self.low:
            return 0.0
        return self.high - self.low

    def varies(self, tolerance: float = SPAN_TOLERANCE) -> bool:
        return self.width > tolerance


@dataclass(frozen=True)
class SpatialDistribution:
    """Accumulated design coordinate spans of all contributing displacements."""

    x_span: Span = Span()
    y_span: Span = Span()
    count: int = 0

    @classmethod
    def of(cls, displacements: Iterable[Displacement]) -> "SpatialDistribution":
        return reduce(SpatialDistribution.consume, displacements, cls())

    def consume(self, d: Displacement) -> "SpatialDistribution":
        """Return a new accumulator including ``d`` when it carries a measurement."""
        if not any(True for _ in d.alignment_equations()):
            return self
        return replace(
            self,
            x_span=self.x_span.include(d.x),
            y_span=self.y_span.include(d.y),
            count=self.count + 1,
        )

    def classify(self) -> Distribution:
        if self.count == 0:
            raise RuntimeError(
                "Could not determine data distribution as no valid "
                "displacements have been processed yet."
            )
        return classify_spans(self.x_span, self.y_span)


def classify_spans(x_span: Span, y_span: Span) -> Distribution:
    x_varies = x_span.varies()
    y_varies = y_span.varies()
    if x_varies and y_varies:
        return Distribution.AREA
    if x_varies:
        return Distribution.HORIZONTAL
    if y_varies:
        return Distribution.VERTICAL
    return Distribution.SINGULARITY
