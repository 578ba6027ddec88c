"""
Displacement Data Model

A Displacement binds together everything needed to evaluate registration at a
single site of a mask: the design (reference) position (x, y), the measured
position (xd, yd) and the derived deviation (dx, dy).

Either measured coordinate may be NaN, meaning the axis was not measured. Such
values are carried along unchanged and excluded from all averages and fits.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Optional

import numpy as np

if TYPE_CHECKING:
    from ..alignment.equations import AlignmentEquation
    from .summary import DisplacementSummary


class DisplacementClass(Enum):
    """Role of a site on the mask."""

    REG = "regular measurement site"
    ALIGN = "alignment mark"
    REG_ALIGN = "regular site also used for alignment"
    INFO_ONLY = "info only, never used for calculation"

    @classmethod
    def from_string(cls, value: str) -> "DisplacementClass":
        """Resolve a class by member name (case-insensitive)."""
        key = str(value).strip().upper()
        try:
            return cls[key]
        except KeyError:
            raise ValueError(
                f"Unknown displacement class '{value}'. "
                f"Expected one of: {', '.join(m.name for m in cls)}"
            ) from None


Selection = Callable[["Displacement"], bool]


@dataclass(frozen=True)
class Displacement:
    """
    Immutable record of one measured site.

    Attributes:
        index: Creation order (e.g. row number in a table)
        id: Arbitrary site label
        x, y: Design coordinates
        xd, yd: Measured coordinates (NaN when not measured)
        site_class: Role of the site
        dx, dy: Deviation xd - x and yd - y, computed at construction
    """

    index: int
    id: int
    x: float
    y: float
    xd: float
    yd: float
    site_class: DisplacementClass = DisplacementClass.REG
    dx: float = field(init=False)
    dy: float = field(init=False)

    def __post_init__(self):
        if self.site_class is None:
            raise ValueError("site_class must not be None")
        object.__setattr__(self, "dx", self.xd - self.x)
        object.__setattr__(self, "dy", self.yd - self.y)

    @classmethod
    def at(
        cls,
        index: int,
        id: int,
        x: float,
        y: float,
        xd: Optional[float] = None,
        yd: Optional[float] = None,
        site_class: DisplacementClass = DisplacementClass.REG,
    ) -> "Displacement":
        """Create a displacement from raw values.

        When xd/yd are omitted the site is undisplaced (measured == design).
        """
        return cls(
            index=int(index),
            id=int(id),
            x=float(x),
            y=float(y),
            xd=float(x if xd is None else xd),
            yd=float(y if yd is None else yd),
            site_class=site_class,
        )

    @classmethod
    def from_source(cls, source: "Displacement", xd: float, yd: float) -> "Displacement":
        """Same site and design position as ``source`` with a new measurement."""
        return cls(source.index, source.id, source.x, source.y, xd, yd, source.site_class)

    def move_by(self, offset_x: float, offset_y: float) -> "Displacement":
        """Translate design and measured coordinates together."""
        return Displacement(
            self.index,
            self.id,
            self.x + offset_x,
            self.y + offset_y,
            self.xd + offset_x,
            self.yd + offset_y,
            self.site_class,
        )

    def correct_by(self, dx: float, dy: float) -> "Displacement":
        """Subtract (dx, dy) from the measured coordinates only."""
        return Displacement(
            self.index,
            self.id,
            self.x,
            self.y,
            self.xd - dx,
            self.yd - dy,
            self.site_class,
        )

    def is_of_type(self, other: DisplacementClass) -> bool:
        return self.site_class == other

    def has_measurement(self) -> bool:
        """True when at least one measured axis is finite."""
        return math.isfinite(self.xd) or math.isfinite(self.yd)

    def alignment_equations(self) -> Iterator["AlignmentEquation"]:
        """Rigid-fit rows for every measured axis (zero, one or two)."""
        from ..alignment.equations import AlignmentEquation

        if math.isfinite(self.xd):
            yield AlignmentEquation.for_x(self)
        if math.isfinite(self.yd):
            yield AlignmentEquation.for_y(self)

    @staticmethod
    def summarize(
        displacements: Iterable["Displacement"],
        selection: Selection,
    ) -> "DisplacementSummary":
        """Descriptive statistics over the selected displacements."""
        from .summary import DisplacementSummary

        return DisplacementSummary.over(displacements, selection)

    def __str__(self) -> str:
        return (
            f"Displacement[type={self.site_class.name} id={self.id} "
            f"x={self.x}, y={self.y}, xd={self.xd}, yd={self.yd}, "
            f"dx={self.dx}, dy={self.dy}]"
        )


def average(
    displacements: Iterable[Displacement],
    selection: Selection,
    mapper: Callable[[Displacement], float],
) -> float:
    """Mean of the finite mapped values of the selected displacements.

    Returns NaN when no finite value remains.
    """
    values = np.array([mapper(d) for d in displacements if selection(d)], dtype=float)
    values = values[np.isfinite(values)]
    if values.size == 0:
        return float("nan")
    return float(np.mean(values))
