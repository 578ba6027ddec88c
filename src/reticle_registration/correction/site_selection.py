"""
Site selection predicates.

A SiteSelection bundles the predicate choosing alignment sites (rigid fit) and
the predicate choosing calculation sites (distortion fit and statistics).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..displacement.displacement import Displacement, DisplacementClass, Selection


def select_all(d: Displacement) -> bool:
    return True


def select_none(d: Displacement) -> bool:
    return False


def of_types(*classes: DisplacementClass) -> Selection:
    """Predicate matching displacements of any of the given classes."""
    wanted = frozenset(classes)

    def predicate(d: Displacement) -> bool:
        return any(d.is_of_type(c) for c in wanted)

    return predicate


@dataclass(frozen=True)
class SiteSelection:
    alignment: Selection = select_all
    calculation: Selection = select_all

    @classmethod
    def of(cls, alignment: Selection, calculation: Selection) -> "SiteSelection":
        if alignment is None or calculation is None:
            raise ValueError("Alignment and calculation selections must not be None.")
        return cls(alignment=alignment, calculation=calculation)

    @classmethod
    def from_classes(
        cls,
        alignment_classes: Iterable[str],
        calculation_classes: Optional[Iterable[str]] = None,
        excluded_classes: Iterable[str] = (),
    ) -> "SiteSelection":
        """Build predicates from DisplacementClass names.

        ``calculation_classes=None`` selects every class for calculation.
        """
        alignment = of_types(*(DisplacementClass.from_string(c) for c in alignment_classes))
        if calculation_classes is None:
            calculation = select_all
        else:
            calculation = of_types(*(DisplacementClass.from_string(c) for c in calculation_classes))
        selection = cls.of(alignment, calculation)

        excluded = [DisplacementClass.from_string(c) for c in excluded_classes]
        if excluded:
            selection = selection.remove(of_types(*excluded))
        return selection

    def remove(self, predicate: Selection) -> "SiteSelection":
        """Exclude matching displacements from both selections."""
        alignment = self.alignment
        calculation = self.calculation
        return SiteSelection(
            alignment=lambda d: alignment(d) and not predicate(d),
            calculation=lambda d: calculation(d) and not predicate(d),
        )
