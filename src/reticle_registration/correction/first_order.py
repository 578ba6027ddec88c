"""
First Order Correction Pipeline

Removes rigid motion and first order distortion from a displacement set in one
reversible pass:

1. center all displacements on the mean design position of the alignment sites
2. fit a rigid transform (translation + small-angle rotation) on the alignment sites
3. remove the rigid contribution from every displacement
4. fit the affine distortion on the calculation sites, keeping only the enabled terms
5. remove the distortion contribution about the alignment center from every displacement
6. move the displacements back to their original frame

Design coordinates, order, index and id are preserved; only the measured
coordinates change.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List

from ..alignment.rigid_transform import RigidTransform, RigidTransformCalculation
from ..alignment.translate_to_center import TranslateToCenter
from ..displacement.displacement import Displacement, Selection
from ..distortions.affine_transform import AffineTransformCalculation, AnyAffineTransform
from ..distortions.builder import AffineTransformBuilder, CompensationConfig, Compensations
from ..utils.config import AppConfig
from ..utils.logging import setup_logger
from .site_selection import SiteSelection, select_none

logger = setup_logger(__name__)


class Alignments(Enum):
    """Which sites define the rigid alignment."""

    ALL = "all"
    SELECTED = "selected"
    SCANNER_SELECTED = "scanner_selected"
    UNALIGNED = "unaligned"


@dataclass(frozen=True)
class FirstOrderSetup:
    alignment: Alignments = Alignments.SELECTED
    compensations: frozenset = field(default_factory=frozenset)
    selection: SiteSelection = field(default_factory=SiteSelection)

    def with_alignment(self, alignment: Alignments) -> "FirstOrderSetup":
        return replace(self, alignment=alignment)

    def with_compensations(self, *compensations: Compensations) -> "FirstOrderSetup":
        return replace(self, compensations=frozenset(compensations))

    def with_site_selection(self, selection: SiteSelection) -> "FirstOrderSetup":
        return replace(self, selection=selection)

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "FirstOrderSetup":
        selection = SiteSelection.from_classes(
            cfg.selection.alignment_classes,
            cfg.selection.calculation_classes,
            cfg.selection.excluded_classes,
        )
        return cls(
            alignment=Alignments(cfg.correction.alignment),
            compensations=frozenset(Compensations.from_string(c) for c in cfg.correction.compensations),
            selection=selection,
        )

    @property
    def compensation_config(self) -> CompensationConfig:
        return CompensationConfig.from_compensations(self.compensations)

    def rigid_selection(self) -> Selection:
        """Sites defining the rigid transform."""
        if self.alignment is Alignments.ALL:
            return self.selection.calculation
        if self.alignment is Alignments.UNALIGNED:
            return select_none
        return self.selection.alignment

    def centering_selection(self) -> Selection:
        """Sites defining the centering translation."""
        if self.alignment is Alignments.UNALIGNED:
            return self.selection.calculation
        return self.rigid_selection()

    def distortion_selection(self) -> Selection:
        """Sites defining the first order distortion fit."""
        if self.alignment is Alignments.SCANNER_SELECTED:
            return self.selection.alignment
        return self.selection.calculation


@dataclass(frozen=True)
class FirstOrderResult:
    """Corrected displacements and the transforms used, in the centered frame."""

    displacements: List[Displacement]
    centering: TranslateToCenter
    rigid_transform: RigidTransform
    affine_transform: AnyAffineTransform
    first_order: AnyAffineTransform


class FirstOrderCorrection:
    """
    Run the first order correction over a displacement collection.

    Example:
        >>> setup = FirstOrderSetup().with_compensations(Compensations.SCALE)
        >>> corrected = FirstOrderCorrection()(displacements, setup)
    """

    def __init__(self):
        self.rigid_calculation = RigidTransformCalculation()
        self.affine_calculation = AffineTransformCalculation()

    def __call__(self, displacements: Iterable[Displacement], setup: FirstOrderSetup) -> List[Displacement]:
        return self.correct(displacements, setup).displacements

    def correct(self, displacements: Iterable[Displacement], setup: FirstOrderSetup) -> FirstOrderResult:
        """
        Correct displacements and return the transforms used.

        Args:
            displacements: Input displacements
            setup: Alignment mode, compensations and site selection

        Returns:
            FirstOrderResult with corrected displacements (same order as input)

        Raises:
            ValueError: If the input is empty or carries no finite measurement
        """
        displacements = list(displacements)
        if not displacements:
            raise ValueError("Cannot correct an empty displacement collection.")
        if not any(d.has_measurement() for d in displacements):
            raise ValueError(
                f"None of the {len(displacements)} displacements carries a finite measured coordinate."
            )

        centering = TranslateToCenter.over(displacements, setup.centering_selection())
        centered = centering.apply(displacements)

        rigid = self.rigid_calculation(centered, setup.rigid_selection())
        aligned = rigid(centered)

        first_order = self.affine_calculation(aligned, setup.distortion_selection())
        # Rigid motion is defined by the alignment selection alone; the translation
        # fitted with the distortion terms is not applied.
        affine = (
            AffineTransformBuilder.from_transform(first_order)
            .with_rigid_origin()
            .configure(setup.compensation_config)
            .build()
        )
        corrected = affine(aligned)

        # Design coordinates are taken from the input so that rounding in the
        # centering round trip never alters them.
        restored = centering.reverse()(corrected)
        results = [
            Displacement.from_source(original, r.xd, r.yd)
            for original, r in zip(displacements, restored)
        ]

        logger.info(
            "First order correction of %d displacements (alignment=%s, compensations=%s): "
            "rigid=%s, affine=%s",
            len(results),
            setup.alignment.value,
            sorted(c.value for c in setup.compensations) or "none",
            "skip" if rigid.skip else f"tx={rigid.translation_x:.6g} ty={rigid.translation_y:.6g} rot={rigid.rotation:.6g}",
            "skip" if affine.skip else f"sx={affine.scale_x:.6g} sy={affine.scale_y:.6g} ox={affine.ortho_x:.6g} oy={affine.ortho_y:.6g}",
        )
        return FirstOrderResult(
            displacements=results,
            centering=centering,
            rigid_transform=rigid,
            affine_transform=affine,
            first_order=first_order,
        )
