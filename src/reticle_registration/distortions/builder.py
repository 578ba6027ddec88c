"""
Configurable first order correction.

AffineTransformBuilder starts from a fitted AffineTransform and selects which
distortion terms take part in the correction. Translation and pivot belong to
the rigid stage: the translation fitted along with the distortion terms only
absorbs offsets of the distortion selection and is replaced through
`with_rigid_origin`. Every toggle returns a new builder.

    >>> correction = (
    ...     AffineTransformBuilder.from_transform(fitted)
    ...     .with_rigid_origin()
    ...     .disable_ortho_xy()
    ...     .use_magnification()
    ...     .build()
    ... )
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

from .affine_transform import AffineTransform, AnyAffineTransform, SkipAffineTransform


class Compensations(Enum):
    SCALE = "scale"
    ORTHO = "ortho"
    MAGNIFICATION = "magnification"

    @classmethod
    def from_string(cls, value: str) -> "Compensations":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown compensation '{value}'. "
                f"Expected one of: {', '.join(m.value for m in cls)}"
            ) from None


@dataclass(frozen=True)
class CompensationConfig:
    """Distortion terms enabled for correction."""

    scale: bool = False
    magnification: bool = False
    ortho: bool = False

    @classmethod
    def from_compensations(cls, compensations: Iterable[Compensations]) -> "CompensationConfig":
        enabled = set(compensations)
        return cls(
            scale=Compensations.SCALE in enabled,
            magnification=Compensations.MAGNIFICATION in enabled,
            ortho=Compensations.ORTHO in enabled,
        )


@dataclass(frozen=True)
class AffineTransformBuilder:
    scale_x: float = 0.0
    scale_y: float = 0.0
    magnification: float = 0.0
    ortho_x: float = 0.0
    ortho_y: float = 0.0
    translation_x: float = 0.0
    translation_y: float = 0.0
    center_x: float = 0.0
    center_y: float = 0.0

    @classmethod
    def from_transform(cls, first_order: AnyAffineTransform) -> "AffineTransformBuilder":
        return cls(
            scale_x=first_order.scale_x,
            scale_y=first_order.scale_y,
            magnification=first_order.magnification,
            ortho_x=first_order.ortho_x,
            ortho_y=first_order.ortho_y,
            translation_x=first_order.translation_x,
            translation_y=first_order.translation_y,
            center_x=first_order.center_x,
            center_y=first_order.center_y,
        )

    def with_rigid_origin(
        self,
        translation_x: float = 0.0,
        translation_y: float = 0.0,
        center_x: float = 0.0,
        center_y: float = 0.0,
    ) -> "AffineTransformBuilder":
        """Take translation and pivot from the rigid stage.

        In a frame that is centered and already rigidly corrected, the defaults
        apply: no translation left and the pivot at the origin.
        """
        return replace(
            self,
            translation_x=translation_x,
            translation_y=translation_y,
            center_x=center_x,
            center_y=center_y,
        )

    def disable_ortho_xy(self) -> "AffineTransformBuilder":
        return replace(self, ortho_x=0.0, ortho_y=0.0)

    def use_magnification(self) -> "AffineTransformBuilder":
        return replace(self, scale_x=self.magnification, scale_y=self.magnification)

    def disable_scale_xy(self) -> "AffineTransformBuilder":
        return replace(self, scale_x=0.0, scale_y=0.0)

    def disable_all(self) -> "AffineTransformBuilder":
        return replace(self, scale_x=0.0, scale_y=0.0, ortho_x=0.0, ortho_y=0.0)

    def configure(self, config: CompensationConfig) -> "AffineTransformBuilder":
        builder = self
        if not config.ortho:
            builder = builder.disable_ortho_xy()
        if config.magnification:
            builder = builder.use_magnification()
        elif not config.scale:
            builder = builder.disable_scale_xy()
        return builder

    def build(self) -> AnyAffineTransform:
        """AffineTransform with the configured terms, or SkipAffineTransform if none remain."""
        if self.scale_x == 0.0 and self.scale_y == 0.0 and self.ortho_x == 0.0 and self.ortho_y == 0.0:
            return SkipAffineTransform()
        return AffineTransform(
            translation_x=self.translation_x,
            translation_y=self.translation_y,
            scale_x=self.scale_x,
            scale_y=self.scale_y,
            ortho_x=self.ortho_x,
            ortho_y=self.ortho_y,
            center_x=self.center_x,
            center_y=self.center_y,
        )
