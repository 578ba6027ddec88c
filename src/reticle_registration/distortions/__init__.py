"""
Distortions Module

First order distortion (scale, magnification, non-orthogonality) fitting and
the builder selecting which terms are corrected.
"""

from .affine_transform import (
    AffineTransform,
    AffineTransformCalculation,
    AnyAffineTransform,
    SkipAffineTransform,
)
from .builder import AffineTransformBuilder, CompensationConfig, Compensations

__all__ = [
    "AffineTransform",
    "AffineTransformCalculation",
    "AnyAffineTransform",
    "SkipAffineTransform",
    "AffineTransformBuilder",
    "CompensationConfig",
    "Compensations",
]
