"""
Alignment Module

Rigid alignment of displacement sets: linearized alignment equations, the
spatial distribution classifier, least-squares rigid transform fitting and the
centering transform used to stabilize rotation fitting.
"""

from .equations import AlignmentEquation, Axis
from .spatial_distribution import Distribution, SpatialDistribution
from .rigid_transform import (
    RigidTransform,
    RigidTransformCalculation,
    SimpleRigidTransform,
    SkipRigidTransform,
)
from .translate_to_center import Translate, TranslateToCenter

__all__ = [
    "AlignmentEquation",
    "Axis",
    "Distribution",
    "SpatialDistribution",
    "RigidTransform",
    "RigidTransformCalculation",
    "SimpleRigidTransform",
    "SkipRigidTransform",
    "Translate",
    "TranslateToCenter",
]
