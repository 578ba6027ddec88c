"""
Reticle Registration Package

A Python package for photomask/reticle registration analysis.
Measured feature positions are compared with their design positions and the
deviation is separated into rigid motion (translation + small-angle rotation),
first order distortion (scale, magnification, non-orthogonality) and residual
placement error. Fitting uses linear least squares on the linearized models;
partially measured sites (single axis metrology) are supported throughout.
"""

__version__ = "0.1.0"

from .displacement import *
from .alignment import *
from .distortions import *
from .correction import *
from .preprocessing import *
from .utils import *

__all__ = [
    "displacement",
    "alignment",
    "distortions",
    "correction",
    "preprocessing",
    "utils",
]
