"""
Correction Module

Orchestrates centering, rigid alignment and first order distortion removal
into one correction pass over a displacement collection.
"""

from ..distortions.builder import Compensations
from .site_selection import SiteSelection, of_types, select_all, select_none
from .first_order import (
    Alignments,
    FirstOrderCorrection,
    FirstOrderResult,
    FirstOrderSetup,
)

__all__ = [
    "Alignments",
    "Compensations",
    "FirstOrderCorrection",
    "FirstOrderResult",
    "FirstOrderSetup",
    "SiteSelection",
    "of_types",
    "select_all",
    "select_none",
]
