"""
Displacement Module

The measured-site data model and descriptive statistics over site selections.
"""

from .displacement import Displacement, DisplacementClass, Selection, average
from .summary import DisplacementSummary

__all__ = [
    "Displacement",
    "DisplacementClass",
    "DisplacementSummary",
    "Selection",
    "average",
]
