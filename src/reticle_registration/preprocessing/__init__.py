"""
Data Preprocessing Module

Loading of measured displacement tables.
"""

from .loader import DisplacementLoader

__all__ = [
    "DisplacementLoader",
]
