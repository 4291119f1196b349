"""
Data loaders for occurrence tables and climate layers.
"""

from .climate import WorldClimProvider, BIOCLIM_BANDS
from .vector import load_occurrences

__all__ = [
    'WorldClimProvider',
    'BIOCLIM_BANDS',
    'load_occurrences',
]
