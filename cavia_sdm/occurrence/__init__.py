"""
Occurrence data processing functionality for SDM.
"""

from .cleaning import (
    drop_invalid_coordinates,
    drop_duplicate_coordinates,
    filter_to_study_area,
    to_geodataframe,
)
from .partition import assign_folds, partition_occurrences
from .sampling import sample_pseudo_absences

__all__ = [
    'drop_invalid_coordinates',
    'drop_duplicate_coordinates',
    'filter_to_study_area',
    'to_geodataframe',
    'assign_folds',
    'partition_occurrences',
    'sample_pseudo_absences',
]
