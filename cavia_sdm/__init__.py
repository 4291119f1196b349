"""
Tools for guinea pig habitat suitability modelling.
"""

from .errors import (
    SDMError,
    EmptyInputError,
    UnknownBandError,
    DisjointExtentError,
    InsufficientDataError,
    ModelFitError,
    InsufficientValidCellsError,
    MismatchedGridError,
)
from .geo import BoundingBox, build_padded_extent
from .pipeline import PipelineResult, run_pipeline

__all__ = [
    'SDMError',
    'EmptyInputError',
    'UnknownBandError',
    'DisjointExtentError',
    'InsufficientDataError',
    'ModelFitError',
    'InsufficientValidCellsError',
    'MismatchedGridError',
    'BoundingBox',
    'build_padded_extent',
    'PipelineResult',
    'run_pipeline',
]
