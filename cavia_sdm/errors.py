"""
Error types raised by the SDM pipeline stages.

Every stage checks its own preconditions and raises one of these rather than
handing a degenerate (empty or misaligned) result to the next stage.
"""


class SDMError(Exception):
    """Base class for all pipeline errors."""


class EmptyInputError(SDMError, ValueError):
    """An operation needs at least one record but received none."""


class UnknownBandError(SDMError, KeyError):
    """A band identifier is not present in an environmental layer stack."""

    def __str__(self) -> str:
        # KeyError quotes its message, keep it readable
        return str(self.args[0]) if self.args else ""


class DisjointExtentError(SDMError, ValueError):
    """A bounding box does not overlap the raster it is applied to."""


class InsufficientDataError(SDMError, ValueError):
    """Too few records to form the requested partition."""


class ModelFitError(SDMError, RuntimeError):
    """The suitability model could not be fitted."""


class InsufficientValidCellsError(SDMError, ValueError):
    """Fewer valid raster cells than requested samples."""


class MismatchedGridError(SDMError, ValueError):
    """Two surfaces do not share the same grid."""
