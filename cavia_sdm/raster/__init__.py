# cavia_sdm/raster/__init__.py
# Band selection, cropping and point extraction for environmental layer stacks.
from .processing import (
    band_names,
    select_layers,
    check_matching_bands,
    stack_extent,
    crop_stack,
    valid_cell_mask,
    valid_cells,
    extract_values_at_points,
)

__all__ = [
    "band_names",
    "select_layers",
    "check_matching_bands",
    "stack_extent",
    "crop_stack",
    "valid_cell_mask",
    "valid_cells",
    "extract_values_at_points",
]
