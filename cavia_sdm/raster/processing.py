import logging
from typing import Iterable, List

import numpy as np
import pandas as pd
import xarray as xr
from affine import Affine
import rioxarray  # noqa: F401  registers the .rio accessor

from cavia_sdm.errors import DisjointExtentError, UnknownBandError
from cavia_sdm.geo import BoundingBox, LAT_COL, LON_COL

logger = logging.getLogger(__name__)


def band_names(stack: xr.Dataset) -> List[str]:
    return [str(name) for name in stack.data_vars]


def select_layers(stack: xr.Dataset, exclude: Iterable[str]) -> xr.Dataset:
    """
    Drops the excluded bands from a layer stack.

    The remaining bands keep their original order. Every excluded band must be
    present: a name that is not in the stack usually means the configuration
    and the data have drifted apart, so it is an error rather than a no-op.
    """
    exclude = list(exclude)
    available = band_names(stack)
    missing = [name for name in exclude if name not in available]
    if missing:
        raise UnknownBandError(
            f"Cannot exclude bands not present in the stack: {missing}. Available: {available}"
        )
    selected = stack.drop_vars(exclude)
    logger.info(f"Selected {len(selected.data_vars)} of {len(available)} bands, excluded {exclude}")
    return selected


def check_matching_bands(first: xr.Dataset, second: xr.Dataset) -> None:
    """Raises UnknownBandError unless both stacks carry the same bands in the same order."""
    first_bands = band_names(first)
    second_bands = band_names(second)
    if first_bands != second_bands:
        raise UnknownBandError(
            f"Layer stacks carry different bands: {first_bands} vs {second_bands}"
        )


def stack_extent(stack: xr.Dataset) -> BoundingBox:
    """The outer edges of the stack's grid (cell edges, not centres)."""
    return BoundingBox.from_bounds(stack.rio.bounds())


def crop_stack(stack: xr.Dataset, bbox: BoundingBox) -> xr.Dataset:
    """
    Crops every band to the part of the grid covered by `bbox`.

    A cell is kept when its centre falls inside the intersection of the box
    and the stack's extent (edges inclusive), so cropping to the stack's own
    extent returns the whole grid.

    Args:
        stack: The environmental layer stack.
        bbox: The box to crop to, in the stack's coordinates.

    Returns:
        xr.Dataset: A new, cropped stack.
    """
    extent = stack_extent(stack)
    overlap = extent.intersection(bbox)
    if overlap is None:
        raise DisjointExtentError(f"Box {bbox} does not intersect the raster extent {extent}.")

    x = stack.x.values
    y = stack.y.values
    # rio.clip_box selects by rounded window bounds, not by cell centre
    x_idx = np.flatnonzero((x >= overlap.min_lon) & (x <= overlap.max_lon))
    y_idx = np.flatnonzero((y >= overlap.min_lat) & (y <= overlap.max_lat))
    if len(x_idx) == 0 or len(y_idx) == 0:
        raise DisjointExtentError(
            f"Box {bbox} intersects the raster extent {extent} but covers no cell centre."
        )

    res_x, res_y = stack.rio.resolution()
    cropped = stack.isel(x=x_idx, y=y_idx)
    # From the source resolution so a single row or column keeps a usable transform
    origin = Affine.translation(x[x_idx[0]] - res_x / 2, y[y_idx[0]] - res_y / 2)
    transform = origin * Affine.scale(res_x, res_y)
    cropped = cropped.rio.write_transform(transform)
    logger.info(
        f"Cropped stack from {stack.sizes['y']}x{stack.sizes['x']} "
        f"to {cropped.sizes['y']}x{cropped.sizes['x']} cells"
    )
    return cropped


def valid_cell_mask(stack: xr.Dataset) -> xr.DataArray:
    """True where every band holds data."""
    return stack.to_dataarray().notnull().all(dim="variable").transpose("y", "x")


def valid_cells(stack: xr.Dataset) -> pd.DataFrame:
    """
    Cell centres with data in every band.

    Returns:
        DataFrame with the coordinate columns plus `row` and `col` grid indices.
    """
    rows, cols = np.nonzero(valid_cell_mask(stack).values)
    return pd.DataFrame(
        {
            LAT_COL: stack.y.values[rows],
            LON_COL: stack.x.values[cols],
            "row": rows,
            "col": cols,
        }
    )


def extract_values_at_points(
    stack: xr.Dataset,
    points: pd.DataFrame,
    lat_col: str = LAT_COL,
    lon_col: str = LON_COL,
) -> pd.DataFrame:
    """
    Reads every band at the cell containing each point.

    Points outside the stack's extent get NaN rather than the value of the
    nearest edge cell.

    Returns:
        DataFrame with one column per band, indexed like `points`.
    """
    lons = points[lon_col].to_numpy(dtype=float)
    lats = points[lat_col].to_numpy(dtype=float)

    if len(points) == 0:
        return pd.DataFrame(columns=band_names(stack), index=points.index, dtype=float)

    sampled = stack.sel(
        x=xr.DataArray(lons, dims="points"),
        y=xr.DataArray(lats, dims="points"),
        method="nearest",
    )
    values = pd.DataFrame(
        {name: sampled[name].values.astype(float) for name in band_names(stack)},
        index=points.index,
    )

    extent = stack_extent(stack)
    outside = ~(
        (lons >= extent.min_lon) & (lons <= extent.max_lon)
        & (lats >= extent.min_lat) & (lats <= extent.max_lat)
    )
    if outside.any():
        logger.warning(f"{int(outside.sum())} points fall outside the raster extent.")
        values.loc[outside, :] = np.nan
    return values
