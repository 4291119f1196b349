import logging
from typing import Optional

import numpy as np
import xarray as xr
import geopandas as gpd

from cavia_sdm.errors import InsufficientValidCellsError
from cavia_sdm.geo import WGS84, LAT_COL, LON_COL
from cavia_sdm.raster.processing import valid_cells

logger = logging.getLogger(__name__)


def sample_pseudo_absences(
    stack: xr.Dataset,
    n_points: int = 1000,
    seed: Optional[int] = None,
) -> gpd.GeoDataFrame:
    """
    Sample pseudo-absence (background) points from the valid cells of a stack.

    Cells are drawn uniformly without replacement from those holding data in
    every band; each point sits at its cell centre.

    Args:
        stack: Environmental layer stack defining the valid-cell mask.
        n_points: Number of points to draw.
        seed: Random seed. None draws a fresh sample on every call.

    Returns:
        GeoDataFrame of points with the coordinate columns and a `presence` column of 0.
    """
    if n_points <= 0:
        raise ValueError(f"n_points must be positive, got {n_points}")

    cells = valid_cells(stack)
    if len(cells) < n_points:
        raise InsufficientValidCellsError(
            f"Requested {n_points} pseudo-absences but only {len(cells)} cells hold data in every band."
        )

    rng = np.random.default_rng(seed)
    chosen = rng.choice(len(cells), size=n_points, replace=False)
    sample = cells.iloc[np.sort(chosen)][[LAT_COL, LON_COL]].reset_index(drop=True)
    sample["presence"] = 0

    logger.info(f"Sampled {n_points} pseudo-absences from {len(cells)} valid cells.")
    return gpd.GeoDataFrame(
        sample,
        geometry=gpd.points_from_xy(sample[LON_COL], sample[LAT_COL]),
        crs=WGS84,
    )
