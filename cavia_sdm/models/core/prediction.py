"""Model prediction functionality for SDM models."""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import pandas as pd
import xarray as xr
import rioxarray  # noqa: F401

from cavia_sdm.errors import MismatchedGridError
from cavia_sdm.raster.processing import band_names, valid_cell_mask

logger = logging.getLogger(__name__)


def _empty_surface_like(stack: xr.Dataset, name: str) -> xr.DataArray:
    surface = xr.DataArray(
        np.full((stack.sizes["y"], stack.sizes["x"]), np.nan),
        coords={"y": stack.y.values, "x": stack.x.values},
        dims=("y", "x"),
        name=name,
    )
    if stack.rio.crs is not None:
        surface = surface.rio.write_crs(stack.rio.crs)
    surface = surface.rio.write_transform(stack.rio.transform())
    return surface


def predict_surface(estimator: Any, stack: xr.Dataset, name: str = "suitability") -> xr.DataArray:
    """Apply a fitted estimator to every valid cell of a layer stack.

    Args:
        estimator: Object with a `predict(X)` method taking a DataFrame with one
            column per band and returning one score per row.
        stack: Layer stack holding the bands the estimator was fitted on.
        name: Name of the output surface.

    Returns:
        A (y, x) DataArray on the stack's grid, NaN where any band is missing.
    """
    surface = _empty_surface_like(stack, name)
    mask = valid_cell_mask(stack).values
    if not mask.any():
        logger.warning("No cell holds data in every band, the predicted surface is empty.")
        return surface

    names = band_names(stack)
    features = stack.to_dataarray().transpose("y", "x", "variable").values
    X = pd.DataFrame(features[mask], columns=names)
    predictions = np.asarray(estimator.predict(X), dtype=float).reshape(-1)

    values = surface.values.copy()
    values[mask] = predictions
    surface.values = values
    logger.info(f"Predicted {name} for {int(mask.sum())} cells")
    return surface


def check_same_grid(first: xr.DataArray, second: xr.DataArray) -> None:
    """Raises MismatchedGridError unless both surfaces share shape, coordinates and CRS."""
    if first.shape != second.shape:
        raise MismatchedGridError(f"Surface shapes differ: {first.shape} vs {second.shape}")
    for dim in ("x", "y"):
        if not np.allclose(first[dim].values, second[dim].values):
            raise MismatchedGridError(f"Surfaces have different {dim} coordinates.")
    if first.rio.crs != second.rio.crs:
        raise MismatchedGridError(f"Surface CRS differ: {first.rio.crs} vs {second.rio.crs}")


def suitability_change(current: xr.DataArray, future: xr.DataArray) -> xr.DataArray:
    """Cell-wise change in suitability, future minus current.

    The grids must match exactly; xarray would otherwise silently align the
    two surfaces on their shared coordinates.
    """
    check_same_grid(current, future)
    change = future.copy(data=future.values - current.values)
    change.name = "suitability_change"
    return change


def summarise_surface(surface: xr.DataArray) -> Dict[str, float]:
    """Basic statistics of the valid cells of a surface."""
    values = surface.values[np.isfinite(surface.values)]
    if values.size == 0:
        return {"min": np.nan, "max": np.nan, "mean": np.nan, "std": np.nan, "n_valid": 0}
    return {
        "min": float(values.min()),
        "max": float(values.max()),
        "mean": float(values.mean()),
        "std": float(values.std()),
        "n_valid": int(values.size),
    }


def save_prediction_raster(
    surface: xr.DataArray,
    output_path: Union[str, Path],
    nodata: float = -9999.0,
) -> Path:
    """Save a surface as a GeoTIFF.

    Args:
        surface: 2D surface to save
        output_path: Path to save raster
        nodata: Nodata value written in place of NaN
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    surface.astype("float32").rio.write_nodata(nodata, encoded=True).rio.to_raster(output_path)
    logger.info(f"Successfully saved prediction raster to: {output_path}")
    return output_path
