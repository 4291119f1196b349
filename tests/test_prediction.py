import numpy as np
import pytest
import rioxarray as rxr
import xarray as xr

from cavia_sdm.errors import MismatchedGridError
from cavia_sdm.geo import BoundingBox
from cavia_sdm.models.core.prediction import (
    predict_surface,
    suitability_change,
    summarise_surface,
    save_prediction_raster,
)
from cavia_sdm.raster.processing import crop_stack

from conftest import BandEstimator, make_stack


@pytest.fixture
def surface(stack) -> xr.DataArray:
    return predict_surface(BandEstimator("bio1"), stack)


def test_predict_surface(stack, surface):
    assert surface.dims == ("y", "x")
    assert surface.shape == (40, 40)
    assert surface.rio.crs == stack.rio.crs
    np.testing.assert_allclose(surface.values, stack["bio1"].values)


def test_predict_surface_missing_data(stack):
    stack = stack.copy(deep=True)
    stack["bio4"][3, 7] = np.nan
    surface = predict_surface(BandEstimator("bio1"), stack)
    assert np.isnan(surface.values[3, 7])
    assert int(np.isfinite(surface.values).sum()) == 1599


def test_predict_surface_all_missing(stack):
    stack = stack.copy(deep=True)
    stack["bio4"][:] = np.nan
    surface = predict_surface(BandEstimator("bio1"), stack)
    assert np.isnan(surface.values).all()


def test_self_difference_is_zero(stack, surface):
    surface = surface.copy(deep=True)
    surface[0, :5] = np.nan
    change = suitability_change(surface, surface)
    valid = np.isfinite(surface.values)
    assert np.all(change.values[valid] == 0)
    assert np.isnan(change.values[~valid]).all()


def test_suitability_change_is_future_minus_current(stack, future_stack):
    current = predict_surface(BandEstimator("bio1"), stack)
    future = predict_surface(BandEstimator("bio1"), future_stack)
    change = suitability_change(current, future)
    np.testing.assert_allclose(change.values, future.values - current.values)
    assert change.name == "suitability_change"


def test_suitability_change_mismatched_grid(stack, surface):
    cropped = predict_surface(
        BandEstimator("bio1"), crop_stack(stack, BoundingBox(-80.0, -50.0, -30.0, 0.0))
    )
    with pytest.raises(MismatchedGridError):
        suitability_change(surface, cropped)


def test_suitability_change_shifted_grid(surface):
    shifted = predict_surface(
        BandEstimator("bio1"), make_stack(x=np.arange(-78.5, -39.0, 1.0))
    )
    assert shifted.shape == surface.shape
    with pytest.raises(MismatchedGridError):
        suitability_change(surface, shifted)


def test_summarise_surface():
    surface = xr.DataArray(np.array([[0.0, 1.0], [np.nan, 0.5]]), dims=("y", "x"))
    summary = summarise_surface(surface)
    assert summary["min"] == 0.0
    assert summary["max"] == 1.0
    assert summary["mean"] == pytest.approx(0.5)
    assert summary["n_valid"] == 3


def test_summarise_empty_surface():
    surface = xr.DataArray(np.full((2, 2), np.nan), dims=("y", "x"))
    assert summarise_surface(surface)["n_valid"] == 0


def test_save_prediction_raster(tmp_path, surface):
    surface = surface.copy(deep=True)
    surface[0, 0] = np.nan
    path = save_prediction_raster(surface, tmp_path / "out" / "suitability.tif")
    assert path.exists()

    written = rxr.open_rasterio(path, masked=True).squeeze("band", drop=True)
    assert written.shape == surface.shape
    assert written.rio.crs == surface.rio.crs
    assert np.isnan(written.values[0, 0])
    np.testing.assert_allclose(written.values[1:], surface.values[1:], rtol=1e-5)


def test_single_column_surface_can_be_saved(tmp_path, stack):
    column = crop_stack(stack, BoundingBox(-80.0, -79.0, -30.0, 10.0))
    surface = predict_surface(BandEstimator("bio1"), column)
    path = save_prediction_raster(surface, tmp_path / "column.tif")

    written = rxr.open_rasterio(path, masked=True).squeeze("band", drop=True)
    assert written.shape == (40, 1)
    np.testing.assert_allclose(written.rio.bounds(), (-80.0, -30.0, -79.0, 10.0))
