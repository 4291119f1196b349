import numpy as np
import pandas as pd
import pytest
import xarray as xr
import rioxarray  # noqa: F401

from cavia_sdm.geo import LAT_COL, LON_COL
from cavia_sdm.models.core.prediction import predict_surface
from cavia_sdm.raster.processing import extract_values_at_points

BANDS = [f"bio{i}" for i in range(1, 20)]


def make_stack(
    bands=BANDS,
    x=np.arange(-79.5, -40.0, 1.0),
    y=np.arange(9.5, -30.0, -1.0),
    offset: float = 0.0,
    seed: int = 0,
) -> xr.Dataset:
    """A 1-degree WGS84 stack, edges (-80, -40) x (-30, 10) by default."""
    rng = np.random.default_rng(seed)
    xx, yy = np.meshgrid(x, y)
    data = {
        name: (("y", "x"), xx * (i + 1) / 10 + yy + offset + rng.normal(0, 0.1, xx.shape))
        for i, name in enumerate(bands)
    }
    stack = xr.Dataset(data, coords={"y": y, "x": x})
    return stack.rio.write_crs("EPSG:4326")


class BandEstimator:
    """Predicts the value of one band, standing in for a fitted estimator."""
    def __init__(self, band: str):
        self.band = band

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        return X[self.band].to_numpy()


class BandScoreModel:
    """Suitability model that scores every location by one band."""
    def __init__(self, band: str = "bio1"):
        self.band = band
        self.n_train_ = None

    def fit(self, occurrences, stack):
        self.n_train_ = len(occurrences)
        return self

    def predict(self, stack):
        return predict_surface(BandEstimator(self.band), stack)

    def score_points(self, points, stack):
        return extract_values_at_points(stack, points)[self.band]


@pytest.fixture
def stack() -> xr.Dataset:
    return make_stack()


@pytest.fixture
def future_stack() -> xr.Dataset:
    return make_stack(offset=1.5, seed=1)


@pytest.fixture
def occurrences() -> pd.DataFrame:
    """100 records in lon [-70, -60], lat [-20, -10] with a passthrough column."""
    rng = np.random.default_rng(42)
    lons = rng.uniform(-70, -60, 100)
    lats = rng.uniform(-20, -10, 100)
    lons[0], lons[1] = -70.0, -60.0
    lats[0], lats[1] = -20.0, -10.0
    return pd.DataFrame(
        {
            "gbifID": np.arange(100),
            "species": "Cavia porcellus",
            LAT_COL: lats,
            LON_COL: lons,
        }
    )
