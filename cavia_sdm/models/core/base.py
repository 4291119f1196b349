from typing import Protocol, runtime_checkable

import pandas as pd
import xarray as xr


@runtime_checkable
class SuitabilityModel(Protocol):
    """
    Anything that can be fitted to presence records over a layer stack and
    then predict habitat suitability.

    The pipeline only talks to models through this interface, so MaxEnt can
    be swapped for any presence-only estimator (or a stub in tests).
    """

    def fit(self, occurrences: pd.DataFrame, stack: xr.Dataset) -> "SuitabilityModel":
        ...

    def predict(self, stack: xr.Dataset) -> xr.DataArray:
        ...

    def score_points(self, points: pd.DataFrame, stack: xr.Dataset) -> pd.Series:
        ...
