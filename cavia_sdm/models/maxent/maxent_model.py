# Core MaxEnt (Elapid-based) model training and prediction logic.
import logging
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
import xarray as xr
from elapid.models import MaxentModel

from cavia_sdm.config import ModelConfig
from cavia_sdm.errors import ModelFitError, UnknownBandError
from cavia_sdm.geo import LAT_COL, LON_COL
from cavia_sdm.models.core.prediction import predict_surface
from cavia_sdm.occurrence.sampling import sample_pseudo_absences
from cavia_sdm.raster.processing import band_names, extract_values_at_points, valid_cells

logger = logging.getLogger(__name__)


class MaxentSuitabilityModel:
    """
    Presence-only MaxEnt suitability model over a bioclimatic layer stack.

    Wraps elapid.MaxentModel. As with the classic MaxEnt tool, fitting takes
    presence records only: the background sample is drawn from the valid
    cells of the training stack.
    """

    def __init__(
        self,
        feature_types: Sequence[str] = ("linear", "hinge", "product"),
        beta_multiplier: float = 1.0,
        transform: str = "cloglog",
        n_background: int = 10000,
        min_presence: int = 2,
        seed: Optional[int] = None,
    ):
        self.feature_types = list(feature_types)
        self.beta_multiplier = beta_multiplier
        self.transform = transform
        self.n_background = n_background
        self.min_presence = min_presence
        self.seed = seed
        self.estimator_: Optional[MaxentModel] = None
        self.feature_names_: Optional[List[str]] = None

    @classmethod
    def from_config(cls, config: ModelConfig, seed: Optional[int] = None) -> "MaxentSuitabilityModel":
        return cls(
            feature_types=config.feature_types,
            beta_multiplier=config.beta_multiplier,
            transform=config.transform,
            n_background=config.n_background,
            min_presence=config.min_presence,
            seed=seed,
        )

    def _create_estimator(self) -> MaxentModel:
        return MaxentModel(
            feature_types=self.feature_types,
            beta_multiplier=self.beta_multiplier,
            transform=self.transform,
        )

    def fit(self, occurrences: pd.DataFrame, stack: xr.Dataset) -> "MaxentSuitabilityModel":
        """Fit the model to presence records.

        Args:
            occurrences: Training presence records.
            stack: Layer stack providing the covariates.

        Returns:
            self, fitted.
        """
        presence_env = extract_values_at_points(stack, occurrences).dropna()
        n_dropped = len(occurrences) - len(presence_env)
        if n_dropped:
            logger.warning(f"Dropped {n_dropped} presence records without environmental data.")

        n_locations = len(
            occurrences.loc[presence_env.index, [LAT_COL, LON_COL]].drop_duplicates()
        )
        if n_locations < self.min_presence:
            raise ModelFitError(
                f"Need at least {self.min_presence} distinct presence locations with data, got {n_locations}."
            )

        n_background = min(self.n_background, len(valid_cells(stack)))
        if n_background < self.n_background:
            logger.warning(
                f"Only {n_background} valid cells available, using all of them as background."
            )
        background = sample_pseudo_absences(stack, n_points=n_background, seed=self.seed)
        background_env = extract_values_at_points(stack, background)

        x = pd.concat([presence_env, background_env], ignore_index=True)
        y = np.concatenate([np.ones(len(presence_env)), np.zeros(len(background_env))]).astype(int)

        logger.info(
            f"Fitting MaxEnt ({', '.join(self.feature_types)}) on {len(presence_env)} presences "
            f"and {len(background_env)} background points, {x.shape[1]} bands."
        )
        estimator = self._create_estimator()
        try:
            estimator.fit(x, y)
        except Exception as e:
            raise ModelFitError(f"MaxEnt fit failed: {e}") from e

        self.estimator_ = estimator
        self.feature_names_ = band_names(stack)
        return self

    def _check_fitted(self) -> None:
        if self.estimator_ is None:
            raise ModelFitError("Model has not been fitted.")

    def _select_features(self, stack: xr.Dataset) -> xr.Dataset:
        missing = [name for name in self.feature_names_ if name not in stack.data_vars]
        extra = [name for name in band_names(stack) if name not in self.feature_names_]
        if missing or extra:
            raise UnknownBandError(
                f"Stack bands do not match the fitted bands. Missing: {missing}, unexpected: {extra}"
            )
        return stack[self.feature_names_]

    def predict(self, stack: xr.Dataset) -> xr.DataArray:
        """Predict suitability for every cell of the stack."""
        self._check_fitted()
        return predict_surface(self.estimator_, self._select_features(stack))

    def score_points(self, points: pd.DataFrame, stack: xr.Dataset) -> pd.Series:
        """Predict suitability at point locations; NaN where the stack has no data."""
        self._check_fitted()
        env = extract_values_at_points(self._select_features(stack), points)
        scores = pd.Series(np.nan, index=points.index, name="suitability")
        has_data = env.notna().all(axis=1)
        if has_data.any():
            scores[has_data] = np.asarray(self.estimator_.predict(env[has_data]), dtype=float).reshape(-1)
        return scores
