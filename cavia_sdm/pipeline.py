"""
End-to-end guinea pig SDM run.

Cleans the occurrence records, prepares the current and future layer stacks,
fits a suitability model on the training folds, predicts both scenarios,
evaluates the held-out fold against pseudo-absences and differences the two
predictions. Stages run in order and the first failure aborts the run.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import geopandas as gpd
import xarray as xr
from pydantic import BaseModel, ConfigDict

from cavia_sdm.config import PipelineConfig
from cavia_sdm.geo import BoundingBox, build_padded_extent
from cavia_sdm.models.core.base import SuitabilityModel
from cavia_sdm.models.core.evaluation import ModelEvaluation, evaluate_model, save_evaluation_results
from cavia_sdm.models.core.prediction import (
    save_prediction_raster,
    suitability_change,
    summarise_surface,
)
from cavia_sdm.models.maxent import MaxentSuitabilityModel
from cavia_sdm.occurrence import (
    drop_invalid_coordinates,
    drop_duplicate_coordinates,
    filter_to_study_area,
    partition_occurrences,
    sample_pseudo_absences,
)
from cavia_sdm.raster import band_names, check_matching_bands, crop_stack, select_layers

logger = logging.getLogger(__name__)


class PipelineResult(BaseModel):
    """Everything a run produces, kept in memory."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    record_counts: Dict[str, int]
    extent: BoundingBox
    bands: List[str]
    test: pd.DataFrame
    train: pd.DataFrame
    pseudo_absences: gpd.GeoDataFrame
    model: Any
    evaluation: ModelEvaluation
    current_suitability: xr.DataArray
    future_suitability: xr.DataArray
    suitability_change: xr.DataArray
    summaries: Dict[str, Dict[str, float]]


def _offset_seed(seed: Optional[int], offset: int) -> Optional[int]:
    # Separate streams for model background and evaluation pseudo-absences
    return None if seed is None else seed + offset


def prepare_stack(stack: xr.Dataset, excluded_bands: List[str], extent: BoundingBox) -> xr.Dataset:
    """Band selection followed by cropping to the modelling extent."""
    return crop_stack(select_layers(stack, excluded_bands), extent)


def run_pipeline(
    occurrences: pd.DataFrame,
    current_stack: xr.Dataset,
    future_stack: xr.Dataset,
    config: Optional[PipelineConfig] = None,
    model: Optional[SuitabilityModel] = None,
) -> PipelineResult:
    """Run the SDM pipeline.

    Args:
        occurrences: Raw occurrence records with coordinate columns.
        current_stack: Bioclimatic stack for the current climate.
        future_stack: Bioclimatic stack for the future scenario, same bands.
        config: Run configuration, defaults if None.
        model: Unfitted suitability model. If None, a MaxEnt model is built
            from `config.model`.

    Returns:
        PipelineResult
    """
    config = config or PipelineConfig()
    counts = {"raw": len(occurrences)}

    valid = drop_invalid_coordinates(occurrences)
    counts["valid_coordinates"] = len(valid)
    unique = drop_duplicate_coordinates(valid)
    counts["unique_coordinates"] = len(unique)
    cleaned = filter_to_study_area(unique, config.study_area.to_bbox())
    counts["in_study_area"] = len(cleaned)

    extent = build_padded_extent(cleaned, buffer=config.extent_buffer)
    current = prepare_stack(current_stack, config.excluded_bands, extent)
    future = prepare_stack(future_stack, config.excluded_bands, extent)
    check_matching_bands(current, future)

    test, train = partition_occurrences(
        cleaned, n_folds=config.n_folds, test_fold=config.test_fold, seed=config.seed
    )
    counts["test"] = len(test)
    counts["train"] = len(train)

    if model is None:
        model = MaxentSuitabilityModel.from_config(config.model, seed=_offset_seed(config.seed, 1))
    model.fit(train, current)

    current_suitability = model.predict(current)
    future_suitability = model.predict(future)

    pseudo_absences = sample_pseudo_absences(
        current, n_points=config.n_pseudo_absences, seed=_offset_seed(config.seed, 2)
    )
    evaluation = evaluate_model(model, test, pseudo_absences, current)

    change = suitability_change(current_suitability, future_suitability)

    summaries = {
        "current_suitability": summarise_surface(current_suitability),
        "future_suitability": summarise_surface(future_suitability),
        "suitability_change": summarise_surface(change),
    }
    logger.info(
        f"Mean suitability change {summaries['suitability_change']['mean']:.4f}, AUC {evaluation.auc:.4f}"
    )

    return PipelineResult(
        record_counts=counts,
        extent=extent,
        bands=band_names(current),
        test=test,
        train=train,
        pseudo_absences=pseudo_absences,
        model=model,
        evaluation=evaluation,
        current_suitability=current_suitability,
        future_suitability=future_suitability,
        suitability_change=change,
        summaries=summaries,
    )


def write_outputs(result: PipelineResult, output_dir: Path) -> Dict[str, Path]:
    """Write the surfaces as GeoTIFFs and the evaluation as CSV files."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {
        name: save_prediction_raster(getattr(result, name), output_dir / f"{name}.tif")
        for name in ("current_suitability", "future_suitability", "suitability_change")
    }
    paths["roc_curve"], paths["evaluation_summary"] = save_evaluation_results(
        result.evaluation, output_dir
    )
    return paths
