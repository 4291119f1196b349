"""Model evaluation functionality for SDM models."""

import logging
from pathlib import Path
from typing import List, Tuple, Sequence, Dict, Any

import numpy as np
import pandas as pd
import xarray as xr
from pydantic import BaseModel
from sklearn.metrics import roc_curve, auc as area_under_curve

from cavia_sdm.errors import EmptyInputError
from cavia_sdm.models.core.base import SuitabilityModel
from cavia_sdm.utils.io import save_table

logger = logging.getLogger(__name__)


class ModelEvaluation(BaseModel):
    """Discrimination of presences against pseudo-absences."""
    auc: float
    roc: List[Tuple[float, float]]
    thresholds: List[float]
    max_sens_spec_threshold: float
    n_presence: int
    n_background: int

    def roc_frame(self) -> pd.DataFrame:
        fpr, tpr = zip(*self.roc)
        return pd.DataFrame({"threshold": self.thresholds, "fpr": fpr, "tpr": tpr})

    def summary(self) -> Dict[str, Any]:
        return {
            "auc": self.auc,
            "max_sens_spec_threshold": self.max_sens_spec_threshold,
            "n_presence": self.n_presence,
            "n_background": self.n_background,
        }


def roc_from_scores(
    presence_scores: Sequence[float],
    background_scores: Sequence[float],
) -> ModelEvaluation:
    """Build the ROC curve and AUC from presence and background scores.

    Every distinct score is used as a threshold; a point counts as predicted
    present when its score is >= the threshold. The curve runs from (0, 0) to
    (1, 1) with thresholds in descending order, and AUC is the trapezoidal
    area under it, so tied presence/background scores contribute half.

    Args:
        presence_scores: Model scores at presence (test) locations.
        background_scores: Model scores at pseudo-absence locations.

    Returns:
        ModelEvaluation with the AUC, the (fpr, tpr) points and their thresholds.
    """
    presence = np.asarray(presence_scores, dtype=float)
    background = np.asarray(background_scores, dtype=float)
    if presence.size == 0:
        raise EmptyInputError("No presence scores to evaluate.")
    if background.size == 0:
        raise EmptyInputError("No background scores to evaluate.")

    y_true = np.concatenate([np.ones(presence.size), np.zeros(background.size)])
    scores = np.concatenate([presence, background])
    fpr, tpr, thresholds = roc_curve(y_true, scores, drop_intermediate=False)
    auc_score = float(area_under_curve(fpr, tpr))

    # The first point is sklearn's "nothing predicted present" threshold
    best = 1 + int(np.argmax((tpr - fpr)[1:]))

    return ModelEvaluation(
        auc=auc_score,
        roc=[(float(f), float(t)) for f, t in zip(fpr, tpr)],
        thresholds=[float(t) for t in thresholds],
        max_sens_spec_threshold=float(thresholds[best]),
        n_presence=int(presence.size),
        n_background=int(background.size),
    )


def _finite_scores(scores: pd.Series, label: str) -> np.ndarray:
    values = scores.to_numpy(dtype=float)
    finite = np.isfinite(values)
    if not finite.all():
        logger.warning(f"Excluding {int((~finite).sum())} {label} points without data from evaluation.")
    return values[finite]


def evaluate_model(
    model: SuitabilityModel,
    presence: pd.DataFrame,
    background: pd.DataFrame,
    stack: xr.Dataset,
) -> ModelEvaluation:
    """Score held-out presences and pseudo-absences and compute ROC/AUC.

    Args:
        model: A fitted suitability model.
        presence: Held-out presence records.
        background: Pseudo-absence points.
        stack: The layer stack the points are scored against.
    """
    presence_scores = _finite_scores(model.score_points(presence, stack), "presence")
    background_scores = _finite_scores(model.score_points(background, stack), "background")
    evaluation = roc_from_scores(presence_scores, background_scores)
    logger.info(
        f"AUC = {evaluation.auc:.4f} "
        f"({evaluation.n_presence} presences, {evaluation.n_background} pseudo-absences)"
    )
    return evaluation


def save_evaluation_results(evaluation: ModelEvaluation, output_dir: Path) -> Tuple[Path, Path]:
    """Save the ROC curve and the evaluation summary as CSV files.

    Returns:
        Paths to the ROC curve and the summary files.
    """
    output_dir = Path(output_dir)
    roc_path = save_table(evaluation.roc_frame(), output_dir / "roc_curve.csv")

    summary = pd.DataFrame([evaluation.summary()])
    summary["timestamp"] = pd.Timestamp.now()
    summary_path = save_table(summary, output_dir / "evaluation_summary.csv")
    return roc_path, summary_path
