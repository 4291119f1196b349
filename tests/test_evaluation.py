import numpy as np
import pandas as pd
import pytest

from cavia_sdm.errors import EmptyInputError
from cavia_sdm.geo import LAT_COL, LON_COL
from cavia_sdm.models.core.evaluation import (
    ModelEvaluation,
    roc_from_scores,
    evaluate_model,
    save_evaluation_results,
)

from conftest import BandScoreModel


def test_perfect_separation():
    evaluation = roc_from_scores([0.9, 0.8], [0.1, 0.2])
    assert evaluation.auc == pytest.approx(1.0)
    assert evaluation.n_presence == 2
    assert evaluation.n_background == 2


def test_identical_scores():
    evaluation = roc_from_scores([0.5] * 10, [0.5] * 30)
    assert evaluation.auc == pytest.approx(0.5)


def test_reversed_scores():
    evaluation = roc_from_scores([0.1, 0.2], [0.8, 0.9])
    assert evaluation.auc == pytest.approx(0.0)


def test_partial_overlap():
    # Of the 4 presence/background pairs, 3 are ordered correctly
    evaluation = roc_from_scores([0.9, 0.4], [0.5, 0.1])
    assert evaluation.auc == pytest.approx(0.75)


def test_roc_curve_shape():
    evaluation = roc_from_scores([0.9, 0.8, 0.3], [0.1, 0.2, 0.35, 0.85])
    fpr, tpr = zip(*evaluation.roc)
    assert evaluation.roc[0] == (0.0, 0.0)
    assert evaluation.roc[-1] == (1.0, 1.0)
    assert list(fpr) == sorted(fpr)
    assert list(tpr) == sorted(tpr)
    # Every distinct score is a threshold, in descending order
    assert evaluation.thresholds[1:] == sorted(evaluation.thresholds[1:], reverse=True)
    assert len(evaluation.thresholds) == 1 + 7
    assert 0.0 <= evaluation.auc <= 1.0


def test_tpr_uses_greater_or_equal():
    evaluation = roc_from_scores([0.8, 0.5], [0.5, 0.2])
    points = dict(zip(evaluation.thresholds, evaluation.roc))
    # At threshold 0.5 both presences and one background point count as positive
    assert points[0.5] == (0.5, 1.0)


def test_max_sens_spec_threshold():
    evaluation = roc_from_scores([0.9, 0.8, 0.7, 0.3], [0.1, 0.2, 0.6, 0.65])
    assert evaluation.max_sens_spec_threshold == pytest.approx(0.7)


@pytest.mark.parametrize("presence, background", [([], [0.1]), ([0.1], [])])
def test_empty_scores(presence, background):
    with pytest.raises(EmptyInputError):
        roc_from_scores(presence, background)


def test_roc_frame():
    evaluation = roc_from_scores([0.9, 0.8], [0.1, 0.2])
    frame = evaluation.roc_frame()
    assert list(frame.columns) == ["threshold", "fpr", "tpr"]
    assert len(frame) == len(evaluation.roc)


def test_evaluate_model(stack):
    # bio1 increases eastwards: presences in the east, background in the west
    presence = pd.DataFrame({LAT_COL: [0.5, 0.5, 0.5], LON_COL: [-41.5, -42.5, -43.5]})
    background = pd.DataFrame({LAT_COL: [0.5, 0.5, 0.5, 0.0], LON_COL: [-78.5, -77.5, -76.5, -120.0]})
    evaluation = evaluate_model(BandScoreModel("bio1"), presence, background, stack)
    assert evaluation.auc == pytest.approx(1.0)
    # The point outside the stack is not scored
    assert evaluation.n_background == 3


def test_save_evaluation_results(tmp_path):
    evaluation = roc_from_scores([0.9, 0.8], [0.1, 0.2])
    roc_path, summary_path = save_evaluation_results(evaluation, tmp_path / "results")
    assert roc_path.exists()
    summary = pd.read_csv(summary_path)
    assert summary.loc[0, "auc"] == pytest.approx(1.0)
    assert summary.loc[0, "n_presence"] == 2


def test_evaluation_is_serialisable():
    evaluation = roc_from_scores([0.9, 0.8], [0.1, 0.2])
    restored = ModelEvaluation.model_validate(evaluation.model_dump())
    assert restored.auc == evaluation.auc
