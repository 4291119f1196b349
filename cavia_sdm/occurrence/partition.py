"""K-fold partitioning of occurrence records into held-out and training sets."""

import logging
from typing import Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import KFold

from cavia_sdm.errors import InsufficientDataError

logger = logging.getLogger(__name__)


def assign_folds(n_records: int, n_folds: int = 5, seed: Optional[int] = None) -> np.ndarray:
    """Assign each of `n_records` records a fold id in 1..n_folds.

    Records are shuffled before splitting, so fold membership is random but
    fold sizes differ by at most one. Passing a seed makes the assignment
    reproducible.

    Args:
        n_records: Number of records to assign.
        n_folds: Number of folds (k).
        seed: Random state for the shuffle.

    Returns:
        Integer array of length n_records with values in 1..n_folds.
    """
    if n_folds < 2:
        raise ValueError(f"n_folds must be at least 2, got {n_folds}")
    if n_records < n_folds:
        raise InsufficientDataError(
            f"Cannot split {n_records} records into {n_folds} non-empty folds."
        )

    kf = KFold(n_splits=n_folds, shuffle=True, random_state=seed)
    folds = np.zeros(n_records, dtype=int)
    for fold_idx, (_, test_idx) in enumerate(kf.split(np.arange(n_records))):
        folds[test_idx] = fold_idx + 1
    return folds


def partition_occurrences(
    occurrences: pd.DataFrame,
    n_folds: int = 5,
    test_fold: int = 1,
    seed: Optional[int] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split occurrences into a held-out test set and a training set.

    Args:
        occurrences: Cleaned occurrence records.
        n_folds: Number of folds (k).
        test_fold: The fold id (1..n_folds) held out for evaluation.
        seed: Random state for the fold assignment.

    Returns:
        Tuple of (test, train). Both keep the input's columns and index.
    """
    if not 1 <= test_fold <= n_folds:
        raise ValueError(f"test_fold must be between 1 and {n_folds}, got {test_fold}")

    folds = assign_folds(len(occurrences), n_folds=n_folds, seed=seed)
    is_test = folds == test_fold
    test = occurrences[is_test].copy()
    train = occurrences[~is_test].copy()
    logger.info(
        f"Partitioned {len(occurrences)} records into {n_folds} folds: "
        f"{len(test)} held out (fold {test_fold}), {len(train)} for training."
    )
    return test, train
