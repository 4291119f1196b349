"""
Occurrence table loading functionality.
"""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from cavia_sdm.geo import LAT_COL, LON_COL

logger = logging.getLogger(__name__)


def load_occurrences(
    occurrence_path: Union[str, Path],
    lat_col: str = LAT_COL,
    lon_col: str = LON_COL,
) -> pd.DataFrame:
    """Load occurrence records.

    CSV (`.csv`), tab-separated (`.tsv`, `.txt`, as in GBIF downloads) and
    Parquet files are supported. All columns are kept.

    Args:
        occurrence_path: Path to the occurrence table
        lat_col: Name of the latitude column
        lon_col: Name of the longitude column

    Returns:
        DataFrame of occurrence records with float coordinate columns
    """
    occurrence_path = Path(occurrence_path)
    suffix = occurrence_path.suffix.lower()

    if suffix == ".parquet":
        df = pd.read_parquet(occurrence_path)
    elif suffix in (".tsv", ".txt"):
        df = pd.read_csv(occurrence_path, sep="\t", low_memory=False)
    elif suffix == ".csv":
        df = pd.read_csv(occurrence_path, low_memory=False)
    else:
        raise ValueError(f"Unsupported occurrence file type: {occurrence_path.suffix}")

    missing = [col for col in (lat_col, lon_col) if col not in df.columns]
    if missing:
        raise ValueError(f"Occurrence data is missing coordinate columns {missing}")

    # Unparseable coordinates become NaN and are dropped by validation
    df[lat_col] = pd.to_numeric(df[lat_col], errors="coerce")
    df[lon_col] = pd.to_numeric(df[lon_col], errors="coerce")

    logger.info(f"Loaded {len(df)} occurrence records from {occurrence_path}")
    return df
