import logging

import numpy as np
import pandas as pd
import geopandas as gpd

from cavia_sdm.geo import BoundingBox, LAT_COL, LON_COL, WGS84

logger = logging.getLogger(__name__)


def _log_dropped(step: str, n_before: int, n_after: int) -> None:
    if n_after < n_before:
        logger.info(f"{step}: dropped {n_before - n_after} of {n_before} records, {n_after} remain.")
    else:
        logger.info(f"{step}: kept all {n_after} records.")


def drop_invalid_coordinates(
    occurrences: pd.DataFrame,
    lat_col: str = LAT_COL,
    lon_col: str = LON_COL,
) -> pd.DataFrame:
    """
    Drops records without a usable coordinate pair.

    A coordinate is unusable when it is missing, not finite, or outside the
    valid range (latitude in [-90, 90], longitude in [-180, 180]).
    """
    lats = pd.to_numeric(occurrences[lat_col], errors="coerce").astype(float)
    lons = pd.to_numeric(occurrences[lon_col], errors="coerce").astype(float)
    valid = (
        np.isfinite(lats)
        & np.isfinite(lons)
        & lats.between(-90, 90)
        & lons.between(-180, 180)
    )
    cleaned = occurrences[valid].copy()
    cleaned[lat_col] = lats[valid]
    cleaned[lon_col] = lons[valid]
    _log_dropped("Coordinate validation", len(occurrences), len(cleaned))
    return cleaned


def drop_duplicate_coordinates(
    occurrences: pd.DataFrame,
    lat_col: str = LAT_COL,
    lon_col: str = LON_COL,
) -> pd.DataFrame:
    """
    Keeps the first record of each distinct (latitude, longitude) pair.

    Matching is exact: the same location recorded at a different precision
    (e.g. -13.5 and -13.50001) is not treated as a duplicate.
    """
    deduplicated = occurrences.drop_duplicates(subset=[lat_col, lon_col], keep="first")
    _log_dropped("Deduplication", len(occurrences), len(deduplicated))
    return deduplicated


def filter_to_study_area(
    occurrences: pd.DataFrame,
    study_area: BoundingBox,
    lat_col: str = LAT_COL,
    lon_col: str = LON_COL,
) -> pd.DataFrame:
    """Keeps records strictly inside the study area; points on its edge are dropped."""
    lats = occurrences[lat_col]
    lons = occurrences[lon_col]
    inside = (
        (lons > study_area.min_lon)
        & (lons < study_area.max_lon)
        & (lats > study_area.min_lat)
        & (lats < study_area.max_lat)
    )
    filtered = occurrences[inside].copy()
    _log_dropped("Study area filter", len(occurrences), len(filtered))
    return filtered


def to_geodataframe(
    occurrences: pd.DataFrame,
    lat_col: str = LAT_COL,
    lon_col: str = LON_COL,
) -> gpd.GeoDataFrame:
    """Attaches WGS84 point geometry built from the coordinate columns."""
    return gpd.GeoDataFrame(
        occurrences.copy(),
        geometry=gpd.points_from_xy(occurrences[lon_col], occurrences[lat_col]),
        crs=WGS84,
    )
