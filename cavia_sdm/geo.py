import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd
from shapely.geometry import box, Polygon

from cavia_sdm.errors import EmptyInputError

logger = logging.getLogger(__name__)

# Darwin Core coordinate columns, as found in GBIF downloads
LAT_COL = "decimalLatitude"
LON_COL = "decimalLongitude"

WGS84 = "EPSG:4326"


@dataclass(frozen=True)
class BoundingBox:
    """
    A longitude/latitude box in degrees.

    Note the field order is (min_lon, max_lon, min_lat, max_lat), the
    xmin, xmax, ymin, ymax convention, not the (minx, miny, maxx, maxy)
    order used by shapely and rasterio. Use `to_bounds` for the latter.
    """
    min_lon: float
    max_lon: float
    min_lat: float
    max_lat: float

    def __post_init__(self):
        if not self.min_lon < self.max_lon:
            raise ValueError(f"min_lon ({self.min_lon}) must be less than max_lon ({self.max_lon})")
        if not self.min_lat < self.max_lat:
            raise ValueError(f"min_lat ({self.min_lat}) must be less than max_lat ({self.max_lat})")

    @classmethod
    def from_bounds(cls, bounds: Tuple[float, float, float, float]) -> "BoundingBox":
        minx, miny, maxx, maxy = bounds
        return cls(minx, maxx, miny, maxy)

    def to_bounds(self) -> Tuple[float, float, float, float]:
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)

    def to_polygon(self) -> Polygon:
        return box(*self.to_bounds())

    def padded(self, buffer: float) -> "BoundingBox":
        """The box grown by `buffer` degrees on every side."""
        return BoundingBox(
            self.min_lon - buffer,
            self.max_lon + buffer,
            self.min_lat - buffer,
            self.max_lat + buffer,
        )

    def strictly_contains(self, lon: float, lat: float) -> bool:
        return self.min_lon < lon < self.max_lon and self.min_lat < lat < self.max_lat

    def intersects(self, other: "BoundingBox") -> bool:
        # Boxes that only share an edge have no area in common
        return (
            self.min_lon < other.max_lon
            and other.min_lon < self.max_lon
            and self.min_lat < other.max_lat
            and other.min_lat < self.max_lat
        )

    def intersection(self, other: "BoundingBox") -> Optional["BoundingBox"]:
        if not self.intersects(other):
            return None
        return BoundingBox(
            max(self.min_lon, other.min_lon),
            min(self.max_lon, other.max_lon),
            max(self.min_lat, other.min_lat),
            min(self.max_lat, other.max_lat),
        )


def build_padded_extent(
    occurrences: pd.DataFrame,
    buffer: float = 10.0,
    lat_col: str = LAT_COL,
    lon_col: str = LON_COL,
) -> BoundingBox:
    """
    Build the modelling extent: the coordinate range of the occurrences
    padded by a fixed buffer in degrees.

    Args:
        occurrences: Cleaned occurrence records.
        buffer: Padding applied on every side, in degrees.

    Returns:
        BoundingBox: (min lon - buffer, max lon + buffer, min lat - buffer, max lat + buffer).
    """
    if len(occurrences) == 0:
        raise EmptyInputError("Cannot build an extent from an empty set of occurrences.")
    if buffer < 0:
        raise ValueError(f"Buffer must be non-negative, got {buffer}")

    lons = occurrences[lon_col]
    lats = occurrences[lat_col]
    extent = BoundingBox(
        float(lons.min()) - buffer,
        float(lons.max()) + buffer,
        float(lats.min()) - buffer,
        float(lats.max()) + buffer,
    )
    logger.info(f"Padded extent ({buffer} degree buffer): {extent}")
    return extent
