"""
Run configuration for the guinea pig SDM pipeline.

Defaults reproduce the reference run: WorldClim 2.1 bioclimatic bands at
2.5 arc-minutes, the MPI-ESM1-2-HR SSP2-4.5 projection for 2061-2080, a
study area covering the Americas south of 15 degrees north and a five-fold
partition holding out fold 1.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cavia_sdm.geo import BoundingBox


class StudyAreaConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_lon: float = -135.0
    max_lon: float = -30.0
    min_lat: float = -60.0
    max_lat: float = 15.0

    @model_validator(mode="after")
    def _check_ordering(self) -> "StudyAreaConfig":
        self.to_bbox()
        return self

    def to_bbox(self) -> BoundingBox:
        return BoundingBox(self.min_lon, self.max_lon, self.min_lat, self.max_lat)


class ClimateConfig(BaseModel):
    """Where and which bioclimatic layers to fetch."""
    resolution: str = "2.5m"
    gcm: str = "MPI-ESM1-2-HR"
    ssp: str = "245"
    period: str = "2061-2080"
    cache_folder: Path = Path("data/raw/climate_cache")


class ModelConfig(BaseModel):
    """Parameters passed through to the MaxEnt estimator."""
    feature_types: List[str] = Field(default_factory=lambda: ["linear", "hinge", "product"])
    beta_multiplier: float = 1.0
    transform: str = "cloglog"
    n_background: int = 10000
    min_presence: int = 2


class PipelineConfig(BaseModel):
    study_area: StudyAreaConfig = Field(default_factory=StudyAreaConfig)
    extent_buffer: float = 10.0
    excluded_bands: List[str] = Field(default_factory=lambda: ["bio8", "bio9", "bio18", "bio19"])
    n_folds: int = Field(default=5, ge=2)
    test_fold: int = Field(default=1, ge=1)
    n_pseudo_absences: int = Field(default=1000, gt=0)
    seed: Optional[int] = None
    climate: ClimateConfig = Field(default_factory=ClimateConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)

    @model_validator(mode="after")
    def _check_test_fold(self) -> "PipelineConfig":
        if self.test_fold > self.n_folds:
            raise ValueError(
                f"test_fold ({self.test_fold}) must be between 1 and n_folds ({self.n_folds})"
            )
        return self
