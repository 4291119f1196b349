"""
Climate data loading functionality.

Bioclimatic variables come from WorldClim 2.1: the 1970-2000 baseline and
the downscaled CMIP6 projections. Each file is downloaded once and cached
as a GeoTIFF.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import xarray as xr
import rioxarray as rxr

from cavia_sdm.config import ClimateConfig
from cavia_sdm.geo import BoundingBox, WGS84
from cavia_sdm.raster.processing import crop_stack

logger = logging.getLogger(__name__)

N_BIOCLIM_BANDS = 19
BIOCLIM_BANDS = [f"bio{i}" for i in range(1, N_BIOCLIM_BANDS + 1)]
RESOLUTIONS = ("10m", "5m", "2.5m", "30s")


class WorldClimProvider:
    """
    A class to handle downloading and loading WorldClim bioclimatic layers.
    """
    base_url = "https://geodata.ucdavis.edu"

    def __init__(
        self,
        cache_folder: Union[str, Path] = "data/raw/climate_cache",
        resolution: str = "2.5m",
    ):
        if resolution not in RESOLUTIONS:
            raise ValueError(f"Unknown WorldClim resolution '{resolution}'. Choose from {RESOLUTIONS}")
        self.resolution = resolution
        self.cache_folder = Path(cache_folder)
        self.cache_folder.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_config(cls, config: ClimateConfig) -> "WorldClimProvider":
        return cls(cache_folder=config.cache_folder, resolution=config.resolution)

    def _current_filename(self, band: int) -> str:
        return f"wc2.1_{self.resolution}_bio_{band}.tif"

    def _current_url(self, band: int) -> str:
        # The baseline is published as one zip of per-band GeoTIFFs; GDAL reads straight from it
        zip_url = f"{self.base_url}/climate/worldclim/2_1/base/wc2.1_{self.resolution}_bio.zip"
        return f"/vsizip//vsicurl/{zip_url}/{self._current_filename(band)}"

    def _future_filename(self, gcm: str, ssp: str, period: str) -> str:
        return f"wc2.1_{self.resolution}_bioc_{gcm}_ssp{ssp}_{period}.tif"

    def _future_url(self, gcm: str, ssp: str, period: str) -> str:
        return (
            f"{self.base_url}/cmip6/{self.resolution}/{gcm}/ssp{ssp}/"
            f"{self._future_filename(gcm, ssp, period)}"
        )

    def _download(self, url: str, filename: str) -> Path:
        cache_path = self.cache_folder / filename
        if not cache_path.exists():
            logger.info(f"Downloading {url}")
            data = rxr.open_rasterio(url)
            if not isinstance(data, xr.DataArray):
                raise ValueError(f"Expected DataArray from {url}, got {type(data)}")
            data.rio.to_raster(cache_path)
        else:
            logger.debug(f"Using cached {cache_path}")
        return cache_path

    @staticmethod
    def _open(path: Path) -> xr.DataArray:
        data = rxr.open_rasterio(path, masked=True)
        if not isinstance(data, xr.DataArray):
            raise ValueError(f"Expected DataArray from {path}, got {type(data)}")
        if data.rio.crs is None:
            data = data.rio.write_crs(WGS84)
        return data

    @staticmethod
    def _finish(stack: xr.Dataset, bbox: Optional[BoundingBox]) -> xr.Dataset:
        if bbox is not None:
            stack = crop_stack(stack, bbox)
        return stack

    def current_stack(self, bbox: Optional[BoundingBox] = None) -> xr.Dataset:
        """Baseline (1970-2000) bioclimatic stack, bands bio1..bio19.

        Args:
            bbox: Optional box to crop to straight after opening, which keeps
                only that window in memory.
        """
        bands: List[xr.Dataset] = []
        for band, name in enumerate(BIOCLIM_BANDS, start=1):
            path = self._download(self._current_url(band), self._current_filename(band))
            data = self._open(path).squeeze("band", drop=True)
            bands.append(data.to_dataset(name=name))
        stack = xr.merge(bands, combine_attrs="drop_conflicts")
        return self._finish(stack, bbox)

    def future_stack(
        self,
        gcm: str = "MPI-ESM1-2-HR",
        ssp: str = "245",
        period: str = "2061-2080",
        bbox: Optional[BoundingBox] = None,
    ) -> xr.Dataset:
        """CMIP6 projected bioclimatic stack for one GCM, SSP and period."""
        path = self._download(
            self._future_url(gcm, ssp, period), self._future_filename(gcm, ssp, period)
        )
        data = self._open(path)
        if data.sizes["band"] != N_BIOCLIM_BANDS:
            raise ValueError(
                f"Expected {N_BIOCLIM_BANDS} bands in {path}, found {data.sizes['band']}"
            )
        data.coords["band"] = BIOCLIM_BANDS
        stack = data.to_dataset(dim="band")
        return self._finish(stack, bbox)
