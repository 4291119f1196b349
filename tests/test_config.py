import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from cavia_sdm.config import PipelineConfig
from cavia_sdm.geo import BoundingBox
from cavia_sdm.utils.io import load_config
from cavia_sdm.utils.logging_utils import setup_logging


def test_defaults():
    config = load_config()
    assert config.study_area.to_bbox() == BoundingBox(-135.0, -30.0, -60.0, 15.0)
    assert config.extent_buffer == 10.0
    assert config.n_folds == 5
    assert config.test_fold == 1
    assert config.n_pseudo_absences == 1000
    assert config.seed is None
    assert config.climate.gcm == "MPI-ESM1-2-HR"


def test_load_yaml_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "seed: 7\n"
        "excluded_bands: [bio2]\n"
        "study_area:\n"
        "  min_lon: -90\n"
        "climate:\n"
        "  ssp: '585'\n"
    )
    config = load_config(path)
    assert config.seed == 7
    assert config.excluded_bands == ["bio2"]
    assert config.study_area.min_lon == -90
    assert config.study_area.max_lon == -30.0
    assert config.climate.ssp == "585"
    assert config.climate.resolution == "2.5m"


def test_load_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == PipelineConfig()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_test_fold_out_of_range():
    with pytest.raises(ValidationError):
        PipelineConfig(n_folds=3, test_fold=4)


def test_study_area_must_be_ordered():
    with pytest.raises(ValidationError):
        PipelineConfig(study_area={"min_lon": 10, "max_lon": 0})


def test_repository_default_config_matches():
    config = load_config(Path(__file__).parents[1] / "config" / "default.yaml")
    assert config.model_dump(exclude={"seed"}) == PipelineConfig().model_dump(exclude={"seed"})


def test_setup_logging_quietens_rasterio():
    setup_logging(verbose=True)
    assert logging.getLogger("rasterio").level == logging.WARNING
