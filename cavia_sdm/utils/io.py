from pathlib import Path
from typing import Union, Optional, Dict, Any
import logging

import yaml
import pandas as pd

from cavia_sdm.config import PipelineConfig

logger = logging.getLogger(__name__)


def load_yaml(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Loads a YAML file into a dictionary."""
    with open(config_path, "r") as f:
        config = yaml.safe_load(f)
    return config or {}


def load_config(config_path: Optional[Union[str, Path]] = None) -> PipelineConfig:
    """
    Loads the pipeline configuration.

    Any key missing from the file falls back to the default in PipelineConfig,
    so an empty (or absent) file gives the default run.

    Args:
        config_path: Path to a YAML configuration file. If None, defaults are used.

    Returns:
        PipelineConfig: The validated configuration.
    """
    if config_path is None:
        logger.info("No configuration file given, using defaults.")
        return PipelineConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    logger.info(f"Loading configuration from {config_path}")
    return PipelineConfig.model_validate(load_yaml(config_path))


def save_table(df: pd.DataFrame, output_path: Union[str, Path]) -> Path:
    """Writes a table to CSV, creating the parent directory if needed."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)
    logger.info(f"Saved table to: {output_path}")
    return output_path
