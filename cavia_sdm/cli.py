# Command Line Interface for cavia-sdm
import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from cavia_sdm.data.loaders import WorldClimProvider, load_occurrences
from cavia_sdm.errors import SDMError
from cavia_sdm.pipeline import run_pipeline, write_outputs
from cavia_sdm.utils.io import load_config
from cavia_sdm.utils.logging_utils import setup_logging

app = typer.Typer(
    name="cavia-sdm",
    help="Guinea pig species distribution model: current and future habitat suitability.",
    add_completion=False,
)
logger = logging.getLogger(__name__)


@app.command()
def run(
    occurrences_path: Annotated[
        Path,
        typer.Option(
            ...,
            help="Occurrence table (CSV, GBIF tab-separated download or Parquet) with decimalLatitude/decimalLongitude.",
            exists=True, readable=True, resolve_path=True,
        ),
    ],
    config_path: Annotated[
        Optional[Path],
        typer.Option(help="YAML configuration file. Defaults are used if omitted.", exists=True, resolve_path=True),
    ] = None,
    output_dir: Annotated[
        Path,
        typer.Option(help="Directory for the suitability rasters and evaluation tables.", resolve_path=True),
    ] = Path("outputs/sdm_run"),
    seed: Annotated[
        Optional[int],
        typer.Option(help="Random seed for fold assignment and background sampling. Overrides the config."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
) -> None:
    """
    Fits the model on current climate, projects it to the configured future
    scenario and writes suitability, change and ROC outputs.
    """
    setup_logging(verbose=verbose)
    config = load_config(config_path)
    if seed is not None:
        config = config.model_copy(update={"seed": seed})

    try:
        occurrences = load_occurrences(occurrences_path)
        provider = WorldClimProvider.from_config(config.climate)
        # Every padded extent lies within the study area grown by the buffer,
        # so only that window is read into memory
        window = config.study_area.to_bbox().padded(config.extent_buffer)
        current_stack = provider.current_stack(bbox=window)
        future_stack = provider.future_stack(
            gcm=config.climate.gcm,
            ssp=config.climate.ssp,
            period=config.climate.period,
            bbox=window,
        )
        result = run_pipeline(occurrences, current_stack, future_stack, config=config)
    except SDMError as e:
        logger.error(f"{type(e).__name__}: {e}")
        raise typer.Exit(code=1)

    paths = write_outputs(result, output_dir)
    typer.echo(f"AUC: {result.evaluation.auc:.4f}")
    for name, path in paths.items():
        typer.echo(f"{name}: {path}")


@app.callback()
def main() -> None:
    """CLI tools for guinea pig habitat suitability modelling."""


if __name__ == "__main__":
    app()
