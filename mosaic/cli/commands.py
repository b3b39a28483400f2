"""
CLI Commands for mosaic-evolution.

Provides command-line interface using Click framework.

Author: Mosaic Team
License: MIT
"""

import sys
import time
from pathlib import Path
from typing import Optional

import click
import yaml
from loguru import logger

from mosaic import __version__
from mosaic.config import EvolutionConfig, MosaicConfig, OutputConfig, load_config
from mosaic.monitoring import configure_logging, log_error


def _apply_overrides(config: MosaicConfig, evolution: dict, output: dict) -> MosaicConfig:
    """Merge non-None command-line values into ``config`` and re-validate."""
    evolution = {k: v for k, v in evolution.items() if v is not None}
    output = {k: v for k, v in output.items() if v is not None}

    return config.model_copy(
        update={
            "evolution": EvolutionConfig.model_validate(
                {**config.evolution.model_dump(), **evolution}
            ),
            "output": OutputConfig.model_validate({**config.output.model_dump(), **output}),
        }
    )


# Main CLI group
@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx, config: Optional[str], verbose: bool):
    """
    Mosaic - island-model genetic image approximation.

    Evolves a population of small RGBA rasters toward a target image.
    """
    ctx.ensure_object(dict)

    try:
        settings = load_config(config)
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        sys.exit(1)

    ctx.obj["config"] = settings
    ctx.obj["verbose"] = verbose

    # Configure logging
    configure_logging(
        log_level="DEBUG" if verbose else settings.logging.level,
        log_file=settings.logging.file,
        serialize=settings.logging.serialize,
    )


# Evolution command
@cli.command()
@click.argument("target", type=click.Path(exists=True, dir_okay=False))
@click.option("--generations", "-g", type=int, help="Number of generations")
@click.option("--population", "-p", type=int, help="Total population size")
@click.option("--side", "-s", type=int, help="Side of the evolved raster")
@click.option("--mutation-rate", "-m", type=float, help="Base mutation rate")
@click.option("--auto/--no-auto", default=None, help="Scale mutation rate with fitness")
@click.option("--parallel/--sequential", default=None, help="Evolve on worker threads")
@click.option("--batch-size", "-b", type=int, help="Generations per batch")
@click.option("--seed", type=int, help="Root random seed")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output PNG path")
@click.option("--history", type=click.Path(dir_okay=False), help="Export history JSON to this path")
@click.pass_context
def run(
    ctx,
    target: str,
    generations: Optional[int],
    population: Optional[int],
    side: Optional[int],
    mutation_rate: Optional[float],
    auto: Optional[bool],
    parallel: Optional[bool],
    batch_size: Optional[int],
    seed: Optional[int],
    output: Optional[str],
    history: Optional[str],
):
    """Evolve an approximation of TARGET."""
    try:
        from mosaic.genome import EvolutionHistory
        from mosaic.imaging import load_target, save_png
        from mosaic.model import GeneticModel
        from mosaic.monitoring import (
            log_evolution_complete,
            log_evolution_generation,
            log_evolution_start,
        )

        settings = _apply_overrides(
            ctx.obj["config"],
            evolution={
                "generations": generations,
                "population_size": population,
                "side": side,
                "mutation_rate": mutation_rate,
                "auto_mutation": auto,
                "parallel": parallel,
                "batch_size": batch_size,
                "seed": seed,
            },
            output={"image_path": output, "history_path": history},
        )
        evolution = settings.evolution
        out = settings.output

        target_bytes = load_target(target, evolution.side)
        evolution_history = (
            EvolutionHistory(experiment_name=settings.project_name)
            if out.history_path
            else None
        )

        log_evolution_start(
            evolution.generations,
            evolution.population_size,
            evolution.num_islands,
            evolution.side,
        )
        started = time.time()
        next_report = out.report_every

        with GeneticModel.from_config(target_bytes, evolution, evolution_history) as model:
            while model.get_generation() < evolution.generations:
                batch = min(evolution.batch_size, evolution.generations - model.get_generation())
                batch_started = time.time()

                rate = model.step_batch(
                    batch,
                    evolution.mutation_rate,
                    evolution.auto_mutation,
                    evolution.parallel,
                )

                generation = model.get_generation()
                if generation >= next_report or generation >= evolution.generations:
                    log_evolution_generation(
                        generation,
                        model.get_best_fitness(),
                        rate,
                        (time.time() - batch_started) / batch,
                    )
                    while next_report <= generation:
                        next_report += out.report_every

            best_fitness = model.get_best_fitness()
            save_png(model.get_best_image(), evolution.side, out.image_path, out.scale)

            if evolution_history is not None:
                evolution_history.export_to_json(out.history_path)

            log_evolution_complete(best_fitness, model.get_generation(), time.time() - started)

        click.echo(f"Best fitness: {best_fitness:.6f}")
        click.echo(f"Image: {out.image_path}")

    except Exception as e:
        log_error("Evolution failed", e)
        sys.exit(1)


# Config command
@cli.command(name="show-config")
@click.pass_context
def show_config(ctx):
    """Show the resolved configuration as YAML."""
    settings: MosaicConfig = ctx.obj["config"]
    click.echo(
        yaml.dump(settings.model_dump(mode="json"), default_flow_style=False, sort_keys=False)
    )


@cli.command(name="init-config")
@click.argument("path", type=click.Path(dir_okay=False), default="mosaic.yaml")
@click.pass_context
def init_config(ctx, path: str):
    """Write the resolved configuration to PATH (YAML or JSON)."""
    settings: MosaicConfig = ctx.obj["config"]
    try:
        if Path(path).suffix == ".json":
            settings.to_json(path)
        else:
            settings.to_yaml(path)
        logger.success(f"Config created: {path}")
    except Exception as e:
        logger.error(f"Config initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
