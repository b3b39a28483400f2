"""
Mosaic Configuration System

Pydantic v2-based configuration with YAML/JSON support and environment overrides.

Features:
- Type-safe configuration models
- YAML/JSON file loading
- Environment variable overrides (MOSAIC_EVOLUTION__POPULATION_SIZE=200)
- Validation with defaults
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from loguru import logger
from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Evolution Configuration
# =============================================================================


class EvolutionConfig(BaseModel):
    """Configuration for the island-model search."""

    # Population
    population_size: int = Field(
        default=100,
        ge=1,
        le=100_000,
        description="Total individuals, split evenly across islands",
    )

    side: int = Field(
        default=32,
        ge=1,
        le=1024,
        description="Side of the square RGBA raster being evolved",
    )

    # Mutation
    mutation_rate: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Base fraction of genome bytes perturbed per child",
    )

    auto_mutation: bool = Field(
        default=True,
        description="Scale the mutation rate down as fitness converges",
    )

    # Execution
    parallel: bool = Field(
        default=False,
        description="Evolve islands and slots on worker threads",
    )

    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Island pool size (one worker per island if None)",
    )

    batch_size: int = Field(
        default=1,
        ge=1,
        le=50,
        description="Generations stepped per batch",
    )

    generations: int = Field(
        default=1000,
        ge=1,
        description="Generations to run",
    )

    # Islands
    num_islands: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Number of independently evolving sub-populations",
    )

    migration_interval: int = Field(
        default=50,
        ge=1,
        description="Run a ring migration every N generations",
    )

    seed: int | None = Field(
        default=None,
        ge=0,
        description="Root seed for reproducible runs",
    )

    @field_validator("num_islands")
    @classmethod
    def validate_islands(cls, v: int, info) -> int:
        """Ensure every island receives at least one individual."""
        if "population_size" in info.data and v > info.data["population_size"]:
            raise ValueError(
                f"num_islands ({v}) must be <= population_size ({info.data['population_size']})"
            )
        return v


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Configuration for loguru sinks."""

    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum log level",
    )

    file: Path | None = Field(
        default=None,
        description="Optional log file",
    )

    serialize: bool = Field(
        default=False,
        description="Emit JSON log records",
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


# =============================================================================
# Output Configuration
# =============================================================================


class OutputConfig(BaseModel):
    """Where and how results are written."""

    image_path: Path = Field(
        default=Path("best.png"),
        description="PNG written with the best raster",
    )

    scale: int = Field(
        default=10,
        ge=1,
        le=64,
        description="Nearest-neighbour upscale factor for the PNG",
    )

    history_path: Path | None = Field(
        default=None,
        description="Optional JSON export of the evolution history",
    )

    report_every: int = Field(
        default=100,
        ge=1,
        description="Log progress every N generations",
    )

    @field_validator("image_path", "history_path")
    @classmethod
    def expand_path(cls, v: str | Path | None) -> Path | None:
        """Expand ``~`` in paths."""
        if v is None:
            return None
        return Path(v).expanduser()


# =============================================================================
# Main Configuration
# =============================================================================


class MosaicConfig(BaseModel):
    """Main mosaic configuration."""

    project_name: str = Field(
        default="mosaic",
        description="Project name",
    )

    evolution: EvolutionConfig = Field(
        default_factory=EvolutionConfig,
        description="Evolution configuration",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )

    output: OutputConfig = Field(
        default_factory=OutputConfig,
        description="Output configuration",
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> MosaicConfig:
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML file

        Returns:
            MosaicConfig instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        logger.info(f"Loaded configuration from {path}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: str | Path) -> MosaicConfig:
        """
        Load configuration from JSON file.

        Args:
            path: Path to JSON file

        Returns:
            MosaicConfig instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        logger.info(f"Loaded configuration from {path}")
        return cls(**data)

    @classmethod
    def from_env(cls, prefix: str = "MOSAIC_") -> MosaicConfig:
        """
        Load configuration from environment variables.

        Environment variables should be in the format:
        MOSAIC_EVOLUTION__POPULATION_SIZE=200
        MOSAIC_LOGGING__LEVEL=DEBUG

        Args:
            prefix: Environment variable prefix

        Returns:
            MosaicConfig instance
        """
        config_dict: dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue

            # Remove prefix and convert to nested dict
            key = key[len(prefix):].lower()
            parts = key.split("__")

            current = config_dict
            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = _parse_env_value(value)

        logger.debug(f"Loaded configuration from environment variables (prefix={prefix})")
        return cls(**config_dict)

    def to_yaml(self, path: str | Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Path to YAML file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

        logger.info(f"Saved configuration to {path}")

    def to_json(self, path: str | Path) -> None:
        """
        Save configuration to JSON file.

        Args:
            path: Path to JSON file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

        logger.info(f"Saved configuration to {path}")


def _parse_env_value(value: str) -> Any:
    """Best-effort conversion of an environment string to bool/int/float."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("none", "null", ""):
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


# =============================================================================
# Configuration Factory
# =============================================================================


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "MOSAIC_",
) -> MosaicConfig:
    """
    Load configuration with automatic format detection.

    Priority:
    1. Explicit config file (YAML or JSON)
    2. Environment variables
    3. Defaults

    Args:
        config_path: Path to config file (YAML or JSON)
        env_prefix: Environment variable prefix

    Returns:
        MosaicConfig instance
    """
    if config_path:
        path = Path(config_path)
        if path.suffix in (".yaml", ".yml"):
            return MosaicConfig.from_yaml(path)
        elif path.suffix == ".json":
            return MosaicConfig.from_json(path)
        else:
            raise ValueError(f"Unknown config format: {path.suffix}")

    if any(key.startswith(env_prefix) for key in os.environ):
        logger.info("Using configuration from environment variables")
        return MosaicConfig.from_env(env_prefix)

    logger.info("Using default configuration")
    return MosaicConfig()


__all__ = [
    "MosaicConfig",
    "EvolutionConfig",
    "LoggingConfig",
    "OutputConfig",
    "load_config",
]
