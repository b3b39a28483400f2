"""
Unit tests for the configuration system.

Tests cover:
- Defaults and validation
- YAML/JSON round trips
- Environment variable overrides
- load_config resolution order
"""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from mosaic.config import (
    EvolutionConfig,
    LoggingConfig,
    MosaicConfig,
    OutputConfig,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Hide MOSAIC_* variables from the host environment."""
    for key in list(os.environ):
        if key.startswith("MOSAIC_"):
            monkeypatch.delenv(key)


# ============================================================================
# Model Tests
# ============================================================================

class TestEvolutionConfig:
    """Test EvolutionConfig validation."""

    def test_defaults(self):
        """Test the reference defaults."""
        config = EvolutionConfig()

        assert config.population_size == 100
        assert config.side == 32
        assert config.num_islands == 4
        assert config.migration_interval == 50
        assert config.auto_mutation is True
        assert config.parallel is False

    @pytest.mark.parametrize(
        "field,value",
        [
            ("population_size", 0),
            ("mutation_rate", 1.5),
            ("mutation_rate", -0.1),
            ("batch_size", 51),
            ("side", 0),
            ("migration_interval", 0),
        ],
    )
    def test_out_of_range(self, field, value):
        """Test bounds are enforced."""
        with pytest.raises(ValidationError):
            EvolutionConfig(**{field: value})

    def test_more_islands_than_individuals(self):
        """Test every island must receive at least one individual."""
        with pytest.raises(ValidationError, match="num_islands"):
            EvolutionConfig(population_size=3, num_islands=4)


class TestLoggingAndOutput:
    """Test LoggingConfig and OutputConfig."""

    def test_level_case_insensitive(self):
        """Test log levels are upper-cased."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")

    def test_paths_expanded(self):
        """Test ~ is expanded in output paths."""
        output = OutputConfig(image_path="~/best.png")
        assert output.image_path == Path("~/best.png").expanduser()
        assert output.history_path is None


# ============================================================================
# Persistence Tests
# ============================================================================

class TestPersistence:
    """Test file and environment loading."""

    def test_yaml_round_trip(self, mosaic_config, tmp_path):
        """Test YAML save and load."""
        path = tmp_path / "config.yaml"
        mosaic_config.to_yaml(path)

        loaded = MosaicConfig.from_yaml(path)
        assert loaded.model_dump() == mosaic_config.model_dump()

    def test_json_round_trip(self, mosaic_config, tmp_path):
        """Test JSON save and load."""
        path = tmp_path / "config.json"
        mosaic_config.to_json(path)

        loaded = MosaicConfig.from_json(path)
        assert loaded.evolution == mosaic_config.evolution

    def test_missing_file(self, tmp_path):
        """Test loading a file that does not exist."""
        with pytest.raises(FileNotFoundError):
            MosaicConfig.from_yaml(tmp_path / "missing.yaml")

    def test_empty_yaml_gives_defaults(self, tmp_path):
        """Test an empty YAML document."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert MosaicConfig.from_yaml(path).model_dump() == MosaicConfig().model_dump()

    def test_from_env(self, monkeypatch):
        """Test nested environment overrides."""
        monkeypatch.setenv("MOSAIC_EVOLUTION__POPULATION_SIZE", "200")
        monkeypatch.setenv("MOSAIC_EVOLUTION__PARALLEL", "true")
        monkeypatch.setenv("MOSAIC_EVOLUTION__MUTATION_RATE", "0.02")
        monkeypatch.setenv("MOSAIC_LOGGING__LEVEL", "debug")

        config = MosaicConfig.from_env()

        assert config.evolution.population_size == 200
        assert config.evolution.parallel is True
        assert config.evolution.mutation_rate == 0.02
        assert config.logging.level == "DEBUG"


class TestLoadConfig:
    """Test load_config resolution order."""

    def test_defaults(self):
        """Test defaults without a file or environment."""
        assert load_config().model_dump() == MosaicConfig().model_dump()

    def test_file_wins(self, mosaic_config, tmp_path, monkeypatch):
        """Test an explicit file takes priority over the environment."""
        path = tmp_path / "config.yml"
        mosaic_config.to_yaml(path)
        monkeypatch.setenv("MOSAIC_EVOLUTION__POPULATION_SIZE", "500")

        assert load_config(path).evolution.population_size == 12

    def test_environment(self, monkeypatch):
        """Test environment variables are used without a file."""
        monkeypatch.setenv("MOSAIC_EVOLUTION__SEED", "9")
        assert load_config().evolution.seed == 9

    def test_unknown_format(self, tmp_path):
        """Test unsupported file extensions."""
        path = tmp_path / "config.toml"
        path.write_text("")
        with pytest.raises(ValueError, match="Unknown config format"):
            load_config(path)
