"""
Pytest configuration and shared fixtures for mosaic tests.

This module provides reusable test fixtures for:
- Seeded random generators
- Small target rasters and image files
- Sample individuals, populations and ensembles
- Configuration objects

Author: Mosaic Team
License: MIT
"""

import sys

import numpy as np
import pytest
from loguru import logger
from PIL import Image

from mosaic.config import EvolutionConfig, LoggingConfig, MosaicConfig, OutputConfig
from mosaic.genome import Individual, Population, genome_length
from mosaic.model import GeneticModel
from mosaic.parallel import shutdown_shared_executor


SIDE = 4


# ============================================================================
# Session Hooks
# ============================================================================

@pytest.fixture(autouse=True)
def reset_logger():
    """Restore loguru's default sink after tests that reconfigure it."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture(scope="session", autouse=True)
def shared_pool():
    """Shut the shared slot pool down once the session ends."""
    yield
    shutdown_shared_executor()


# ============================================================================
# Random Fixtures
# ============================================================================

@pytest.fixture
def rng():
    """Deterministic random generator."""
    return np.random.default_rng(1234)


# ============================================================================
# Raster Fixtures
# ============================================================================

@pytest.fixture
def side():
    """Side of the small rasters used throughout the tests."""
    return SIDE


@pytest.fixture
def zero_target(side):
    """All-zero RGBA target."""
    return np.zeros(genome_length(side), dtype=np.uint8)


@pytest.fixture
def random_target(side):
    """Random RGBA target."""
    return np.random.default_rng(99).integers(0, 256, size=genome_length(side), dtype=np.uint8)


@pytest.fixture
def target_image(tmp_path):
    """Small gradient PNG on disk."""
    pixels = np.zeros((16, 16, 4), dtype=np.uint8)
    pixels[..., 0] = np.arange(16, dtype=np.uint8)[None, :] * 16
    pixels[..., 1] = np.arange(16, dtype=np.uint8)[:, None] * 16
    pixels[..., 3] = 255

    path = tmp_path / "target.png"
    Image.fromarray(pixels).save(path)
    return path


# ============================================================================
# Genome Fixtures
# ============================================================================

@pytest.fixture
def individual(side, rng):
    """Random individual."""
    return Individual.random(side, rng)


@pytest.fixture
def population(side):
    """Seeded population of 10."""
    return Population(10, side, seed=7)


@pytest.fixture
def model(random_target, side):
    """Seeded four-island ensemble of 20 individuals."""
    with GeneticModel(random_target, 20, side, seed=11) as model:
        yield model


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def evolution_config():
    """Small, fast evolution configuration."""
    return EvolutionConfig(
        population_size=12,
        side=SIDE,
        mutation_rate=0.05,
        auto_mutation=True,
        batch_size=5,
        generations=10,
        num_islands=4,
        migration_interval=5,
        seed=3,
    )


@pytest.fixture
def mosaic_config(evolution_config, tmp_path):
    """Complete configuration writing into a temporary directory."""
    return MosaicConfig(
        project_name="mosaic-test",
        evolution=evolution_config,
        logging=LoggingConfig(level="WARNING"),
        output=OutputConfig(image_path=tmp_path / "best.png", scale=2, report_every=5),
    )
