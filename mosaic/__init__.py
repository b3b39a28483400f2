"""
Mosaic - Island-Model Genetic Image Approximation

Evolves populations of small RGBA rasters toward a target image.
"""

__version__ = "0.1.0"

# Core genome system
from mosaic.genome import (
    Individual,
    Population,
    PopulationStatistics,
    EvolutionHistory,
    GenerationRecord,
    MutationConfig,
    effective_rate,
    genome_length,
)

# Island ensemble
from mosaic.model import GeneticModel

# Configuration
from mosaic.config import (
    MosaicConfig,
    EvolutionConfig,
    LoggingConfig,
    OutputConfig,
    load_config,
)

# Errors
from mosaic.exceptions import (
    MosaicError,
    ContractViolation,
    GenomeLengthError,
    EmptyPopulationError,
)

__all__ = [
    "__version__",
    # Genome system
    "Individual",
    "Population",
    "PopulationStatistics",
    "EvolutionHistory",
    "GenerationRecord",
    "MutationConfig",
    "effective_rate",
    "genome_length",
    # Ensemble
    "GeneticModel",
    # Config
    "MosaicConfig",
    "EvolutionConfig",
    "LoggingConfig",
    "OutputConfig",
    "load_config",
    # Errors
    "MosaicError",
    "ContractViolation",
    "GenomeLengthError",
    "EmptyPopulationError",
]
