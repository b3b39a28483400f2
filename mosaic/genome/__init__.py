"""
Mosaic Genome Evolution System

Raster genomes and the operators that evolve them toward a target image:
- Individual: a flat RGBA byte buffer plus its cached fitness
- Fitness: normalized mean-squared similarity to the target
- Operators: two-tier point mutation and two-point crossover
- Population: one island's double-buffered generational step
- Scheduler: convergence-driven mutation-rate scaling
- History: per-generation records for analysis
"""

from .individual import (
    CHANNELS,
    Individual,
    genome_length,
)

from .fitness import (
    MAX_SQUARED_ERROR,
    RasterLike,
    as_raster,
    similarity,
    squared_error,
)

from .operators import (
    DEFAULT_MUTATION,
    MutationConfig,
    mutation_count,
    point_mutate,
    two_point_crossover,
)

from .population import (
    ELITE_COUNT,
    Population,
    PopulationStatistics,
)

from .scheduler import (
    RATE_SCHEDULE,
    effective_rate,
)

from .history import (
    EvolutionHistory,
    GenerationRecord,
)

__all__ = [
    # Individual
    "CHANNELS",
    "Individual",
    "genome_length",
    # Fitness
    "MAX_SQUARED_ERROR",
    "RasterLike",
    "as_raster",
    "similarity",
    "squared_error",
    # Operators
    "DEFAULT_MUTATION",
    "MutationConfig",
    "mutation_count",
    "point_mutate",
    "two_point_crossover",
    # Population
    "ELITE_COUNT",
    "Population",
    "PopulationStatistics",
    # Scheduler
    "RATE_SCHEDULE",
    "effective_rate",
    # History
    "EvolutionHistory",
    "GenerationRecord",
]
