"""
Population Management for Raster Evolution

This module owns one island's individuals and advances them one
generation at a time:
- Fitness evaluation against the target raster
- Ranking (best first)
- Elite preservation
- Recombination into a preallocated scratch buffer
- Buffer swap

Two equally shaped lists of individuals are kept alive for the whole run;
the next generation is written into ``scratch`` and then adopted by
swapping references, so no genome is allocated after construction.

Author: Mosaic Team
License: MIT
"""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass
from itertools import repeat

import numpy as np
from loguru import logger

from mosaic.exceptions import EmptyPopulationError
from mosaic.parallel import shared_executor

from .individual import Individual

# Top-ranked individuals copied unchanged into the next generation
ELITE_COUNT = 3


# =============================================================================
# Population Statistics
# =============================================================================


@dataclass
class PopulationStatistics:
    """Statistics about the current members."""

    generation: int
    population_size: int

    # Fitness statistics
    best_fitness: float
    avg_fitness: float
    min_fitness: float
    std_fitness: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "generation": self.generation,
            "population_size": self.population_size,
            "best_fitness": self.best_fitness,
            "avg_fitness": self.avg_fitness,
            "min_fitness": self.min_fitness,
            "std_fitness": self.std_fitness,
        }


# =============================================================================
# Population
# =============================================================================


class Population:
    """
    A fixed-size island of individuals evolved in lock-step generations.

    After every completed :meth:`evolve`, ``members[0]`` is the best
    individual found by ranking.
    """

    def __init__(
        self,
        size: int,
        length: int,
        seed: int | np.random.SeedSequence | None = None,
    ):
        """
        Initialize population.

        Args:
            size: Number of individuals, fixed for the run
            length: Side of the square raster each genome encodes
            seed: Seed or SeedSequence for this island's random streams
        """
        if isinstance(seed, np.random.SeedSequence):
            self._seed_sequence = seed
        else:
            self._seed_sequence = np.random.SeedSequence(seed)

        self.rng = np.random.default_rng(self._seed_sequence)
        self.length = length

        self.members: list[Individual] = [
            Individual.random(length, self.rng) for _ in range(size)
        ]
        self.scratch: list[Individual] = [Individual.empty(length) for _ in range(size)]
        self.generation = 0

    def __len__(self) -> int:
        return len(self.members)

    # -------------------------------------------------------------------------
    # Generational step
    # -------------------------------------------------------------------------

    def evolve(
        self,
        target: np.ndarray,
        mutation_rate: float,
        parallel: bool = False,
        executor: Executor | None = None,
    ) -> None:
        """
        Advance the population by one generation.

        Args:
            target: Reference raster, same length as every genome
            mutation_rate: Effective mutation rate for this generation
            parallel: Run fitness evaluation and recombination on a pool
            executor: Pool to use in parallel mode (shared pool if None)

        Raises:
            GenomeLengthError: If ``target`` does not match the genome length
        """
        if parallel and executor is None:
            executor = shared_executor()
        pool = executor if parallel else None

        self.compute_fitnesses(target, pool)
        self.sort_by_fitness()

        size = len(self.members)
        elite_count = min(ELITE_COUNT, size)
        for rank in range(elite_count):
            self.scratch[rank].copy_from(self.members[rank])

        parent_pool = max(1, size // 2)
        slots = range(elite_count, size)

        if pool is None:
            for slot in slots:
                self._breed(slot, parent_pool, mutation_rate, self.rng)
        else:
            rngs = [np.random.default_rng(s) for s in self._seed_sequence.spawn(len(slots))]
            list(pool.map(self._breed, slots, repeat(parent_pool), repeat(mutation_rate), rngs))

        self.members, self.scratch = self.scratch, self.members
        self.generation += 1

        logger.debug(
            "Population evolved",
            generation=self.generation,
            size=size,
            elite=elite_count,
            rate=mutation_rate,
        )

    def compute_fitnesses(self, target: np.ndarray, executor: Executor | None = None) -> None:
        """Evaluate every member against ``target``."""
        if executor is None:
            for individual in self.members:
                individual.calculate_fitness(target)
        else:
            list(executor.map(Individual.calculate_fitness, self.members, repeat(target)))

    def sort_by_fitness(self) -> None:
        """
        Rank members best first.

        Order among equal fitness values is unspecified; a NaN fitness ranks
        below every defined value.
        """
        if not self.members:
            return

        fitness = np.fromiter(
            (individual.fitness for individual in self.members),
            dtype=np.float64,
            count=len(self.members),
        )
        keys = np.where(np.isnan(fitness), -np.inf, fitness)
        order = np.argsort(-keys, kind="quicksort")
        self.members[:] = [self.members[i] for i in order]

    def _breed(
        self,
        slot: int,
        parent_pool: int,
        mutation_rate: float,
        rng: np.random.Generator,
    ) -> None:
        """Fill scratch ``slot`` with a mutated child of two top-ranked parents."""
        first = self.members[rng.integers(parent_pool)]
        second = self.members[rng.integers(parent_pool)]

        child = self.scratch[slot]
        first.crossover_into(second, child, rng)
        child.mutate(mutation_rate, rng)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def best(self) -> Individual:
        """Rank-0 individual."""
        if not self.members:
            raise EmptyPopulationError("population has no members")
        return self.members[0]

    def worst_index(self) -> int:
        """Index of the last-ranked individual."""
        if not self.members:
            raise EmptyPopulationError("population has no members")
        return len(self.members) - 1

    def best_fitness(self) -> float:
        """Fitness of the rank-0 individual."""
        return self.best().fitness

    def statistics(self) -> PopulationStatistics:
        """
        Compute statistics over the current members.

        Values reflect the most recent evaluation; members bred since then
        carry stale fitness.
        """
        if not self.members:
            return PopulationStatistics(
                generation=self.generation,
                population_size=0,
                best_fitness=0.0,
                avg_fitness=0.0,
                min_fitness=0.0,
                std_fitness=0.0,
            )

        fitness = np.array([individual.fitness for individual in self.members], dtype=np.float64)

        return PopulationStatistics(
            generation=self.generation,
            population_size=len(self.members),
            best_fitness=float(self.members[0].fitness),
            avg_fitness=float(np.mean(fitness)),
            min_fitness=float(np.min(fitness)),
            std_fitness=float(np.std(fitness)),
        )


__all__ = [
    "ELITE_COUNT",
    "Population",
    "PopulationStatistics",
]
