"""
Island-Model Genetic Search

Coordinates several independently evolving populations ("islands") that
approximate one target raster:
- Split the population evenly across islands
- Step every island in lock-step, optionally on worker threads
- Scale the mutation rate as the search converges
- Periodically migrate each island's elite to its ring neighbour

Author: Mosaic Team
License: MIT
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import numpy as np
from loguru import logger

from mosaic.exceptions import EmptyPopulationError
from mosaic.genome import (
    EvolutionHistory,
    Individual,
    Population,
    PopulationStatistics,
    effective_rate,
)
from mosaic.monitoring import log_migration
from mosaic.parallel import shared_executor

if TYPE_CHECKING:
    from mosaic.config import EvolutionConfig

# Reference island layout
NUM_ISLANDS = 4
MIGRATION_INTERVAL = 50


def _as_target(target) -> np.ndarray:
    """Private read-only uint8 copy of the target raster."""
    if isinstance(target, (bytes, bytearray, memoryview)):
        array = np.frombuffer(target, dtype=np.uint8).copy()
    else:
        array = np.array(target, dtype=np.uint8).ravel()

    array.setflags(write=False)
    return array


def _rank_key(fitness: float) -> float:
    return -math.inf if math.isnan(fitness) else fitness


class GeneticModel:
    """
    Ensemble of islands evolving toward a shared target raster.

    Islands never see each other; the only cross-island interaction is the
    staged ring migration in :meth:`migrate`.
    """

    def __init__(
        self,
        target,
        population_size: int,
        length: int,
        *,
        num_islands: int = NUM_ISLANDS,
        migration_interval: int = MIGRATION_INTERVAL,
        seed: int | None = None,
        max_workers: int | None = None,
        history: EvolutionHistory | None = None,
    ):
        """
        Initialize the island ensemble.

        Args:
            target: Target raster as bytes or a uint8 array of
                ``length * length * 4`` values
            population_size: Total individuals; each island receives
                ``population_size // num_islands`` and the remainder is dropped
            length: Side of the square raster
            num_islands: Number of islands
            migration_interval: Generations between ring migrations
            seed: Root seed; each island gets an independent child stream
            max_workers: Island pool size in parallel mode
            history: Optional history that records every step

        Raises:
            ValueError: If ``migration_interval`` is below 1
        """
        if migration_interval < 1:
            raise ValueError(f"migration_interval must be >= 1 (got {migration_interval})")

        self.target = _as_target(target)
        self.length = length
        self.migration_interval = migration_interval
        self.history = history

        size_per_island = population_size // num_islands if num_islands > 0 else 0
        dropped = population_size - size_per_island * num_islands
        if dropped > 0:
            logger.warning(
                f"population_size {population_size} is not divisible by {num_islands} islands; "
                f"{dropped} individuals dropped"
            )

        island_seeds = np.random.SeedSequence(seed).spawn(num_islands)
        self.islands: list[Population] = [
            Population(size_per_island, length, island_seed) for island_seed in island_seeds
        ]
        self.migration_buffer: list[Individual] = [
            Individual.empty(length) for _ in range(num_islands)
        ]

        self._max_workers = max_workers
        self._island_executor: ThreadPoolExecutor | None = None

        logger.info(
            "Initialized GeneticModel",
            islands=num_islands,
            size_per_island=size_per_island,
            genome_length=self.target.shape[0],
        )

    @classmethod
    def from_config(
        cls,
        target,
        config: EvolutionConfig,
        history: EvolutionHistory | None = None,
    ) -> GeneticModel:
        """Build a model from an :class:`~mosaic.config.EvolutionConfig`."""
        return cls(
            target,
            config.population_size,
            config.side,
            num_islands=config.num_islands,
            migration_interval=config.migration_interval,
            seed=config.seed,
            max_workers=config.max_workers,
            history=history,
        )

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def step_batch(
        self,
        batch_size: int,
        base_mutation_rate: float,
        is_auto: bool = False,
        is_parallel: bool = False,
    ) -> float:
        """
        Run :meth:`step` ``batch_size`` times.

        Returns:
            The effective mutation rate of the last step (the base rate
            when ``batch_size`` is 0)
        """
        rate = base_mutation_rate
        for _ in range(batch_size):
            rate = self.step(base_mutation_rate, is_auto, is_parallel)
        return rate

    def step(
        self,
        base_mutation_rate: float,
        is_auto: bool = False,
        is_parallel: bool = False,
    ) -> float:
        """
        Advance every island by one generation.

        Args:
            base_mutation_rate: User-selected mutation rate
            is_auto: Scale the rate by the current best fitness
            is_parallel: Evolve islands concurrently, each with parallel
                fitness evaluation and recombination

        Returns:
            The effective mutation rate used for this step
        """
        rate = effective_rate(self._current_best_fitness(), base_mutation_rate, is_auto)
        target = self.target

        if is_parallel:
            slot_pool = shared_executor()
            list(
                self._get_island_executor().map(
                    lambda island: island.evolve(target, rate, True, slot_pool),
                    self.islands,
                )
            )
        else:
            for island in self.islands:
                island.evolve(target, rate, False)

        migrated = False
        if self.get_generation() % self.migration_interval == 0:
            migrated = self.migrate()

        if self.history is not None:
            self.history.record_generation(
                generation=self.get_generation(),
                mutation_rate=rate,
                islands=self.statistics(),
                migrated=migrated,
            )

        return rate

    def migrate(self) -> bool:
        """
        Move every island's elite into its ring neighbour's worst slot.

        Elites are first staged in ``migration_buffer`` and only then
        scattered, so the outcome does not depend on iteration order and no
        elite travels more than one hop per call. Empty islands neither send
        nor receive.

        Returns:
            False when there are fewer than two islands (nothing moves)
        """
        islands = self.islands
        num_islands = len(islands)
        if num_islands < 2:
            return False

        for i, island in enumerate(islands):
            if len(island):
                self.migration_buffer[i].copy_from(island.best())

        for i in range(num_islands):
            destination = islands[(i + 1) % num_islands]
            if not len(islands[i]) or not len(destination):
                continue
            destination.members[destination.worst_index()].copy_from(self.migration_buffer[i])

        log_migration(self.get_generation(), num_islands)
        return True

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def get_best_image(self) -> bytes:
        """Genome of the best island's rank-0 individual."""
        return self._get_best_island().best().to_bytes()

    def get_best_fitness(self) -> float:
        """Fitness of the best island's rank-0 individual."""
        return self._get_best_island().best_fitness()

    def get_generation(self) -> int:
        """Generation counter (islands always step together)."""
        if not self.islands:
            return 0
        return self.islands[0].generation

    def statistics(self) -> list[PopulationStatistics]:
        """Per-island statistics."""
        return [island.statistics() for island in self.islands]

    def _get_best_island(self) -> Population:
        candidates = [island for island in self.islands if len(island)]
        if not candidates:
            raise EmptyPopulationError("No islands with members found")
        return max(candidates, key=lambda island: _rank_key(island.best_fitness()))

    def _current_best_fitness(self) -> float:
        candidates = [island.best_fitness() for island in self.islands if len(island)]
        return max(candidates, key=_rank_key, default=0.0)

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def _get_island_executor(self) -> ThreadPoolExecutor:
        if self._island_executor is None:
            self._island_executor = ThreadPoolExecutor(
                max_workers=self._max_workers or max(1, len(self.islands)),
                thread_name_prefix="mosaic-island",
            )
            logger.debug(
                f"Created island pool with {self._island_executor._max_workers} workers"  # type: ignore[attr-defined]
            )
        return self._island_executor

    def close(self) -> None:
        """Shut down the island pool."""
        if self._island_executor is not None:
            self._island_executor.shutdown(wait=True)
            self._island_executor = None

    def __enter__(self) -> GeneticModel:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = [
    "NUM_ISLANDS",
    "MIGRATION_INTERVAL",
    "GeneticModel",
]
