"""
Individual - one candidate raster and its cached fitness.

The genome is a flat RGBA buffer of ``side * side * 4`` bytes. Individuals
are created once per run and then recycled: the generational loop
overwrites them in place instead of allocating new ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from mosaic.exceptions import GenomeLengthError

from .fitness import RasterLike, similarity
from .operators import DEFAULT_MUTATION, MutationConfig, point_mutate, two_point_crossover

# Bytes per pixel (RGBA)
CHANNELS = 4


def genome_length(side: int) -> int:
    """Byte length of a square RGBA raster with the given side."""
    return side * side * CHANNELS


@dataclass(eq=False)
class Individual:
    """
    A fixed-length byte genome plus its most recent fitness.

    ``fitness`` is only meaningful right after :meth:`calculate_fitness`;
    mutation and crossover leave it stale until the next evaluation.
    """

    genome: np.ndarray
    fitness: float = 0.0
    _workspace: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.genome = np.ascontiguousarray(self.genome, dtype=np.uint8)
        # Reused by every fitness evaluation of this individual
        self._workspace = np.empty(self.genome.shape[0], dtype=np.int64)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def random(cls, length: int, rng: np.random.Generator | None = None) -> Individual:
        """
        Create an individual with uniformly random bytes.

        Args:
            length: Side of the square raster; the genome has
                ``length * length * 4`` bytes
            rng: Random source (a fresh one if None)
        """
        rng = rng if rng is not None else np.random.default_rng()
        genome = rng.integers(0, 256, size=genome_length(length), dtype=np.uint8)
        return cls(genome=genome)

    @classmethod
    def empty(cls, length: int) -> Individual:
        """Zero-filled placeholder used for scratch and staging slots."""
        return cls(genome=np.zeros(genome_length(length), dtype=np.uint8))

    def __len__(self) -> int:
        return self.genome.shape[0]

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def calculate_fitness(self, target: RasterLike) -> float:
        """
        Score this genome against ``target`` (array or raw bytes) and cache the result.

        Raises:
            GenomeLengthError: If ``target`` has a different length
        """
        self.fitness = similarity(self.genome, target, self._workspace)
        return self.fitness

    # -------------------------------------------------------------------------
    # Variation
    # -------------------------------------------------------------------------

    def mutate(
        self,
        rate: float,
        rng: np.random.Generator | None = None,
        config: MutationConfig = DEFAULT_MUTATION,
    ) -> int:
        """
        Apply ``max(1, round(len * rate))`` point mutations in place.

        Returns:
            Number of mutation events applied
        """
        rng = rng if rng is not None else np.random.default_rng()
        return point_mutate(self.genome, rate, rng, config)

    def crossover_into(
        self,
        partner: Individual,
        child: Individual,
        rng: np.random.Generator | None = None,
    ) -> Individual:
        """
        Overwrite ``child`` with this genome spliced with a partner segment.

        No allocation takes place; ``child``'s buffer is rewritten in place
        and its fitness is left stale.
        """
        rng = rng if rng is not None else np.random.default_rng()
        two_point_crossover(self.genome, partner.genome, child.genome, rng)
        return child

    def crossover(
        self,
        partner: Individual,
        rng: np.random.Generator | None = None,
    ) -> Individual:
        """Allocating variant of :meth:`crossover_into`."""
        if len(partner) != len(self):
            raise GenomeLengthError(len(self), len(partner), "crossover")

        child = Individual(genome=np.empty_like(self.genome))
        return self.crossover_into(partner, child, rng)

    def copy_from(self, other: Individual) -> None:
        """
        Overwrite genome and fitness from ``other`` without reallocating.

        Raises:
            GenomeLengthError: If the genomes differ in length
        """
        if len(other) != len(self):
            raise GenomeLengthError(len(self), len(other), "copy")

        np.copyto(self.genome, other.genome)
        self.fitness = other.fitness

    def to_bytes(self) -> bytes:
        """Genome as an immutable byte string."""
        return self.genome.tobytes()


__all__ = [
    "CHANNELS",
    "genome_length",
    "Individual",
]
