"""
Variation Operators - Point Mutation & Two-Point Crossover

This module implements the genetic operators applied to raw RGBA genomes:
- Mutation: a fixed count of point perturbations drawn from a two-tier
  noise model (mostly fine adjustments, occasionally a coarse jump)
- Crossover: cut-and-splice of one contiguous segment from a partner

All operators work in place on numpy ``uint8`` buffers so that the
generational loop never allocates genome storage.

Author: Mosaic Team
License: MIT
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from mosaic.exceptions import GenomeLengthError


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class MutationConfig:
    """Parameters of the two-tier perturbation model."""

    fine_probability: float = 0.9     # Chance a mutation uses the fine range
    fine_amplitude: int = 5           # Fine noise drawn from [-5, 5]
    coarse_amplitude: int = 30        # Coarse noise drawn from [-30, 30]

    def validate(self) -> tuple[bool, list[str]]:
        """Validate configuration."""
        errors = []

        if not (0.0 <= self.fine_probability <= 1.0):
            errors.append("fine_probability must be in [0, 1]")

        if self.fine_amplitude < 0 or self.coarse_amplitude < 0:
            errors.append("amplitudes must be >= 0")

        if self.coarse_amplitude > 255:
            errors.append("coarse_amplitude must be <= 255")

        return (len(errors) == 0, errors)


DEFAULT_MUTATION = MutationConfig()


# =============================================================================
# Mutation
# =============================================================================


def mutation_count(length: int, rate: float) -> int:
    """
    Number of point mutations applied to a genome of ``length`` bytes.

    ``round(length * rate)`` with halves rounded up, floored at one so that
    every call perturbs at least one position.
    """
    return max(1, int(math.floor(length * rate + 0.5)))


def point_mutate(
    genome: np.ndarray,
    rate: float,
    rng: np.random.Generator,
    config: MutationConfig = DEFAULT_MUTATION,
) -> int:
    """
    Apply point mutations to ``genome`` in place.

    Each mutation targets a uniformly random index (the same index may be
    drawn more than once), adds a signed perturbation and clamps the result
    to ``[0, 255]``.

    Args:
        genome: ``uint8`` buffer to mutate
        rate: Mutation intensity; the fraction of the genome to perturb
        rng: Random source owned by the caller
        config: Perturbation model

    Returns:
        Number of mutation events applied

    Raises:
        ValueError: If a custom ``config`` fails validation
    """
    if config is not DEFAULT_MUTATION:
        is_valid, errors = config.validate()
        if not is_valid:
            raise ValueError(f"Invalid mutation config: {', '.join(errors)}")

    length = genome.shape[0]
    if length == 0:
        return 0

    count = mutation_count(length, rate)

    indices = rng.integers(0, length, size=count)
    fine = rng.random(count) < config.fine_probability
    noise = np.where(
        fine,
        rng.integers(-config.fine_amplitude, config.fine_amplitude + 1, size=count),
        rng.integers(-config.coarse_amplitude, config.coarse_amplitude + 1, size=count),
    )

    # Repeated indices are applied in draw order, one wave per repeat, so the
    # clamp runs after every event exactly as a scalar loop would.
    while indices.size:
        unique, first = np.unique(indices, return_index=True)
        values = genome[unique].astype(np.int16) + noise[first]
        genome[unique] = np.clip(values, 0, 255)

        remaining = np.ones(indices.size, dtype=bool)
        remaining[first] = False
        indices = indices[remaining]
        noise = noise[remaining]

    return count


# =============================================================================
# Crossover
# =============================================================================


def two_point_crossover(
    base: np.ndarray,
    donor: np.ndarray,
    out: np.ndarray,
    rng: np.random.Generator,
) -> tuple[int, int]:
    """
    Write a child of ``base`` and ``donor`` into ``out``.

    Two independent indices are drawn over ``[0, length)`` and ordered as
    ``start <= end``; the child equals ``base`` except on ``[start, end)``,
    which comes from ``donor``. Degenerates to a copy of ``base`` when the
    two draws coincide.

    Args:
        base: Genome providing everything outside the segment
        donor: Genome providing the segment
        out: Preallocated child buffer, overwritten byte for byte
        rng: Random source owned by the caller

    Returns:
        The ``(start, end)`` segment taken from ``donor``

    Raises:
        GenomeLengthError: If the three buffers differ in length
    """
    length = base.shape[0]
    if donor.shape[0] != length:
        raise GenomeLengthError(length, donor.shape[0], "crossover")
    if out.shape[0] != length:
        raise GenomeLengthError(length, out.shape[0], "crossover")

    np.copyto(out, base)
    if length == 0:
        return (0, 0)

    a, b = rng.integers(0, length, size=2)
    start, end = (int(a), int(b)) if a <= b else (int(b), int(a))
    out[start:end] = donor[start:end]

    return (start, end)


__all__ = [
    "MutationConfig",
    "DEFAULT_MUTATION",
    "mutation_count",
    "point_mutate",
    "two_point_crossover",
]
