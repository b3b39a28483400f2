"""
Adaptive mutation-rate schedule.

As the best fitness approaches 1.0 large perturbations mostly destroy
detail, so the base rate is scaled down in steps. The rate never reaches
zero.
"""

from __future__ import annotations

# (exclusive lower bound on best fitness, multiplier), checked in order
RATE_SCHEDULE: tuple[tuple[float, float], ...] = (
    (0.99, 0.3),
    (0.98, 0.5),
    (0.97, 0.7),
    (0.95, 0.8),
    (0.90, 0.9),
)


def effective_rate(current_best_fitness: float, base_rate: float, is_auto: bool) -> float:
    """
    Mutation rate to use for the next generation.

    Args:
        current_best_fitness: Best fitness across all islands
        base_rate: User-selected mutation rate
        is_auto: Whether to scale ``base_rate`` by convergence

    Returns:
        ``base_rate`` unchanged when ``is_auto`` is false, otherwise scaled by
        the first schedule entry whose bound ``current_best_fitness`` exceeds
    """
    if not is_auto:
        return base_rate

    for threshold, factor in RATE_SCHEDULE:
        if current_best_fitness > threshold:
            return base_rate * factor

    return base_rate


__all__ = [
    "RATE_SCHEDULE",
    "effective_rate",
]
