"""
Unit tests for the adaptive mutation-rate schedule.
"""

import pytest

from mosaic.genome import RATE_SCHEDULE, effective_rate


class TestEffectiveRate:
    """Test effective_rate."""

    @pytest.mark.parametrize(
        "fitness,expected",
        [
            (0.995, 0.03),
            (0.991, 0.03),
            (0.985, 0.05),
            (0.975, 0.07),
            (0.96, 0.08),
            (0.92, 0.09),
            (0.5, 0.1),
            (0.0, 0.1),
        ],
    )
    def test_auto_schedule(self, fitness, expected):
        """Test each band scales the base rate."""
        assert effective_rate(fitness, 0.1, True) == pytest.approx(expected, abs=1e-10)

    @pytest.mark.parametrize(
        "fitness,expected",
        [
            (0.99, 0.05),
            (0.98, 0.07),
            (0.97, 0.08),
            (0.95, 0.09),
            (0.90, 0.1),
        ],
    )
    def test_bounds_are_exclusive(self, fitness, expected):
        """Test a fitness equal to a bound falls into the next band down."""
        assert effective_rate(fitness, 0.1, True) == pytest.approx(expected, abs=1e-10)

    @pytest.mark.parametrize("fitness", [0.0, 0.5, 0.95, 0.999, 1.0])
    def test_manual_rate_unchanged(self, fitness):
        """Test the base rate passes through when auto scaling is off."""
        assert effective_rate(fitness, 0.037, False) == 0.037

    def test_rate_never_reaches_zero(self):
        """Test every multiplier is positive."""
        assert all(factor > 0 for _, factor in RATE_SCHEDULE)
        assert effective_rate(1.0, 0.1, True) > 0
