"""
Unit tests for evolution history tracking.

Tests cover:
- Generation recording and global best tracking
- Fitness progression and summaries
- JSON export/import
"""

import json
import math

import pytest

from mosaic.genome import EvolutionHistory, GenerationRecord, PopulationStatistics


def island_stats(generation, best):
    return PopulationStatistics(
        generation=generation,
        population_size=5,
        best_fitness=best,
        avg_fitness=best - 0.1,
        min_fitness=best - 0.2,
        std_fitness=0.05,
    )


@pytest.fixture
def history():
    """History with three recorded generations."""
    history = EvolutionHistory(experiment_name="test-run")
    history.record_generation(1, 0.1, [island_stats(1, 0.80), island_stats(1, 0.82)])
    history.record_generation(2, 0.1, [island_stats(2, 0.85), island_stats(2, 0.83)], migrated=True)
    history.record_generation(3, 0.09, [island_stats(3, 0.91), island_stats(3, 0.86)])
    return history


class TestEvolutionHistory:
    """Test EvolutionHistory."""

    def test_record_generation(self, history):
        """Test records store the best island fitness."""
        record = history.get_generation_record(2)

        assert isinstance(record, GenerationRecord)
        assert record.best_fitness == 0.85
        assert record.migrated
        assert len(record.islands) == 2
        assert len(history) == 3

    def test_missing_record(self, history):
        """Test unknown generations return None."""
        assert history.get_generation_record(99) is None

    def test_global_best(self, history):
        """Test the global best is tracked across generations."""
        assert history.global_best_fitness == 0.91
        assert history.global_best_generation == 3

    def test_fitness_progression(self, history):
        """Test progression is ordered by generation."""
        assert history.get_fitness_progression() == [(1, 0.82), (2, 0.85), (3, 0.91)]

    def test_summary(self, history):
        """Test summary statistics."""
        summary = history.compute_summary()

        assert summary["experiment_name"] == "test-run"
        assert summary["total_generations"] == 3
        assert summary["fitness_improvement"] == pytest.approx(0.09)
        assert summary["migrations"] == 1

    def test_empty_summary(self):
        """Test summary of an empty history."""
        summary = EvolutionHistory().compute_summary()
        assert summary["total_generations"] == 0

    def test_export_import(self, history, tmp_path):
        """Test JSON export can be read back."""
        path = tmp_path / "out" / "history.json"
        history.export_to_json(path)

        data = json.loads(path.read_text())
        assert data["experiment_name"] == "test-run"
        assert set(data["generations"]) == {"1", "2", "3"}

        restored = EvolutionHistory.import_from_json(path)
        assert restored.get_fitness_progression() == history.get_fitness_progression()
        assert restored.global_best_generation == 3
        assert restored.get_generation_record(2).islands[0] == history.get_generation_record(2).islands[0]

    def test_nan_island_never_best(self):
        """Test a NaN island best ranks below every defined value."""
        history = EvolutionHistory()
        record = history.record_generation(1, 0.1, [island_stats(1, math.nan), island_stats(1, 0.5)])

        assert record.best_fitness == 0.5
        assert history.global_best_fitness == 0.5
        assert history.global_best_generation == 1

    def test_nan_generation_keeps_global_best(self):
        """Test an all-NaN generation does not replace the global best."""
        history = EvolutionHistory()
        history.record_generation(1, 0.1, [island_stats(1, 0.4)])
        record = history.record_generation(2, 0.1, [island_stats(2, math.nan)])

        assert math.isnan(record.best_fitness)
        assert history.global_best_fitness == 0.4
        assert history.global_best_generation == 1

    def test_import_skips_nan_best(self, tmp_path):
        """Test global best rebuilt on import ignores NaN generations."""
        history = EvolutionHistory()
        history.record_generation(1, 0.1, [island_stats(1, math.nan)])
        history.record_generation(2, 0.1, [island_stats(2, 0.6)])
        path = tmp_path / "history.json"
        history.export_to_json(path)

        restored = EvolutionHistory.import_from_json(path)

        assert restored.global_best_fitness == 0.6
        assert restored.global_best_generation == 2
