"""
Evolution History Tracking

This module records the progress of a run across generations:
- Generation records (per-island statistics snapshots)
- Fitness progression over time
- Mutation-rate schedule actually applied
- Export/import as JSON for analysis and plotting

Author: Mosaic Team
License: MIT
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger

from .population import PopulationStatistics


def _rank_key(fitness: float) -> float:
    return -math.inf if math.isnan(fitness) else fitness


# =============================================================================
# Generation Record
# =============================================================================


@dataclass
class GenerationRecord:
    """
    Record of one ensemble step.

    Captures:
    - Generation number and wall-clock timestamp
    - Effective mutation rate used for the step
    - Statistics of every island after the step
    - Whether a migration pass ran
    """

    generation: int
    timestamp: str
    mutation_rate: float

    # Best across islands
    best_fitness: float

    # Per-island snapshots
    islands: list[PopulationStatistics] = field(default_factory=list)

    migrated: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "generation": self.generation,
            "timestamp": self.timestamp,
            "mutation_rate": self.mutation_rate,
            "best_fitness": self.best_fitness,
            "islands": [stats.to_dict() for stats in self.islands],
            "migrated": self.migrated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenerationRecord:
        """Create from dictionary."""
        return cls(
            generation=data["generation"],
            timestamp=data["timestamp"],
            mutation_rate=data["mutation_rate"],
            best_fitness=data["best_fitness"],
            islands=[PopulationStatistics(**stats) for stats in data.get("islands", [])],
            migrated=data.get("migrated", False),
        )


# =============================================================================
# Evolution History
# =============================================================================


class EvolutionHistory:
    """
    Tracks evolution history across all generations of a run.

    Responsibilities:
    - Record each generation
    - Analyze fitness progression
    - Export history for visualization
    """

    def __init__(self, experiment_name: str = "mosaic-evolution"):
        """
        Initialize evolution history.

        Args:
            experiment_name: Name of this evolution run
        """
        self.experiment_name = experiment_name
        self.start_time = datetime.now(timezone.utc).isoformat()

        self.generations: dict[int, GenerationRecord] = {}

        self.global_best_fitness: float = 0.0
        self.global_best_generation: int | None = None

        logger.debug("Initialized EvolutionHistory", experiment=experiment_name)

    def __len__(self) -> int:
        return len(self.generations)

    def _update_global_best(self, generation: int, fitness: float) -> None:
        """Adopt ``fitness`` as the global best if it beats the current one; NaN never does."""
        if math.isnan(fitness):
            return
        if self.global_best_generation is None or fitness > self.global_best_fitness:
            self.global_best_fitness = fitness
            self.global_best_generation = generation

    def record_generation(
        self,
        generation: int,
        mutation_rate: float,
        islands: list[PopulationStatistics],
        migrated: bool = False,
    ) -> GenerationRecord:
        """
        Record a completed ensemble step.

        Args:
            generation: Generation number after the step
            mutation_rate: Effective mutation rate used for the step
            islands: Statistics of every island
            migrated: Whether a migration pass ran after the step

        Returns:
            The stored record
        """
        best_fitness = max(
            (stats.best_fitness for stats in islands), key=_rank_key, default=0.0
        )
        self._update_global_best(generation, best_fitness)

        record = GenerationRecord(
            generation=generation,
            timestamp=datetime.now(timezone.utc).isoformat(),
            mutation_rate=mutation_rate,
            best_fitness=best_fitness,
            islands=list(islands),
            migrated=migrated,
        )
        self.generations[generation] = record

        logger.debug(
            "Generation recorded",
            generation=generation,
            best_fitness=f"{best_fitness:.6f}",
            migrated=migrated,
        )

        return record

    def get_fitness_progression(self) -> list[tuple[int, float]]:
        """
        Get fitness progression over generations.

        Returns:
            List of (generation, best_fitness) tuples
        """
        return [
            (generation, self.generations[generation].best_fitness)
            for generation in sorted(self.generations.keys())
        ]

    def get_generation_record(self, generation: int) -> GenerationRecord | None:
        """Get record for a specific generation."""
        return self.generations.get(generation)

    def compute_summary(self) -> dict[str, Any]:
        """
        Compute summary statistics of evolution history.

        Returns:
            Summary dictionary
        """
        if not self.generations:
            return {
                "experiment_name": self.experiment_name,
                "total_generations": 0,
                "global_best_fitness": 0.0,
            }

        progression = self.get_fitness_progression()
        initial_fitness = progression[0][1]
        final_fitness = progression[-1][1]

        return {
            "experiment_name": self.experiment_name,
            "start_time": self.start_time,
            "total_generations": len(self.generations),
            "global_best_fitness": self.global_best_fitness,
            "global_best_generation": self.global_best_generation,
            "initial_fitness": initial_fitness,
            "final_fitness": final_fitness,
            "fitness_improvement": final_fitness - initial_fitness,
            "migrations": sum(1 for r in self.generations.values() if r.migrated),
        }

    def export_to_json(self, filepath: Path | str) -> None:
        """
        Export complete history to JSON file.

        Args:
            filepath: Output file path
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "experiment_name": self.experiment_name,
            "start_time": self.start_time,
            "summary": self.compute_summary(),
            "generations": {
                str(gen): record.to_dict()
                for gen, record in self.generations.items()
            },
        }

        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)

        logger.info(
            "Evolution history exported",
            filepath=str(filepath),
            generations=len(self.generations),
        )

    @classmethod
    def import_from_json(cls, filepath: Path | str) -> EvolutionHistory:
        """
        Load history from a JSON file written by :meth:`export_to_json`.

        Args:
            filepath: Input file path
        """
        filepath = Path(filepath)

        with open(filepath, "r") as f:
            data = json.load(f)

        history = cls(experiment_name=data["experiment_name"])
        history.start_time = data["start_time"]
        history.generations = {
            int(gen): GenerationRecord.from_dict(record)
            for gen, record in data["generations"].items()
        }

        for generation, record in sorted(history.generations.items()):
            history._update_global_best(generation, record.best_fitness)

        logger.info(
            "Evolution history imported",
            filepath=str(filepath),
            generations=len(history.generations),
        )

        return history


__all__ = [
    "GenerationRecord",
    "EvolutionHistory",
]
