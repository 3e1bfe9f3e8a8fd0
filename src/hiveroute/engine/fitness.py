"""Fitness registry: per-species win tracking and evolutionary pruning."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hiveroute.catalog.registry import SpecialistCatalog

logger = logging.getLogger(__name__)

UNSEEN_FITNESS = 0.5


@dataclass
class FitnessRecord:
    """Spawn and win counters for one species."""

    spawns: int = 0
    wins: int = 0

    @property
    def win_rate(self) -> float:
        if self.spawns == 0:
            return UNSEEN_FITNESS
        return self.wins / self.spawns


@dataclass
class EvolutionReport:
    """Statistics for a single evolution pass."""

    generation: int
    pruned: list[str] = field(default_factory=list)
    surviving: int = 0
    best_fitness: float = 0.0
    avg_fitness: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "pruned": list(self.pruned),
            "surviving": self.surviving,
            "best_fitness": round(self.best_fitness, 4),
            "avg_fitness": round(self.avg_fitness, 4),
        }


class FitnessRegistry:
    """Thread-safe per-species fitness tracker.

    Fitness is the observed win rate; species never seen score 0.5. Counters
    only grow between evolution passes.

    Example:
        >>> registry = FitnessRegistry()
        >>> registry.record_spawn("code.swift.debug")
        >>> registry.record_success("code.swift.debug")
        >>> registry.fitness("code.swift.debug")
        1.0
    """

    def __init__(self, min_sample: int = 10, prune_floor: float = 0.1) -> None:
        self.min_sample = min_sample
        self.prune_floor = prune_floor
        self.generation = 0
        self.total_spawns = 0
        self.total_queries = 0
        self.history: list[EvolutionReport] = []
        self._records: dict[str, FitnessRecord] = {}
        self._lock = threading.Lock()

    def record_spawn(self, species: str) -> None:
        """Count a surviving candidate for ``species``."""
        with self._lock:
            self._records.setdefault(species, FitnessRecord()).spawns += 1
            self.total_spawns += 1

    def record_success(self, species: str) -> None:
        """Count a win; spawns are raised so wins never exceed them."""
        with self._lock:
            record = self._records.setdefault(species, FitnessRecord())
            record.wins += 1
            record.spawns = max(record.spawns, record.wins)

    def record_query(self) -> None:
        with self._lock:
            self.total_queries += 1

    def fitness(self, species: str) -> float:
        with self._lock:
            record = self._records.get(species)
            return record.win_rate if record else UNSEEN_FITNESS

    def record(self, species: str) -> FitnessRecord | None:
        """Copy of the record for ``species``, if tracked."""
        with self._lock:
            record = self._records.get(species)
            return FitnessRecord(record.spawns, record.wins) if record else None

    def __contains__(self, species: object) -> bool:
        with self._lock:
            return species in self._records

    def _should_prune(self, record: FitnessRecord) -> bool:
        return record.spawns > self.min_sample and record.win_rate < self.prune_floor

    def evolve(self, catalog: SpecialistCatalog | None = None) -> EvolutionReport:
        """Advance one generation: prune weak species and write fitness back.

        Species with more than ``min_sample`` spawns and a win rate below
        ``prune_floor`` are removed from the registry and from ``catalog``.
        Surviving catalog templates receive the current fitness, counters and
        generation.

        Args:
            catalog: Catalog to prune and update, if any.

        Returns:
            EvolutionReport for this generation (also appended to ``history``).
        """
        with self._lock:
            self.generation += 1
            pruned = [s for s, r in self._records.items() if self._should_prune(r)]
            for species in pruned:
                del self._records[species]
            snapshot = {s: FitnessRecord(r.spawns, r.wins) for s, r in self._records.items()}
            generation = self.generation

        if catalog is not None:
            for species in pruned:
                catalog.remove(species)
            for template in catalog.all():
                record = snapshot.get(template.species, FitnessRecord())
                catalog.apply_fitness(
                    template.species,
                    fitness=record.win_rate,
                    spawns=record.spawns,
                    wins=record.wins,
                    generation=generation,
                )

        rates = [r.win_rate for r in snapshot.values()]
        report = EvolutionReport(
            generation=generation,
            pruned=pruned,
            surviving=catalog.count if catalog is not None else len(snapshot),
            best_fitness=max(rates, default=0.0),
            avg_fitness=sum(rates) / len(rates) if rates else 0.0,
        )
        with self._lock:
            self.history.append(report)

        logger.info(
            "Evolved to generation %d: pruned=%d surviving=%d best=%.3f avg=%.3f",
            report.generation,
            len(pruned),
            report.surviving,
            report.best_fitness,
            report.avg_fitness,
        )
        return report

    def top_performers(self, n: int = 5) -> list[str]:
        """Species with the highest fitness; ties keep first-seen order."""
        with self._lock:
            ranked = sorted(self._records.items(), key=lambda kv: kv[1].win_rate, reverse=True)
            return [species for species, _ in ranked[:n]]

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "generation": self.generation,
                "tracked_species": len(self._records),
                "total_spawns": self.total_spawns,
                "total_queries": self.total_queries,
            }
