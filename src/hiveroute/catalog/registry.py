"""SpecialistCatalog: the owned, ordered table of specialist templates."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator

from hiveroute.model.template import Family, SpecialistTemplate

logger = logging.getLogger(__name__)


class SpecialistCatalog:
    """Ordered registry of specialist templates keyed by species.

    Templates keep catalog insertion order so that ranking ties resolve
    deterministically. Removal and fitness write-back are the only mutations
    after construction; both happen during evolution.

    Example:
        >>> catalog = SpecialistCatalog([SpecialistTemplate("code.swift", "Swift", "Swift")])
        >>> "code.swift" in catalog
        True
    """

    def __init__(self, templates: Iterable[SpecialistTemplate] = ()) -> None:
        self._templates: dict[str, SpecialistTemplate] = {}
        self._lock = threading.RLock()
        for template in templates:
            if template.species in self._templates:
                msg = f"Duplicate species in catalog: {template.species}"
                raise ValueError(msg)
            self._templates[template.species] = template

    def all(self) -> list[SpecialistTemplate]:
        """Return a snapshot list of templates in catalog order."""
        with self._lock:
            return list(self._templates.values())

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._templates)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, species: object) -> bool:
        with self._lock:
            return species in self._templates

    def __iter__(self) -> Iterator[SpecialistTemplate]:
        return iter(self.all())

    def get(self, species: str) -> SpecialistTemplate | None:
        with self._lock:
            return self._templates.get(species)

    def remove(self, species: str) -> bool:
        """Remove a species.

        Returns:
            True if the species was present.
        """
        with self._lock:
            removed = self._templates.pop(species, None)
        if removed is not None:
            logger.debug("Removed species %s from catalog", species)
        return removed is not None

    def apply_fitness(
        self,
        species: str,
        fitness: float,
        spawns: int,
        wins: int,
        generation: int,
    ) -> None:
        """Write evolutionary state back onto a template.

        Unknown species are ignored; the registry may track species that were
        removed from the catalog by a host.
        """
        with self._lock:
            template = self._templates.get(species)
            if template is None:
                return
            template.fitness_score = max(0.0, min(1.0, fitness))
            template.spawn_count = spawns
            template.success_count = wins
            template.generation = generation

    def families(self) -> dict[Family, int]:
        """Count templates per family."""
        counts: dict[Family, int] = {}
        with self._lock:
            for template in self._templates.values():
                counts[template.family] = counts.get(template.family, 0) + 1
        return counts
