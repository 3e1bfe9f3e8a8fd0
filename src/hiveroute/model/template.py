"""SpecialistTemplate dataclass: the static blueprint a candidate is spawned from."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Family(StrEnum):
    """Response strategy families, keyed by the first species segment."""

    CODE = "code"
    CREATIVE = "creative"
    INFRA = "infra"
    RESEARCH = "research"
    BUSINESS = "biz"
    WELLBEING = "well"
    LOCALIZED = "lang"
    GENERAL = "general"


@dataclass
class SpecialistTemplate:
    """A narrow-domain specialist: keywords, app affinities and a fitness prior.

    Identity fields (species through emoji) are fixed at catalog load.
    ``fitness_score`` and the counters are written only by the fitness
    registry during evolution.
    """

    # Identity
    species: str  # dotted domain path, e.g. "code.swift.debug"
    label: str
    domain: str
    keywords: tuple[str, ...] = ()
    affinities: frozenset[str] = frozenset()
    emoji: str = ""

    # Evolutionary state
    fitness_score: float = 0.5
    spawn_count: int = 0
    success_count: int = 0
    generation: int = 0

    # Derived
    depth: int = field(init=False)
    family: Family = field(init=False)

    def __post_init__(self) -> None:
        if not self.species or not self.species.strip():
            msg = "Specialist species must be a non-empty dotted path"
            raise ValueError(msg)
        self.keywords = tuple(dict.fromkeys(k.lower() for k in self.keywords if k))
        self.affinities = frozenset(self.affinities)
        self.depth = self.species.count(".") + 1
        head = self.species.split(".", 1)[0]
        try:
            self.family = Family(head)
        except ValueError:
            self.family = Family.GENERAL

    @property
    def win_rate(self) -> float:
        """Observed win rate from the last fitness write-back."""
        if self.spawn_count == 0:
            return 0.0
        return self.success_count / self.spawn_count

    @property
    def base_species(self) -> str:
        """First two species levels, e.g. ``code.swift`` for ``code.swift.debug``."""
        return ".".join(self.species.split(".")[:2])
