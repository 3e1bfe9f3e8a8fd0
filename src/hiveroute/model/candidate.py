"""Per-query candidates and the consensus result handed back to the host."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from hiveroute.model.template import SpecialistTemplate

REPHRASE_PROMPT = "The hive could not reach consensus. Try rephrasing your query."


@dataclass
class Candidate:
    """One template spawned for one query: scored, then given a response.

    Lives only for the duration of a query.
    """

    template: SpecialistTemplate
    confidence: float = 0.0
    response: str = ""
    latency_ms: float = 0.0

    @property
    def species(self) -> str:
        return self.template.species

    def with_confidence(self, confidence: float) -> Candidate:
        """Return a copy with a new (clamped) confidence."""
        return replace(self, confidence=max(0.0, min(1.0, confidence)))


@dataclass(frozen=True)
class VoteBreakdown:
    """One ranked row of a consensus breakdown."""

    species: str
    emoji: str
    confidence: float
    latency_ms: float

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> VoteBreakdown:
        return cls(
            species=candidate.species,
            emoji=candidate.template.emoji,
            confidence=candidate.confidence,
            latency_ms=candidate.latency_ms,
        )


@dataclass(frozen=True)
class ConsensusResult:
    """Outcome of a consensus round.

    ``winning_species`` is empty and ``participant_count`` is zero when no
    candidate survived; hosts should prompt the user to rephrase.
    """

    final_response: str
    winning_species: str
    participant_count: int
    consensus_strength: float
    protocol: str
    breakdown: tuple[VoteBreakdown, ...] = ()
    contributors: tuple[str, ...] = field(default=())

    @property
    def is_empty(self) -> bool:
        return not self.winning_species or self.participant_count == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "final_response": self.final_response,
            "winning_species": self.winning_species,
            "participant_count": self.participant_count,
            "consensus_strength": round(self.consensus_strength, 4),
            "protocol": self.protocol,
            "breakdown": [
                {
                    "species": vote.species,
                    "emoji": vote.emoji,
                    "confidence": round(vote.confidence, 4),
                    "latency_ms": round(vote.latency_ms, 3),
                }
                for vote in self.breakdown
            ],
            "contributors": list(self.contributors),
        }


EMPTY_RESULT = ConsensusResult(
    final_response=REPHRASE_PROMPT,
    winning_species="",
    participant_count=0,
    consensus_strength=0.0,
    protocol="None",
)
