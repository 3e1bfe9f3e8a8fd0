"""Consensus protocols: pick or merge candidate responses into one result."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from hiveroute.model.candidate import EMPTY_RESULT, Candidate, ConsensusResult, VoteBreakdown

logger = logging.getLogger(__name__)

MAJORITY_BREAKDOWN = 5
SYNTHESIS_BREAKDOWN = 10
DEFAULT_SYNTHESIS_TOP_N = 3

_PROTOCOL = re.compile(r"^(majority|tournament|unanimous|synthesis)(?:\((\d+)\))?$")


class ProtocolKind(StrEnum):
    """Consensus protocol families."""

    MAJORITY = "majority"
    SYNTHESIS = "synthesis"
    TOURNAMENT = "tournament"  # alias of majority
    UNANIMOUS = "unanimous"


@dataclass(frozen=True)
class ConsensusProtocol:
    """A protocol kind plus its expert count (used by synthesis only)."""

    kind: ProtocolKind = ProtocolKind.SYNTHESIS
    top_n: int = DEFAULT_SYNTHESIS_TOP_N

    def __post_init__(self) -> None:
        if self.top_n < 1:
            msg = f"Synthesis top_n must be at least 1, got {self.top_n}"
            raise ValueError(msg)

    @classmethod
    def parse(cls, text: str) -> ConsensusProtocol:
        """Parse strings such as ``"majority"`` or ``"synthesis(5)"``.

        Raises:
            ValueError: If the string names no known protocol.
        """
        normalized = text.strip().lower().replace(" ", "")
        match = _PROTOCOL.match(normalized)
        if not match:
            msg = f"Unknown consensus protocol: {text!r}"
            raise ValueError(msg)
        kind = ProtocolKind(match.group(1))
        top_n = int(match.group(2)) if match.group(2) else DEFAULT_SYNTHESIS_TOP_N
        return cls(kind=kind, top_n=top_n)

    @property
    def name(self) -> str:
        if self.kind is ProtocolKind.SYNTHESIS:
            return f"Synthesis({self.top_n})"
        return self.kind.value.capitalize()

    def __str__(self) -> str:
        return self.name


MAJORITY = ConsensusProtocol(ProtocolKind.MAJORITY)


def rank(candidates: Sequence[Candidate]) -> list[Candidate]:
    """Candidates with text, highest confidence first; ties keep input order."""
    return sorted(
        (c for c in candidates if c.response),
        key=lambda c: c.confidence,
        reverse=True,
    )


def _majority(ranked: list[Candidate]) -> ConsensusResult:
    winner = ranked[0]
    return ConsensusResult(
        final_response=winner.response,
        winning_species=winner.species,
        participant_count=len(ranked),
        consensus_strength=winner.confidence,
        protocol="Majority",
        breakdown=tuple(VoteBreakdown.from_candidate(c) for c in ranked[:MAJORITY_BREAKDOWN]),
    )


def _synthesis(ranked: list[Candidate], top_n: int, floor: float) -> ConsensusResult:
    experts = [c for c in ranked[:top_n] if c.confidence > floor]
    if not experts:
        return EMPTY_RESULT
    if len(experts) == 1:
        return _majority(ranked)

    lead = experts[0]
    survivors_sum = sum(c.confidence for c in experts)
    label = " × ".join(f"{c.template.emoji} {c.species}" for c in experts)
    sections = [
        f"🐝 **Hive: {len(ranked)} candidates, {len(experts)} converged**",
        f"Consensus: {label}",
        "",
    ]
    for expert in experts:
        weight = int(expert.confidence / survivors_sum * 100)
        sections.append(f"### {expert.template.emoji} {expert.species} ({weight}% weight)")
        sections.append(expert.response)
        sections.append("")
        sections.append("───")
        sections.append("")

    return ConsensusResult(
        final_response="\n".join(sections).rstrip(),
        winning_species=lead.species,
        participant_count=len(ranked),
        consensus_strength=lead.confidence,
        protocol=f"Synthesis({top_n})",
        breakdown=tuple(VoteBreakdown.from_candidate(c) for c in ranked[:SYNTHESIS_BREAKDOWN]),
        contributors=tuple(c.species for c in experts),
    )


def resolve(
    candidates: Sequence[Candidate],
    protocol: ConsensusProtocol | str | None = None,
    *,
    synthesis_floor: float = 0.2,
    unanimous_threshold: float = 0.6,
) -> ConsensusResult:
    """Resolve scored candidates into a single result.

    Args:
        candidates: Candidates with confidence and response text.
        protocol: Protocol value or string; defaults to ``synthesis(3)``.
        synthesis_floor: Minimum confidence for a synthesis expert (exclusive).
        unanimous_threshold: Confidence every candidate must exceed for a
            unanimous decision.

    Returns:
        The consensus result; ``EMPTY_RESULT`` when nothing usable remains.
    """
    if protocol is None:
        protocol = ConsensusProtocol()
    elif isinstance(protocol, str):
        protocol = ConsensusProtocol.parse(protocol)

    ranked = rank(candidates)
    if not ranked:
        return EMPTY_RESULT

    if protocol.kind in (ProtocolKind.MAJORITY, ProtocolKind.TOURNAMENT):
        return _majority(ranked)
    if protocol.kind is ProtocolKind.UNANIMOUS:
        if all(c.confidence > unanimous_threshold for c in ranked):
            return _majority(ranked)
        logger.debug("No unanimous agreement among %d candidates", len(ranked))
        return _synthesis(ranked, DEFAULT_SYNTHESIS_TOP_N, synthesis_floor)
    return _synthesis(ranked, protocol.top_n, synthesis_floor)
