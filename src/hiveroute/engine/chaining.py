"""Chaining boost between related specialists.

A confident specialist lends confidence to the specialists that usually
follow it (a Docker question often turns into a Kubernetes one).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from hiveroute.model.candidate import Candidate

logger = logging.getLogger(__name__)

CHAINING_RULES: dict[str, tuple[str, ...]] = {
    "code.swift": ("infra.ci", "infra.docker"),
    "code.python": ("research.ml", "research.data"),
    "code.javascript": ("infra.cloud.gcp", "infra.ci"),
    "creative.midjourney": ("creative.color", "creative.typography"),
    "creative.audio": ("creative.motion",),
    "infra.docker": ("infra.kubernetes", "infra.ci"),
    "infra.kubernetes": ("infra.monitoring", "infra.networking"),
    "research.ml": ("research.data", "research.cv"),
    "biz.product": ("biz.marketing", "biz.pm"),
}


def _base(species: str) -> str:
    return ".".join(species.split(".")[:2])


def apply_chaining(
    candidates: Sequence[Candidate],
    *,
    trigger: float = 0.4,
    boost: float = 0.15,
    rules: Mapping[str, Sequence[str]] = CHAINING_RULES,
) -> list[Candidate]:
    """Return candidates with chained confidence boosts applied.

    Triggers and comparisons use pre-boost confidences, and each candidate is
    boosted at most once, so the result does not depend on candidate order.
    A rule target matches a candidate's two-level base or its full species.
    """
    boosted: list[Candidate] = []
    for target in candidates:
        keys = {_base(target.species), target.species}
        chained = any(
            source is not target
            and source.confidence > trigger
            and target.confidence < source.confidence
            and keys.intersection(rules.get(_base(source.species), ()))
            for source in candidates
        )
        if chained:
            logger.debug("Chaining boost for %s", target.species)
            boosted.append(target.with_confidence(target.confidence + boost))
        else:
            boosted.append(target)
    return boosted
