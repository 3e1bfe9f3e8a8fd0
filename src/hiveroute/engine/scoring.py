"""Deterministic multi-signal confidence scoring.

``score`` is a pure function of a template, the query, the context snapshot
and an immutable session view. Each signal adds a non-negative contribution;
the total is clamped into [0, 1].
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from hiveroute.config import ScoringWeights
from hiveroute.engine.session import IntentSignal, SessionView
from hiveroute.model.snapshot import ContextSnapshot
from hiveroute.model.template import Family, SpecialistTemplate

_WORD = re.compile(r"\w+")

DEBUG_KEYWORDS = frozenset({"debug", "error", "fix", "crash"})

FAMILY_INTENTS: dict[IntentSignal, Family] = {
    IntentSignal.CODING: Family.CODE,
    IntentSignal.CREATING: Family.CREATIVE,
    IntentSignal.SHIPPING: Family.INFRA,
    IntentSignal.LEARNING: Family.RESEARCH,
    IntentSignal.RESTING: Family.WELLBEING,
}

# language -> predicate over raw clipboard text
CLIPBOARD_MARKERS: dict[str, Callable[[str], bool]] = {
    "swift": lambda c: "func " in c and ("->" in c or "@State" in c or "var body" in c),
    "python": lambda c: "def " in c or ("import " in c and ":" in c),
    "javascript": lambda c: "const " in c or "=>" in c or "require(" in c,
    "rust": lambda c: "fn " in c and "let " in c,
    "go": lambda c: "func " in c and ("package " in c or ":=" in c),
}


def _matches(keyword: str, text: str, tokens: set[str]) -> bool:
    if len(keyword) <= 3 and keyword.isalnum():
        return keyword in tokens
    return keyword in text


def keyword_hits(keywords: Iterable[str], text: str) -> list[str]:
    """Keywords found in ``text``, in keyword order.

    Short alphanumeric keywords (three characters or fewer) must match a whole
    word so that "go" does not fire on "good".
    """
    lowered = text.lower()
    tokens = set(_WORD.findall(lowered))
    return [kw for kw in keywords if _matches(kw, lowered, tokens)]


def bigram_hits(keywords: Iterable[str], text: str) -> list[str]:
    """Multi-word keywords with an adjacent word pair present in ``text``."""
    words = _WORD.findall(text.lower())
    pairs = set(zip(words, words[1:], strict=False))
    if not pairs:
        return []
    hits = []
    for kw in keywords:
        if " " not in kw:
            continue
        kw_words = _WORD.findall(kw)
        if any(pair in pairs for pair in zip(kw_words, kw_words[1:], strict=False)):
            hits.append(kw)
    return hits


def _intent_bonus(template: SpecialistTemplate, intent: IntentSignal, w: ScoringWeights) -> float:
    if intent is IntentSignal.DEBUGGING:
        return w.intent_debugging if DEBUG_KEYWORDS.intersection(template.keywords) else 0.0
    if FAMILY_INTENTS.get(intent) is not template.family:
        return 0.0
    return {
        IntentSignal.CODING: w.intent_coding,
        IntentSignal.CREATING: w.intent_creating,
        IntentSignal.SHIPPING: w.intent_shipping,
        IntentSignal.LEARNING: w.intent_learning,
        IntentSignal.RESTING: w.intent_resting,
    }[intent]


def _clipboard_bonus(template: SpecialistTemplate, clipboard: str, w: ScoringWeights) -> float:
    total = len(keyword_hits(template.keywords, clipboard)) * w.clipboard_keyword
    segments = set(template.species.split("."))
    for language, marker in CLIPBOARD_MARKERS.items():
        if language in segments and marker(clipboard):
            total += w.clipboard_syntax
            break
    return total


def score(
    template: SpecialistTemplate,
    query: str,
    snapshot: ContextSnapshot,
    session: SessionView,
    weights: ScoringWeights | None = None,
) -> float:
    """Compute a template's confidence for a query.

    Args:
        template: Specialist being evaluated.
        query: Raw user query.
        snapshot: Ambient context captured for this query.
        session: Session view captured at query start.
        weights: Signal weights; defaults to ``ScoringWeights()``.

    Returns:
        Confidence in [0, 1].
    """
    w = weights or ScoringWeights()
    total = 0.0

    total += len(keyword_hits(template.keywords, query)) * w.keyword
    total += len(bigram_hits(template.keywords, query)) * w.bigram

    if snapshot.active_app_id and snapshot.active_app_id in template.affinities:
        total += w.app_affinity

    total += w.fitness * template.fitness_score
    total += _intent_bonus(template, session.intent, w)

    if template.species in session.momentum:
        total += w.momentum

    total += sum(w.language for tag in session.languages if tag in template.species)

    if snapshot.time_of_day.is_night and template.family is Family.WELLBEING:
        total += w.night_wellbeing
    if snapshot.is_playing and template.family is Family.CREATIVE:
        total += w.playback_creative

    if snapshot.clipboard_text:
        total += _clipboard_bonus(template, snapshot.clipboard_text, w)

    if len(query.split()) > w.complexity_min_words and template.depth >= 3:
        total += w.complexity

    if session.mode_bias:
        haystack = f"{template.domain} {template.label} {template.species}".lower()
        total += sum(w.mode_bias for term in session.mode_bias if term.lower() in haystack)

    return max(0.0, min(1.0, total))
