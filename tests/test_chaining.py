"""Tests for the chaining boost."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from hiveroute.engine.chaining import CHAINING_RULES, apply_chaining
from hiveroute.model import Candidate, SpecialistTemplate


@pytest.fixture
def candidate(make_template: Callable[..., SpecialistTemplate]) -> Callable[..., Candidate]:
    def _make(species: str, confidence: float) -> Candidate:
        return Candidate(template=make_template(species), confidence=confidence)

    return _make


def _by_species(candidates: list[Candidate]) -> dict[str, float]:
    return {c.species: c.confidence for c in candidates}


class TestApplyChaining:
    """Tests for apply_chaining."""

    def test_boosts_related_target(self, candidate: Callable[..., Candidate]) -> None:
        result = apply_chaining(
            [candidate("infra.docker", 0.6), candidate("infra.kubernetes", 0.3)]
        )
        scores = _by_species(result)
        assert scores["infra.docker"] == 0.6
        assert scores["infra.kubernetes"] == pytest.approx(0.45)

    def test_trigger_uses_source_base(self, candidate: Callable[..., Candidate]) -> None:
        result = apply_chaining([candidate("code.swift.debug", 0.7), candidate("infra.ci", 0.2)])
        assert _by_species(result)["infra.ci"] == pytest.approx(0.35)

    def test_matches_full_target_species(self, candidate: Callable[..., Candidate]) -> None:
        result = apply_chaining(
            [candidate("code.javascript", 0.6), candidate("infra.cloud.gcp", 0.2)]
        )
        assert _by_species(result)["infra.cloud.gcp"] == pytest.approx(0.35)

    def test_matches_target_base(self, candidate: Callable[..., Candidate]) -> None:
        result = apply_chaining([candidate("infra.docker", 0.6), candidate("infra.ci.lint", 0.2)])
        assert _by_species(result)["infra.ci.lint"] == pytest.approx(0.35)

    def test_source_below_trigger(self, candidate: Callable[..., Candidate]) -> None:
        result = apply_chaining(
            [candidate("infra.docker", 0.4), candidate("infra.kubernetes", 0.3)]
        )
        assert _by_species(result)["infra.kubernetes"] == 0.3

    def test_target_not_below_source(self, candidate: Callable[..., Candidate]) -> None:
        result = apply_chaining(
            [candidate("infra.docker", 0.5), candidate("infra.kubernetes", 0.7)]
        )
        assert _by_species(result)["infra.kubernetes"] == 0.7

    def test_boost_applied_once(self, candidate: Callable[..., Candidate]) -> None:
        candidates = [
            candidate("infra.docker", 0.6),
            candidate("code.swift", 0.6),
            candidate("infra.ci", 0.2),
        ]
        assert _by_species(apply_chaining(candidates))["infra.ci"] == pytest.approx(0.35)

    def test_order_independent(self, candidate: Callable[..., Candidate]) -> None:
        forward = [candidate("infra.docker", 0.6), candidate("infra.kubernetes", 0.5)]
        backward = list(reversed(forward))
        assert _by_species(apply_chaining(forward)) == _by_species(apply_chaining(backward))

    def test_clamped(self, candidate: Callable[..., Candidate]) -> None:
        result = apply_chaining(
            [candidate("infra.docker", 0.99), candidate("infra.kubernetes", 0.95)],
            boost=0.5,
        )
        assert _by_species(result)["infra.kubernetes"] == 1.0

    def test_custom_rules(self, candidate: Callable[..., Candidate]) -> None:
        result = apply_chaining(
            [candidate("well.focus", 0.8), candidate("well.mood", 0.1)],
            rules={"well.focus": ("well.mood",)},
        )
        assert _by_species(result)["well.mood"] == pytest.approx(0.25)

    def test_inputs_not_mutated(self, candidate: Callable[..., Candidate]) -> None:
        target = candidate("infra.kubernetes", 0.3)
        apply_chaining([candidate("infra.docker", 0.6), target])
        assert target.confidence == 0.3

    def test_rule_table(self) -> None:
        assert len(CHAINING_RULES) == 9
        assert CHAINING_RULES["infra.docker"] == ("infra.kubernetes", "infra.ci")
