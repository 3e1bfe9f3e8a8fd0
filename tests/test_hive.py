"""Tests for the hive orchestrator."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from hiveroute.catalog import SpecialistCatalog
from hiveroute.config import HiveSettings
from hiveroute.engine import (
    ConversationMemory,
    HiveBusyError,
    HiveEngine,
    HiveError,
    QueryTimeoutError,
    SessionContext,
)
from hiveroute.model import (
    EMPTY_RESULT,
    ContextSnapshot,
    SpecialistTemplate,
    SystemSnapshotBuilder,
)

SWIFT_BUG = "fix this bug in my swift code"


@pytest.fixture
def hive(settings: HiveSettings) -> Iterator[HiveEngine]:
    engine = HiveEngine(settings=settings)
    yield engine
    engine.shutdown()


@pytest.fixture
def small_catalog(make_template: Callable[..., SpecialistTemplate]) -> SpecialistCatalog:
    return SpecialistCatalog(
        [
            make_template("code.alpha", ("alpha", "beta")),
            make_template("code.beta", ("beta",)),
        ]
    )


class TestScenarios:
    """End-to-end routing over the default catalog."""

    def test_swift_debugging_in_xcode(
        self, hive: HiveEngine, xcode_snapshot: ContextSnapshot
    ) -> None:
        result = hive.process(SWIFT_BUG, snapshot=xcode_snapshot)
        assert result.winning_species == "code.swift.debug"
        assert result.consensus_strength == pytest.approx(0.925)
        top3 = {vote.species: vote.confidence for vote in result.breakdown[:3]}
        assert top3["code.swift.debug"] > 0.3
        assert result.protocol == "Synthesis(5)"
        assert "code.swift.debug" in result.contributors

    def test_empty_catalog(self, settings: HiveSettings, xcode_snapshot: ContextSnapshot) -> None:
        with HiveEngine(catalog=SpecialistCatalog(), settings=settings) as hive:
            for query in (SWIFT_BUG, "hello", ""):
                assert hive.process(query, snapshot=xcode_snapshot) == EMPTY_RESULT

    def test_repeat_query_builds_momentum(
        self, hive: HiveEngine, xcode_snapshot: ContextSnapshot
    ) -> None:
        first = hive.process(SWIFT_BUG, snapshot=xcode_snapshot)
        second = hive.process(SWIFT_BUG, snapshot=xcode_snapshot)
        assert first.winning_species in hive.session.momentum
        assert hive.session.momentum == [first.winning_species, second.winning_species]

    def test_momentum_raises_repeat_confidence(
        self, hive: HiveEngine, xcode_snapshot: ContextSnapshot
    ) -> None:
        first = hive.process(SWIFT_BUG, snapshot=xcode_snapshot)
        second = hive.process(SWIFT_BUG, snapshot=xcode_snapshot)
        assert second.consensus_strength >= first.consensus_strength

    def test_unmatched_query_yields_empty(
        self, settings: HiveSettings, make_snapshot: Callable[..., ContextSnapshot]
    ) -> None:
        with HiveEngine(settings=settings) as hive:
            result = hive.process("zzzz qqqq", snapshot=make_snapshot())
        assert result.is_empty
        assert result.final_response == EMPTY_RESULT.final_response


class TestRecording:
    """What a completed query records."""

    def test_records_fitness_session_and_telemetry(
        self, hive: HiveEngine, xcode_snapshot: ContextSnapshot
    ) -> None:
        result = hive.process(SWIFT_BUG, snapshot=xcode_snapshot)
        assert hive.fitness.total_queries == 1
        assert hive.fitness.total_spawns == result.participant_count
        record = hive.fitness.record("code.swift.debug")
        assert record.wins == 1
        assert hive.session.recent_queries == [SWIFT_BUG]
        assert hive.session.detected_languages == {"swift"}
        assert hive.session.top_species_for_bucket("afternoon") == ["code.swift.debug"]
        assert hive.telemetry.total_queries == 1
        assert hive.telemetry.peak_concurrency == result.participant_count

    def test_conversation_append(
        self, settings: HiveSettings, xcode_snapshot: ContextSnapshot
    ) -> None:
        memory = ConversationMemory()
        with HiveEngine(settings=settings, conversation=memory) as hive:
            result = hive.process(SWIFT_BUG, snapshot=xcode_snapshot)
        [exchange] = memory.exchanges()
        assert exchange.query == SWIFT_BUG
        assert exchange.species == result.winning_species
        assert exchange.response == result.final_response

    def test_empty_result_records_no_winner(
        self, settings: HiveSettings, make_snapshot: Callable[..., ContextSnapshot]
    ) -> None:
        with HiveEngine(catalog=SpecialistCatalog(), settings=settings) as hive:
            hive.process("hello", snapshot=make_snapshot())
            assert hive.fitness.total_queries == 1
            assert hive.session.momentum == []
            assert hive.session.recent_queries == ["hello"]

    def test_explicit_session(self, hive: HiveEngine, xcode_snapshot: ContextSnapshot) -> None:
        other = SessionContext()
        hive.process(SWIFT_BUG, snapshot=xcode_snapshot, session=other)
        assert other.recent_queries == [SWIFT_BUG]
        assert hive.session.recent_queries == []

    def test_uses_snapshot_builder(self, settings: HiveSettings) -> None:
        builder = SystemSnapshotBuilder(
            clock=lambda: datetime(2026, 3, 1, 14, 0),
            app_provider=lambda: ("com.apple.dt.Xcode", "Xcode"),
        )
        with HiveEngine(settings=settings, snapshot_builder=builder) as hive:
            assert hive.process(SWIFT_BUG).winning_species == "code.swift.debug"

    def test_logs_query_fields(
        self,
        hive: HiveEngine,
        xcode_snapshot: ContextSnapshot,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="hiveroute.engine.hive"):
            hive.process(SWIFT_BUG, snapshot=xcode_snapshot)
        [record] = [r for r in caplog.records if r.getMessage().startswith("Query resolved")]
        assert record.species == "code.swift.debug"
        assert record.protocol == "Synthesis(5)"
        assert len(record.query_id) == 12


class TestProtocols:
    """Protocol selection at the hive level."""

    def test_protocol_override(self, hive: HiveEngine, xcode_snapshot: ContextSnapshot) -> None:
        result = hive.process(SWIFT_BUG, snapshot=xcode_snapshot, protocol="majority")
        assert result.protocol == "Majority"
        assert result.winning_species == "code.swift.debug"

    def test_default_from_settings(self, xcode_snapshot: ContextSnapshot) -> None:
        settings = HiveSettings(_env_file=None, default_protocol="tournament")
        with HiveEngine(settings=settings) as hive:
            assert hive.process(SWIFT_BUG, snapshot=xcode_snapshot).protocol == "Majority"

    def test_invalid_protocol_records_nothing(
        self, hive: HiveEngine, xcode_snapshot: ContextSnapshot
    ) -> None:
        with pytest.raises(ValueError, match="Unknown consensus protocol"):
            hive.process(SWIFT_BUG, snapshot=xcode_snapshot, protocol="plurality")
        assert hive.fitness.total_queries == 0
        assert hive.session.recent_queries == []


class TestConcurrency:
    """Busy rejection, timeouts and worker failures."""

    def test_overlapping_query_rejected(
        self,
        settings: HiveSettings,
        small_catalog: SpecialistCatalog,
        xcode_snapshot: ContextSnapshot,
    ) -> None:
        started = threading.Event()
        release = threading.Event()

        def blocking_score(*args: object, **kwargs: object) -> float:
            started.set()
            release.wait(timeout=5)
            return 0.5

        with (
            patch("hiveroute.engine.hive.score", side_effect=blocking_score),
            HiveEngine(catalog=small_catalog, settings=settings) as hive,
        ):
            worker = threading.Thread(target=hive.process, args=("alpha", xcode_snapshot))
            worker.start()
            assert started.wait(timeout=5)
            with pytest.raises(HiveBusyError):
                hive.process("alpha", snapshot=xcode_snapshot)
            release.set()
            worker.join(timeout=5)

        assert hive.fitness.total_queries == 1
        assert hive.session.recent_queries == ["alpha"]

    def test_timeout_records_nothing(
        self, small_catalog: SpecialistCatalog, xcode_snapshot: ContextSnapshot
    ) -> None:
        settings = HiveSettings(_env_file=None, query_timeout_s=0.05)
        memory = ConversationMemory()

        def slow_score(*args: object, **kwargs: object) -> float:
            time.sleep(0.3)
            return 0.9

        with patch("hiveroute.engine.hive.score", side_effect=slow_score):
            hive = HiveEngine(catalog=small_catalog, settings=settings, conversation=memory)
            with pytest.raises(QueryTimeoutError, match="scoring"):
                hive.process("alpha", snapshot=xcode_snapshot)
            hive.shutdown(wait=True)

        assert hive.fitness.total_queries == 0
        assert hive.fitness.total_spawns == 0
        assert hive.session.recent_queries == []
        assert hive.session.momentum == []
        assert hive.telemetry.total_queries == 0
        assert len(memory) == 0

    def test_timeout_drains_workers_before_evolve(
        self, small_catalog: SpecialistCatalog, xcode_snapshot: ContextSnapshot
    ) -> None:
        settings = HiveSettings(_env_file=None, query_timeout_s=0.05, max_workers=2)
        active = 0
        active_lock = threading.Lock()

        def slow_score(*args: object, **kwargs: object) -> float:
            nonlocal active
            with active_lock:
                active += 1
            time.sleep(0.3)
            with active_lock:
                active -= 1
            return 0.9

        with (
            patch("hiveroute.engine.hive.score", side_effect=slow_score),
            HiveEngine(catalog=small_catalog, settings=settings) as hive,
        ):
            with pytest.raises(QueryTimeoutError):
                hive.process("alpha", snapshot=xcode_snapshot)
            assert active == 0
            report = hive.evolve()
            assert active == 0

        assert report.generation == 1
        assert hive.fitness.total_spawns == 0

    def test_hive_usable_after_timeout(
        self, small_catalog: SpecialistCatalog, xcode_snapshot: ContextSnapshot
    ) -> None:
        settings = HiveSettings(_env_file=None, query_timeout_s=0.05)
        hive = HiveEngine(catalog=small_catalog, settings=settings)
        with patch("hiveroute.engine.hive.score", side_effect=lambda *a, **k: time.sleep(0.3)):
            with pytest.raises(QueryTimeoutError):
                hive.process("alpha", snapshot=xcode_snapshot)
            hive.shutdown(wait=True)
        settings_ok = HiveSettings(_env_file=None)
        hive.settings = settings_ok
        result = hive.process("alpha beta", snapshot=xcode_snapshot)
        hive.shutdown()
        assert result.winning_species == "code.alpha"

    def test_worker_failure_wrapped(
        self,
        settings: HiveSettings,
        small_catalog: SpecialistCatalog,
        xcode_snapshot: ContextSnapshot,
    ) -> None:
        with (
            patch("hiveroute.engine.hive.score", side_effect=RuntimeError("boom")),
            HiveEngine(catalog=small_catalog, settings=settings) as hive,
        ):
            with pytest.raises(HiveError, match="Scoring failed: boom"):
                hive.process("alpha", snapshot=xcode_snapshot)
        assert hive.fitness.total_queries == 0

    def test_executor_created_lazily(self, hive: HiveEngine) -> None:
        assert hive._executor is None
        hive.process("hello", snapshot=ContextSnapshot())
        assert hive._executor is not None
        hive.shutdown()
        assert hive._executor is None


class TestChainingInHive:
    """The chaining boost is applied only when enabled."""

    @pytest.fixture
    def infra_catalog(self, make_template: Callable[..., SpecialistTemplate]) -> SpecialistCatalog:
        return SpecialistCatalog(
            [
                make_template("infra.docker", ("docker", "container", "image")),
                make_template("infra.kubernetes", ("pods",)),
            ]
        )

    @pytest.mark.parametrize(("enabled", "expected"), [(False, 0.225), (True, 0.375)])
    def test_boost(
        self,
        infra_catalog: SpecialistCatalog,
        make_snapshot: Callable[..., ContextSnapshot],
        enabled: bool,
        expected: float,
    ) -> None:
        settings = HiveSettings(_env_file=None, chaining_enabled=enabled)
        with HiveEngine(catalog=infra_catalog, settings=settings) as hive:
            result = hive.process(
                "docker container image pods", snapshot=make_snapshot(), protocol="majority"
            )
        votes = {vote.species: vote.confidence for vote in result.breakdown}
        assert result.winning_species == "infra.docker"
        assert votes["infra.kubernetes"] == pytest.approx(expected)


class TestEvolution:
    """Evolution through the hive."""

    def test_prunes_losing_species(
        self, small_catalog: SpecialistCatalog, make_snapshot: Callable[..., ContextSnapshot]
    ) -> None:
        settings = HiveSettings(_env_file=None, evolve_min_sample=2, default_protocol="majority")
        with HiveEngine(catalog=small_catalog, settings=settings) as hive:
            for _ in range(3):
                assert hive.process("alpha beta", snapshot=make_snapshot()).winning_species == (
                    "code.alpha"
                )
            report = hive.evolve()

        assert report.pruned == ["code.beta"]
        assert "code.beta" not in hive.catalog
        assert hive.catalog.get("code.alpha").fitness_score == 1.0
        assert hive.summary()["generation"] == 1

    def test_summary(self, hive: HiveEngine, xcode_snapshot: ContextSnapshot) -> None:
        hive.process(SWIFT_BUG, snapshot=xcode_snapshot)
        summary = hive.summary()
        assert summary["species"] == hive.catalog.count
        assert summary["total_queries"] == 1
        assert summary["health"] == "nominal"
        assert summary["intent"] == "debugging"
        assert summary["top_species"] == ["code.swift.debug"]
        assert summary["momentum"] == ["code.swift.debug"]
        assert summary["languages"] == ["swift"]
        assert summary["chaining_rules"] == 9
        assert summary["chaining_enabled"] is False
        assert summary["protocol"] == "Synthesis(5)"


class TestConversationSeeding:
    """A persisted conversation log carries the session across restarts."""

    def test_restart_restores_session(
        self, tmp_path: Path, xcode_snapshot: ContextSnapshot
    ) -> None:
        log_path = tmp_path / "conversation.json"
        settings = HiveSettings(_env_file=None, conversation_log_path=str(log_path))

        with HiveEngine(settings=settings) as first:
            result = first.process(SWIFT_BUG, snapshot=xcode_snapshot)
        assert log_path.exists()

        with HiveEngine(settings=settings) as second:
            assert second.session.recent_queries == [SWIFT_BUG]
            assert second.session.momentum == [result.winning_species]
            assert len(second.conversation.exchanges()) == 1

    def test_corrupt_log_starts_empty(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        log_path = tmp_path / "conversation.json"
        log_path.write_text("not json", encoding="utf-8")
        settings = HiveSettings(_env_file=None, conversation_log_path=str(log_path))
        with caplog.at_level(logging.WARNING, logger="hiveroute.engine.hive"):
            hive = HiveEngine(settings=settings)
        assert hive.session.recent_queries == []
        assert "empty conversation log" in caplog.text
