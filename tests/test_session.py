"""Tests for session context tracking."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from hiveroute.engine.conversation import Exchange
from hiveroute.engine.session import (
    IntentSignal,
    SessionContext,
    classify_intent,
    clipboard_languages,
    detect_languages,
)
from hiveroute.model import ContextSnapshot, OperatingMode, TimeOfDay


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestClassifyIntent:
    """Tests for intent classification."""

    @pytest.mark.parametrize(
        ("query", "intent"),
        [
            ("fix this bug in my swift code", IntentSignal.DEBUGGING),
            ("deploy the release tonight", IntentSignal.SHIPPING),
            ("design a poster", IntentSignal.CREATING),
            ("explain monads to me", IntentSignal.LEARNING),
            ("refactor the payment module", IntentSignal.CODING),
            ("I am so tired", IntentSignal.RESTING),
            ("hello there", IntentSignal.EXPLORING),
            ("tengo un problema con mi app", IntentSignal.DEBUGGING),
        ],
    )
    def test_single_query(self, query: str, intent: IntentSignal) -> None:
        assert classify_intent([query]) is intent

    def test_debugging_wins_over_coding(self) -> None:
        assert classify_intent(["write code", "then fix the crash"]) is IntentSignal.DEBUGGING

    def test_empty_is_exploring(self) -> None:
        assert classify_intent([]) is IntentSignal.EXPLORING


class TestLanguageDetection:
    """Tests for language tag detection."""

    def test_xcode_implies_swift(self, make_snapshot: Callable[..., ContextSnapshot]) -> None:
        snapshot = make_snapshot(active_app_id="com.apple.dt.Xcode")
        assert detect_languages("hello", snapshot) == {"swift"}

    def test_ide_clipboard(self, make_snapshot: Callable[..., ContextSnapshot]) -> None:
        snapshot = make_snapshot(
            active_app_id="com.microsoft.VSCode",
            clipboard_text="from os import path\nimport sys",
        )
        assert "python" in detect_languages("hello", snapshot)

    def test_clipboard_ignored_outside_ide(
        self, make_snapshot: Callable[..., ContextSnapshot]
    ) -> None:
        snapshot = make_snapshot(
            active_app_id="com.apple.Safari",
            clipboard_text="const x = () => 1",
        )
        assert detect_languages("hello", snapshot) == set()

    def test_query_terms(self, make_snapshot: Callable[..., ContextSnapshot]) -> None:
        found = detect_languages("port my django app to golang", make_snapshot())
        assert found == {"python", "go"}

    def test_short_terms_need_whole_words(
        self, make_snapshot: Callable[..., ContextSnapshot]
    ) -> None:
        assert detect_languages("a good morning", make_snapshot()) == set()

    def test_clipboard_languages(self) -> None:
        assert clipboard_languages("func add(a: Int) -> Int") == {"swift"}
        assert clipboard_languages("fn main() -> i32") == {"rust"}
        assert clipboard_languages("plain prose") == set()


class TestSessionContext:
    """Tests for SessionContext state transitions."""

    def test_ingest_updates_intent_and_languages(self, xcode_snapshot: ContextSnapshot) -> None:
        session = SessionContext()
        session.ingest("fix this bug in my swift code", xcode_snapshot)
        assert session.intent is IntentSignal.DEBUGGING
        assert session.detected_languages == {"swift"}
        assert session.recent_queries == ["fix this bug in my swift code"]

    def test_query_buffer_bounded(self, make_snapshot: Callable[..., ContextSnapshot]) -> None:
        session = SessionContext(buffer_size=3)
        for i in range(5):
            session.ingest(f"query {i}", make_snapshot())
        assert session.recent_queries == ["query 2", "query 3", "query 4"]

    def test_intent_uses_recent_window(
        self, make_snapshot: Callable[..., ContextSnapshot]
    ) -> None:
        session = SessionContext(intent_window=2)
        session.ingest("fix the crash", make_snapshot())
        session.ingest("hello", make_snapshot())
        session.ingest("hi again", make_snapshot())
        assert session.intent is IntentSignal.EXPLORING

    def test_mode_override_only_when_exploring(
        self, make_snapshot: Callable[..., ContextSnapshot]
    ) -> None:
        session = SessionContext()
        session.ingest("hello there", make_snapshot(mode=OperatingMode.DJ))
        assert session.intent is IntentSignal.CREATING
        session.ingest("fix the crash", make_snapshot(mode=OperatingMode.DJ))
        assert session.intent is IntentSignal.DEBUGGING

    def test_mode_bias_follows_mode(self, make_snapshot: Callable[..., ContextSnapshot]) -> None:
        session = SessionContext()
        session.ingest("hello", make_snapshot(mode=OperatingMode.PRODUCER))
        assert session.mode is OperatingMode.PRODUCER
        assert "DAW" in session.mode_bias
        session.ingest("hello", make_snapshot(mode=OperatingMode.NORMAL))
        assert session.mode_bias == frozenset()

    def test_momentum_bounded(self) -> None:
        session = SessionContext(momentum_size=3)
        for species in ("a.1", "a.2", "a.3", "a.4"):
            session.record_winner(species, TimeOfDay.MORNING)
        assert session.momentum == ["a.2", "a.3", "a.4"]

    def test_win_counts(self) -> None:
        session = SessionContext()
        session.record_winner("code.swift", TimeOfDay.MORNING)
        session.record_winner("code.swift", "night")
        session.record_winner("well.focus", TimeOfDay.NIGHT)
        assert session.top_species_overall() == ["code.swift", "well.focus"]
        assert session.top_species_for_bucket(TimeOfDay.MORNING) == ["code.swift"]
        assert set(session.top_species_for_bucket("night")) == {"code.swift", "well.focus"}
        assert session.top_species_for_bucket(TimeOfDay.EVENING) == []

    def test_session_minutes(self) -> None:
        clock = FakeClock()
        session = SessionContext(clock=clock)
        clock.now += 95 * 60
        assert session.session_minutes == 95


class TestPreviewAndView:
    """Tests for the immutable session views."""

    def test_preview_does_not_mutate(self, xcode_snapshot: ContextSnapshot) -> None:
        session = SessionContext()
        view = session.preview("fix this bug in my swift code", xcode_snapshot)
        assert view.intent is IntentSignal.DEBUGGING
        assert view.languages == frozenset({"swift"})
        assert view.recent_queries[-1] == "fix this bug in my swift code"
        assert session.recent_queries == []
        assert session.intent is IntentSignal.EXPLORING
        assert session.detected_languages == set()

    def test_preview_matches_ingest(self, xcode_snapshot: ContextSnapshot) -> None:
        session = SessionContext()
        preview = session.preview("fix this bug in my swift code", xcode_snapshot)
        session.ingest("fix this bug in my swift code", xcode_snapshot)
        view = session.view()
        assert preview.intent is view.intent
        assert preview.languages == view.languages
        assert preview.recent_queries == view.recent_queries

    def test_view_is_stable(self, make_snapshot: Callable[..., ContextSnapshot]) -> None:
        session = SessionContext()
        view = session.view()
        session.ingest("fix it", make_snapshot())
        session.record_winner("code.swift", TimeOfDay.MORNING)
        assert view.recent_queries == ()
        assert view.momentum == ()


class TestSeed:
    """Tests for rehydrating a session from the conversation log."""

    def test_seed_replays_queries_and_winners(self) -> None:
        session = SessionContext()
        exchanges = [
            Exchange(query="fix the crash", response="...", species="code.swift.debug"),
            Exchange(query="hello", response="", species=""),
        ]
        assert session.seed(exchanges) == 2
        assert session.recent_queries == ["fix the crash", "hello"]
        assert session.momentum == ["code.swift.debug"]
        assert session.intent is IntentSignal.DEBUGGING

    def test_seed_uses_exchange_time_bucket(self) -> None:
        session = SessionContext()
        local_morning = datetime(2026, 3, 1, 9, 0).astimezone()
        session.seed(
            [Exchange(query="q", species="well.focus", timestamp=local_morning.astimezone(UTC))]
        )
        assert session.top_species_for_bucket(TimeOfDay.MORNING) == ["well.focus"]

    def test_seed_empty(self) -> None:
        session = SessionContext()
        assert session.seed([]) == 0
        assert session.intent is IntentSignal.EXPLORING
