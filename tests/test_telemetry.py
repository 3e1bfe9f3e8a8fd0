"""Tests for hive telemetry."""

from __future__ import annotations

import pytest

from hiveroute.engine.telemetry import HiveHealth, HiveTelemetry, health_for_rate


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def telemetry(clock: FakeClock) -> HiveTelemetry:
    return HiveTelemetry(clock=clock)


class TestHealthForRate:
    """Tests for health classification."""

    @pytest.mark.parametrize(
        ("qpm", "health"),
        [
            (0, HiveHealth.HIBERNATING),
            (1, HiveHealth.NOMINAL),
            (10, HiveHealth.NOMINAL),
            (11, HiveHealth.ELEVATED),
            (30, HiveHealth.ELEVATED),
            (31, HiveHealth.CRITICAL),
        ],
    )
    def test_thresholds(self, qpm: float, health: HiveHealth) -> None:
        assert health_for_rate(qpm) is health


class TestHiveTelemetry:
    """Tests for HiveTelemetry."""

    def test_starts_hibernating(self, telemetry: HiveTelemetry) -> None:
        assert telemetry.queries_per_minute == 0.0
        assert telemetry.health is HiveHealth.HIBERNATING

    def test_rate_window(self, telemetry: HiveTelemetry, clock: FakeClock) -> None:
        for _ in range(12):
            telemetry.record_query(candidate_count=3, response_time_ms=5.0)
        assert telemetry.queries_per_minute == 12.0
        assert telemetry.health is HiveHealth.ELEVATED

        clock.now = 59.0
        assert telemetry.queries_per_minute == 12.0
        clock.now = 60.0
        assert telemetry.queries_per_minute == 0.0
        assert telemetry.total_queries == 12

    def test_exponential_average(self, telemetry: HiveTelemetry) -> None:
        telemetry.record_query(candidate_count=1, response_time_ms=10.0)
        assert telemetry.average_response_ms == pytest.approx(2.0)
        telemetry.record_query(candidate_count=1, response_time_ms=10.0)
        assert telemetry.average_response_ms == pytest.approx(3.6)

    def test_peak_concurrency(self, telemetry: HiveTelemetry) -> None:
        telemetry.record_query(candidate_count=7, response_time_ms=1.0)
        telemetry.record_query(candidate_count=3, response_time_ms=1.0)
        assert telemetry.peak_concurrency == 7
        assert telemetry.last_candidate_count == 3

    def test_stats(self, telemetry: HiveTelemetry) -> None:
        for ms in (1.0, 2.0, 3.0, 4.0, 100.0):
            telemetry.record_query(candidate_count=2, response_time_ms=ms)
        stats = telemetry.get_stats()
        assert stats["total_queries"] == 5
        assert stats["p50_response_ms"] == 3.0
        assert stats["p95_response_ms"] == 100.0
        assert stats["health"] == "nominal"

    def test_stats_empty(self, telemetry: HiveTelemetry) -> None:
        stats = telemetry.get_stats()
        assert stats["p50_response_ms"] == 0.0
        assert stats["health"] == "hibernating"

    def test_reset(self, telemetry: HiveTelemetry) -> None:
        telemetry.record_query(candidate_count=5, response_time_ms=3.0)
        telemetry.reset()
        assert telemetry.total_queries == 0
        assert telemetry.peak_concurrency == 0
        assert telemetry.queries_per_minute == 0.0
