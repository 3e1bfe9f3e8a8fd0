"""Profile HiveEngine.process() to identify routing bottlenecks."""

import cProfile
import pstats
import time
from io import StringIO

from hiveroute.config import HiveSettings
from hiveroute.engine import HiveEngine, score
from hiveroute.engine.session import SessionContext
from hiveroute.model import ContextSnapshot, OperatingMode, TimeOfDay

QUERIES = (
    "fix this bug in my swift code",
    "how do I set up a reverse proxy with nginx",
    "design a color palette for a music app",
    "explain transformers and embeddings",
    "deploy the docker image to kubernetes",
    "I am tired, need a break",
    "react vs vue for a dashboard",
    "optimize my postgres query with explain analyze",
)

SNAPSHOTS = (
    ContextSnapshot(active_app_id="com.apple.dt.Xcode", active_app_name="Xcode"),
    ContextSnapshot(active_app_id="com.apple.Terminal", time_of_day=TimeOfDay.NIGHT),
    ContextSnapshot(is_playing=True, current_track="Roygbiv", mode=OperatingMode.CREATIVE),
    ContextSnapshot(
        active_app_id="com.microsoft.VSCode",
        clipboard_text="from pathlib import Path\nimport sys\ndef main():\n    print(sys.argv)",
    ),
)


def make_hive(**overrides) -> HiveEngine:
    settings = HiveSettings(_env_file=None, **overrides)
    return HiveEngine(settings=settings)


def measure_query_rate(hive: HiveEngine, num_queries: int) -> tuple[float, float]:
    """Measure queries per second and the slowest single query (ms)."""
    slowest = 0.0
    start_time = time.perf_counter()

    for i in range(num_queries):
        began = time.perf_counter()
        hive.process(QUERIES[i % len(QUERIES)], snapshot=SNAPSHOTS[i % len(SNAPSHOTS)])
        slowest = max(slowest, (time.perf_counter() - began) * 1000)
        if i % 25 == 24:
            hive.evolve()

    elapsed = time.perf_counter() - start_time
    return (num_queries / elapsed if elapsed > 0 else 0), slowest


def measure_scoring_pass(hive: HiveEngine, passes: int) -> float:
    """Single-threaded scoring over the whole catalog, in ms per pass."""
    templates = hive.catalog.all()
    session = SessionContext()
    start_time = time.perf_counter()

    for i in range(passes):
        query = QUERIES[i % len(QUERIES)]
        snapshot = SNAPSHOTS[i % len(SNAPSHOTS)]
        view = session.preview(query, snapshot)
        for template in templates:
            score(template, query, snapshot, view)

    return (time.perf_counter() - start_time) * 1000 / passes


def profile_process(hive: HiveEngine, num_queries: int) -> str:
    """Profile process() and return the top entries by cumulative time."""
    profiler = cProfile.Profile()

    profiler.enable()
    for i in range(num_queries):
        hive.process(QUERIES[i % len(QUERIES)], snapshot=SNAPSHOTS[i % len(SNAPSHOTS)])
    profiler.disable()

    stats_stream = StringIO()
    stats = pstats.Stats(profiler, stream=stats_stream)
    stats.sort_stats("cumulative")
    stats.print_stats(30)

    return stats_stream.getvalue()


def main():
    print("=" * 60)
    print("Performance Profiling: HiveEngine.process()")
    print("=" * 60)

    with make_hive() as hive:
        print(f"\nCatalog: {hive.catalog.count} species, workers: {hive.settings.max_workers}")

        print("\nWarm-up run (20 queries)...")
        measure_query_rate(hive, 20)

    print("\n--- Query Rate (400 queries, evolve every 25) ---")
    with make_hive() as hive:
        qps, slowest_ms = measure_query_rate(hive, 400)
        stats = hive.telemetry.get_stats()
    print(f"Query rate: {qps:.1f} queries/sec")
    print(f"p50: {stats['p50_response_ms']:.2f}ms  p95: {stats['p95_response_ms']:.2f}ms")
    print(f"Slowest query: {slowest_ms:.2f}ms")

    print("\n--- Single-worker Comparison (200 queries) ---")
    with make_hive(max_workers=1) as hive:
        qps_single, _ = measure_query_rate(hive, 200)
    print(f"Query rate with one worker: {qps_single:.1f} queries/sec")

    print("\n--- Scoring Pass (500 passes, no pool) ---")
    with make_hive() as hive:
        ms_per_pass = measure_scoring_pass(hive, 500)
    print(f"Scoring pass: {ms_per_pass:.3f}ms")

    print("\n--- Profiling Breakdown (200 queries) ---")
    with make_hive() as hive:
        print(profile_process(hive, 200))

    print("\n" + "=" * 60)
    print("Performance Assessment")
    print("=" * 60)

    target_p95_ms = 50.0
    if stats["p95_response_ms"] <= target_p95_ms:
        print(f"✓ PASS: p95 {stats['p95_response_ms']:.1f}ms (target: {target_p95_ms:.0f}ms)")
    else:
        print(f"✗ FAIL: p95 {stats['p95_response_ms']:.1f}ms (target: {target_p95_ms:.0f}ms)")


if __name__ == "__main__":
    main()
