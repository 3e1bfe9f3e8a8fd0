"""Hive orchestrator: score, synthesize, resolve and record one query at a time.

Flow per query:
    snapshot -> session preview -> score every template (thread pool)
    -> drop weak candidates -> optional chaining boost
    -> synthesize responses (thread pool) -> consensus
    -> record fitness, session, telemetry and conversation log

Nothing is recorded for a query that times out or is rejected.
"""

from __future__ import annotations

import logging
import math
import threading
import time
import uuid
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, TypeVar

from hiveroute.catalog import SpecialistCatalog, build_default_catalog
from hiveroute.config import HiveSettings, get_hive_settings
from hiveroute.engine.chaining import CHAINING_RULES, apply_chaining
from hiveroute.engine.consensus import ConsensusProtocol, resolve
from hiveroute.engine.conversation import (
    ConversationLog,
    ConversationLogError,
    ConversationMemory,
    Exchange,
)
from hiveroute.engine.fitness import EvolutionReport, FitnessRegistry
from hiveroute.engine.scoring import score
from hiveroute.engine.session import SessionContext
from hiveroute.engine.synthesis import synthesize
from hiveroute.engine.telemetry import HiveTelemetry
from hiveroute.model.candidate import Candidate, ConsensusResult
from hiveroute.model.snapshot import ContextSnapshot, SnapshotBuilder, SystemSnapshotBuilder
from hiveroute.model.template import SpecialistTemplate

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class HiveError(Exception):
    """Base exception for host-level hive failures."""

    pass


class HiveBusyError(HiveError):
    """Raised when a query arrives while another is in flight."""

    pass


class QueryTimeoutError(HiveError):
    """Raised when a query exceeds its time budget before consensus."""

    pass


def _chunks(items: Sequence[T], parts: int) -> list[Sequence[T]]:
    if not items:
        return []
    size = math.ceil(len(items) / max(1, parts))
    return [items[i : i + size] for i in range(0, len(items), size)]


class HiveEngine:
    """Routes queries through the specialist hive.

    Owns the catalog, fitness registry, default session, telemetry and an
    optional conversation log. All collaborators can be injected.

    Example:
        >>> with HiveEngine() as hive:
        ...     result = hive.process("fix this bug in my swift code")
        ...     print(result.winning_species)
    """

    def __init__(
        self,
        catalog: SpecialistCatalog | None = None,
        settings: HiveSettings | None = None,
        session: SessionContext | None = None,
        fitness: FitnessRegistry | None = None,
        telemetry: HiveTelemetry | None = None,
        snapshot_builder: SnapshotBuilder | None = None,
        conversation: ConversationLog | None = None,
    ) -> None:
        """Initialize the hive.

        Args:
            catalog: Specialist catalog. Defaults to the full default catalog.
            settings: Hive settings. Defaults to ``get_hive_settings()``.
            session: Default session used when ``process`` gets none.
            fitness: Fitness registry.
            telemetry: Telemetry recorder.
            snapshot_builder: Captures context when ``process`` gets no snapshot.
            conversation: Conversation log. When omitted and
                ``conversation_log_path`` is set, a persistent
                ConversationMemory is loaded and seeds the default session.
        """
        self.settings = settings or get_hive_settings()
        self.catalog = catalog if catalog is not None else build_default_catalog()
        self.fitness = fitness or FitnessRegistry(
            min_sample=self.settings.evolve_min_sample,
            prune_floor=self.settings.evolve_prune_floor,
        )
        self.telemetry = telemetry or HiveTelemetry()
        self.snapshot_builder = snapshot_builder or SystemSnapshotBuilder()
        self.default_protocol = ConsensusProtocol.parse(self.settings.default_protocol)

        fresh_session = session is None
        self.session = session or SessionContext(
            buffer_size=self.settings.query_buffer_size,
            momentum_size=self.settings.momentum_size,
            intent_window=self.settings.intent_window,
        )

        if conversation is None and self.settings.conversation_log_path:
            memory = ConversationMemory(
                max_size=self.settings.conversation_log_size,
                path=self.settings.conversation_log_path,
            )
            try:
                memory.load()
            except ConversationLogError as e:
                logger.warning("Starting with an empty conversation log: %s", e)
            conversation = memory
        self.conversation = conversation
        if fresh_session and self.conversation is not None:
            self.session.seed(self.conversation.exchanges())

        self._query_lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    def _get_executor(self) -> ThreadPoolExecutor:
        """Get or create the thread pool executor.

        Creates executor lazily on first use.
        """
        if self._executor is None:
            with self._executor_lock:
                # Double-check after acquiring lock
                if self._executor is None:
                    self._executor = ThreadPoolExecutor(
                        max_workers=self.settings.max_workers,
                        thread_name_prefix="hive_worker",
                    )
                    logger.info(
                        "Created thread pool with %d workers for scoring and synthesis",
                        self.settings.max_workers,
                    )
        return self._executor

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the thread pool executor.

        Args:
            wait: If True, wait for pending tasks to complete.
        """
        with self._executor_lock:
            if self._executor is not None:
                logger.info("Shutting down hive thread pool")
                self._executor.shutdown(wait=wait, cancel_futures=not wait)
                self._executor = None

    def __enter__(self) -> HiveEngine:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.shutdown(wait=True)

    def _fan_out(
        self,
        items: Sequence[T],
        work: Callable[[Sequence[T]], list[R]],
        deadline: float,
        stage: str,
    ) -> list[R]:
        """Run ``work`` over chunks of ``items`` and join in input order."""
        chunks = _chunks(items, self.settings.max_workers)
        if not chunks:
            return []
        executor = self._get_executor()
        futures: list[Future[list[R]]] = [executor.submit(work, chunk) for chunk in chunks]

        remaining = max(0.0, deadline - time.perf_counter())
        _done, not_done = wait(futures, timeout=remaining)
        if not_done:
            for f in not_done:
                f.cancel()
            # Running chunks ignore cancel(); drain them before the query lock is released.
            wait(not_done)
            raise QueryTimeoutError(
                f"Query timed out during {stage}: "
                f"{len(not_done)} of {len(futures)} chunks incomplete"
            )

        results: list[R] = []
        for future in futures:
            try:
                results.extend(future.result())
            except Exception as e:
                raise HiveError(f"{stage.capitalize()} failed: {e}") from e
        return results

    def process(
        self,
        query: str,
        snapshot: ContextSnapshot | None = None,
        session: SessionContext | None = None,
        protocol: ConsensusProtocol | str | None = None,
    ) -> ConsensusResult:
        """Route one query through the hive.

        Args:
            query: Free-text user query.
            snapshot: Ambient context; captured from the snapshot builder if
                omitted.
            session: Session to read and update; defaults to the hive's own.
            protocol: Consensus protocol; defaults to ``default_protocol``.

        Returns:
            The consensus result. An empty result (no winner) is a normal
            outcome, not an error.

        Raises:
            HiveBusyError: If another query is in flight.
            QueryTimeoutError: If the query exceeds ``query_timeout_s``.
            ValueError: If ``protocol`` is a malformed string.
        """
        if not self._query_lock.acquire(blocking=False):
            raise HiveBusyError("Another query is already being processed")
        try:
            return self._process_locked(query, snapshot, session, protocol)
        finally:
            self._query_lock.release()

    def _process_locked(
        self,
        query: str,
        snapshot: ContextSnapshot | None,
        session: SessionContext | None,
        protocol: ConsensusProtocol | str | None,
    ) -> ConsensusResult:
        started = time.perf_counter()
        deadline = started + self.settings.query_timeout_s
        query_id = uuid.uuid4().hex[:12]

        if protocol is None:
            protocol = self.default_protocol
        elif isinstance(protocol, str):
            protocol = ConsensusProtocol.parse(protocol)
        snapshot = snapshot or self.snapshot_builder.capture()
        session = session or self.session
        view = session.preview(query, snapshot)
        weights = self.settings.weights

        def score_chunk(templates: Sequence[SpecialistTemplate]) -> list[Candidate]:
            return [
                Candidate(template=t, confidence=score(t, query, snapshot, view, weights))
                for t in templates
            ]

        scored = self._fan_out(self.catalog.all(), score_chunk, deadline, "scoring")
        survivors = [c for c in scored if c.confidence > self.settings.discard_threshold]
        if self.settings.chaining_enabled and survivors:
            survivors = apply_chaining(
                survivors,
                trigger=self.settings.chain_trigger,
                boost=self.settings.chain_boost,
            )

        def synthesize_chunk(candidates: Sequence[Candidate]) -> list[Candidate]:
            responded = []
            for c in candidates:
                c.response = synthesize(c.template, query, snapshot, view)
                c.latency_ms = (time.perf_counter() - started) * 1000
                responded.append(c)
            return responded

        responded = self._fan_out(survivors, synthesize_chunk, deadline, "synthesis")
        if time.perf_counter() > deadline:
            raise QueryTimeoutError(
                f"Query exceeded {self.settings.query_timeout_s}s before consensus"
            )

        result = resolve(
            responded,
            protocol,
            synthesis_floor=self.settings.synthesis_floor,
            unanimous_threshold=self.settings.unanimous_threshold,
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        self._record(query, snapshot, session, responded, result, elapsed_ms)

        logger.info(
            "Query resolved: winner=%s candidates=%d/%d strength=%.3f %.1fms",
            result.winning_species or "-",
            len(responded),
            len(scored),
            result.consensus_strength,
            elapsed_ms,
            extra={
                "query_id": query_id,
                "species": result.winning_species,
                "protocol": result.protocol,
            },
        )
        return result

    def _record(
        self,
        query: str,
        snapshot: ContextSnapshot,
        session: SessionContext,
        responded: list[Candidate],
        result: ConsensusResult,
        elapsed_ms: float,
    ) -> None:
        session.ingest(query, snapshot)
        self.fitness.record_query()
        for candidate in responded:
            self.fitness.record_spawn(candidate.species)
        if not result.is_empty:
            self.fitness.record_success(result.winning_species)
            session.record_winner(result.winning_species, snapshot.time_of_day)
        self.telemetry.record_query(len(responded), elapsed_ms)
        if self.conversation is not None:
            self.conversation.append(
                Exchange(
                    query=query,
                    response=result.final_response,
                    species=result.winning_species,
                )
            )

    def evolve(self) -> EvolutionReport:
        """Run one evolution pass; waits for any in-flight query."""
        with self._query_lock:
            return self.fitness.evolve(self.catalog)

    def summary(self) -> dict[str, Any]:
        """Snapshot of hive state for dashboards."""
        stats = self.fitness.stats()
        return {
            "species": self.catalog.count,
            "generation": stats["generation"],
            "total_queries": stats["total_queries"],
            "total_spawns": stats["total_spawns"],
            "peak_concurrency": self.telemetry.peak_concurrency,
            "health": self.telemetry.health.value,
            "intent": self.session.intent.value,
            "top_species": self.session.top_species_overall(limit=3),
            "momentum": self.session.momentum[-3:],
            "languages": sorted(self.session.detected_languages),
            "chaining_rules": len(CHAINING_RULES),
            "chaining_enabled": self.settings.chaining_enabled,
            "protocol": self.default_protocol.name,
        }
