"""Session context tracking: recent queries, intent, momentum and languages.

A SessionContext is mutated only by the hive, and only after consensus
(``ingest`` then ``record_winner``). Scoring and synthesis read the immutable
``SessionView`` returned by ``preview``, which already includes the current
query.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from collections import Counter, deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from hiveroute.model.snapshot import ContextSnapshot, OperatingMode, TimeOfDay, time_of_day_for_hour

if TYPE_CHECKING:
    from hiveroute.engine.conversation import Exchange

logger = logging.getLogger(__name__)


class IntentSignal(StrEnum):
    """Coarse user intent inferred from recent queries."""

    CODING = "coding"
    DEBUGGING = "debugging"
    CREATING = "creating"
    SHIPPING = "shipping"
    LEARNING = "learning"
    RESTING = "resting"
    EXPLORING = "exploring"


# Checked in order; the first family with a hit wins.
INTENT_TERMS: tuple[tuple[IntentSignal, tuple[str, ...]], ...] = (
    (IntentSignal.DEBUGGING, ("fix", "error", "bug", "crash", "falla", "roto", "problema")),
    (IntentSignal.SHIPPING, ("build", "deploy", "ship", "release", "publicar", "subir")),
    (
        IntentSignal.CREATING,
        ("create", "design", "art", "prompt", "crear", "diseñar", "dibujar"),
    ),
    (
        IntentSignal.LEARNING,
        ("what", "how", "explain", "learn", "qué", "cómo", "explica", "aprend"),
    ),
    (IntentSignal.CODING, ("code", "func", "class", "refactor", "código", "implementar")),
    (IntentSignal.RESTING, ("break", "rest", "tired", "descanso", "cansado", "pausa")),
)

# Applied only when the classified intent is EXPLORING.
MODE_INTENT_OVERRIDES: dict[OperatingMode, IntentSignal] = {
    OperatingMode.DJ: IntentSignal.CREATING,
    OperatingMode.CREATIVE: IntentSignal.CREATING,
    OperatingMode.FOCUS: IntentSignal.CODING,
    OperatingMode.PRODUCER: IntentSignal.CODING,
    OperatingMode.ADHD: IntentSignal.LEARNING,
    OperatingMode.NIGHT: IntentSignal.RESTING,
}

MODE_BIAS: dict[OperatingMode, frozenset[str]] = {
    OperatingMode.DJ: frozenset({"Audio", "Music", "DJ", "MIDI", "BPM"}),
    OperatingMode.PRODUCER: frozenset({"Audio", "Music", "DAW", "Mix", "Master", "MIDI"}),
    OperatingMode.CREATIVE: frozenset({"Design", "Creative", "Art", "Prompt", "Color"}),
    OperatingMode.FOCUS: frozenset({"Code", "Swift", "React", "Debug", "Architecture"}),
    OperatingMode.GAMING: frozenset({"Performance", "GPU", "FPS", "Optimization"}),
    OperatingMode.IMAGES: frozenset({"Design", "Color", "Figma", "CSS", "Art"}),
}

IDE_MARKERS = ("VSCode", "Cursor", "todesktop")

# language -> query terms; terms of three letters or fewer match whole words only
QUERY_LANGUAGE_TERMS: dict[str, tuple[str, ...]] = {
    "swift": ("swift", "swiftui"),
    "python": ("python", "django", "flask"),
    "javascript": ("javascript", "react", "node"),
    "rust": ("rust", "cargo"),
    "go": ("go", "golang"),
    "php": ("php", "laravel"),
    "typescript": ("typescript", "angular"),
}

_WORD = re.compile(r"\w+")


def classify_intent(queries: Iterable[str]) -> IntentSignal:
    """Classify intent from a window of queries by bilingual term families."""
    text = " ".join(queries).lower()
    for intent, terms in INTENT_TERMS:
        if any(term in text for term in terms):
            return intent
    return IntentSignal.EXPLORING


def clipboard_languages(clipboard: str) -> set[str]:
    """Languages recognizable from syntax markers in clipboard text."""
    found: set[str] = set()
    if "import " in clipboard and "from " in clipboard:
        found.add("python")
    if "const " in clipboard or "=>" in clipboard:
        found.add("javascript")
    if "func " in clipboard and "->" in clipboard:
        found.add("swift")
    if "fn " in clipboard and "->" in clipboard:
        found.add("rust")
    return found


def detect_languages(query: str, snapshot: ContextSnapshot) -> set[str]:
    """Detect languages from the active app, IDE clipboard and query terms."""
    found: set[str] = set()
    app = snapshot.active_app_id
    if "Xcode" in app:
        found.add("swift")
    if any(marker in app for marker in IDE_MARKERS) and snapshot.clipboard_text:
        found |= clipboard_languages(snapshot.clipboard_text)

    lowered = query.lower()
    tokens = set(_WORD.findall(lowered))
    for language, terms in QUERY_LANGUAGE_TERMS.items():
        for term in terms:
            if (term in tokens) if len(term) <= 3 else (term in lowered):
                found.add(language)
                break
    return found


@dataclass(frozen=True)
class SessionView:
    """Immutable view of a session, captured once per query."""

    recent_queries: tuple[str, ...] = ()
    intent: IntentSignal = IntentSignal.EXPLORING
    momentum: tuple[str, ...] = ()
    languages: frozenset[str] = frozenset()
    mode: OperatingMode = OperatingMode.NORMAL
    mode_bias: frozenset[str] = frozenset()
    session_minutes: int = 0


class SessionContext:
    """Tracks one user session across queries.

    All bounded collections are deques, so the bounds hold regardless of
    how many queries are ingested.
    """

    def __init__(
        self,
        buffer_size: int = 50,
        momentum_size: int = 10,
        intent_window: int = 5,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._queries: deque[str] = deque(maxlen=buffer_size)
        self._momentum: deque[str] = deque(maxlen=momentum_size)
        self._intent_window = intent_window
        self._intent = IntentSignal.EXPLORING
        self._wins: Counter[str] = Counter()
        self._bucket_wins: dict[TimeOfDay, Counter[str]] = {
            bucket: Counter() for bucket in TimeOfDay
        }
        self._languages: set[str] = set()
        self._mode = OperatingMode.NORMAL
        self.started_at = self._clock()

    @property
    def intent(self) -> IntentSignal:
        with self._lock:
            return self._intent

    @property
    def mode(self) -> OperatingMode:
        with self._lock:
            return self._mode

    @property
    def mode_bias(self) -> frozenset[str]:
        with self._lock:
            return MODE_BIAS.get(self._mode, frozenset())

    @property
    def momentum(self) -> list[str]:
        with self._lock:
            return list(self._momentum)

    @property
    def recent_queries(self) -> list[str]:
        with self._lock:
            return list(self._queries)

    @property
    def detected_languages(self) -> set[str]:
        with self._lock:
            return set(self._languages)

    @property
    def session_minutes(self) -> int:
        return int((self._clock() - self.started_at) / 60)

    def ingest(self, query: str, snapshot: ContextSnapshot) -> None:
        """Fold a new query and its snapshot into the session."""
        with self._lock:
            self._queries.append(query)
            self._mode = snapshot.mode
            self._intent = self._intent_for(self._queries, self._mode)
            self._languages |= detect_languages(query, snapshot)
            logger.debug(
                "Session ingest: intent=%s mode=%s languages=%s",
                self._intent,
                self._mode,
                sorted(self._languages),
            )

    def _intent_for(self, queries: Iterable[str], mode: OperatingMode) -> IntentSignal:
        window = list(queries)[-self._intent_window :]
        intent = classify_intent(window)
        if intent is IntentSignal.EXPLORING:
            intent = MODE_INTENT_OVERRIDES.get(mode, intent)
        return intent

    def record_winner(self, species: str, time_bucket: TimeOfDay | str) -> None:
        """Record a consensus winner for momentum and frequency tracking."""
        bucket = TimeOfDay(time_bucket)
        with self._lock:
            self._momentum.append(species)
            self._wins[species] += 1
            self._bucket_wins[bucket][species] += 1

    def top_species_overall(self, limit: int = 10) -> list[str]:
        with self._lock:
            return [species for species, _ in self._wins.most_common(limit)]

    def top_species_for_bucket(self, bucket: TimeOfDay | str, limit: int = 5) -> list[str]:
        with self._lock:
            wins = self._bucket_wins[TimeOfDay(bucket)]
            return [species for species, _ in wins.most_common(limit)]

    def seed(self, exchanges: Iterable[Exchange]) -> int:
        """Rehydrate queries and winners from a conversation log.

        Returns:
            Number of exchanges replayed.
        """
        count = 0
        with self._lock:
            for exchange in exchanges:
                self._queries.append(exchange.query)
                if exchange.species:
                    hour = exchange.timestamp.astimezone().hour
                    self.record_winner(exchange.species, time_of_day_for_hour(hour))
                count += 1
            if count:
                self._intent = self._intent_for(self._queries, self._mode)
        logger.info("Seeded session with %d exchanges", count)
        return count

    def preview(self, query: str, snapshot: ContextSnapshot) -> SessionView:
        """View of the session as if ``query`` had been ingested.

        Nothing is written; the hive commits with ``ingest`` only once a
        query completes.
        """
        with self._lock:
            queries = deque(self._queries, maxlen=self._queries.maxlen)
            queries.append(query)
            mode = snapshot.mode
            return SessionView(
                recent_queries=tuple(queries),
                intent=self._intent_for(queries, mode),
                momentum=tuple(self._momentum),
                languages=frozenset(self._languages | detect_languages(query, snapshot)),
                mode=mode,
                mode_bias=MODE_BIAS.get(mode, frozenset()),
                session_minutes=self.session_minutes,
            )

    def view(self) -> SessionView:
        """Capture an immutable view for scoring and synthesis."""
        with self._lock:
            return SessionView(
                recent_queries=tuple(self._queries),
                intent=self._intent,
                momentum=tuple(self._momentum),
                languages=frozenset(self._languages),
                mode=self._mode,
                mode_bias=MODE_BIAS.get(self._mode, frozenset()),
                session_minutes=self.session_minutes,
            )
