"""ContextSnapshot: immutable facts about "now", captured once per query.

The snapshot is built by a host-side collaborator. ``SystemSnapshotBuilder``
is a reference builder that composes small provider callables so hosts can
plug in whatever clipboard, window or playback source they have.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Protocol


class TimeOfDay(StrEnum):
    """Five coarse time-of-day buckets."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
    LATE_NIGHT = "late_night"

    @property
    def is_night(self) -> bool:
        return self in (TimeOfDay.NIGHT, TimeOfDay.LATE_NIGHT)


class OperatingMode(StrEnum):
    """Host operating modes that bias routing."""

    NORMAL = "normal"
    ADHD = "adhd"
    FOCUS = "focus"
    DJ = "dj"
    PRODUCER = "producer"
    CREATIVE = "creative"
    IMAGES = "images"
    GAMING = "gaming"
    NIGHT = "night"
    PRESENTATION = "presentation"


def time_of_day_for_hour(hour: int) -> TimeOfDay:
    """Bucket a 0-23 hour into a TimeOfDay.

    Args:
        hour: Hour of day.

    Returns:
        The bucket containing that hour.
    """
    if 6 <= hour < 12:
        return TimeOfDay.MORNING
    if 12 <= hour < 17:
        return TimeOfDay.AFTERNOON
    if 17 <= hour < 21:
        return TimeOfDay.EVENING
    if 21 <= hour < 24:
        return TimeOfDay.NIGHT
    return TimeOfDay.LATE_NIGHT


@dataclass(frozen=True)
class ContextSnapshot:
    """Read-only ambient context for a single query."""

    active_app_id: str = ""
    active_app_name: str = ""
    clipboard_text: str | None = None
    cpu_load: float = 0.0  # percent, 0-100
    is_playing: bool = False
    current_track: str = ""
    current_artist: str = ""
    mood: str = ""
    time_of_day: TimeOfDay = TimeOfDay.AFTERNOON
    mode: OperatingMode = OperatingMode.NORMAL
    captured_at: float = field(default_factory=time.time)


class SnapshotBuilder(Protocol):
    """Anything that can capture a ContextSnapshot."""

    def capture(self) -> ContextSnapshot: ...


class ModeProvider(Protocol):
    """Supplies the host's current operating mode."""

    def current_mode(self) -> OperatingMode: ...


class StaticModeProvider:
    """Mode provider holding a settable mode.

    Thread-safe: the host may switch modes while queries are in flight.
    """

    def __init__(self, mode: OperatingMode = OperatingMode.NORMAL) -> None:
        self._mode = mode
        self._lock = threading.Lock()

    def current_mode(self) -> OperatingMode:
        with self._lock:
            return self._mode

    def set_mode(self, mode: OperatingMode | str) -> None:
        with self._lock:
            self._mode = OperatingMode(mode)


class SystemSnapshotBuilder:
    """Reference snapshot builder assembled from provider callables.

    Every provider is optional; missing ones leave the corresponding field
    at its neutral default. Providers must be cheap and non-blocking.

    Example:
        >>> builder = SystemSnapshotBuilder(
        ...     app_provider=lambda: ("com.apple.dt.Xcode", "Xcode"),
        ...     clipboard_provider=lambda: "func main() -> Int",
        ... )
        >>> snapshot = builder.capture()
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = datetime.now,
        app_provider: Callable[[], tuple[str, str]] | None = None,
        clipboard_provider: Callable[[], str | None] | None = None,
        playback_provider: Callable[[], tuple[bool, str, str]] | None = None,
        cpu_probe: Callable[[], float] | None = None,
        mood_provider: Callable[[], str] | None = None,
        mode_provider: ModeProvider | None = None,
    ) -> None:
        self._clock = clock
        self._app_provider = app_provider
        self._clipboard_provider = clipboard_provider
        self._playback_provider = playback_provider
        self._cpu_probe = cpu_probe
        self._mood_provider = mood_provider
        self._mode_provider = mode_provider

    def capture(self) -> ContextSnapshot:
        """Build a fresh snapshot from the configured providers."""
        now = self._clock()
        app_id, app_name = self._app_provider() if self._app_provider else ("", "")
        playing, track, artist = (
            self._playback_provider() if self._playback_provider else (False, "", "")
        )
        return ContextSnapshot(
            active_app_id=app_id,
            active_app_name=app_name,
            clipboard_text=self._clipboard_provider() if self._clipboard_provider else None,
            cpu_load=self._cpu_probe() if self._cpu_probe else 0.0,
            is_playing=playing,
            current_track=track,
            current_artist=artist,
            mood=self._mood_provider() if self._mood_provider else "",
            time_of_day=time_of_day_for_hour(now.hour),
            mode=(
                self._mode_provider.current_mode()
                if self._mode_provider
                else OperatingMode.NORMAL
            ),
            captured_at=now.timestamp(),
        )
