"""Bounded conversation log with optional JSON file persistence.

The hive appends one Exchange per answered query. On restart a session can be
seeded from the persisted log so momentum and intent carry over.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import deque
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class ConversationLogError(Exception):
    """Exception raised when the conversation log cannot be read or written."""

    pass


class Exchange(BaseModel):
    """One answered query.

    Attributes:
        query: The user's query.
        response: Final response text.
        species: Winning species, empty when no consensus was reached.
        timestamp: When the exchange happened (UTC).
    """

    query: str = Field(description="User query")
    response: str = Field(default="", description="Final response text")
    species: str = Field(default="", description="Winning species")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ConversationLog(Protocol):
    """Anything that accepts exchanges and returns them oldest first."""

    def append(self, exchange: Exchange) -> None: ...

    def exchanges(self) -> list[Exchange]: ...


class ConversationMemory:
    """In-memory bounded conversation log.

    When ``path`` is set, every append rewrites the JSON file. Write failures
    are logged and never propagate to the caller.

    Example:
        >>> memory = ConversationMemory(max_size=50, path="data/conversation.json")
        >>> memory.load()
        >>> memory.append(Exchange(query="hi", response="hello", species="well.mood"))
    """

    def __init__(self, max_size: int = 50, path: str | Path | None = None) -> None:
        self._exchanges: deque[Exchange] = deque(maxlen=max_size)
        self._path = Path(path) if path is not None else None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path | None:
        return self._path

    def __len__(self) -> int:
        with self._lock:
            return len(self._exchanges)

    def append(self, exchange: Exchange) -> None:
        with self._lock:
            self._exchanges.append(exchange)
        if self._path is not None:
            try:
                self.save()
            except ConversationLogError as e:
                logger.warning("Conversation log not persisted: %s", e)

    def exchanges(self) -> list[Exchange]:
        with self._lock:
            return list(self._exchanges)

    def recent(self, n: int = 3) -> list[Exchange]:
        with self._lock:
            return list(self._exchanges)[-n:] if n > 0 else []

    def clear(self) -> None:
        with self._lock:
            self._exchanges.clear()

    def save(self) -> None:
        """Write the log to ``path``.

        Raises:
            ConversationLogError: If no path is set or the write fails.
        """
        if self._path is None:
            raise ConversationLogError("No conversation log path configured")
        with self._lock:
            payload = [e.model_dump(mode="json") for e in self._exchanges]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConversationLogError(f"Failed to write {self._path}: {e}") from e

    def load(self) -> int:
        """Replace the in-memory log with the contents of ``path``.

        A missing file is treated as an empty log.

        Returns:
            Number of exchanges loaded.

        Raises:
            ConversationLogError: If the file is unreadable or corrupt.
        """
        if self._path is None or not self._path.exists():
            return 0
        try:
            with open(self._path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConversationLogError(f"Failed to read {self._path}: {e}") from e
        if not isinstance(raw, list):
            raise ConversationLogError(f"Expected a JSON list in {self._path}")
        try:
            loaded = [Exchange.model_validate(item) for item in raw]
        except ValidationError as e:
            raise ConversationLogError(f"Invalid exchange in {self._path}: {e}") from e

        with self._lock:
            self._exchanges.clear()
            self._exchanges.extend(loaded)
            count = len(self._exchanges)
        logger.info("Loaded %d exchanges from %s", count, self._path)
        return count
