"""Tests for the conversation log."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from hiveroute.engine.conversation import ConversationLogError, ConversationMemory, Exchange


def _exchange(i: int) -> Exchange:
    return Exchange(query=f"query {i}", response=f"response {i}", species="code.swift")


class TestConversationMemory:
    """Tests for in-memory behavior."""

    def test_bounded(self) -> None:
        memory = ConversationMemory(max_size=3)
        for i in range(5):
            memory.append(_exchange(i))
        assert len(memory) == 3
        assert [e.query for e in memory.exchanges()] == ["query 2", "query 3", "query 4"]

    def test_recent(self) -> None:
        memory = ConversationMemory()
        for i in range(4):
            memory.append(_exchange(i))
        assert [e.query for e in memory.recent(2)] == ["query 2", "query 3"]
        assert memory.recent(0) == []

    def test_clear(self) -> None:
        memory = ConversationMemory()
        memory.append(_exchange(0))
        memory.clear()
        assert len(memory) == 0

    def test_save_without_path(self) -> None:
        with pytest.raises(ConversationLogError, match="No conversation log path"):
            ConversationMemory().save()


class TestPersistence:
    """Tests for JSON file persistence."""

    def test_append_persists_and_load_restores(self, tmp_path: Path) -> None:
        path = tmp_path / "logs" / "conversation.json"
        memory = ConversationMemory(path=path)
        memory.append(_exchange(1))
        memory.append(Exchange(query="¿qué tal?", response="bien", species=""))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert [item["query"] for item in data] == ["query 1", "¿qué tal?"]

        restored = ConversationMemory(path=path)
        assert restored.load() == 2
        assert restored.exchanges()[0].species == "code.swift"
        assert restored.exchanges()[0].timestamp == memory.exchanges()[0].timestamp

    def test_load_missing_file(self, tmp_path: Path) -> None:
        memory = ConversationMemory(path=tmp_path / "missing.json")
        assert memory.load() == 0

    def test_load_respects_bound(self, tmp_path: Path) -> None:
        path = tmp_path / "conversation.json"
        writer = ConversationMemory(path=path)
        for i in range(5):
            writer.append(_exchange(i))
        reader = ConversationMemory(max_size=2, path=path)
        assert reader.load() == 2
        assert [e.query for e in reader.exchanges()] == ["query 3", "query 4"]

    def test_load_corrupt_json(self, tmp_path: Path) -> None:
        path = tmp_path / "conversation.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConversationLogError, match="Failed to read"):
            ConversationMemory(path=path).load()

    def test_load_wrong_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "conversation.json"
        path.write_text('{"query": "x"}', encoding="utf-8")
        with pytest.raises(ConversationLogError, match="Expected a JSON list"):
            ConversationMemory(path=path).load()

    def test_load_invalid_exchange(self, tmp_path: Path) -> None:
        path = tmp_path / "conversation.json"
        path.write_text('[{"response": "no query"}]', encoding="utf-8")
        with pytest.raises(ConversationLogError, match="Invalid exchange"):
            ConversationMemory(path=path).load()

    def test_write_failure_is_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory", encoding="utf-8")
        memory = ConversationMemory(path=blocker / "conversation.json")
        with caplog.at_level(logging.WARNING, logger="hiveroute.engine.conversation"):
            memory.append(_exchange(0))
        assert len(memory) == 1
        assert "not persisted" in caplog.text
