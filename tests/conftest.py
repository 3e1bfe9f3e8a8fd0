"""Shared fixtures for HiveRoute tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from hiveroute.catalog import SpecialistCatalog, build_default_catalog
from hiveroute.config import HiveSettings, get_hive_settings
from hiveroute.engine.session import SessionView
from hiveroute.logging_config import LOGGER_NAMESPACE
from hiveroute.model import ContextSnapshot, OperatingMode, SpecialistTemplate, TimeOfDay

XCODE = "com.apple.dt.Xcode"


@pytest.fixture(autouse=True)
def _reset_hive_logging() -> Iterator[None]:
    """Undo configure_logging so caplog sees hiveroute records."""
    yield
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    get_hive_settings.cache_clear()


@pytest.fixture
def make_snapshot() -> Callable[..., ContextSnapshot]:
    """Factory for snapshots with an afternoon, normal-mode default."""

    def _make(**overrides: Any) -> ContextSnapshot:
        fields: dict[str, Any] = {
            "time_of_day": TimeOfDay.AFTERNOON,
            "mode": OperatingMode.NORMAL,
            "captured_at": 0.0,
        }
        fields.update(overrides)
        return ContextSnapshot(**fields)

    return _make


@pytest.fixture
def xcode_snapshot(make_snapshot: Callable[..., ContextSnapshot]) -> ContextSnapshot:
    return make_snapshot(active_app_id=XCODE, active_app_name="Xcode")


@pytest.fixture
def empty_view() -> SessionView:
    return SessionView()


@pytest.fixture
def catalog() -> SpecialistCatalog:
    return build_default_catalog()


@pytest.fixture
def settings() -> HiveSettings:
    """Settings independent of the process environment."""
    return HiveSettings(_env_file=None)


@pytest.fixture
def make_template() -> Callable[..., SpecialistTemplate]:
    def _make(species: str, keywords: tuple[str, ...] = (), **overrides: Any) -> SpecialistTemplate:
        fields: dict[str, Any] = {
            "label": species.rsplit(".", 1)[-1].capitalize(),
            "domain": species,
            "emoji": "🐝",
        }
        fields.update(overrides)
        return SpecialistTemplate(species=species, keywords=keywords, **fields)

    return _make
