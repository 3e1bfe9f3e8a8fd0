"""Configuration loading for the hive engine.

Pydantic-based settings loaded from ``HIVE_``-prefixed environment variables
and an optional ``.env`` file. Every scoring weight and consensus threshold is
exposed here; none are baked into the engine.

Nested weights use a double underscore, e.g. ``HIVE_WEIGHTS__KEYWORD=0.2``.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_PROTOCOL_PATTERN = re.compile(r"^(majority|tournament|unanimous|synthesis)(\((\d+)\))?$")


class ScoringWeights(BaseModel):
    """Per-signal weights for confidence scoring.

    Only the relative ordering matters for routing. The defaults weigh a
    matched bigram above a single keyword and app affinity above either;
    custom weights are not required to keep that order.
    """

    model_config = ConfigDict(frozen=True)

    keyword: float = Field(default=0.15, ge=0.0, description="Per keyword hit in the query")
    bigram: float = Field(default=0.2, ge=0.0, description="Per multi-word keyword hit")
    app_affinity: float = Field(default=0.3, ge=0.0, description="Active app is in affinities")
    fitness: float = Field(default=0.15, ge=0.0, description="Multiplier on fitness prior")

    intent_debugging: float = Field(default=0.25, ge=0.0)
    intent_coding: float = Field(default=0.2, ge=0.0)
    intent_creating: float = Field(default=0.2, ge=0.0)
    intent_shipping: float = Field(default=0.2, ge=0.0)
    intent_learning: float = Field(default=0.15, ge=0.0)
    intent_resting: float = Field(default=0.3, ge=0.0)

    momentum: float = Field(default=0.1, ge=0.0, description="Species among recent winners")
    language: float = Field(default=0.15, ge=0.0, description="Per detected language tag")
    night_wellbeing: float = Field(default=0.25, ge=0.0)
    playback_creative: float = Field(default=0.15, ge=0.0)
    clipboard_keyword: float = Field(default=0.1, ge=0.0, description="Per clipboard hit")
    clipboard_syntax: float = Field(default=0.2, ge=0.0, description="Clipboard code matches")
    complexity: float = Field(default=0.05, ge=0.0)
    complexity_min_words: int = Field(default=8, ge=1, description="Words needed, exclusive")
    mode_bias: float = Field(default=0.2, ge=0.0, description="Per mode-bias term hit")


class HiveSettings(BaseSettings):
    """Runtime settings for the hive engine.

    Environment Variables:
        HIVE_DISCARD_THRESHOLD: Candidates at or below are dropped (default: 0.15)
        HIVE_SYNTHESIS_FLOOR: Minimum confidence to join a synthesis (default: 0.2)
        HIVE_SYNTHESIS_TOP_N: Experts merged by the default protocol (default: 5)
        HIVE_UNANIMOUS_THRESHOLD: Agreement threshold (default: 0.6)
        HIVE_DEFAULT_PROTOCOL: majority, tournament, unanimous, synthesis(N)
        HIVE_EVOLVE_MIN_SAMPLE: Spawns needed before pruning (default: 10)
        HIVE_EVOLVE_PRUNE_FLOOR: Win-rate floor for pruning (default: 0.1)
        HIVE_MAX_WORKERS: Thread pool size for scoring/synthesis (default: 8)
        HIVE_QUERY_TIMEOUT_S: Abort a query after this many seconds (default: 5.0)
        HIVE_CONVERSATION_LOG_PATH: Optional JSON file for the conversation log

    Example:
        >>> settings = HiveSettings()  # Loads from environment
        >>> settings = HiveSettings(discard_threshold=0.2)
    """

    model_config = SettingsConfigDict(
        env_prefix="HIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    weights: ScoringWeights = Field(default_factory=ScoringWeights)

    # Candidate filtering and consensus
    discard_threshold: float = Field(default=0.15, ge=0.0, le=1.0)
    synthesis_floor: float = Field(default=0.2, ge=0.0, le=1.0)
    synthesis_top_n: int = Field(default=5, ge=1, le=50)
    unanimous_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    default_protocol: str = Field(
        default="synthesis(5)",
        description="majority, tournament, unanimous or synthesis(N)",
    )

    # Evolution
    evolve_min_sample: int = Field(default=10, ge=0)
    evolve_prune_floor: float = Field(default=0.1, ge=0.0, le=1.0)

    # Session bounds
    query_buffer_size: int = Field(default=50, ge=1, le=10000)
    momentum_size: int = Field(default=10, ge=1, le=1000)
    intent_window: int = Field(default=5, ge=1, le=100)

    # Concurrency
    max_workers: int = Field(default=8, ge=1, le=128)
    query_timeout_s: float = Field(default=5.0, gt=0)

    # Chaining boost between related specialists
    chaining_enabled: bool = Field(default=False)
    chain_boost: float = Field(default=0.15, ge=0.0, le=1.0)
    chain_trigger: float = Field(default=0.4, ge=0.0, le=1.0)

    # Conversation log
    conversation_log_path: str | None = Field(default=None)
    conversation_log_size: int = Field(default=50, ge=1, le=10000)

    @field_validator("default_protocol", mode="before")
    @classmethod
    def normalize_protocol(cls, v: Any) -> str:
        """Lower-case and validate the protocol string."""
        if not isinstance(v, str):
            return v
        normalized = v.strip().lower().replace(" ", "")
        if not _PROTOCOL_PATTERN.match(normalized):
            msg = f"Unknown consensus protocol: {v!r}"
            raise ValueError(msg)
        return normalized

    def __repr__(self) -> str:
        """Compact representation for startup logs."""
        return (
            f"HiveSettings("
            f"protocol={self.default_protocol}, "
            f"discard={self.discard_threshold}, "
            f"floor={self.synthesis_floor}, "
            f"unanimous={self.unanimous_threshold}, "
            f"prune={self.evolve_min_sample}/{self.evolve_prune_floor}, "
            f"workers={self.max_workers}, "
            f"timeout={self.query_timeout_s}s, "
            f"chaining={'on' if self.chaining_enabled else 'off'}"
            f")"
        )


@lru_cache
def get_hive_settings() -> HiveSettings:
    """Get cached settings singleton.

    To reload, call ``get_hive_settings.cache_clear()`` first.
    """
    settings = HiveSettings()
    logger.info("Loaded hive settings: %r", settings)
    return settings
