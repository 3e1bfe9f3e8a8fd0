"""Hive engine: scoring, synthesis, consensus, fitness and orchestration."""

from hiveroute.engine.chaining import CHAINING_RULES, apply_chaining
from hiveroute.engine.consensus import MAJORITY, ConsensusProtocol, ProtocolKind, resolve
from hiveroute.engine.conversation import (
    ConversationLog,
    ConversationLogError,
    ConversationMemory,
    Exchange,
)
from hiveroute.engine.fitness import EvolutionReport, FitnessRegistry
from hiveroute.engine.hive import HiveBusyError, HiveEngine, HiveError, QueryTimeoutError
from hiveroute.engine.scoring import score
from hiveroute.engine.session import IntentSignal, SessionContext, SessionView
from hiveroute.engine.synthesis import synthesize
from hiveroute.engine.telemetry import HiveHealth, HiveTelemetry

__all__ = [
    "CHAINING_RULES",
    "MAJORITY",
    "ConsensusProtocol",
    "ConversationLog",
    "ConversationLogError",
    "ConversationMemory",
    "EvolutionReport",
    "Exchange",
    "FitnessRegistry",
    "HiveBusyError",
    "HiveEngine",
    "HiveError",
    "HiveHealth",
    "HiveTelemetry",
    "IntentSignal",
    "ProtocolKind",
    "QueryTimeoutError",
    "SessionContext",
    "SessionView",
    "apply_chaining",
    "resolve",
    "score",
    "synthesize",
]
