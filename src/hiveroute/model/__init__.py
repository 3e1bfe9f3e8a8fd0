"""Domain model: SpecialistTemplate, ContextSnapshot, Candidate, ConsensusResult."""

from hiveroute.model.candidate import (
    EMPTY_RESULT,
    REPHRASE_PROMPT,
    Candidate,
    ConsensusResult,
    VoteBreakdown,
)
from hiveroute.model.snapshot import (
    ContextSnapshot,
    ModeProvider,
    OperatingMode,
    SnapshotBuilder,
    StaticModeProvider,
    SystemSnapshotBuilder,
    TimeOfDay,
    time_of_day_for_hour,
)
from hiveroute.model.template import Family, SpecialistTemplate

__all__ = [
    "EMPTY_RESULT",
    "REPHRASE_PROMPT",
    "Candidate",
    "ConsensusResult",
    "ContextSnapshot",
    "Family",
    "ModeProvider",
    "OperatingMode",
    "SnapshotBuilder",
    "SpecialistTemplate",
    "StaticModeProvider",
    "SystemSnapshotBuilder",
    "TimeOfDay",
    "VoteBreakdown",
    "time_of_day_for_hour",
]
