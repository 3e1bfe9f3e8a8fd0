"""API endpoints for routing queries through the hive.

Endpoints:
- POST /api/v1/hive/query: Route one query and return the consensus result
- POST /api/v1/hive/evolve: Run one evolution pass
- GET /api/v1/hive/summary: Hive state for dashboards
- GET /api/v1/hive/telemetry: Live query-rate and response-time metrics
- GET /api/v1/hive/species: Catalog listing with fitness state
"""

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from hiveroute.engine import HiveBusyError, HiveEngine, HiveError, QueryTimeoutError
from hiveroute.model import ContextSnapshot, OperatingMode, TimeOfDay, time_of_day_for_hour

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/hive", tags=["hive"])


class QueryRequest(BaseModel):
    """Request body for routing a query.

    Context fields describe the caller's environment; omitted fields take
    neutral defaults and ``time_of_day`` falls back to the server clock.
    """

    query: str = Field(min_length=1, description="Free-text user query")
    app_id: str = Field(default="", description="Active application bundle id")
    app_name: str = Field(default="", description="Active application display name")
    clipboard: str | None = Field(default=None, description="Current clipboard text")
    cpu_load: float = Field(default=0.0, ge=0.0, le=100.0, description="CPU load percent")
    is_playing: bool = Field(default=False, description="Whether media is playing")
    current_track: str = Field(default="", description="Now-playing track")
    current_artist: str = Field(default="", description="Now-playing artist")
    mood: str = Field(default="", description="Free-form mood label")
    mode: OperatingMode = Field(default=OperatingMode.NORMAL, description="Operating mode")
    time_of_day: TimeOfDay | None = Field(default=None, description="Time-of-day bucket")
    protocol: str | None = Field(
        default=None,
        description="majority, tournament, unanimous or synthesis(N)",
    )

    def to_snapshot(self) -> ContextSnapshot:
        return ContextSnapshot(
            active_app_id=self.app_id,
            active_app_name=self.app_name,
            clipboard_text=self.clipboard,
            cpu_load=self.cpu_load,
            is_playing=self.is_playing,
            current_track=self.current_track,
            current_artist=self.current_artist,
            mood=self.mood,
            time_of_day=self.time_of_day or time_of_day_for_hour(datetime.now().hour),
            mode=self.mode,
        )


class VoteResponse(BaseModel):
    """One ranked candidate in the consensus breakdown."""

    species: str = Field(description="Candidate species")
    emoji: str = Field(description="Species emoji")
    confidence: float = Field(description="Final confidence")
    latency_ms: float = Field(description="Time from query start to response")


class QueryResponse(BaseModel):
    """Consensus result for a query.

    Attributes:
        final_response: Text to show the user.
        winning_species: Winner, empty when no consensus was reached.
        participant_count: Candidates that took part.
        consensus_strength: Winner confidence.
        protocol: Protocol that produced the result.
        breakdown: Ranked candidates.
        contributors: Species merged by a synthesis.
    """

    final_response: str = Field(description="Text to show the user")
    winning_species: str = Field(description="Winning species")
    participant_count: int = Field(description="Candidates that took part")
    consensus_strength: float = Field(description="Winner confidence")
    protocol: str = Field(description="Protocol that produced the result")
    breakdown: list[VoteResponse] = Field(default_factory=list)
    contributors: list[str] = Field(default_factory=list)


class EvolutionResponse(BaseModel):
    """Statistics for one evolution pass."""

    generation: int = Field(description="Generation reached")
    pruned: list[str] = Field(description="Species removed this pass")
    surviving: int = Field(description="Species left in the catalog")
    best_fitness: float = Field(description="Best tracked fitness")
    avg_fitness: float = Field(description="Mean tracked fitness")


class TelemetryResponse(BaseModel):
    """Live hive telemetry."""

    total_queries: int
    queries_per_minute: float
    average_response_ms: float
    p50_response_ms: float
    p95_response_ms: float
    last_candidate_count: int
    peak_concurrency: int
    health: str


class SpeciesResponse(BaseModel):
    """One catalog entry with its evolutionary state."""

    species: str
    label: str
    domain: str
    emoji: str
    family: str
    fitness_score: float
    win_rate: float
    spawn_count: int
    success_count: int
    generation: int


# Engine instance shared by all requests
_engine: HiveEngine | None = None


def _get_engine() -> HiveEngine:
    """Get or create the HiveEngine instance."""
    global _engine
    if _engine is None:
        _engine = HiveEngine()
    return _engine


def set_engine(engine: HiveEngine | None) -> None:
    """Set the engine instance for testing or shared use.

    Args:
        engine: HiveEngine to use, or None to recreate lazily.
    """
    global _engine
    _engine = engine


@router.post(
    "/query",
    response_model=QueryResponse,
    responses={
        200: {"description": "Query resolved (possibly with no consensus)"},
        400: {"description": "Unknown consensus protocol"},
        409: {"description": "Another query is in flight"},
        504: {"description": "Query timed out"},
    },
)
def post_query(request: QueryRequest) -> QueryResponse:
    """Route a query through the hive.

    An empty ``winning_species`` is a normal outcome: the hive found no
    confident specialist and ``final_response`` asks the user to rephrase.

    Raises:
        HTTPException: 400 for a bad protocol, 409 when busy, 504 on timeout.
    """
    engine = _get_engine()
    try:
        result = engine.process(
            request.query,
            snapshot=request.to_snapshot(),
            protocol=request.protocol,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except HiveBusyError as e:
        logger.warning("Rejected query while busy")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except QueryTimeoutError as e:
        logger.warning("Query timed out: %s", e)
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(e)) from e
    except HiveError as e:
        logger.error("Query failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal error while routing the query",
        ) from e

    return QueryResponse.model_validate(result.to_dict())


@router.post("/evolve", response_model=EvolutionResponse)
def post_evolve() -> EvolutionResponse:
    """Run one evolution pass, pruning species that keep losing."""
    report = _get_engine().evolve()
    logger.info("Evolution triggered via API: generation %d", report.generation)
    return EvolutionResponse.model_validate(report.to_dict())


@router.get("/summary")
async def get_summary() -> dict:
    """Hive summary: species count, generation, health, intent and momentum."""
    return _get_engine().summary()


@router.get("/telemetry", response_model=TelemetryResponse)
async def get_telemetry() -> TelemetryResponse:
    """Live query rate, response-time percentiles and health."""
    return TelemetryResponse.model_validate(_get_engine().telemetry.get_stats())


@router.get("/species", response_model=list[SpeciesResponse])
async def list_species(family: str | None = None, limit: int = 500) -> list[SpeciesResponse]:
    """List catalog species in catalog order.

    Args:
        family: Only include this family (e.g. ``code``, ``well``).
        limit: Maximum number of entries to return.
    """
    templates = _get_engine().catalog.all()
    if family:
        templates = [t for t in templates if t.family.value == family]
    return [
        SpeciesResponse(
            species=t.species,
            label=t.label,
            domain=t.domain,
            emoji=t.emoji,
            family=t.family.value,
            fitness_score=t.fitness_score,
            win_rate=round(t.win_rate, 4),
            spawn_count=t.spawn_count,
            success_count=t.success_count,
            generation=t.generation,
        )
        for t in templates[: max(0, limit)]
    ]
