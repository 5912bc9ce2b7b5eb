"""API routes for edugraph.

Provides:
- /v1/graph for loading a graph payload or structured lecture breakdown
- Interaction endpoints (click, back, search, zoom, clock) driving the session
- Scene, timeline and metrics read endpoints for renderers
"""

import logging
from typing import Any, Literal

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, field_validator

from edugraph.graph import compute_structural_metrics
from edugraph.ingestion import convert_structured
from edugraph.interaction import GraphSession, active_ids
from edugraph.render import ConceptSummary, timeline_payload

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Graph Payload Models
# ============================================================================


def coerce_id(value: Any) -> Any:
    """Accept numeric concept ids and treat them as strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class ConceptNodeModel(BaseModel):
    """Concept node as sent by the processing service."""

    id: str
    label: str = ""
    description: str = ""
    category: str = "definition"
    size: float = 12.0
    timestamps: list[float] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, value: Any) -> Any:
        return coerce_id(value)


class ConceptEdgeModel(BaseModel):
    """Relationship between two concepts."""

    source: str
    target: str
    type: str = "related"
    strength: float = 0.5

    @field_validator("source", "target", mode="before")
    @classmethod
    def endpoints_as_strings(cls, value: Any) -> Any:
        return coerce_id(value)


class GraphPayloadRequest(BaseModel):
    """Full graph for one video."""

    nodes: list[ConceptNodeModel] = Field(default_factory=list)
    edges: list[ConceptEdgeModel] = Field(default_factory=list)


class StructuredLectureRequest(BaseModel):
    """Structured lecture breakdown to convert into a graph."""

    hierarchical_structure: dict[str, Any] = Field(default_factory=dict)
    detailed_breakdown: list[dict[str, Any]] = Field(default_factory=list)


class LoadResponse(BaseModel):
    """Result of loading a graph."""

    nodes: int
    edges: int
    overview_nodes: int
    mode: str


# ============================================================================
# Interaction Models
# ============================================================================


class ClockRequest(BaseModel):
    """Current playback position."""

    time: float = Field(..., ge=0.0, description="Seconds into the video")


class ClockResponse(BaseModel):
    changed: list[str]
    active: list[str]


class ZoomRequest(BaseModel):
    action: Literal["in", "out", "reset"]


class SearchRequest(BaseModel):
    """Text filter over concept labels and descriptions."""

    term: str = Field(default="", max_length=200, description="Empty clears the filter")


class TransformResponse(BaseModel):
    x: float
    y: float
    k: float


class ViewResponse(BaseModel):
    """View state after a transition."""

    mode: str
    focus_node_id: str | None
    selected_node_id: str | None
    title: str
    summary: str
    exploring: str | None
    node_ids: list[str]
    search: str | None = None


class StepRequest(BaseModel):
    ticks: int = Field(default=1, ge=1, le=5000)


class StepResponse(BaseModel):
    ticks: int
    alpha: float
    active: bool


class SeekResponse(BaseModel):
    node_id: str
    time: float | None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    graph_loaded: bool
    version: str = "0.1.0"


# ============================================================================
# Helper Functions
# ============================================================================


def get_session(request: Request) -> GraphSession:
    """Get the graph session from app state."""
    return request.app.state.session


def require_graph(request: Request) -> GraphSession:
    """Session with a loaded graph, else 404."""
    session = get_session(request)
    if session.generation == 0:
        raise HTTPException(status_code=404, detail="No graph loaded")
    return session


def load_response(session: GraphSession) -> LoadResponse:
    return LoadResponse(
        nodes=len(session.snapshot.nodes),
        edges=len(session.snapshot.edges),
        overview_nodes=len(session.first_order_nodes),
        mode=session.view_state.mode.value,
    )


def view_response(session: GraphSession) -> ViewResponse:
    view = session.view_state
    stats = session.view_stats()
    return ViewResponse(
        mode=view.mode.value,
        focus_node_id=view.focus_node_id,
        selected_node_id=view.selected_node_id,
        title=stats.title,
        summary=stats.summary,
        exploring=stats.exploring,
        node_ids=[node.id for node in session.current_nodes],
        search=session.search,
    )


# ============================================================================
# Loading Endpoints
# ============================================================================


@router.post("/v1/graph", response_model=LoadResponse)
async def load_graph(request: Request, body: GraphPayloadRequest) -> LoadResponse:
    """Replace the current graph and reset to overview."""
    session = get_session(request)
    session.load(body.model_dump())
    return load_response(session)


@router.post("/v1/graph/structured", response_model=LoadResponse)
async def load_structured(request: Request, body: StructuredLectureRequest) -> LoadResponse:
    """Convert a structured lecture breakdown and load it."""
    session = get_session(request)
    result = convert_structured(body.model_dump())
    session.load(result.payload)
    logger.info(f"Loaded structured lecture ({result.skipped_items} items skipped)")
    return load_response(session)


@router.get("/v1/graph")
async def get_graph(request: Request) -> dict:
    """Current snapshot in GraphPayload form."""
    return require_graph(request).snapshot.to_dict()


# ============================================================================
# Interaction Endpoints
# ============================================================================


@router.post("/v1/graph/clock", response_model=ClockResponse)
async def set_clock(request: Request, body: ClockRequest) -> ClockResponse:
    """Push the playback position; returns concepts whose activation changed."""
    session = require_graph(request)
    changed = session.set_clock(body.time)
    return ClockResponse(changed=changed, active=sorted(active_ids(session.snapshot)))


@router.post("/v1/graph/nodes/{node_id}/click", response_model=ViewResponse)
async def click_node(request: Request, node_id: str) -> ViewResponse:
    session = require_graph(request)
    if not session.click(node_id):
        raise HTTPException(status_code=404, detail=f"Unknown concept: {node_id}")
    return view_response(session)


@router.post("/v1/graph/nodes/{node_id}/seek", response_model=SeekResponse)
async def seek_node(request: Request, node_id: str) -> SeekResponse:
    """Playback time to jump to for a concept (its first listed reference)."""
    session = require_graph(request)
    if node_id not in session.snapshot:
        raise HTTPException(status_code=404, detail=f"Unknown concept: {node_id}")
    return SeekResponse(node_id=node_id, time=session.seek_to_node(node_id))


@router.get("/v1/graph/nodes/{node_id}")
async def get_node(request: Request, node_id: str) -> dict:
    """Concept details with reference statistics."""
    session = require_graph(request)
    node = session.snapshot.get(node_id)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Unknown concept: {node_id}")
    return {
        "node": node.to_dict(),
        "summary": ConceptSummary.of(node).to_dict(),
    }


@router.post("/v1/graph/back", response_model=ViewResponse)
async def back_to_overview(request: Request) -> ViewResponse:
    session = require_graph(request)
    session.back_to_overview()
    return view_response(session)


@router.post("/v1/graph/search", response_model=ViewResponse)
async def search_graph(request: Request, body: SearchRequest) -> ViewResponse:
    """Filter the current view to concepts matching a term."""
    session = require_graph(request)
    session.set_search(body.term)
    return view_response(session)


@router.post("/v1/graph/zoom", response_model=TransformResponse)
async def zoom(request: Request, body: ZoomRequest) -> TransformResponse:
    """Zoom buttons; returns the transform the camera is moving to."""
    session = require_graph(request)
    if body.action == "in":
        session.zoom_in()
    elif body.action == "out":
        session.zoom_out()
    else:
        session.reset_view()
    target = session.viewport.target
    return TransformResponse(x=target.x, y=target.y, k=target.k)


@router.post("/v1/graph/step", response_model=StepResponse)
async def step_layout(request: Request, body: StepRequest) -> StepResponse:
    """Advance the layout by a number of frames."""
    session = require_graph(request)
    ran = 0
    for _ in range(body.ticks):
        if not session.needs_frame:
            break
        session.tick()
        ran += 1
    simulation = session.simulation
    return StepResponse(
        ticks=ran,
        alpha=simulation.alpha if simulation else 0.0,
        active=bool(simulation and simulation.active),
    )


# ============================================================================
# Read Endpoints
# ============================================================================


@router.get("/v1/graph/scene")
async def get_scene(request: Request) -> dict:
    """Styled nodes, edges and view labels for the current frame."""
    return require_graph(request).scene().to_dict()


@router.get("/v1/graph/timeline")
async def get_timeline(request: Request, duration: float | None = None) -> dict:
    """Timeline markers; duration defaults to the last referenced second."""
    session = require_graph(request)
    nodes = session.snapshot.node_list()
    if duration is None or duration <= 0:
        duration = max((ts for node in nodes for ts in node.timestamps), default=0.0)
    current = session.activation.current_time or 0.0
    return timeline_payload(nodes, current, duration)


@router.get("/v1/graph/metrics")
async def get_metrics(request: Request) -> dict:
    return compute_structural_metrics(require_graph(request).snapshot).to_dict()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    session = get_session(request)
    return HealthResponse(status="healthy", graph_loaded=session.generation > 0)
