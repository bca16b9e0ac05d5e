"""
Flowcore Backend - FastAPI Application

Exposes the layout and presentation engine to the diagram editor:
- Layout endpoints (bounds, overlap resolution, extent, free-slot placement)
- Presentation endpoints (reveal order, per-step visibility)
- Proposal merge endpoint
- Graph validation and edit commands
- CORS configuration for local frontend development
"""
import logging
from typing import Literal

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from flowcore import (
    Graph,
    apply_command,
    compute_bounds,
    compute_edge_order,
    compute_order,
    compute_visibility,
    content_extent,
    find_available_position,
    merge_proposal,
    needs_minimap,
    resolve_overlaps,
    validate_graph,
    validation_summary,
    UnknownNodeError,
)
from flowcore.commands import CommandRequest
from flowcore.config import get_settings
from flowcore.models import (
    AvailablePositionRequest,
    MergeRequest,
    MinimapRequest,
    NodesRequest,
    ResolveOverlapsRequest,
    VisibilityRequest,
)

settings = get_settings()
logger = logging.getLogger(__name__)


# --- FastAPI App ---

app = FastAPI(
    title="Flowcore API",
    description="Layout and presentation engine for the diagram editor",
    version="1.0.0",
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Health Check ---

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


# --- Layout ---

@app.post("/api/layout/bounds")
async def layout_bounds(request: NodesRequest):
    """Bounding box of a node set."""
    return compute_bounds(request.nodes).model_dump()


@app.post("/api/layout/resolve-overlaps")
async def layout_resolve_overlaps(request: ResolveOverlapsRequest):
    """Push colliding nodes apart."""
    nodes = resolve_overlaps(
        request.nodes,
        min_gap=request.min_gap,
        max_passes=request.max_passes
    )
    return {"nodes": [n.model_dump(mode="json") for n in nodes]}


@app.post("/api/layout/extent")
async def layout_extent(request: NodesRequest):
    """Padded content extent for limiting pan."""
    return content_extent(request.nodes).model_dump()


@app.post("/api/layout/available-position")
async def layout_available_position(request: AvailablePositionRequest):
    """Find a free slot for a new node near a starting point."""
    position = find_available_position(request.start, request.size, request.occupied)
    return position.model_dump()


@app.post("/api/layout/minimap")
async def layout_minimap(request: MinimapRequest):
    """Whether the content overflows the visible area enough to show a minimap."""
    if request.visible_width <= 0 or request.visible_height <= 0:
        raise HTTPException(status_code=400, detail="Visible area must be positive")
    return {"show": needs_minimap(request.nodes, request.visible_width, request.visible_height)}


# --- Presentation ---

@app.post("/api/presentation/order")
async def presentation_order(
    graph: Graph,
    variant: Literal["nodes", "edges"] = Query(default="nodes")
):
    """Deterministic reveal order, node-centric or edge-centric."""
    if variant == "edges":
        return compute_edge_order(graph).to_dict()
    return compute_order(graph).to_dict()


@app.post("/api/presentation/visibility")
async def presentation_visibility(request: VisibilityRequest):
    """Visible nodes, visible edges and the active node at a step."""
    return compute_visibility(request.graph, step=request.step).to_dict()


# --- Proposals ---

@app.post("/api/proposals/merge")
async def proposals_merge(request: MergeRequest):
    """Merge a proposal into the current graph."""
    if request.next_id_seed < 0:
        raise HTTPException(status_code=400, detail="next_id_seed must not be negative")

    result = merge_proposal(
        request.existing,
        request.proposal,
        request.next_id_seed,
        insertion_anchor=request.insertion_anchor,
        resolve=request.resolve
    )
    return result.to_dict()


# --- Graph ---

@app.post("/api/graph/validate")
async def graph_validate(graph: Graph):
    """Validate graph structure."""
    issues = validate_graph(graph)
    return {
        "issues": [i.to_dict() for i in issues],
        "summary": validation_summary(issues)
    }


@app.post("/api/graph/commands")
async def graph_commands(request: CommandRequest):
    """Apply an edit command and return the new graph."""
    try:
        graph = apply_command(request.graph, request.command)
    except UnknownNodeError:
        raise HTTPException(status_code=404, detail="Node not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return graph.to_json_dict()


# --- Run with uvicorn ---

def run():
    """Start the API server."""
    import uvicorn
    logging.basicConfig(level=settings.log_level.upper())
    logger.info("Starting Flowcore API on %s:%s", settings.api_host, settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
