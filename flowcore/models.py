"""
Core data models for graphs.

These models define the canonical in-memory schema the engine works on:
- Nodes with a kind, a top-left position and an optional explicit size
- Edges connecting nodes (using source/target naming convention)
- Graphs as ordered sequences of nodes and edges

Order matters: every "first occurrence wins" rule in the engine uses the
input order of `Graph.nodes` and `Graph.edges`.

All models are frozen. The engine never mutates a node or a graph in place,
it builds new ones with `model_copy(update=...)`.

Field Naming Convention:
- Snake case is canonical (`source_anchor`, `target_anchor`)
- camelCase `sourceAnchor`/`targetAnchor` and the older
  `sourceHandle`/`targetHandle` are accepted on input and converted
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, ConfigDict, Field, model_validator


class NodeKind(str, Enum):
    """Element categories a node can belong to."""
    STEP = "step"
    DECISION = "decision"
    NOTE = "note"
    IMAGE = "image"


class Anchor(str, Enum):
    """Cardinal side of a node an edge attaches to."""
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


class EdgeStyle(str, Enum):
    """Line styles for edges."""
    DEFAULT = "default"
    ANIMATED = "animated"
    STEP = "step"


def default_edge_id(source: str, target: str) -> str:
    """Derive the id an edge gets when none is supplied."""
    return f"e{source}-{target}"


class Position(BaseModel):
    """Top-left corner of a node."""
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class Size(BaseModel):
    """Explicit node size overriding the kind-keyed default."""
    model_config = ConfigDict(frozen=True)

    width: float
    height: float


class Node(BaseModel):
    """A node in the graph."""
    model_config = ConfigDict(frozen=True)

    id: str
    kind: str = NodeKind.STEP.value
    position: Position = Field(default_factory=Position)
    size: Optional[Size] = None
    label: str = ""
    image_url: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def convert_flat_fields(cls, data: Any) -> Any:
        """Accept `type`, flat `x`/`y` and flat `width`/`height` on input."""
        if isinstance(data, dict):
            data = dict(data)
            if 'type' in data and 'kind' not in data:
                data['kind'] = data.pop('type')
            if 'position' not in data and ('x' in data or 'y' in data):
                data['position'] = {'x': data.pop('x', 0.0), 'y': data.pop('y', 0.0)}
            # Only a fully specified size overrides the default
            if 'size' not in data and data.get('width') and data.get('height'):
                data['size'] = {'width': data.pop('width'), 'height': data.pop('height')}
            if 'imageUrl' in data and 'image_url' not in data:
                data['image_url'] = data.pop('imageUrl')
        return data

    def moved_to(self, x: float, y: float) -> "Node":
        """Return a copy of this node at a new position."""
        return self.model_copy(update={"position": Position(x=x, y=y)})


class Edge(BaseModel):
    """
    A directed edge connecting two nodes.

    Uses `source` and `target` as canonical field names. When no `id` is
    supplied it is derived as `e<source>-<target>`.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    source_anchor: Optional[Anchor] = None
    target_anchor: Optional[Anchor] = None
    label: str = ""
    style: Optional[EdgeStyle] = None

    @model_validator(mode='before')
    @classmethod
    def convert_legacy_fields(cls, data: Any) -> Any:
        """Convert camelCase and legacy handle fields, derive a missing id."""
        if isinstance(data, dict):
            data = dict(data)
            for legacy, canonical in (
                ('sourceAnchor', 'source_anchor'),
                ('sourceHandle', 'source_anchor'),
                ('targetAnchor', 'target_anchor'),
                ('targetHandle', 'target_anchor'),
                ('from', 'source'),
                ('to', 'target'),
            ):
                if legacy in data and canonical not in data:
                    data[canonical] = data.pop(legacy)
            if not data.get('id') and 'source' in data and 'target' in data:
                data['id'] = default_edge_id(data['source'], data['target'])
        return data


class Graph(BaseModel):
    """
    An ordered collection of nodes and directed edges.

    Node ids are expected to be unique. Duplicate ids are a caller contract
    violation; lookups by id resolve them last-write-wins.
    """
    model_config = ConfigDict(frozen=True)

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    @property
    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    def node_index(self) -> dict[str, Node]:
        """Map node id to node (last occurrence wins)."""
        return {n.id: n for n in self.nodes}

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.node_index().get(node_id)

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return self.model_dump(mode="json")


class Bounds(BaseModel):
    """Axis-aligned box in diagram coordinates."""
    model_config = ConfigDict(frozen=True)

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def center(self) -> tuple[float, float]:
        """Get the center point of the box."""
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)


class FlowProposal(Graph):
    """A sub-graph produced outside the editor, e.g. by a generative model."""
    summary: Optional[str] = None


# --- API Request/Response Models ---

class NodesRequest(BaseModel):
    """Request carrying a bare node list."""
    nodes: list[Node] = Field(default_factory=list)


class ResolveOverlapsRequest(NodesRequest):
    """Request to separate colliding nodes."""
    min_gap: Optional[float] = None
    max_passes: Optional[int] = None


class AvailablePositionRequest(BaseModel):
    """Request for a free slot near a starting point."""
    start: Position
    size: Size
    occupied: list[Node] = Field(default_factory=list)


class MinimapRequest(NodesRequest):
    """Request to decide whether content overflows the viewport."""
    visible_width: float
    visible_height: float


class VisibilityRequest(BaseModel):
    """Request for the visible subset at a presentation step."""
    graph: Graph
    step: int = 0


class MergeRequest(BaseModel):
    """Request to merge a proposal into an existing graph."""
    existing: Graph = Field(default_factory=Graph)
    proposal: FlowProposal
    next_id_seed: int = 1
    insertion_anchor: Optional[Position] = None
    resolve: bool = False
