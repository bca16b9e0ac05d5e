"""
Flowcore - Graph presentation and layout engine for the diagram editor.

Pure, stateless functions over explicit graph values:
- Bounding boxes and overlap resolution for positioned nodes
- Deterministic step-by-step reveal order and per-step visibility
- Merging externally produced proposals without id or position clashes
"""

from .models import (
    # Enums
    NodeKind,
    Anchor,
    EdgeStyle,
    # Core models
    Position,
    Size,
    Node,
    Edge,
    Graph,
    Bounds,
    FlowProposal,
)

from .bounds import compute_bounds, node_dimensions, DEFAULT_NODE_SIZES
from .overlap import resolve_overlaps, has_overlaps
from .sequence import compute_order, compute_edge_order, TraversalOrder, EdgeTraversalOrder
from .visibility import compute_visibility, Visibility, clamp_step, next_step, previous_step
from .merge import merge_proposal, MergeResult
from .validation import validate_graph, validation_summary, ValidationIssue, IssueSeverity
from .placement import find_available_position, content_extent, needs_minimap
from .commands import apply_command, UpdateNodeLabel, MoveNode, UnknownNodeError

__all__ = [
    # Enums
    "NodeKind",
    "Anchor",
    "EdgeStyle",
    # Models
    "Position",
    "Size",
    "Node",
    "Edge",
    "Graph",
    "Bounds",
    "FlowProposal",
    # Bounds
    "compute_bounds",
    "node_dimensions",
    "DEFAULT_NODE_SIZES",
    # Overlap
    "resolve_overlaps",
    "has_overlaps",
    # Sequencing
    "compute_order",
    "compute_edge_order",
    "TraversalOrder",
    "EdgeTraversalOrder",
    # Visibility
    "compute_visibility",
    "Visibility",
    "clamp_step",
    "next_step",
    "previous_step",
    # Merge
    "merge_proposal",
    "MergeResult",
    # Validation
    "validate_graph",
    "validation_summary",
    "ValidationIssue",
    "IssueSeverity",
    # Placement
    "find_available_position",
    "content_extent",
    "needs_minimap",
    # Commands
    "apply_command",
    "UpdateNodeLabel",
    "MoveNode",
    "UnknownNodeError",
]
