"""
Visibility at a presentation step.

Step k reveals the first k + 1 nodes of the traversal order. An edge is
visible as soon as both of its endpoints are; the most recently revealed
node is the active one the renderer highlights and centers on.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .sequence import TraversalOrder, compute_order
from .validation import split_drawable_edges

if TYPE_CHECKING:
    from .models import Edge, Graph


@dataclass
class Visibility:
    """Visible subset of a graph at one step."""
    step: int = 0
    total_steps: int = 0
    visible_node_ids: list[str] = field(default_factory=list)
    visible_edges: list["Edge"] = field(default_factory=list)
    active_node_id: Optional[str] = None
    dropped_edges: list["Edge"] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "step": self.step,
            "total_steps": self.total_steps,
            "visible_node_ids": list(self.visible_node_ids),
            "visible_edges": [e.model_dump(mode="json") for e in self.visible_edges],
            "active_node_id": self.active_node_id,
            "dropped_edge_ids": [e.id for e in self.dropped_edges],
        }


def clamp_step(step: int, total_steps: int) -> int:
    """Clamp a step index into [0, total_steps - 1] (0 when there are no steps)."""
    if total_steps <= 0:
        return 0
    return max(0, min(step, total_steps - 1))


def next_step(step: int, total_steps: int) -> int:
    return clamp_step(step + 1, total_steps)


def previous_step(step: int, total_steps: int) -> int:
    return clamp_step(step - 1, total_steps)


def compute_visibility(
    graph: "Graph",
    order: TraversalOrder | None = None,
    step: int = 0
) -> Visibility:
    """
    Compute which nodes and edges are shown at a step.

    Args:
        graph: The graph being presented
        order: Reveal order (computed from `graph` when omitted)
        step: Step index; out-of-range values are clamped

    Returns:
        Visibility with visible node ids, visible edges, the active node
        and any dangling edges that were left out
    """
    if order is None:
        order = compute_order(graph)

    edges, dropped = split_drawable_edges(graph.nodes, graph.edges, context="visibility")

    total = order.total_steps
    if total == 0:
        return Visibility(dropped_edges=dropped)

    step = clamp_step(step, total)
    visible_ids = order.ordered_node_ids[:step + 1]
    visible_set = set(visible_ids)

    visible_edges = [
        edge for edge in edges
        if edge.source in visible_set and edge.target in visible_set
    ]

    return Visibility(
        step=step,
        total_steps=total,
        visible_node_ids=visible_ids,
        visible_edges=visible_edges,
        active_node_id=order.ordered_node_ids[step],
        dropped_edges=dropped,
    )
