"""
Traversal sequencing for step-by-step presentation.

Derives a deterministic reveal order over a graph:
- Start at the first node with no incoming edge (or the first node if
  every node has one)
- Breadth-first from there, scanning outgoing edges in input order
- Append nodes the walk never reached, in input order

Dangling edges take no part in the walk.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .validation import split_drawable_edges

if TYPE_CHECKING:
    from .models import Edge, Graph


@dataclass
class TraversalOrder:
    """Node-centric reveal order."""
    start_id: Optional[str] = None
    ordered_node_ids: list[str] = field(default_factory=list)
    dropped_edges: list["Edge"] = field(default_factory=list)

    @property
    def total_steps(self) -> int:
        return len(self.ordered_node_ids)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "start_id": self.start_id,
            "ordered_node_ids": list(self.ordered_node_ids),
            "total_steps": self.total_steps,
            "dropped_edge_ids": [e.id for e in self.dropped_edges],
        }


@dataclass
class EdgeTraversalOrder:
    """Edge-centric reveal order."""
    start_id: Optional[str] = None
    ordered_edges: list["Edge"] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "start_id": self.start_id,
            "ordered_edges": [e.model_dump(mode="json") for e in self.ordered_edges],
        }


def find_start_node(graph: "Graph", edges: list["Edge"] | None = None) -> Optional[str]:
    """
    Pick the node the walk starts from.

    Args:
        graph: The graph to search
        edges: Drawable edges (defaults to the graph's edges)

    Returns:
        First node id without an incoming edge, the first node id as a
        fallback, or None for an empty graph
    """
    if not graph.nodes:
        return None
    if edges is None:
        edges = graph.edges

    has_parent = {edge.target for edge in edges}
    for node in graph.nodes:
        if node.id not in has_parent:
            return node.id
    return graph.nodes[0].id


def compute_order(graph: "Graph") -> TraversalOrder:
    """
    Compute the node reveal order using BFS.

    Every node id appears exactly once in the result, including nodes in
    components the walk never reaches. Cycles terminate because a node is
    queued at most once.

    Args:
        graph: The graph to order

    Returns:
        TraversalOrder with start id and ordered node ids
    """
    if not graph.nodes:
        return TraversalOrder()

    edges, dropped = split_drawable_edges(graph.nodes, graph.edges, context="sequence")

    # Build adjacency list (source -> targets, in edge input order)
    children: dict[str, list[str]] = defaultdict(list)
    for edge in edges:
        children[edge.source].append(edge.target)

    start_id = find_start_node(graph, edges)

    visited: set[str] = {start_id}
    ordered: list[str] = []
    queue = [start_id]

    while queue:
        current = queue.pop(0)
        ordered.append(current)
        for child in children[current]:
            if child not in visited:
                visited.add(child)
                queue.append(child)

    # Handle disconnected nodes
    for node in graph.nodes:
        if node.id not in visited:
            visited.add(node.id)
            ordered.append(node.id)

    return TraversalOrder(start_id=start_id, ordered_node_ids=ordered, dropped_edges=dropped)


def compute_edge_order(graph: "Graph") -> EdgeTraversalOrder:
    """
    Compute the edge reveal order.

    Walks the node order from `compute_order` and emits each node's
    drawable outgoing edges in input order, so every drawable edge appears
    exactly once.

    Args:
        graph: The graph to order

    Returns:
        EdgeTraversalOrder with start id and ordered edges
    """
    order = compute_order(graph)
    node_ids = set(graph.node_ids)

    outgoing: dict[str, list["Edge"]] = defaultdict(list)
    for edge in graph.edges:
        if edge.source in node_ids and edge.target in node_ids:
            outgoing[edge.source].append(edge)

    ordered_edges: list["Edge"] = []
    for node_id in order.ordered_node_ids:
        ordered_edges.extend(outgoing.pop(node_id, []))

    return EdgeTraversalOrder(start_id=order.start_id, ordered_edges=ordered_edges)
