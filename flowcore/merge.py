"""
Proposal merging - Insert an externally produced sub-graph into a graph.

The insert-as-new algorithm:
1. Give every proposal node a fresh sequential id starting at the seed
2. Rewrite edge endpoints through the id map, dropping dangling edges
3. Move the proposal as a rigid unit so its centroid lands on the
   insertion anchor
4. Default missing connection sides to bottom -> top
5. Append to the existing graph, optionally resolving overlaps on the union

The returned seed is the next unused id, so repeated merges never collide.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .bounds import compute_bounds
from .config import get_settings
from .models import Anchor, Edge, Graph, Position, default_edge_id
from .overlap import resolve_overlaps
from .validation import split_drawable_edges

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_ANCHOR = Anchor.BOTTOM
DEFAULT_TARGET_ANCHOR = Anchor.TOP


@dataclass
class MergeResult:
    """Outcome of merging a proposal."""
    merged_graph: Graph
    new_next_id_seed: int
    id_map: dict[str, str] = field(default_factory=dict)
    added_node_ids: list[str] = field(default_factory=list)
    dropped_edges: list[Edge] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "merged_graph": self.merged_graph.to_json_dict(),
            "new_next_id_seed": self.new_next_id_seed,
            "id_map": dict(self.id_map),
            "added_node_ids": list(self.added_node_ids),
            "dropped_edge_ids": [e.id for e in self.dropped_edges],
        }


def _remapped_edge_id(edge: Edge, id_map: dict[str, str], source: str, target: str) -> str:
    """Build the id of a remapped proposal edge."""
    if edge.id == default_edge_id(edge.source, edge.target):
        return default_edge_id(source, target)
    prefix = id_map.get(edge.id.split("-")[0], "e")
    return f"{prefix}-{source}-{target}"


def _unique_id(candidate: str, taken: set[str]) -> str:
    if candidate not in taken:
        return candidate
    n = 2
    while f"{candidate}-{n}" in taken:
        n += 1
    return f"{candidate}-{n}"


def merge_proposal(
    existing: Graph,
    proposal: Graph,
    next_id_seed: int,
    insertion_anchor: Optional[Position] = None,
    resolve: bool = False
) -> MergeResult:
    """
    Merge a proposal graph into an existing graph.

    Args:
        existing: Current graph
        proposal: Sub-graph to insert
        next_id_seed: First id to hand out to proposal nodes
        insertion_anchor: Point the proposal centroid is moved onto
            (settings default when omitted)
        resolve: Run overlap resolution on the merged node list

    Returns:
        MergeResult with the merged graph and the next unused id seed
    """
    if insertion_anchor is None:
        settings = get_settings()
        insertion_anchor = Position(x=settings.default_anchor_x, y=settings.default_anchor_y)

    # 1. Generate fresh ids for proposal nodes, skipping ids already in use
    existing_ids = set(existing.node_ids)
    id_map: dict[str, str] = {}
    new_ids: list[str] = []
    counter = next_id_seed
    for node in proposal.nodes:
        while str(counter) in existing_ids:
            counter += 1
        new_ids.append(str(counter))
        id_map[node.id] = str(counter)
        counter += 1

    # 2. Offset that moves the proposal centroid onto the anchor
    center_x, center_y = compute_bounds(proposal.nodes).center()
    offset_x = insertion_anchor.x - center_x
    offset_y = insertion_anchor.y - center_y

    new_nodes = [
        node.model_copy(update={
            "id": new_id,
            "position": Position(x=node.position.x + offset_x, y=node.position.y + offset_y),
        })
        for node, new_id in zip(proposal.nodes, new_ids)
    ]

    # 3. Existing dangling edges are not carried over
    kept_edges, dropped = split_drawable_edges(existing.nodes, existing.edges, context="existing graph")
    taken_edge_ids = {e.id for e in kept_edges}

    # 4. Remap proposal edges, with default handles for vertical flow
    new_edges: list[Edge] = []
    for edge in proposal.edges:
        source = id_map.get(edge.source)
        target = id_map.get(edge.target)
        if source is None or target is None:
            logger.warning(
                "Dropping proposal edge %s: endpoint not in proposal (%s -> %s)",
                edge.id, edge.source, edge.target
            )
            dropped.append(edge)
            continue

        edge_id = _unique_id(_remapped_edge_id(edge, id_map, source, target), taken_edge_ids)
        taken_edge_ids.add(edge_id)
        new_edges.append(edge.model_copy(update={
            "id": edge_id,
            "source": source,
            "target": target,
            "source_anchor": edge.source_anchor or DEFAULT_SOURCE_ANCHOR,
            "target_anchor": edge.target_anchor or DEFAULT_TARGET_ANCHOR,
        }))

    merged_nodes = [*existing.nodes, *new_nodes]
    if resolve:
        merged_nodes = resolve_overlaps(merged_nodes)

    merged = Graph(nodes=merged_nodes, edges=[*kept_edges, *new_edges])

    logger.info(
        "Merged proposal: %d node(s), %d edge(s) added, next id seed %d",
        len(new_nodes), len(new_edges), counter
    )

    return MergeResult(
        merged_graph=merged,
        new_next_id_seed=counter,
        id_map=id_map,
        added_node_ids=[n.id for n in new_nodes],
        dropped_edges=dropped,
    )
