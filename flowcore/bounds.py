"""
Bounding box computation for node sets.

A node's footprint is its explicit size when one is set, otherwise the
default size for its kind.
"""

from typing import Iterable

from .config import get_settings
from .models import Bounds, Node, NodeKind


# Kind-keyed default sizes (width, height)
DEFAULT_NODE_SIZES: dict[str, tuple[float, float]] = {
    NodeKind.STEP.value: (180, 80),
    NodeKind.DECISION.value: (160, 160),
    NodeKind.NOTE.value: (180, 80),
    NodeKind.IMAGE.value: (140, 140),
}
FALLBACK_NODE_SIZE: tuple[float, float] = DEFAULT_NODE_SIZES[NodeKind.STEP.value]


def node_dimensions(node: Node) -> tuple[float, float]:
    """Get the effective (width, height) of a node."""
    if node.size is not None:
        return (node.size.width, node.size.height)
    return DEFAULT_NODE_SIZES.get(node.kind, FALLBACK_NODE_SIZE)


def node_box(node: Node) -> tuple[float, float, float, float]:
    """Get the node's box as (left, top, right, bottom)."""
    width, height = node_dimensions(node)
    x, y = node.position.x, node.position.y
    return (x, y, x + width, y + height)


def fallback_bounds(half_extent: float | None = None) -> Bounds:
    """Box centered at the origin, used when there is nothing to measure."""
    if half_extent is None:
        half_extent = get_settings().fallback_half_extent
    return Bounds(min_x=-half_extent, min_y=-half_extent, max_x=half_extent, max_y=half_extent)


def compute_bounds(nodes: Iterable[Node], half_extent: float | None = None) -> Bounds:
    """
    Compute the union box over all node footprints.

    Args:
        nodes: Nodes to measure
        half_extent: Half size of the fallback box for empty input

    Returns:
        The enclosing Bounds, or the fallback box when `nodes` is empty
    """
    boxes = [node_box(n) for n in nodes]
    if not boxes:
        return fallback_bounds(half_extent)

    return Bounds(
        min_x=min(b[0] for b in boxes),
        min_y=min(b[1] for b in boxes),
        max_x=max(b[2] for b in boxes),
        max_y=max(b[3] for b in boxes),
    )
