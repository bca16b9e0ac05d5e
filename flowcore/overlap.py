"""
Overlap resolution for already-positioned nodes.

Nodes whose boxes intersect are pushed apart along the axis with the smaller
overlap, so the layout direction chosen by whoever placed them is kept and
the correction stays small. Iteration is bounded: the pass limit guarantees
termination, not a zero-overlap result.

Input nodes are never modified; moved nodes are returned as new copies.
"""

import logging

from .bounds import node_dimensions
from .config import get_settings
from .models import Node

logger = logging.getLogger(__name__)


def overlap_amounts(
    a: tuple[float, float, float, float],
    b: tuple[float, float, float, float]
) -> tuple[float, float]:
    """
    Horizontal and vertical overlap of two (x, y, width, height) boxes.

    Either value is <= 0 when the boxes are apart or only touching.
    """
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    overlap_x = min(ax + aw, bx + bw) - max(ax, bx)
    overlap_y = min(ay + ah, by + bh) - max(ay, by)
    return overlap_x, overlap_y


def resolve_overlaps(
    nodes: list[Node],
    min_gap: float | None = None,
    max_passes: int | None = None
) -> list[Node]:
    """
    Push colliding nodes apart until no pair overlaps or the pass bound hits.

    Each pass walks every pair (i, j) with i before j in input order. For a
    colliding pair the node with the larger coordinate on the chosen axis is
    moved so its near edge sits `min_gap` past the other node's far edge.
    Equal overlap on both axes is resolved vertically.

    Args:
        nodes: Nodes to separate
        min_gap: Space left between separated nodes
        max_passes: Maximum number of passes over all pairs

    Returns:
        New list with the same ids and sizes, in the same order
    """
    settings = get_settings()
    if min_gap is None:
        min_gap = settings.min_gap
    if max_passes is None:
        max_passes = settings.max_overlap_passes

    if len(nodes) < 2:
        return list(nodes)

    # Working boxes: [x, y, width, height]
    boxes = [[n.position.x, n.position.y, *node_dimensions(n)] for n in nodes]
    moved: set[int] = set()
    passes = 0
    converged = False

    while passes < max_passes:
        passes += 1
        changed = False

        for i in range(len(boxes)):
            for j in range(i + 1, len(boxes)):
                a, b = boxes[i], boxes[j]
                overlap_x, overlap_y = overlap_amounts(tuple(a), tuple(b))
                if overlap_x <= 0 or overlap_y <= 0:
                    continue

                if overlap_x < overlap_y:
                    # Horizontal push: the right-hand node moves
                    if b[0] >= a[0]:
                        b[0] = a[0] + a[2] + min_gap
                        moved.add(j)
                    else:
                        a[0] = b[0] + b[2] + min_gap
                        moved.add(i)
                else:
                    # Vertical push (also the tie case): the lower node moves
                    if b[1] >= a[1]:
                        b[1] = a[1] + a[3] + min_gap
                        moved.add(j)
                    else:
                        a[1] = b[1] + b[3] + min_gap
                        moved.add(i)
                changed = True

        if not changed:
            converged = True
            break

    if converged:
        logger.debug("Overlaps resolved in %d pass(es), %d node(s) moved", passes, len(moved))
    else:
        logger.debug(
            "Overlap pass bound (%d) reached, %d node(s) moved; returning best layout",
            max_passes, len(moved)
        )

    return [
        node.moved_to(boxes[idx][0], boxes[idx][1]) if idx in moved else node
        for idx, node in enumerate(nodes)
    ]


def has_overlaps(nodes: list[Node]) -> bool:
    """Check whether any pair of nodes strictly overlaps."""
    boxes = [(n.position.x, n.position.y, *node_dimensions(n)) for n in nodes]
    for i in range(len(boxes)):
        for j in range(i + 1, len(boxes)):
            overlap_x, overlap_y = overlap_amounts(boxes[i], boxes[j])
            if overlap_x > 0 and overlap_y > 0:
                return True
    return False
