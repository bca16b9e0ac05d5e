"""
Placement helpers for viewport and insertion logic.

- Free-slot search for a single new node
- Padded content extent used to limit panning
- Minimap visibility check
"""

from .bounds import compute_bounds, node_box
from .config import get_settings
from .models import Bounds, Node, Position, Size


def _intersects(a: tuple[float, float, float, float], b: tuple[float, float, float, float]) -> bool:
    """Strict intersection of two (left, top, right, bottom) boxes."""
    return a[0] < b[2] and a[2] > b[0] and a[1] < b[3] and a[3] > b[1]


def find_available_position(
    start: Position,
    size: Size,
    occupied: list[Node],
    step: float | None = None,
    max_attempts: int | None = None
) -> Position:
    """
    Nudge a candidate position diagonally until it is free.

    Args:
        start: Preferred top-left position
        size: Size of the node being placed
        occupied: Nodes already on the canvas
        step: Diagonal nudge per attempt
        max_attempts: Maximum number of nudges

    Returns:
        The first free position, or the last candidate once attempts run out
    """
    settings = get_settings()
    if step is None:
        step = settings.placement_step
    if max_attempts is None:
        max_attempts = settings.placement_max_attempts

    boxes = [node_box(n) for n in occupied]

    def overlaps(x: float, y: float) -> bool:
        candidate = (x, y, x + size.width, y + size.height)
        return any(_intersects(candidate, box) for box in boxes)

    x, y = start.x, start.y
    attempts = 0
    while attempts < max_attempts and overlaps(x, y):
        x += step
        y += step
        attempts += 1

    return Position(x=x, y=y)


def content_extent(
    nodes: list[Node],
    min_padding: float | None = None,
    max_padding: float | None = None
) -> Bounds:
    """
    Content bounds padded by half the smaller content span.

    The padding is clamped to [min_padding, max_padding]. With no nodes the
    fallback box is returned unpadded.
    """
    if not nodes:
        return compute_bounds(nodes)

    settings = get_settings()
    if min_padding is None:
        min_padding = settings.extent_min_padding
    if max_padding is None:
        max_padding = settings.extent_max_padding

    bounds = compute_bounds(nodes)
    padding = max(min_padding, min(max_padding, min(bounds.width, bounds.height) * 0.5))
    return Bounds(
        min_x=bounds.min_x - padding,
        min_y=bounds.min_y - padding,
        max_x=bounds.max_x + padding,
        max_y=bounds.max_y + padding,
    )


def needs_minimap(
    nodes: list[Node],
    visible_width: float,
    visible_height: float,
    threshold: float | None = None
) -> bool:
    """Check whether content exceeds `threshold` of the visible area in either dimension."""
    if not nodes:
        return False
    if threshold is None:
        threshold = get_settings().minimap_threshold

    bounds = compute_bounds(nodes)
    return bounds.width > visible_width * threshold or bounds.height > visible_height * threshold
