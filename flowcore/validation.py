"""
Graph validation - Check graphs for structural issues.

The engine never raises on structurally invalid input; it filters what it
cannot draw. This module is where those problems become visible: callers
can list them with `validate_graph`, and the engine components share
`split_drawable_edges` so dropped edges are reported consistently.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .models import Edge, Graph, Node

logger = logging.getLogger(__name__)


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""
    ERROR = "error"      # Invalid state, the engine drops or ignores it
    WARNING = "warning"  # Potential problem, should review
    INFO = "info"        # Informational, may be intentional


@dataclass
class ValidationIssue:
    """A single validation issue found in a graph."""
    severity: IssueSeverity
    message: str
    node_id: str | None = None
    edge_id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.severity.value,
            "message": self.message
        }
        if self.node_id:
            result["node_id"] = self.node_id
        if self.edge_id:
            result["edge_id"] = self.edge_id
        return result


def split_drawable_edges(
    nodes: Iterable["Node"],
    edges: Iterable["Edge"],
    context: str = "graph"
) -> tuple[list["Edge"], list["Edge"]]:
    """
    Separate edges whose endpoints both exist from dangling ones.

    Args:
        nodes: Nodes the endpoints must resolve to
        edges: Edges to check, in input order
        context: Short label used in the log line for dropped edges

    Returns:
        (kept, dropped), both preserving input order
    """
    node_ids = {n.id for n in nodes}
    kept: list["Edge"] = []
    dropped: list["Edge"] = []

    for edge in edges:
        if edge.source in node_ids and edge.target in node_ids:
            kept.append(edge)
        else:
            dropped.append(edge)
            missing = [e for e in (edge.source, edge.target) if e not in node_ids]
            logger.warning(
                "Dropping dangling edge %s in %s: missing node(s) %s",
                edge.id, context, ", ".join(missing)
            )

    return kept, dropped


def validate_graph(graph: "Graph") -> list[ValidationIssue]:
    """
    Validate a graph and return a list of issues.

    Checks for:
    - Empty graph - INFO
    - Duplicate node ids - ERROR
    - Invalid edge references (source/target doesn't exist) - ERROR
    - Duplicate edge ids - WARNING
    - Self-referencing edges - WARNING
    - Duplicate edges (same source->target) - WARNING

    Args:
        graph: The graph to validate

    Returns:
        List of ValidationIssue objects
    """
    issues: list[ValidationIssue] = []

    nodes = graph.nodes
    edges = graph.edges

    if not nodes:
        issues.append(ValidationIssue(
            severity=IssueSeverity.INFO,
            message="Graph has no nodes"
        ))

    # Duplicate node ids
    seen_nodes: set[str] = set()
    for node in nodes:
        if node.id in seen_nodes:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"Duplicate node id: {node.id}",
                node_id=node.id
            ))
        else:
            seen_nodes.add(node.id)

    # Invalid edge references
    for edge in edges:
        if edge.source not in seen_nodes:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"Edge references non-existent source node: {edge.source}",
                edge_id=edge.id
            ))
        if edge.target not in seen_nodes:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"Edge references non-existent target node: {edge.target}",
                edge_id=edge.id
            ))

    # Duplicate edge ids
    seen_edges: set[str] = set()
    for edge in edges:
        if edge.id in seen_edges:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Duplicate edge id: {edge.id}",
                edge_id=edge.id
            ))
        else:
            seen_edges.add(edge.id)

    # Self-referencing edges
    for edge in edges:
        if edge.source == edge.target:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message="Self-referencing edge (node points to itself)",
                edge_id=edge.id,
                node_id=edge.source
            ))

    # Duplicate edges (same source->target)
    seen_pairs: set[tuple[str, str]] = set()
    for edge in edges:
        pair = (edge.source, edge.target)
        if pair in seen_pairs:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Duplicate edge from {edge.source} to {edge.target}",
                edge_id=edge.id
            ))
        else:
            seen_pairs.add(pair)

    return issues


def validation_summary(issues: list[ValidationIssue]) -> dict:
    """
    Create a summary of validation issues.

    Args:
        issues: List of validation issues

    Returns:
        Dictionary with counts by severity
    """
    errors = len([i for i in issues if i.severity == IssueSeverity.ERROR])
    return {
        "total": len(issues),
        "errors": errors,
        "warnings": len([i for i in issues if i.severity == IssueSeverity.WARNING]),
        "info": len([i for i in issues if i.severity == IssueSeverity.INFO]),
        "valid": errors == 0
    }
