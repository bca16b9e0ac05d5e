"""
Edit commands applied to a graph.

Node data carries no callbacks. Edits are explicit command values applied
by `apply_command`, which returns a new Graph.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .models import Graph


class UnknownNodeError(KeyError):
    """Raised when a command targets a node id that is not in the graph."""


class UpdateNodeLabel(BaseModel):
    """Replace the label of a node."""
    model_config = ConfigDict(frozen=True)

    command: Literal["update_node_label"] = "update_node_label"
    id: str
    text: str


class MoveNode(BaseModel):
    """Move a node to a new top-left position."""
    model_config = ConfigDict(frozen=True)

    command: Literal["move_node"] = "move_node"
    id: str
    x: float
    y: float


Command = Union[UpdateNodeLabel, MoveNode]


class CommandRequest(BaseModel):
    """Request to apply a command to a graph."""
    graph: Graph
    command: Command = Field(discriminator="command")


def apply_command(graph: Graph, command: Command) -> Graph:
    """
    Apply a command and return the resulting graph.

    Every node with the targeted id is updated.

    Raises:
        UnknownNodeError: If no node has the targeted id
    """
    if command.id not in set(graph.node_ids):
        raise UnknownNodeError(command.id)

    nodes = []
    for node in graph.nodes:
        if node.id != command.id:
            nodes.append(node)
        elif isinstance(command, UpdateNodeLabel):
            nodes.append(node.model_copy(update={"label": command.text}))
        elif isinstance(command, MoveNode):
            nodes.append(node.moved_to(command.x, command.y))
        else:
            raise ValueError(f"Unsupported command: {command!r}")

    return graph.model_copy(update={"nodes": nodes})
