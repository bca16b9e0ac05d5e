#!/usr/bin/env python3
"""Flowcore CLI - run the layout and presentation engine on graph JSON files."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .bounds import compute_bounds
from .config import get_settings
from .merge import merge_proposal
from .models import Graph, Position
from .overlap import resolve_overlaps
from .sequence import compute_edge_order, compute_order
from .validation import validate_graph, validation_summary
from .visibility import compute_visibility


def _json_out(data):
    print(json.dumps(data))
    sys.exit(0)


def _load_graph(path):
    """Read a graph JSON file, exiting with an error payload on failure."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        _json_out({"status": "error", "error": f"File not found: {path}"})
    except OSError as e:
        _json_out({"status": "error", "error": f"Cannot read {path}: {e.strerror or e}"})
    except json.JSONDecodeError as e:
        _json_out({"status": "error", "error": f"Invalid JSON in {path}: {e}"})
    except UnicodeDecodeError:
        _json_out({"status": "error", "error": f"File is not UTF-8 text: {path}"})

    try:
        return Graph.model_validate(data)
    except ValidationError as e:
        _json_out({"status": "error", "error": f"Invalid graph in {path}: {e.error_count()} error(s)",
                   "details": json.loads(e.json())})


# ── Layout ───────────────────────────────────────────────────────────────────

def cmd_bounds(args):
    graph = _load_graph(args.graph)
    _json_out({"status": "ok", "bounds": compute_bounds(graph.nodes).model_dump()})


def cmd_resolve_overlaps(args):
    graph = _load_graph(args.graph)
    nodes = resolve_overlaps(graph.nodes, min_gap=args.min_gap, max_passes=args.max_passes)
    resolved = graph.model_copy(update={"nodes": nodes})
    _json_out({"status": "ok", "graph": resolved.to_json_dict()})


# ── Presentation ─────────────────────────────────────────────────────────────

def cmd_order(args):
    graph = _load_graph(args.graph)
    if args.edges:
        _json_out({"status": "ok", **compute_edge_order(graph).to_dict()})
    _json_out({"status": "ok", **compute_order(graph).to_dict()})


def cmd_visibility(args):
    graph = _load_graph(args.graph)
    _json_out({"status": "ok", **compute_visibility(graph, step=args.step).to_dict()})


# ── Proposals ────────────────────────────────────────────────────────────────

def cmd_merge(args):
    graph = _load_graph(args.graph)
    proposal = _load_graph(args.proposal)

    anchor = None
    if args.anchor_x is not None or args.anchor_y is not None:
        settings = get_settings()
        anchor = Position(
            x=args.anchor_x if args.anchor_x is not None else settings.default_anchor_x,
            y=args.anchor_y if args.anchor_y is not None else settings.default_anchor_y,
        )

    result = merge_proposal(graph, proposal, args.seed, insertion_anchor=anchor, resolve=args.resolve)
    _json_out({"status": "ok", **result.to_dict()})


# ── Analysis ─────────────────────────────────────────────────────────────────

def cmd_validate(args):
    graph = _load_graph(args.graph)
    issues = validate_graph(graph)
    _json_out({
        "status": "ok",
        "issues": [i.to_dict() for i in issues],
        "summary": validation_summary(issues),
    })


def build_parser():
    parser = argparse.ArgumentParser(prog="flowcore", description="Diagram layout and presentation engine")
    sub = parser.add_subparsers(dest="command", required=True)

    # Layout
    p = sub.add_parser("bounds")
    p.add_argument("graph")

    p = sub.add_parser("resolve-overlaps")
    p.add_argument("graph")
    p.add_argument("--min-gap", type=float, default=None)
    p.add_argument("--max-passes", type=int, default=None)

    # Presentation
    p = sub.add_parser("order")
    p.add_argument("graph")
    p.add_argument("--edges", action="store_true")

    p = sub.add_parser("visibility")
    p.add_argument("graph")
    p.add_argument("--step", type=int, default=0)

    # Proposals
    p = sub.add_parser("merge")
    p.add_argument("graph")
    p.add_argument("--proposal", required=True)
    p.add_argument("--seed", type=int, required=True)
    p.add_argument("--anchor-x", type=float, default=None)
    p.add_argument("--anchor-y", type=float, default=None)
    p.add_argument("--resolve", action="store_true")

    # Analysis
    p = sub.add_parser("validate")
    p.add_argument("graph")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    # Logs go to stderr so stdout stays valid JSON
    logging.basicConfig(level=get_settings().log_level.upper(), stream=sys.stderr)

    cmd_map = {
        "bounds": cmd_bounds,
        "resolve-overlaps": cmd_resolve_overlaps,
        "order": cmd_order,
        "visibility": cmd_visibility,
        "merge": cmd_merge,
        "validate": cmd_validate,
    }
    cmd_map[args.command](args)


if __name__ == "__main__":
    main()
