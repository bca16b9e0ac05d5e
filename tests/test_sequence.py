"""Tests for sequence.py: start selection, BFS order, islands, cycles and the edge variant."""

from __future__ import annotations

import logging

from flowcore.models import Edge, Graph, Node
from flowcore.sequence import compute_edge_order, compute_order, find_start_node


def make_graph(node_ids: list[str], *edges: tuple[str, str]) -> Graph:
    """Build a Graph from node ids and (src, tgt) pairs."""
    return Graph(
        nodes=[Node(id=nid) for nid in node_ids],
        edges=[Edge(id=f"e{src}-{tgt}", source=src, target=tgt) for src, tgt in edges],
    )


class TestStartSelection:
    def test_first_root_in_input_order(self):
        graph = make_graph(["B", "A", "C"], ("B", "C"), ("A", "C"))
        assert find_start_node(graph) == "B"

    def test_skips_nodes_with_incoming_edges(self):
        graph = make_graph(["X", "Y", "Z"], ("Z", "X"))
        assert find_start_node(graph) == "Y"

    def test_all_nodes_have_parents(self):
        """A pure cycle falls back to the first node."""
        graph = make_graph(["A", "B", "C"], ("A", "B"), ("B", "C"), ("C", "A"))
        assert find_start_node(graph) == "A"

    def test_empty_graph(self):
        assert find_start_node(Graph()) is None


class TestComputeOrder:
    def test_linear_chain(self):
        """A → B → C starts at A and walks the chain."""
        order = compute_order(make_graph(["A", "B", "C"], ("A", "B"), ("B", "C")))
        assert order.start_id == "A"
        assert order.ordered_node_ids == ["A", "B", "C"]
        assert order.total_steps == 3

    def test_no_edges(self):
        """Without edges every node after the first is appended as disconnected."""
        order = compute_order(make_graph(["A", "B", "C"]))
        assert order.start_id == "A"
        assert order.ordered_node_ids == ["A", "B", "C"]

    def test_level_order_with_edge_tie_break(self):
        """Siblings follow edge input order, levels come before deeper nodes."""
        graph = make_graph(
            ["R", "D", "C", "B", "A"],
            ("R", "B"), ("R", "C"), ("B", "D"), ("C", "A"),
        )
        order = compute_order(graph)
        assert order.ordered_node_ids == ["R", "B", "C", "D", "A"]

    def test_disconnected_islands_appended(self):
        graph = make_graph(["A", "B", "X", "Y"], ("A", "B"), ("X", "Y"))
        order = compute_order(graph)
        # X is a root too, but only the first root starts the walk
        assert order.ordered_node_ids == ["A", "B", "X", "Y"]

    def test_island_with_only_back_edges(self):
        """Nodes unreachable from the start keep input order when appended."""
        graph = make_graph(["S", "Q", "P"], ("Q", "P"), ("P", "Q"))
        order = compute_order(graph)
        assert order.ordered_node_ids == ["S", "Q", "P"]

    def test_cycle_terminates(self):
        graph = make_graph(["A", "B", "C"], ("A", "B"), ("B", "C"), ("C", "A"), ("B", "A"))
        order = compute_order(graph)
        assert order.ordered_node_ids == ["A", "B", "C"]

    def test_self_loop(self):
        order = compute_order(make_graph(["A", "B"], ("A", "A"), ("A", "B")))
        assert order.ordered_node_ids == ["A", "B"]

    def test_coverage_exactly_once(self):
        """Every node id appears exactly once."""
        ids = [f"n{i}" for i in range(12)]
        edges = [(ids[i], ids[(i * 5) % 12]) for i in range(12)] + [(ids[3], ids[7])]
        order = compute_order(make_graph(ids, *edges))
        assert sorted(order.ordered_node_ids) == sorted(ids)
        assert len(order.ordered_node_ids) == len(set(order.ordered_node_ids))

    def test_deterministic(self):
        graph = make_graph(["A", "B", "C", "D"], ("A", "C"), ("A", "B"), ("C", "D"))
        assert compute_order(graph) == compute_order(graph)

    def test_empty_graph(self):
        order = compute_order(Graph())
        assert order.start_id is None
        assert order.ordered_node_ids == []
        assert order.total_steps == 0

    def test_single_node(self):
        order = compute_order(make_graph(["only"]))
        assert order.start_id == "only"
        assert order.ordered_node_ids == ["only"]

    def test_dangling_edges_ignored_and_reported(self, caplog):
        """A dangling edge does not count as incoming and is reported."""
        graph = make_graph(["A", "B"], ("ghost", "A"), ("A", "B"), ("B", "missing"))
        with caplog.at_level(logging.WARNING, logger="flowcore.validation"):
            order = compute_order(graph)
        assert order.start_id == "A"
        assert order.ordered_node_ids == ["A", "B"]
        assert [e.id for e in order.dropped_edges] == ["eghost-A", "eB-missing"]
        assert "eghost-A" in caplog.text

    def test_duplicate_node_ids_do_not_crash(self):
        graph = Graph(nodes=[Node(id="A"), Node(id="A"), Node(id="B")])
        order = compute_order(graph)
        assert order.ordered_node_ids == ["A", "B"]

    def test_to_dict(self):
        data = compute_order(make_graph(["A", "B"], ("A", "B"))).to_dict()
        assert data == {
            "start_id": "A",
            "ordered_node_ids": ["A", "B"],
            "total_steps": 2,
            "dropped_edge_ids": [],
        }


class TestComputeEdgeOrder:
    def test_edges_follow_node_order(self):
        graph = make_graph(
            ["R", "B", "C", "D"],
            ("C", "D"), ("R", "B"), ("R", "C"), ("B", "D"),
        )
        order = compute_edge_order(graph)
        assert order.start_id == "R"
        assert [e.id for e in order.ordered_edges] == ["eR-B", "eR-C", "eB-D", "eC-D"]

    def test_every_drawable_edge_once(self):
        graph = make_graph(["A", "B", "C"], ("A", "B"), ("B", "A"), ("C", "A"), ("A", "zzz"))
        order = compute_edge_order(graph)
        ids = [e.id for e in order.ordered_edges]
        assert sorted(ids) == ["eA-B", "eB-A", "eC-A"]

    def test_empty_graph(self):
        order = compute_edge_order(Graph())
        assert order.start_id is None
        assert order.ordered_edges == []
