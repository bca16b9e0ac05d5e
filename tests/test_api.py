"""Tests for the FastAPI surface in backend/main.py."""

from __future__ import annotations

import importlib
import logging

import pytest
from fastapi.testclient import TestClient

import backend.main
from backend.main import app

CHAIN = {
    "nodes": [{"id": "A"}, {"id": "B"}, {"id": "C"}],
    "edges": [{"source": "A", "target": "B"}, {"source": "B", "target": "C"}],
}


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}


def test_bounds(client: TestClient) -> None:
    response = client.post("/api/layout/bounds", json={"nodes": [{"id": "A", "position": {"x": 10, "y": 10}}]})
    assert response.status_code == 200
    assert response.json() == {"min_x": 10, "min_y": 10, "max_x": 190, "max_y": 90}


def test_resolve_overlaps(client: TestClient) -> None:
    """Equal overlap pushes the second node down by its height plus the gap."""
    payload = {
        "nodes": [
            {"id": "P", "position": {"x": 0, "y": 0}, "size": {"width": 100, "height": 50}},
            {"id": "Q", "position": {"x": 50, "y": 0}, "size": {"width": 100, "height": 50}},
        ]
    }
    nodes = client.post("/api/layout/resolve-overlaps", json=payload).json()["nodes"]
    assert nodes[1]["position"] == {"x": 50, "y": 70}


def test_extent_and_minimap(client: TestClient) -> None:
    nodes = [{"id": "A", "size": {"width": 100, "height": 100}}]
    extent = client.post("/api/layout/extent", json={"nodes": nodes}).json()
    assert extent["min_x"] == -300
    minimap = client.post("/api/layout/minimap", json={"nodes": nodes, "visible_width": 800, "visible_height": 600})
    assert minimap.json() == {"show": False}


def test_minimap_rejects_empty_viewport(client: TestClient) -> None:
    response = client.post("/api/layout/minimap", json={"nodes": [], "visible_width": 0, "visible_height": 600})
    assert response.status_code == 400


def test_available_position(client: TestClient) -> None:
    payload = {
        "start": {"x": 94, "y": 0},
        "size": {"width": 50, "height": 50},
        "occupied": [{"id": "A", "size": {"width": 100, "height": 100}}],
    }
    assert client.post("/api/layout/available-position", json=payload).json() == {"x": 100, "y": 6}


def test_order(client: TestClient) -> None:
    data = client.post("/api/presentation/order", json=CHAIN).json()
    assert data["start_id"] == "A"
    assert data["ordered_node_ids"] == ["A", "B", "C"]


def test_edge_order(client: TestClient) -> None:
    data = client.post("/api/presentation/order?variant=edges", json=CHAIN).json()
    assert [e["id"] for e in data["ordered_edges"]] == ["eA-B", "eB-C"]


def test_visibility(client: TestClient) -> None:
    data = client.post("/api/presentation/visibility", json={"graph": CHAIN, "step": 1}).json()
    assert data["visible_node_ids"] == ["A", "B"]
    assert data["active_node_id"] == "B"
    assert [e["id"] for e in data["visible_edges"]] == ["eA-B"]


def test_merge(client: TestClient) -> None:
    payload = {
        "existing": {"nodes": [{"id": "A"}]},
        "proposal": {
            "summary": "two steps",
            "nodes": [{"id": "X"}, {"id": "Y", "position": {"x": 0, "y": 200}}],
            "edges": [{"source": "X", "target": "Y"}, {"source": "X", "target": "missing"}],
        },
        "next_id_seed": 5,
        "insertion_anchor": {"x": 0, "y": 0},
    }
    data = client.post("/api/proposals/merge", json=payload).json()
    assert [n["id"] for n in data["merged_graph"]["nodes"]] == ["A", "5", "6"]
    assert data["new_next_id_seed"] == 7
    assert data["dropped_edge_ids"] == ["eX-missing"]
    assert data["merged_graph"]["edges"][0]["source_anchor"] == "bottom"


def test_merge_rejects_negative_seed(client: TestClient) -> None:
    payload = {"proposal": {"nodes": []}, "next_id_seed": -1}
    assert client.post("/api/proposals/merge", json=payload).status_code == 400


def test_validate(client: TestClient) -> None:
    graph = {"nodes": [{"id": "A"}], "edges": [{"source": "A", "target": "B"}]}
    data = client.post("/api/graph/validate", json=graph).json()
    assert data["summary"]["valid"] is False
    assert data["issues"][0]["edge_id"] == "eA-B"


def test_command(client: TestClient) -> None:
    payload = {"graph": CHAIN, "command": {"command": "update_node_label", "id": "B", "text": "Review"}}
    data = client.post("/api/graph/commands", json=payload).json()
    assert data["nodes"][1]["label"] == "Review"


def test_command_unknown_node(client: TestClient) -> None:
    payload = {"graph": CHAIN, "command": {"command": "update_node_label", "id": "Z", "text": "x"}}
    assert client.post("/api/graph/commands", json=payload).status_code == 404


def test_malformed_graph_rejected(client: TestClient) -> None:
    response = client.post("/api/presentation/order", json={"nodes": [{"id": "A", "position": {"x": "left"}}]})
    assert response.status_code == 422


def test_import_leaves_logging_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    """Loading the app module does not configure the root logger."""
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    importlib.reload(backend.main)
    assert calls == []


def test_run_configures_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    started: list[tuple] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setattr("uvicorn.run", lambda app, host, port: started.append((host, port)))
    backend.main.run()
    assert calls == [{"level": backend.main.settings.log_level.upper()}]
    assert started == [(backend.main.settings.api_host, backend.main.settings.api_port)]
