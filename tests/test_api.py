"""Test the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from schematic_backend.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _pts(*coords) -> list[dict]:
    return [{"x": x, "y": y} for x, y in coords]


def _resistor(y: int = 10) -> dict:
    return {
        "type": "symbol",
        "id": "R1",
        "x": 10,
        "y": y,
        "width": 8,
        "height": 6,
        "pins": [
            {"id": "p1", "edge": "left", "offset": 0.5},
            {"id": "p2", "edge": "right", "offset": 0.5},
        ],
    }


def _bound_wire() -> dict:
    return {
        "type": "wire",
        "id": "w-bound",
        "points": _pts((10, 13), (4, 13), (4, 6)),
        "startBinding": {"symbolId": "R1", "pinId": "p1"},
    }


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_derived(client):
    response = client.post("/api/derived", json={"objects": [
        {"type": "wire", "id": "a", "points": _pts((0, 5), (10, 5)), "net": "VCC"},
        {"type": "wire", "id": "b", "points": _pts((5, 0), (5, 5))},
    ]})
    assert response.status_code == 200
    data = response.json()
    junctions = [o for o in data["derivedObjects"] if o["type"] == "wire-junction"]
    assert junctions == [{
        "type": "wire-junction",
        "id": "wjunc-5-5",
        "x": 5,
        "y": 5,
        "connectedWires": ["b", "a"],
        "net": "VCC",
        "style": "single",
        "derived": True,
        "selectable": False,
    }]
    assert [o["type"] for o in data["renderList"]][:2] == ["wire", "wire"]


def test_derived_rejects_unknown_type(client):
    response = client.post("/api/derived", json={"objects": [{"type": "ellipse", "id": "e"}]})
    assert response.status_code == 422


def test_derived_ignores_derived_entries_in_payload(client):
    response = client.post("/api/derived", json={"objects": [
        {"type": "wire", "id": "w", "points": _pts((0, 0), (10, 0))},
        {"type": "wire-noconnect", "id": "wnc-w-start", "x": 0, "y": 0, "wireId": "w", "endpoint": "start"},
        {"type": "junction", "id": "junc-1-1", "x": 1, "y": 1},
    ]})
    assert response.status_code == 200
    data = response.json()
    assert [o["id"] for o in data["derivedObjects"]] == ["wnc-w-start", "wnc-w-end"]
    assert len(data["renderList"]) == 3


def test_validate(client):
    response = client.post("/api/validate", json={"objects": [
        {"type": "wire", "id": "w", "points": _pts((0, 0), (3, 4))},
    ]})
    data = response.json()
    assert data["summary"]["valid"] is False
    assert data["issues"][0]["object_id"] == "w"


def test_summary(client):
    response = client.post("/api/summary", json={"objects": [_resistor(), _bound_wire()]})
    data = response.json()
    assert data["summary"]["objects_by_type"] == {"symbol": 1, "wire": 1}
    assert data["networks"][0]["pins"] == ["R1:p1"]


def test_merge(client):
    response = client.post("/api/wires/merge", json={
        "wire1": {"id": "a", "points": _pts((0, 0), (5, 0)), "net": "VCC",
                  "startBinding": {"symbolId": "X", "pinId": "1"}},
        "wire1IsStart": False,
        "wire2": {"id": "b", "points": _pts((5, 0), (5, 5)),
                  "endBinding": {"symbolId": "Y", "pinId": "1"}},
        "wire2IsStart": True,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["wire"]["points"] == _pts((0, 0), (5, 0), (5, 5))
    assert data["wire"]["net"] == "VCC"
    assert data["wire"]["startBinding"] == {"symbolId": "X", "pinId": "1"}
    assert data["deleted_ids"] == ["a", "b"]


def test_merge_mismatched_ends(client):
    response = client.post("/api/wires/merge", json={
        "wire1": {"id": "a", "points": _pts((0, 0), (5, 0))},
        "wire1IsStart": False,
        "wire2": {"id": "b", "points": _pts((6, 0), (9, 0))},
        "wire2IsStart": True,
    })
    assert response.status_code == 400


def test_extend(client):
    response = client.post("/api/wires/extend", json={
        "wire": {"id": "w", "points": _pts((0, 0), (5, 0))},
        "fromStart": False,
        "newPoints": _pts((5, 0), (5, 5)),
    })
    assert response.json()["wire"]["points"] == _pts((0, 0), (5, 0), (5, 5))


def test_rubberband(client):
    response = client.post("/api/wires/rubberband", json={
        "symbolId": "R1",
        "objects": [_resistor(y=12), _bound_wire()],
    })
    wires = response.json()["wires"]
    assert len(wires) == 1
    assert wires[0]["points"] == _pts((10, 15), (4, 15), (4, 6))


def test_rubberband_missing_symbol(client):
    response = client.post("/api/wires/rubberband", json={"symbolId": "nope", "objects": []})
    assert response.status_code == 404


def test_drag_segment(client):
    response = client.post("/api/wires/drag-segment", json={
        "wireId": "w-bound",
        "segmentIndex": 0,
        "target": {"x": 6, "y": 12},
        "objects": [_resistor(), _bound_wire()],
    })
    assert response.status_code == 200
    data = response.json()
    assert data["wire"]["points"][0] == {"x": 10, "y": 12}
    assert data["pin_moves"][0]["pin_id"] == "p1"


def test_drag_segment_rejected(client):
    response = client.post("/api/wires/drag-segment", json={
        "wireId": "w-bound",
        "segmentIndex": 0,
        "target": {"x": 6, "y": 8},
        "objects": [_resistor(), _bound_wire()],
    })
    assert response.status_code == 409


def test_drag_segment_missing_wire(client):
    response = client.post("/api/wires/drag-segment", json={
        "wireId": "nope",
        "segmentIndex": 0,
        "target": {"x": 0, "y": 0},
        "objects": [],
    })
    assert response.status_code == 404


def test_preview_path(client):
    response = client.post("/api/geometry/preview-path", json={
        "anchor": {"x": 0, "y": 0},
        "cursor": {"x": 4, "y": 3},
        "horizontalFirst": False,
    })
    assert response.json()["points"] == _pts((0, 0), (0, 3), (4, 3))
