from fastapi.testclient import TestClient

from blobs import api
from blobs.api import app
from blobs.config import MAX_VERTICES
from blobs.path import to_path
from blobs.ring import new_ring


def test_health():
    with TestClient(app) as client:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


def test_get_config_returns_config_and_params():
    with TestClient(app) as client:
        response = client.get("/config")
        assert response.status_code == 200
        data = response.json()
        assert "config" in data
        assert data["params"]["edge_length"] == 0.5
        assert data["params"]["centering"] == 0.25
        assert data["canvas_center"] == [500.0, 500.0]


def test_apply_preset_rebuilds_scene():
    with TestClient(app) as client:
        response = client.post("/presets/single")
        assert response.status_code == 200
        assert response.json()["config"]["vertex_counts"] == [3]

        blobs = client.get("/blobs").json()
        assert len(blobs) == 1
        assert blobs[0]["vertex_count"] == 3
        assert blobs[0]["path"].startswith("M ")


def test_unknown_preset_is_404():
    with TestClient(app) as client:
        response = client.post("/presets/nope")
        assert response.status_code == 404


def test_get_blob_includes_metrics_and_404s_out_of_range():
    with TestClient(app) as client:
        client.post("/presets/trio")
        response = client.get("/blobs/1")
        assert response.status_code == 200
        data = response.json()
        assert data["vertex_count"] == 12
        assert data["metrics"]["finite"] is True

        assert client.get("/blobs/3").status_code == 404


def test_post_config_changes_vertex_mapping():
    with TestClient(app) as client:
        response = client.post("/config", json={"n_blobs": 3, "vertex_step": 4})
        assert response.status_code == 200
        assert response.json()["config"]["vertex_counts"] == [0, 4, 8]


def test_post_config_rejects_negative_radius():
    with TestClient(app) as client:
        response = client.post("/config", json={"radius": -1.0})
        assert response.status_code == 422


def test_scene_svg():
    with TestClient(app) as client:
        client.post("/presets/trio")
        response = client.get("/scene.svg")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert response.text.count("<path ") == 3


def test_websocket_streams_state_and_reports_errors():
    with TestClient(app) as client:
        client.post("/presets/single")
        with client.websocket_connect("/ws") as websocket:
            message = websocket.receive_json()
            assert message["type"] == "state"
            assert len(message["payload"]["blobs"]) == 1

            websocket.send_json({"type": "bogus"})
            for _ in range(100):
                message = websocket.receive_json()
                if message["type"] == "error":
                    break
            assert message["type"] == "error"


def _slow_scene(client, vertex_counts):
    # one-second ticks leave the rings alone for the rest of the test
    response = client.post("/config", json={"vertex_counts": vertex_counts, "tick_interval": 1.0})
    assert response.status_code == 200


def _receive_until(websocket, predicate, limit=100):
    for _ in range(limit):
        message = websocket.receive_json()
        if predicate(message):
            return message
    raise AssertionError("expected message never arrived")


def test_post_config_rejects_oversized_blobs():
    with TestClient(app) as client:
        response = client.post("/config", json={"n_blobs": 200, "vertex_step": 100})
        assert response.status_code == 400

        response = client.post("/config", json={"vertex_counts": [10 ** 6]})
        assert response.status_code == 422

        response = client.post("/config", json={"vertex_counts": [3, MAX_VERTICES], "tick_interval": 1.0})
        assert response.status_code == 200


def test_post_reset_restores_initial_rings():
    with TestClient(app) as client:
        _slow_scene(client, [3, 12])
        for _ in range(3):
            api._scene.tick(1)
        assert client.get("/blobs/1").json()["ticks"] == 3

        response = client.post("/reset")
        assert response.status_code == 200
        assert response.json() == {"status": "reset"}

        data = client.get("/blobs/1").json()
        config = api._scene.config
        assert data["ticks"] == 0
        assert data["path"] == to_path(new_ring(12, config.radius, config.canvas_center))


def test_websocket_reset_restores_initial_rings():
    with TestClient(app) as client:
        _slow_scene(client, [5])
        for _ in range(4):
            api._scene.tick(0)
        config = api._scene.config
        initial = to_path(new_ring(5, config.radius, config.canvas_center))

        with client.websocket_connect("/ws") as websocket:
            message = websocket.receive_json()
            assert message["payload"]["blobs"][0]["ticks"] == 4

            websocket.send_json({"type": "reset"})
            message = _receive_until(
                websocket,
                lambda m: m["type"] == "state" and m["payload"]["blobs"][0]["ticks"] == 0,
            )
            assert message["payload"]["blobs"][0]["path"] == initial


def test_websocket_use_preset_switches_scene():
    with TestClient(app) as client:
        client.post("/presets/single")
        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "use_preset", "name": "trio"})
            message = _receive_until(
                websocket,
                lambda m: m["type"] == "state" and len(m["payload"]["blobs"]) == 3,
            )
            counts = [b["vertex_count"] for b in message["payload"]["blobs"]]
            assert counts == [3, 12, 48]


def test_websocket_survives_malformed_messages():
    with TestClient(app) as client:
        client.post("/presets/single")
        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()

            websocket.send_json([1, 2])
            error = _receive_until(websocket, lambda m: m["type"] == "error")
            assert "JSON object" in error["detail"]

            websocket.send_json({"type": "use_preset", "name": ["x"]})
            error = _receive_until(websocket, lambda m: m["type"] == "error")
            assert "string" in error["detail"]

            websocket.send_text("{not json")
            _receive_until(websocket, lambda m: m["type"] == "error")

            # connection is still usable
            websocket.send_json({"type": "use_preset", "name": "trio"})
            _receive_until(
                websocket,
                lambda m: m["type"] == "state" and len(m["payload"]["blobs"]) == 3,
            )
