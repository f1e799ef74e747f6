from fastapi.testclient import TestClient

from msgcontract.main import app, bus


client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_contracts_endpoint_lists_each_direction():
    r = client.get("/contracts")
    assert r.status_code == 200
    js = r.json()
    assert set(js["to_host"]) == {"join", "leave"}
    assert set(js["to_peer"]) == {"join", "error"}
    assert js["to_peer"]["join"]["etc?"] == {"key": "string"}


def test_join_round_trip():
    with client.websocket_connect("/ws/c1") as ws:
        ws.send_json({"type": "join", "payload": {"id": "1", "name": "a"}})
        out = ws.receive_json()
        assert out == {"type": "join", "payload": {"id": "1", "name": "a"}}

        # numeric names are allowed inbound and sent back as strings
        ws.send_json({"type": "join", "payload": {"id": "2", "name": 5}})
        out = ws.receive_json()
        assert out["payload"] == {"id": "2", "name": "5"}


def test_invalid_join_gets_error_frame():
    with client.websocket_connect("/ws/c2") as ws:
        ws.send_json({"type": "join", "payload": {"id": "4", "name": "a"}})
        out = ws.receive_json()
        assert out["type"] == "error"
        assert out["payload"]["message"] == "join"
        assert out["payload"]["path"] == "id"


def test_unknown_message_gets_error_frame():
    with client.websocket_connect("/ws/c3") as ws:
        ws.send_json({"type": "error", "payload": {}})
        out = ws.receive_json()
        assert out["type"] == "error"
        assert out["payload"]["reason"] == "unknown message for direction"


def test_leave_closes_connection_and_drops_channels():
    with client.websocket_connect("/ws/c4") as ws:
        ws.send_json({"type": "join", "payload": {"id": "3", "name": "z"}})
        assert ws.receive_json()["type"] == "join"
        ws.send_json({"type": "leave", "payload": {"userId": "3"}})
    assert "c4" not in bus.sessions
