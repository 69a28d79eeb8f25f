"""
End-to-end tests for the /ws endpoint through the TestClient.
"""
import pytest

from shared_utils.auth import create_access_token


def authenticate(ws, user):
    ws.send_json({"type": "authenticate", "userId": user.id, "token": create_access_token(user)})
    frame = ws.receive_json()
    assert frame["type"] == "authenticated"
    return frame


@pytest.mark.integration
class TestWebSocket:
    def test_connect_greeting_and_ping(self, client):
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json()["type"] == "connected"
            ws.send_json({"type": "ping"})
            assert ws.receive_json()["type"] == "pong"

    def test_malformed_frame_keeps_connection_open(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_text("not json")
            assert ws.receive_json() == {"type": "error", "message": "Invalid message format"}
            ws.send_json({"type": "ping"})
            assert ws.receive_json()["type"] == "pong"

    def test_binary_frame_keeps_connection_open(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_bytes(b'{"type": "ping"}')
            assert ws.receive_json() == {"type": "error", "message": "Invalid message format"}
            ws.send_json({"type": "ping"})
            assert ws.receive_json()["type"] == "pong"

    def test_auth_error(self, client, resident_user):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "authenticate", "userId": resident_user.id, "token": "bogus"})
            assert ws.receive_json()["type"] == "auth_error"

    def test_visitor_flow_between_guard_and_resident(self, client, guard_user, resident_user, sample_visitor, sample_flat):
        with client.websocket_connect("/ws") as guard, client.websocket_connect("/ws") as resident:
            guard.receive_json()
            resident.receive_json()
            authenticate(guard, guard_user)
            frame = authenticate(resident, resident_user)
            assert frame["role"] == "resident"

            guard.send_json({
                "type": "visitor_approval_request",
                "visitorId": sample_visitor.id,
                "flatId": sample_flat.id,
                "residentId": resident_user.id,
            })
            request = resident.receive_json()
            assert request["type"] == "visitor_approval_request"
            assert request["visitor"]["name"] == "Ravi Courier"

            resident.send_json({"type": "visitor_status_update", "visitorId": sample_visitor.id, "status": "approved"})
            update = guard.receive_json()
            assert update["type"] == "visitor_status_updated"
            assert update["visitor"]["status"] == "approved"
            assert update["visitor"]["approvedBy"] == resident_user.id

    def test_disconnect_unregisters(self, client, resident_user):
        before = client.get("/health").json()["connections"]
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            authenticate(ws, resident_user)
        assert client.get("/health").json()["connections"] == before
