"""
Tests for /api/complaints endpoints.
"""
import pytest


@pytest.fixture
def sample_complaint(client, auth_headers, sample_flat):
    resp = client.post(
        "/api/complaints",
        json={
            "title": "Leaking pipe",
            "description": "Water leaking in kitchen",
            "category": "plumbing",
            "flatId": sample_flat.id,
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.json()


class TestComplaintsAPI:
    def test_create_complaint(self, sample_complaint, resident_user):
        assert sample_complaint["status"] == "open"
        assert sample_complaint["raisedBy"] == resident_user.id
        assert sample_complaint["priority"] == "medium"

    def test_list_with_filters(self, client, auth_headers, sample_complaint):
        assert len(client.get("/api/complaints?status=open", headers=auth_headers).json()) == 1
        assert client.get("/api/complaints?category=electrical", headers=auth_headers).json() == []

    def test_resident_cannot_resolve(self, client, auth_headers, admin_headers, sample_complaint):
        cid = sample_complaint["id"]
        assert client.patch(f"/api/complaints/{cid}", json={"status": "in_progress"}, headers=auth_headers).status_code == 200

        resp = client.patch(f"/api/complaints/{cid}", json={"status": "resolved"}, headers=auth_headers)
        assert resp.status_code == 403

        resp = client.patch(f"/api/complaints/{cid}", json={"status": "resolved"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["resolvedAt"] is not None

    def test_illegal_transition(self, client, admin_headers, sample_complaint):
        resp = client.patch(f"/api/complaints/{sample_complaint['id']}", json={"status": "closed"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_escalation_counts(self, client, admin_headers, sample_complaint):
        resp = client.patch(f"/api/complaints/{sample_complaint['id']}", json={"status": "escalated"}, headers=admin_headers)
        assert resp.json()["escalationLevel"] == 1

    def test_assign_to_foreign_user_rejected(self, client, admin_headers, outsider_user, sample_complaint):
        resp = client.patch(
            f"/api/complaints/{sample_complaint['id']}",
            json={"assignedTo": outsider_user.id},
            headers=admin_headers,
        )
        assert resp.status_code == 404

    def test_feedback_after_resolution(self, client, auth_headers, admin_headers, sample_complaint):
        cid = sample_complaint["id"]
        resp = client.post(f"/api/complaints/{cid}/feedback", json={"rating": 4}, headers=auth_headers)
        assert resp.status_code == 400

        client.patch(f"/api/complaints/{cid}", json={"status": "in_progress"}, headers=admin_headers)
        client.patch(f"/api/complaints/{cid}", json={"status": "resolved"}, headers=admin_headers)

        resp = client.post(f"/api/complaints/{cid}/feedback", json={"rating": 4}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["satisfactionRating"] == 4

        resp = client.post(f"/api/complaints/{cid}/feedback", json={"rating": 9}, headers=auth_headers)
        assert resp.status_code == 422

    def test_only_raiser_can_rate(self, client, admin_headers, sample_complaint):
        resp = client.post(f"/api/complaints/{sample_complaint['id']}/feedback", json={"rating": 5}, headers=admin_headers)
        assert resp.status_code == 403
