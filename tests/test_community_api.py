"""
Tests for messaging, finance, amenities, announcements/polls, staff,
security alerts, documents, inventory, dashboard and audit endpoints.
"""
from datetime import datetime, timedelta

import pytest

from audit.models import AuditLog


class TestMessages:
    def test_send_and_read_conversation(self, client, auth_headers, guard_headers, resident_user, guard_user):
        resp = client.post("/api/messages", json={"receiverId": guard_user.id, "content": "Expecting a parcel"}, headers=auth_headers)
        assert resp.status_code == 201
        message = resp.json()
        assert message["isGroupMessage"] is False
        assert message["isRead"] is False

        client.post("/api/messages", json={"receiverId": resident_user.id, "content": "Noted"}, headers=guard_headers)

        convo = client.get(f"/api/messages/{guard_user.id}", headers=auth_headers).json()
        assert [m["content"] for m in convo] == ["Expecting a parcel", "Noted"]

    def test_only_receiver_marks_read(self, client, auth_headers, guard_headers, guard_user, db_session):
        message = client.post("/api/messages", json={"receiverId": guard_user.id, "content": "Hi"}, headers=auth_headers).json()

        assert client.post(f"/api/messages/{message['id']}/read", headers=auth_headers).status_code == 403

        resp = client.post(f"/api/messages/{message['id']}/read", headers=guard_headers)
        assert resp.status_code == 200
        assert resp.json()["isRead"] is True
        assert resp.json()["readAt"] is not None

        audits = db_session.query(AuditLog).filter(AuditLog.entity == "message").order_by(AuditLog.id).all()
        assert [a.action for a in audits] == ["create_message", "mark_message_read"]
        assert audits[1].user_id == guard_user.id
        assert audits[1].new_data == {"is_read": True}

        # Marking again is a no-op and writes nothing
        assert client.post(f"/api/messages/{message['id']}/read", headers=guard_headers).status_code == 200
        assert db_session.query(AuditLog).filter(AuditLog.action == "mark_message_read").count() == 1

    def test_message_to_other_society_rejected(self, client, auth_headers, outsider_user):
        resp = client.post("/api/messages", json={"receiverId": outsider_user.id, "content": "Hi"}, headers=auth_headers)
        assert resp.status_code == 404

    def test_group_message(self, client, auth_headers):
        resp = client.post("/api/messages", json={"content": "Society meeting at 6"}, headers=auth_headers)
        assert resp.status_code == 201
        assert resp.json()["isGroupMessage"] is True


class TestFinance:
    def _bill(self, client, headers, flat_id, **overrides):
        payload = {
            "flatId": flat_id,
            "month": 5,
            "year": 2024,
            "baseAmount": 2500,
            "additionalCharges": {"water": 300.5, "parking": 200},
            "lateFee": 0,
            "dueDate": "2024-05-10T00:00:00",
        }
        payload.update(overrides)
        return client.post("/api/finance/bills", json=payload, headers=headers)

    def test_create_bill_computes_total(self, client, admin_headers, sample_flat):
        resp = self._bill(client, admin_headers, sample_flat.id)
        assert resp.status_code == 201
        body = resp.json()
        assert body["totalAmount"] == pytest.approx(3000.5)
        assert body["status"] == "pending"

    def test_residents_cannot_create_bills(self, client, auth_headers, sample_flat):
        assert self._bill(client, auth_headers, sample_flat.id).status_code == 403

    def test_partial_then_full_payment(self, client, admin_headers, auth_headers, sample_flat):
        bill = self._bill(client, admin_headers, sample_flat.id).json()

        resp = client.post(f"/api/finance/bills/{bill['id']}/pay", json={"paymentMethod": "upi", "amount": 1000}, headers=auth_headers)
        assert resp.json()["status"] == "partial"

        resp = client.post(f"/api/finance/bills/{bill['id']}/pay", json={"paymentMethod": "upi", "transactionId": "T1"}, headers=auth_headers)
        assert resp.json()["status"] == "paid"
        assert resp.json()["transactionId"] == "T1"

        resp = client.post(f"/api/finance/bills/{bill['id']}/pay", json={"paymentMethod": "upi"}, headers=auth_headers)
        assert resp.status_code == 400

    def test_bill_month_filter(self, client, admin_headers, sample_flat):
        self._bill(client, admin_headers, sample_flat.id)
        self._bill(client, admin_headers, sample_flat.id, month=6)
        bills = client.get("/api/finance/bills?month=6&year=2024", headers=admin_headers).json()
        assert [b["month"] for b in bills] == [6]

    def test_expenses(self, client, admin_headers, auth_headers, admin_user):
        resp = client.post(
            "/api/finance/expenses",
            json={"category": "security", "description": "Guard salaries", "amount": 45000},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["approvedBy"] == admin_user.id
        assert len(client.get("/api/finance/expenses?category=security", headers=auth_headers).json()) == 1


class TestAmenities:
    @pytest.fixture
    def clubhouse(self, client, admin_headers):
        resp = client.post("/api/amenities", json={"name": "Clubhouse", "hourlyRate": 500, "capacity": 50}, headers=admin_headers)
        assert resp.status_code == 201
        return resp.json()

    def _book(self, client, headers, amenity_id, flat_id, start, hours=2, guests=10):
        return client.post(
            "/api/amenity-bookings",
            json={
                "amenityId": amenity_id,
                "flatId": flat_id,
                "startTime": start.isoformat(),
                "endTime": (start + timedelta(hours=hours)).isoformat(),
                "guests": guests,
            },
            headers=headers,
        )

    def test_booking_charges_hourly_rate(self, client, auth_headers, clubhouse, sample_flat):
        start = datetime(2030, 1, 1, 18, 0)
        resp = self._book(client, auth_headers, clubhouse["id"], sample_flat.id, start)
        assert resp.status_code == 201
        assert resp.json()["totalAmount"] == pytest.approx(1000)
        assert resp.json()["status"] == "confirmed"

    def test_overlapping_booking_conflicts(self, client, auth_headers, clubhouse, sample_flat):
        start = datetime(2030, 1, 1, 18, 0)
        self._book(client, auth_headers, clubhouse["id"], sample_flat.id, start)
        resp = self._book(client, auth_headers, clubhouse["id"], sample_flat.id, start + timedelta(hours=1))
        assert resp.status_code == 409

        resp = self._book(client, auth_headers, clubhouse["id"], sample_flat.id, start + timedelta(hours=2))
        assert resp.status_code == 201

    def test_booking_must_end_after_start(self, client, auth_headers, clubhouse, sample_flat):
        resp = self._book(client, auth_headers, clubhouse["id"], sample_flat.id, datetime(2030, 1, 1, 18, 0), hours=0)
        assert resp.status_code == 400

    def test_capacity_enforced(self, client, auth_headers, clubhouse, sample_flat):
        resp = self._book(client, auth_headers, clubhouse["id"], sample_flat.id, datetime(2030, 1, 2, 18, 0), guests=51)
        assert resp.status_code == 400


class TestAnnouncementsAndPolls:
    def test_announcements_hide_expired(self, client, admin_headers, auth_headers):
        client.post("/api/announcements", json={"title": "Water cut", "content": "10am-2pm"}, headers=admin_headers)
        client.post(
            "/api/announcements",
            json={"title": "Old news", "content": "...", "expiresAt": "2000-01-01T00:00:00"},
            headers=admin_headers,
        )
        titles = [a["title"] for a in client.get("/api/announcements", headers=auth_headers).json()]
        assert titles == ["Water cut"]

    def test_residents_cannot_announce(self, client, auth_headers):
        resp = client.post("/api/announcements", json={"title": "x", "content": "y"}, headers=auth_headers)
        assert resp.status_code == 403

    def test_poll_vote_and_results(self, client, admin_headers, auth_headers, guard_headers):
        expires = (datetime.utcnow() + timedelta(days=3)).isoformat()
        poll = client.post(
            "/api/polls",
            json={"question": "Paint colour?", "options": ["White", "Beige", "Grey"], "expiresAt": expires},
            headers=admin_headers,
        ).json()

        assert client.post(f"/api/polls/{poll['id']}/vote", json={"selectedOptions": [1]}, headers=auth_headers).status_code == 201
        assert client.post(f"/api/polls/{poll['id']}/vote", json={"selectedOptions": [1]}, headers=guard_headers).status_code == 201

        duplicate = client.post(f"/api/polls/{poll['id']}/vote", json={"selectedOptions": [0]}, headers=auth_headers)
        assert duplicate.status_code == 409

        results = client.get(f"/api/polls/{poll['id']}/results", headers=auth_headers).json()
        assert results["totalVotes"] == 2
        assert [r["votes"] for r in results["results"]] == [0, 2, 0]

    def test_single_choice_poll_rejects_multiple(self, client, admin_headers, auth_headers):
        expires = (datetime.utcnow() + timedelta(days=1)).isoformat()
        poll = client.post(
            "/api/polls",
            json={"question": "Gym hours?", "options": ["6-10", "6-12"], "expiresAt": expires},
            headers=admin_headers,
        ).json()
        resp = client.post(f"/api/polls/{poll['id']}/vote", json={"selectedOptions": [0, 1]}, headers=auth_headers)
        assert resp.status_code == 400

    def test_poll_must_expire_in_future(self, client, admin_headers):
        resp = client.post(
            "/api/polls",
            json={"question": "Late?", "options": ["a", "b"], "expiresAt": "2000-01-01T00:00:00"},
            headers=admin_headers,
        )
        assert resp.status_code == 400


class TestStaff:
    @pytest.fixture
    def cleaner(self, client, admin_headers):
        resp = client.post(
            "/api/staff",
            json={"name": "Lakshmi", "phone": "9876501234", "category": "housekeeping"},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        return resp.json()

    def test_attendance_upserts_one_row_per_day(self, client, guard_headers, cleaner):
        first = client.post(f"/api/staff/{cleaner['id']}/attendance", json={"status": "present"}, headers=guard_headers).json()
        assert first["checkInTime"] is not None

        second = client.post(f"/api/staff/{cleaner['id']}/attendance", json={"status": "absent"}, headers=guard_headers).json()
        assert second["id"] == first["id"]
        assert second["status"] == "absent"
        assert second["checkOutTime"] is not None
        assert second["hoursWorked"] is not None

    def test_residents_cannot_mark_attendance(self, client, auth_headers, cleaner):
        resp = client.post(f"/api/staff/{cleaner['id']}/attendance", json={"status": "present"}, headers=auth_headers)
        assert resp.status_code == 403

    def test_update_staff(self, client, admin_headers, cleaner):
        resp = client.patch(f"/api/staff/{cleaner['id']}", json={"shiftTiming": "6am-2pm"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["shiftTiming"] == "6am-2pm"


class TestSecurityAlerts:
    def test_alert_lifecycle(self, client, auth_headers, guard_headers, guard_user):
        alert = client.post("/api/security/alert", json={"type": "medical", "location": "B-204"}, headers=auth_headers).json()
        assert alert["status"] == "active"

        resp = client.post(f"/api/security/alerts/{alert['id']}/acknowledge", headers=guard_headers)
        assert resp.json()["status"] == "acknowledged"
        assert resp.json()["acknowledgedBy"] == guard_user.id

        resp = client.post(f"/api/security/alerts/{alert['id']}/resolve", json={"notes": "Ambulance arrived"}, headers=guard_headers)
        assert resp.json()["status"] == "resolved"
        assert resp.json()["notes"] == "Ambulance arrived"

        assert client.post(f"/api/security/alerts/{alert['id']}/acknowledge", headers=guard_headers).status_code == 400

    def test_residents_cannot_acknowledge(self, client, auth_headers):
        alert = client.post("/api/security/alert", json={"type": "panic"}, headers=auth_headers).json()
        assert client.post(f"/api/security/alerts/{alert['id']}/acknowledge", headers=auth_headers).status_code == 403


class TestDocumentsAndInventory:
    def test_admin_only_documents_hidden(self, client, admin_headers, auth_headers):
        for title, access in (("Bylaws", "all"), ("Legal notice", "admin")):
            client.post(
                "/api/documents",
                json={"title": title, "category": "legal", "fileUrl": f"/files/{title}.pdf", "fileName": f"{title}.pdf", "accessLevel": access},
                headers=admin_headers,
            )
        assert [d["title"] for d in client.get("/api/documents", headers=auth_headers).json()] == ["Bylaws"]
        assert len(client.get("/api/documents?category=all", headers=admin_headers).json()) == 2
        assert client.get("/api/documents?category=finance", headers=admin_headers).json() == []

    def test_inventory(self, client, admin_headers, auth_headers):
        resp = client.post("/api/inventory", json={"name": "Generator", "category": "electrical"}, headers=admin_headers)
        assert resp.status_code == 201
        assert [i["name"] for i in client.get("/api/inventory", headers=auth_headers).json()] == ["Generator"]
        assert client.post("/api/inventory", json={"name": "x", "category": "y"}, headers=auth_headers).status_code == 403


class TestDashboardAndAudit:
    def test_dashboard_stats(self, client, auth_headers, sample_visitor):
        stats = client.get("/api/dashboard/stats", headers=auth_headers).json()
        assert stats["pendingApprovals"] == 1
        assert stats["todaysVisitors"] == 1
        assert stats["visitorsInside"] == 0

    def test_audit_logs_for_admin_and_auditor(self, client, admin_headers, auditor_headers, auth_headers, sample_visitor):
        client.patch(f"/api/visitors/{sample_visitor.id}", json={"status": "approved"}, headers=auth_headers)

        logs = client.get("/api/audit-logs?entity=visitor", headers=auditor_headers).json()
        assert [l["action"] for l in logs] == ["update_visitor"]
        assert client.get("/api/audit-logs", headers=admin_headers).status_code == 200
        assert client.get("/api/audit-logs", headers=auth_headers).status_code == 403
