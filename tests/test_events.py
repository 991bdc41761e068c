"""Tests for the event lifecycle: proposals, approvals, registration, feedback, certificates and winners.

Covers:
- Authorization hook: club admin of the owning club proposes and runs events,
  college admins approve and reject
- Status transitions (PENDING -> APPROVED | REJECTED, REJECTED -> PENDING, APPROVED -> COMPLETED)
- Registration: idempotent, counter moves with the row, capacity enforced
- Feedback from registered attendees only, one entry each
"""
from tests.conftest import approve_event, create_test_event, signup


def _register(client, event_id: str, user_id: str):
    return client.post(f"/api/events/{event_id}/register", json={"user_id": user_id})


def _set_status(client, event_id: str, actor_id: str, status: str, reason: str = None):
    return client.post(f"/api/events/{event_id}/status?actor_user_id={actor_id}", json={
        "status": status, "reason": reason,
    })


class TestProposal:
    """Proposals start PENDING and carry the club's name."""

    def test_propose_event(self, client, campus):
        event = create_test_event(client, campus["admin"]["user_id"], campus["club"]["club_id"], title="AI Workshop")
        assert event["status"] == "PENDING"
        assert event["organizer"] == campus["club"]["name"]
        assert event["registered_count"] == 0

    def test_student_cannot_propose(self, client, campus):
        resp = client.post(f"/api/events/?actor_user_id={campus['student']['user_id']}", json={
            "title": "Party", "club_id": campus["club"]["club_id"],
            "date": "2026-11-20", "time": "20:00", "capacity": 10,
        })
        assert resp.status_code == 403

    def test_invalid_time(self, client, campus):
        resp = client.post(f"/api/events/?actor_user_id={campus['admin']['user_id']}", json={
            "title": "Late", "club_id": campus["club"]["club_id"],
            "date": "2026-11-20", "time": "25:00", "capacity": 10,
        })
        assert resp.status_code == 422

    def test_capacity_cannot_exceed_venue(self, client, campus):
        venue = client.post(f"/api/venues/?actor_user_id={campus['college_admin']}", json={
            "name": "Computer Lab 3", "capacity": 60,
        }).json()
        resp = client.post(f"/api/events/?actor_user_id={campus['admin']['user_id']}", json={
            "title": "Too Big", "club_id": campus["club"]["club_id"],
            "date": "2026-11-20", "time": "10:00", "capacity": 61, "venue_id": venue["venue_id"],
        })
        assert resp.status_code == 400


class TestStatusTransitions:
    def test_approve(self, client, campus):
        event = create_test_event(client, campus["admin"]["user_id"], campus["club"]["club_id"])
        approved = approve_event(client, campus["college_admin"], event["event_id"])
        assert approved["status"] == "APPROVED"

    def test_club_admin_cannot_approve(self, client, campus):
        event = create_test_event(client, campus["admin"]["user_id"], campus["club"]["club_id"])
        resp = _set_status(client, event["event_id"], campus["admin"]["user_id"], "APPROVED")
        assert resp.status_code == 403

    def test_reject_requires_reason(self, client, campus):
        event = create_test_event(client, campus["admin"]["user_id"], campus["club"]["club_id"])
        resp = _set_status(client, event["event_id"], campus["college_admin"], "REJECTED")
        assert resp.status_code == 400

        resp = _set_status(client, event["event_id"], campus["college_admin"], "REJECTED", "Does not meet criteria")
        assert resp.status_code == 200
        assert resp.json()["rejection_reason"] == "Does not meet criteria"

    def test_resubmitting_rejected_event(self, client, campus):
        admin_id = campus["admin"]["user_id"]
        event = create_test_event(client, admin_id, campus["club"]["club_id"])
        _set_status(client, event["event_id"], campus["college_admin"], "REJECTED", "Too vague")

        resp = client.patch(f"/api/events/{event['event_id']}?actor_user_id={admin_id}", json={
            "description": "Now with an agenda",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "PENDING"
        assert data["rejection_reason"] is None
        assert data["description"] == "Now with an agenda"

    def test_complete_approved_event(self, client, campus):
        resp = _set_status(client, campus["event"]["event_id"], campus["admin"]["user_id"], "COMPLETED")
        assert resp.status_code == 200
        assert resp.json()["status"] == "COMPLETED"

    def test_cannot_complete_pending_event(self, client, campus):
        event = create_test_event(client, campus["admin"]["user_id"], campus["club"]["club_id"])
        resp = _set_status(client, event["event_id"], campus["admin"]["user_id"], "COMPLETED")
        assert resp.status_code == 400

    def test_cannot_approve_twice(self, client, campus):
        resp = _set_status(client, campus["event"]["event_id"], campus["college_admin"], "APPROVED")
        assert resp.status_code == 400

    def test_completed_event_cannot_be_edited(self, client, campus):
        admin_id = campus["admin"]["user_id"]
        _set_status(client, campus["event"]["event_id"], admin_id, "COMPLETED")
        resp = client.patch(f"/api/events/{campus['event']['event_id']}?actor_user_id={admin_id}", json={
            "title": "Renamed",
        })
        assert resp.status_code == 400

    def test_null_for_required_field_rejected(self, client, campus):
        admin_id = campus["admin"]["user_id"]
        url = f"/api/events/{campus['event']['event_id']}?actor_user_id={admin_id}"
        assert client.patch(url, json={"capacity": None}).status_code == 422
        assert client.patch(url, json={"title": None}).status_code == 422
        event = client.get(f"/api/events/{campus['event']['event_id']}").json()
        assert event["capacity"] == 2
        assert event["title"] == campus["event"]["title"]

    def test_null_clears_optional_field(self, client, campus):
        admin_id = campus["admin"]["user_id"]
        url = f"/api/events/{campus['event']['event_id']}?actor_user_id={admin_id}"
        resp = client.patch(url, json={"image": None})
        assert resp.status_code == 200
        assert resp.json()["image"] is None

    def test_list_by_status(self, client, campus):
        create_test_event(client, campus["admin"]["user_id"], campus["club"]["club_id"], title="Pending One")
        pending = client.get("/api/events/?status=PENDING").json()
        assert [e["title"] for e in pending] == ["Pending One"]
        assert client.get("/api/events/?status=LOST").status_code == 400


class TestRegistration:
    def test_register(self, client, campus):
        event_id, student_id = campus["event"]["event_id"], campus["student"]["user_id"]
        resp = _register(client, event_id, student_id)
        assert resp.status_code == 200
        data = resp.json()
        assert data["event"]["registered_count"] == 1
        assert data["event_ids"] == [event_id]

        assert client.get(f"/api/users/{student_id}/registrations").json() == [event_id]
        users = client.get(f"/api/events/{event_id}/registrations").json()
        assert [u["user_id"] for u in users] == [student_id]

    def test_register_twice_counts_once(self, client, campus):
        event_id, student_id = campus["event"]["event_id"], campus["student"]["user_id"]
        _register(client, event_id, student_id)
        resp = _register(client, event_id, student_id)
        assert resp.status_code == 200
        assert resp.json()["event"]["registered_count"] == 1

    def test_full_event(self, client, campus):
        event_id = campus["event"]["event_id"]  # capacity 2
        for name in ("One", "Two"):
            assert _register(client, event_id, signup(client, name=name)["user_id"]).status_code == 200
        resp = _register(client, event_id, campus["student"]["user_id"])
        assert resp.status_code == 409

    def test_pending_event_closed(self, client, campus):
        event = create_test_event(client, campus["admin"]["user_id"], campus["club"]["club_id"])
        resp = _register(client, event["event_id"], campus["student"]["user_id"])
        assert resp.status_code == 409

    def test_capacity_cannot_drop_below_registrations(self, client, campus):
        event_id = campus["event"]["event_id"]
        _register(client, event_id, campus["student"]["user_id"])
        _register(client, event_id, signup(client, name="Other")["user_id"])
        resp = client.patch(f"/api/events/{event_id}?actor_user_id={campus['admin']['user_id']}", json={
            "capacity": 1,
        })
        assert resp.status_code == 400


class TestFeedback:
    def _feedback(self, client, event_id, user_id, rating=5, comment="Great!"):
        return client.post(f"/api/events/{event_id}/feedback", json={
            "user_id": user_id, "rating": rating, "comment": comment,
        })

    def test_registered_user_leaves_feedback(self, client, campus):
        event_id, student_id = campus["event"]["event_id"], campus["student"]["user_id"]
        _register(client, event_id, student_id)
        resp = self._feedback(client, event_id, student_id, rating=4)
        assert resp.status_code == 200
        assert resp.json()["feedback"] == [{"user_id": student_id, "rating": 4, "comment": "Great!"}]

    def test_unregistered_user_rejected(self, client, campus):
        resp = self._feedback(client, campus["event"]["event_id"], campus["student"]["user_id"])
        assert resp.status_code == 403

    def test_one_feedback_per_user(self, client, campus):
        event_id, student_id = campus["event"]["event_id"], campus["student"]["user_id"]
        _register(client, event_id, student_id)
        self._feedback(client, event_id, student_id)
        assert self._feedback(client, event_id, student_id).status_code == 409

    def test_rating_bounds(self, client, campus):
        event_id, student_id = campus["event"]["event_id"], campus["student"]["user_id"]
        _register(client, event_id, student_id)
        assert self._feedback(client, event_id, student_id, rating=6).status_code == 422
        assert self._feedback(client, event_id, student_id, rating=0).status_code == 422


class TestCertificatesAndWinners:
    def test_issue_certificates(self, client, campus):
        resp = client.post(
            f"/api/events/{campus['event']['event_id']}/certificates?actor_user_id={campus['admin']['user_id']}"
        )
        assert resp.status_code == 200
        assert resp.json()["certificates_issued"] is True

    def test_certificates_need_open_event(self, client, campus):
        event = create_test_event(client, campus["admin"]["user_id"], campus["club"]["club_id"])
        resp = client.post(
            f"/api/events/{event['event_id']}/certificates?actor_user_id={campus['admin']['user_id']}"
        )
        assert resp.status_code == 400

    def test_save_winners_sorted_by_rank(self, client, campus):
        resp = client.put(
            f"/api/events/{campus['event']['event_id']}/winners?actor_user_id={campus['admin']['user_id']}",
            json={"winners": [{"rank": 2, "name": "Bo"}, {"rank": 1, "name": "Ada"}]},
        )
        assert resp.status_code == 200
        assert [w["name"] for w in resp.json()["winners"]] == ["Ada", "Bo"]

    def test_winner_ranks_unique(self, client, campus):
        resp = client.put(
            f"/api/events/{campus['event']['event_id']}/winners?actor_user_id={campus['admin']['user_id']}",
            json={"winners": [{"rank": 1, "name": "Ada"}, {"rank": 1, "name": "Bo"}]},
        )
        assert resp.status_code == 400

    def test_student_cannot_save_winners(self, client, campus):
        resp = client.put(
            f"/api/events/{campus['event']['event_id']}/winners?actor_user_id={campus['student']['user_id']}",
            json={"winners": []},
        )
        assert resp.status_code == 403
