"""
Tests d'intégration API du tracker : CRUD, tableau de bord et synchronisation.
Testent les URLs, les codes HTTP, la validation et le format des réponses.
"""

import uuid
from datetime import datetime
from unittest.mock import patch

from ghostclass.schemas.attendance import (
    AttendanceResult,
    CourseDashboard,
    DashboardResponse,
    ReconciledStats,
)
from ghostclass.schemas.sync import TrackerSyncResult
from ghostclass.schemas.tracking import TrackedEntryResponse

USER_ID = uuid.uuid4()
BASE = f"/api/users/{USER_ID}"


# --- Helper ---

def make_entry_response(**kwargs) -> TrackedEntryResponse:
    return TrackedEntryResponse(
        id=kwargs.get("id", 1),
        course=kwargs.get("course", "101"),
        date=kwargs.get("date", "2026-01-27"),
        session=kwargs.get("session", "1st Hour"),
        year=None,
        semester=None,
        status=kwargs.get("status", "correction"),
        attendance=kwargs.get("attendance", 110),
        remarks=None,
        created_at=datetime.now(),
    )


ENTRY_PAYLOAD = {
    "course": "101",
    "date": "2026-01-27",
    "session": "1st Hour",
    "status": "extra",
    "attendance": 110,
}


# ============================================================
# POST /tracking
# ============================================================

def test_add_entry_succes(client):
    """Entrée valide → 201."""
    with patch("ghostclass.routers.tracking.tracking_service.add_entry") as mock:
        mock.return_value = make_entry_response(status="extra")

        response = client.post(f"{BASE}/tracking", json=ENTRY_PAYLOAD)

    assert response.status_code == 201
    assert response.json()["status"] == "extra"
    assert mock.call_args[0][1] == USER_ID


def test_add_entry_doublon(client):
    """Créneau déjà suivi → 409 Conflict."""
    with patch("ghostclass.routers.tracking.tracking_service.add_entry") as mock:
        mock.side_effect = ValueError("Une entrée existe déjà pour le créneau 101_20260127_I.")

        response = client.post(f"{BASE}/tracking", json=ENTRY_PAYLOAD)

    assert response.status_code == 409
    assert "existe déjà" in response.json()["detail"]


def test_add_entry_code_invalide(client):
    response = client.post(f"{BASE}/tracking", json={**ENTRY_PAYLOAD, "attendance": 999})
    assert response.status_code == 422


def test_add_entry_statut_invalide(client):
    response = client.post(f"{BASE}/tracking", json={**ENTRY_PAYLOAD, "status": "bonus"})
    assert response.status_code == 422


def test_add_entry_uuid_invalide(client):
    response = client.post("/api/users/pas-un-uuid/tracking", json=ENTRY_PAYLOAD)
    assert response.status_code == 422


# ============================================================
# GET /tracking, /tracking/count
# ============================================================

def test_list_entries(client):
    with patch("ghostclass.routers.tracking.tracking_service.list_entries") as mock:
        mock.return_value = [make_entry_response(id=1), make_entry_response(id=2)]

        response = client.get(f"{BASE}/tracking?semester=even")

    assert response.status_code == 200
    assert len(response.json()) == 2
    assert mock.call_args[0][2] == "even"


def test_count_entries(client):
    with patch("ghostclass.routers.tracking.tracking_service.count_entries", return_value=4):
        response = client.get(f"{BASE}/tracking/count")

    assert response.status_code == 200
    assert response.json() == {"count": 4}


# ============================================================
# PUT / DELETE /tracking/{entry_id}
# ============================================================

def test_update_entry(client):
    with patch("ghostclass.routers.tracking.tracking_service.update_entry") as mock:
        mock.return_value = make_entry_response(attendance=225)

        response = client.put(f"{BASE}/tracking/1", json={"attendance": 225})

    assert response.status_code == 200
    assert response.json()["attendance"] == 225


def test_update_entry_introuvable(client):
    with patch("ghostclass.routers.tracking.tracking_service.update_entry") as mock:
        mock.side_effect = ValueError("Entrée 99 introuvable.")

        response = client.put(f"{BASE}/tracking/99", json={"attendance": 111})

    assert response.status_code == 404


def test_delete_entry(client):
    with patch("ghostclass.routers.tracking.tracking_service.delete_entry") as mock:
        response = client.delete(f"{BASE}/tracking/1")

    assert response.status_code == 204
    mock.assert_called_once()


def test_delete_entry_introuvable(client):
    with patch("ghostclass.routers.tracking.tracking_service.delete_entry") as mock:
        mock.side_effect = ValueError("Entrée 99 introuvable.")

        response = client.delete(f"{BASE}/tracking/99")

    assert response.status_code == 404


def test_delete_all(client):
    with patch("ghostclass.routers.tracking.tracking_service.delete_all", return_value=3):
        response = client.delete(f"{BASE}/tracking")

    assert response.status_code == 200
    assert response.json()["count"] == 3


# ============================================================
# POST /dashboard, /tracking/sync
# ============================================================

def test_dashboard(client):
    course = CourseDashboard(
        course_id="101",
        name="Mathématiques",
        code="MA101",
        stats=ReconciledStats(present=4, total=4, percentage=100.0),
        bunk=AttendanceResult(
            can_bunk=1, required_to_attend=0, target_percentage=75,
            is_exact=False, is_borderline=False,
        ),
    )
    with patch("ghostclass.routers.tracking.dashboard_service.get_user_dashboard") as mock:
        mock.return_value = DashboardResponse(target_percentage=75, courses=[course])

        response = client.post(f"{BASE}/dashboard", json={"report": {"studentAttendanceData": {}}})

    assert response.status_code == 200
    assert response.json()["courses"][0]["bunk"]["can_bunk"] == 1


def test_sync_tracker(client):
    with patch("ghostclass.routers.tracking.tracker_sync_service.sync_user_tracker") as mock:
        mock.return_value = TrackerSyncResult(
            processed=3, deletions=2, updates=1, conflicts=1, notifications=3, emails_sent=0
        )

        response = client.post(f"{BASE}/tracking/sync", json={"report": {}, "username": "alice"})

    assert response.status_code == 200
    assert response.json()["deletions"] == 2
    assert mock.call_args[0][5] == "alice"


def test_sync_tracker_email_invalide(client):
    response = client.post(f"{BASE}/tracking/sync", json={"report": {}, "email": "pas-un-email"})
    assert response.status_code == 422
