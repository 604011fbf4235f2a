"""API tests for assignment and notification endpoints"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient


pytestmark = pytest.mark.integration

API = "/api/v1"


def _assign(client: TestClient, document, assignee, **extra):
    payload = {"document_id": str(document.id), "assigned_to": str(assignee.id)}
    payload.update(extra)
    return client.post(f"{API}/assignments", json=payload)


class TestAssignmentEndpoints:
    """Test the assignment workflow over HTTP"""

    def test_create_assignment(self, owner_client: TestClient, document, other_user):
        """Test POST /assignments returns the PENDING assignment and notification flag"""
        response = _assign(owner_client, document, other_user, notes="Please countersign")

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["notes"] == "Please countersign"
        assert data["notification_sent"] is True
        assert data["document"]["id"] == str(document.id)

        document_response = owner_client.get(f"{API}/documents/{document.id}")
        assert document_response.json()["sharing_status"] == "ASSIGNED"

    def test_create_without_write(self, member_client: TestClient, document, other_user):
        assert _assign(member_client, document, other_user).status_code == 403

    def test_create_for_unknown_user(self, owner_client: TestClient, document):
        response = owner_client.post(
            f"{API}/assignments", json={"document_id": str(document.id), "assigned_to": str(uuid4())}
        )
        assert response.status_code == 404

    def test_assignee_workflow(self, owner_client: TestClient, other_client: TestClient, document, other_user):
        """Test accept, complete and the 409 for skipping a step"""
        assignment_id = _assign(owner_client, document, other_user).json()["id"]

        received = other_client.get(f"{API}/assignments").json()
        assert [item["id"] for item in received["items"]] == [assignment_id]
        sent = owner_client.get(f"{API}/assignments/sent").json()
        assert sent["total"] == 1

        response = other_client.patch(f"{API}/assignments/{assignment_id}/status", json={"status": "COMPLETED"})
        assert response.status_code == 409

        response = owner_client.patch(f"{API}/assignments/{assignment_id}/status", json={"status": "ACCEPTED"})
        assert response.status_code == 403

        response = other_client.patch(f"{API}/assignments/{assignment_id}/status", json={"status": "ACCEPTED"})
        assert response.status_code == 200
        assert response.json()["status"] == "ACCEPTED"

        response = other_client.patch(f"{API}/assignments/{assignment_id}/status", json={"status": "COMPLETED"})
        assert response.status_code == 200
        assert response.json()["completed_at"] is not None

        document_response = owner_client.get(f"{API}/documents/{document.id}")
        assert document_response.json()["sharing_status"] == "NONE"

    def test_status_filter(self, owner_client: TestClient, other_client: TestClient, document, other_user):
        _assign(owner_client, document, other_user)

        assert other_client.get(f"{API}/assignments", params={"status": "PENDING"}).json()["total"] == 1
        assert other_client.get(f"{API}/assignments", params={"status": "REJECTED"}).json()["total"] == 0

    def test_notes(self, owner_client: TestClient, other_client: TestClient, document, other_user):
        """Test only the assigner edits notes"""
        assignment_id = _assign(owner_client, document, other_user).json()["id"]

        response = owner_client.patch(f"{API}/assignments/{assignment_id}/notes", json={"notes": "By Friday"})
        assert response.status_code == 200
        assert response.json()["notes"] == "By Friday"

        response = other_client.patch(f"{API}/assignments/{assignment_id}/notes", json={"notes": "Monday?"})
        assert response.status_code == 403

    def test_document_assignments(self, owner_client: TestClient, member_client: TestClient, document, other_user):
        _assign(owner_client, document, other_user)

        assert owner_client.get(f"{API}/documents/{document.id}/assignments").json()["total"] == 1
        assert member_client.get(f"{API}/documents/{document.id}/assignments").status_code == 403

    def test_trashed_document_leaves_assignment_lists(
        self, owner_client: TestClient, other_client: TestClient, document, other_user
    ):
        """Test assignments of a trashed document disappear from received and sent lists"""
        assignment_id = _assign(owner_client, document, other_user).json()["id"]

        assert owner_client.delete(f"{API}/documents/{document.id}").status_code == 200
        assert other_client.get(f"{API}/documents/{document.id}").status_code == 404

        received = other_client.get(f"{API}/assignments").json()
        assert received["total"] == 0
        assert received["items"] == []
        assert owner_client.get(f"{API}/assignments/sent").json()["total"] == 0

        response = other_client.patch(f"{API}/assignments/{assignment_id}/status", json={"status": "ACCEPTED"})
        assert response.status_code == 404

    def test_restored_document_brings_assignments_back(
        self, owner_client: TestClient, other_client: TestClient, document, other_user
    ):
        assignment_id = _assign(owner_client, document, other_user).json()["id"]
        owner_client.delete(f"{API}/documents/{document.id}")
        assert owner_client.post(f"{API}/documents/{document.id}/restore").status_code == 200

        received = other_client.get(f"{API}/assignments").json()
        assert [item["id"] for item in received["items"]] == [assignment_id]


class TestNotificationEndpoints:
    """Test the assignee inbox"""

    def test_assignee_is_notified(self, owner_client: TestClient, other_client: TestClient, document, other_user):
        """Test the notification shows up unread, then read"""
        _assign(owner_client, document, other_user)

        inbox = other_client.get(f"{API}/notifications").json()
        assert inbox["total"] == 1
        assert inbox["unread_count"] == 1
        notification = inbox["items"][0]
        assert notification["type"] == "assignment"
        assert notification["entity_id"] == str(document.id)

        response = other_client.patch(f"{API}/notifications/{notification['id']}/read")
        assert response.status_code == 200
        assert response.json()["is_read"] is True

        assert other_client.get(f"{API}/notifications", params={"unread_only": True}).json()["total"] == 0

    def test_cannot_read_someone_elses_notification(
        self, owner_client: TestClient, other_client: TestClient, document, other_user
    ):
        _assign(owner_client, document, other_user)
        notification_id = other_client.get(f"{API}/notifications").json()["items"][0]["id"]

        assert owner_client.patch(f"{API}/notifications/{notification_id}/read").status_code == 404

    def test_mark_all_read(self, owner_client: TestClient, other_client: TestClient, document, other_user):
        _assign(owner_client, document, other_user)
        _assign(owner_client, document, other_user)

        response = other_client.post(f"{API}/notifications/read-all")
        assert response.status_code == 200
        assert response.json()["updated"] == 2
        assert other_client.get(f"{API}/notifications").json()["unread_count"] == 0
