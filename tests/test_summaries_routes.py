"""
Integration tests for the summary history API.
"""

from datetime import date, datetime, timedelta

import pytest

from app.models import Summary


@pytest.fixture
def add_summary(db_session):
    def _add(owner, day=date(2024, 1, 15), content="A calm day.", created_at=None):
        summary = Summary(
            user_id=owner.id,
            content=content,
            note_count=1,
            date=day,
            summary_type="regular",
            provider="primary",
            notes_snapshot=[{"id": 1, "content": "tea", "created_at": "2024-01-15T08:00:00"}],
            created_at=created_at or datetime.utcnow(),
        )
        db_session.add(summary)
        db_session.commit()
        return summary
    return _add


class TestListSummaries:
    """Tests for GET /summaries."""

    def test_requires_authentication(self, anon_client):
        response = anon_client.get("/summaries")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_newest_first_and_scoped_to_caller(self, client, user, other_user, add_summary):
        base = datetime(2024, 1, 15, 20, 0)
        add_summary(user, content="older", created_at=base)
        add_summary(user, content="newer", created_at=base + timedelta(hours=1))
        add_summary(other_user, content="someone else")

        data = client.get("/summaries").json()

        assert data["success"] is True
        assert data["count"] == 2
        assert [s["content"] for s in data["summaries"]] == ["newer", "older"]

    def test_empty_history(self, client):
        assert client.get("/summaries").json() == {"success": True, "summaries": [], "count": 0}

    def test_summary_payload_includes_snapshot(self, client, user, add_summary):
        add_summary(user)
        summary = client.get("/summaries").json()["summaries"][0]

        assert summary["date"] == "2024-01-15"
        assert summary["note_count"] == len(summary["notes_snapshot"]) == 1


class TestSummariesByDate:
    """Tests for GET /summaries/date/{day}."""

    def test_filters_by_date(self, client, user, add_summary):
        add_summary(user, day=date(2024, 1, 14), content="sunday")
        add_summary(user, day=date(2024, 1, 15), content="monday")

        data = client.get("/summaries/date/2024-01-15").json()

        assert data["count"] == 1
        assert data["summaries"][0]["content"] == "monday"

    def test_bad_date(self, client):
        response = client.get("/summaries/date/15-01-2024")
        assert response.status_code == 400
        assert "error" in response.json()


class TestGetSummary:
    """Tests for GET /summaries/{id}."""

    def test_own_summary(self, client, user, add_summary):
        summary = add_summary(user)
        response = client.get(f"/summaries/{summary.id}")
        assert response.status_code == 200
        assert response.json()["summary"]["id"] == summary.id

    def test_other_users_summary_is_forbidden(self, client, other_user, add_summary):
        summary = add_summary(other_user)
        assert client.get(f"/summaries/{summary.id}").status_code == 403

    def test_non_numeric_id(self, client):
        response = client.get("/summaries/abc")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}


class TestDeleteSummary:
    """Tests for DELETE /summaries/{id}."""

    def test_delete_own_summary(self, client, user, add_summary, db_session):
        summary = add_summary(user)
        summary_id = summary.id

        response = client.delete(f"/summaries/{summary_id}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        db_session.expire_all()
        assert db_session.get(Summary, summary_id) is None

    def test_delete_other_users_summary_is_forbidden(self, client, other_user, add_summary):
        summary = add_summary(other_user, content="keep me")
        summary_id = summary.id

        response = client.delete(f"/summaries/{summary_id}")

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden: You can only delete your own summaries"}

        # Row is untouched and still readable by its owner
        from app.auth import SESSION_COOKIE, create_session_token
        client.cookies.set(SESSION_COOKIE, create_session_token(other_user.id))
        owner_view = client.get(f"/summaries/{summary_id}")
        assert owner_view.status_code == 200
        assert owner_view.json()["summary"]["content"] == "keep me"

    def test_delete_missing_summary(self, client):
        response = client.delete("/summaries/12345")
        assert response.status_code == 404
        assert response.json() == {"error": "Summary not found"}

    def test_delete_requires_authentication(self, anon_client, user, add_summary):
        summary = add_summary(user)
        assert anon_client.delete(f"/summaries/{summary.id}").status_code == 401
