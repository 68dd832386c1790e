"""Tests for the versioning routes."""

from __future__ import annotations

import asyncio

from factories import touch


class TestVersionRoutes:
    """Test the Version Routes."""

    def test_requires_authentication(self, anonymous_client) -> None:
        """Verify requests without a session user are rejected."""
        response = anonymous_client.get("/inspections/I1/changes")
        assert response.status_code == 401

    def test_changes_first_pull(self, client) -> None:
        """Verify the drift check of a never-pulled inspection."""
        response = client.get("/inspections/I1/changes")

        assert response.status_code == 200
        assert response.json()["is_first_pull"] is True

    def test_malformed_record(self, client, api_store) -> None:
        """Verify a stored record that does not fit the model yields typed responses."""
        asyncio.run(touch(api_store, "I1", title=None))

        changes = client.get("/inspections/I1/changes")
        assert changes.status_code == 200
        assert changes.json()["error"] is not None

        pulled = client.post("/inspections/I1/pull", json={})
        assert pulled.status_code == 500
        assert "malformed" in pulled.json()["detail"]

    def test_pull_then_history(self, client) -> None:
        """Verify a pull is recorded under the signed-in manager."""
        pulled = client.post("/inspections/I1/pull", json={"notes": "initial pull"})
        assert pulled.status_code == 201
        version = pulled.json()["version"]

        history = client.get("/inspections/I1/history").json()

        assert len(history) == 1
        assert history[0]["version"] == version
        assert history[0]["action"] == "pull"
        assert history[0]["performed_by"] == "manager-1"
        assert client.get("/inspections/I1/changes").json()["has_changes"] is False

    def test_preview(self, client) -> None:
        """Verify the preview carries statistics."""
        response = client.get("/inspections/I1/preview")

        assert response.status_code == 200
        assert response.json()["statistics"]["total_topics"] == 2

    def test_current_version_before_pull_is_404(self, client) -> None:
        """Verify the current version is missing until the first pull."""
        assert client.get("/inspections/I1/versions/current").status_code == 404

    def test_restore(self, client) -> None:
        """Verify restoring creates a newer version."""
        first = client.post("/inspections/I1/pull", json={}).json()["version"]
        client.post("/inspections/I1/pull", json={})

        response = client.post(f"/inspections/I1/versions/{first}/restore", json={"notes": "back"})

        assert response.status_code == 201
        body = response.json()
        assert body["version"] > first
        assert body["restored_from_version"] == first
        current = client.get("/inspections/I1/versions/current").json()
        assert current["version"] == body["version"]
        snapshot = client.get(f"/inspections/I1/versions/{first}").json()
        assert snapshot["content"] == current["content"]

    def test_unknown_version_is_404(self, client) -> None:
        """Verify NotFound maps to HTTP 404."""
        assert client.get("/inspections/I1/versions/123").status_code == 404

    def test_unknown_inspection_pull_is_404(self, client) -> None:
        """Verify pulling an unknown inspection maps to HTTP 404."""
        assert client.post("/inspections/nope/pull", json={}).status_code == 404
