"""Tests for the release routes."""

from __future__ import annotations


class TestReleaseRoutes:
    """Test the Release Routes."""

    def test_create_and_deliver(self, client) -> None:
        """Verify the create → deliver → revert flow over HTTP."""
        created = client.post(
            "/inspections/I1/releases",
            json={"inspection": {"title": "X"}, "notes": "first cut"},
        )
        assert created.status_code == 201
        release_id = created.json()["release_id"]

        delivered = client.post(f"/inspections/I1/releases/{release_id}/deliver")
        assert delivered.status_code == 200
        assert delivered.json()["is_delivered"] is True
        assert delivered.json()["delivered_by"] == "manager-1"

        reverted = client.post(f"/inspections/I1/releases/{release_id}/revert")
        assert reverted.json()["is_delivered"] is False

        releases = client.get("/inspections/I1/releases").json()
        assert [r["id"] for r in releases] == [release_id]
        assert releases[0]["inspection_snapshot"]["title"] == "X"

    def test_create_with_invalid_content_is_422(self, client) -> None:
        """Verify content that fails validation maps to HTTP 422, not 500."""
        response = client.post(
            "/inspections/I1/releases", json={"inspection": {"title": 5}, "notes": ""}
        )

        assert response.status_code == 422
        assert "invalid inspection content" in response.json()["detail"]

    def test_get_release(self, client) -> None:
        """Verify a single release can be fetched."""
        release_id = client.post("/inspections/I1/releases", json={}).json()["release_id"]

        response = client.get(f"/inspections/I1/releases/{release_id}")

        assert response.status_code == 200
        assert response.json()["is_delivered"] is False

    def test_deliver_unknown_release_is_404(self, client) -> None:
        """Verify delivering an unknown release maps to HTTP 404."""
        assert client.post("/inspections/I1/releases/nope/deliver").status_code == 404

    def test_edit_block(self, client) -> None:
        """Verify the edit block endpoint echoes the new state."""
        response = client.post("/inspections/I1/edit-block", json={"blocked": True})

        assert response.status_code == 200
        assert response.json() == {"inspection_edit_blocked": True}

    def test_edit_block_requires_boolean(self, client) -> None:
        """Verify malformed bodies are rejected."""
        response = client.post("/inspections/I1/edit-block", json={"blocked": "maybe"})
        assert response.status_code == 422

    def test_requires_authentication(self, anonymous_client) -> None:
        """Verify release listing needs a session user."""
        assert anonymous_client.get("/inspections/I1/releases").status_code == 401
