"""Tests for /state endpoints."""

import pytest


class TestApplyEndpoint:
    """Tests for POST /state/apply."""

    @pytest.mark.asyncio
    async def test_select_and_replace(self, client):
        """Should return the updated state."""
        payload = {
            "state": {"a": {"b": {"c": True}}},
            "action": {
                "op": "select",
                "path": "a.b.c",
                "action": {"op": "replace", "value": False}
            }
        }

        response = await client.post("/state/apply", json=payload)
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["updates_applied"] == 1
        assert data["state"] == {"a": {"b": {"c": False}}}
        assert data["errors"] == []

    @pytest.mark.asyncio
    async def test_range_delete(self, client):
        """Should delete a window of a list."""
        payload = {
            "state": [1, 2, 99, 100, 3, 4],
            "action": {
                "op": "range",
                "start": 2,
                "length": 2,
                "action": {"op": "replace", "value": []}
            }
        }

        response = await client.post("/state/apply", json=payload)
        assert response.status_code == 200
        assert response.json()["state"] == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_shape_mismatch_returns_422(self, client):
        """Merging into a list should fail with a descriptive error."""
        payload = {
            "state": [1, 2, 3],
            "action": {"op": "merge", "value": {"a": 1}}
        }

        response = await client.post("/state/apply", json=payload)
        assert response.status_code == 422

        detail = response.json()["detail"]
        assert detail["error"] == "ShapeMismatchError"
        assert "merge()" in detail["message"]

    @pytest.mark.asyncio
    async def test_invalid_document_returns_422(self, client):
        """Unknown operations fail request validation."""
        payload = {"state": {}, "action": {"op": "explode"}}

        response = await client.post("/state/apply", json=payload)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_action_returns_422(self, client):
        response = await client.post("/state/apply", json={"state": {}})
        assert response.status_code == 422


class TestPathsEndpoint:
    """Tests for POST /state/paths."""

    @pytest.mark.asyncio
    async def test_bracket_path(self, client):
        """Should split bracketed keys."""
        response = await client.post(
            "/state/paths",
            json={"path": "foo.bar[key.with.dots].fizz[buzz]"}
        )
        assert response.status_code == 200
        assert response.json()["segments"] == [
            "foo", "bar", "key.with.dots", "fizz", "buzz"
        ]

    @pytest.mark.asyncio
    async def test_dot_syntax(self, client):
        response = await client.post(
            "/state/paths",
            json={"path": "a.b[0]", "syntax": "dot"}
        )
        assert response.status_code == 200
        assert response.json()["segments"] == ["a", "b[0]"]

    @pytest.mark.asyncio
    async def test_malformed_path_returns_422(self, client):
        response = await client.post("/state/paths", json={"path": "..."})
        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "PathSyntaxError"
