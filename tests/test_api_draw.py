"""Tests for the one-shot draw endpoint."""

from fastapi import status
from httpx import AsyncClient

from arcanaflow.db.operations import get_readings_for_session


class TestDrawEndpoint:
    async def test_draw_returns_reading(self, client: AsyncClient, fake_interpreter) -> None:
        """Draws, narrates and reports the stored reading."""
        response = await client.post(
            "/api/draw", json={"user_query": "Will I find a new job?", "count": 3}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["session_id"]
        assert data["reading_id"] >= 1
        assert data["interpretation"] == fake_interpreter.narration
        assert len(data["cards"]) == 3
        assert [c["position_index"] for c in data["cards"]] == [0, 1, 2]
        assert len({c["card"]["id"] for c in data["cards"]}) == 3

    async def test_draw_is_persisted(
        self, client: AsyncClient, session_factory
    ) -> None:
        """The reading is stored under the returned session id."""
        response = await client.post("/api/draw", json={"user_query": "love", "count": 2})
        data = response.json()

        async with session_factory() as session:
            readings = await get_readings_for_session(session, data["session_id"])

        assert [r.id for r in readings] == [data["reading_id"]]
        assert readings[0].user_query == "love"
        assert len(readings[0].drawn_cards) == 2

    async def test_default_count(self, client: AsyncClient) -> None:
        response = await client.post("/api/draw", json={"user_query": "love"})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["cards"]) == 3

    async def test_count_out_of_range(self, client: AsyncClient) -> None:
        """Counts outside 1..78 are rejected."""
        for count in (0, 79):
            response = await client.post("/api/draw", json={"user_query": "love", "count": count})

            assert response.status_code == 422

    async def test_empty_query_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/api/draw", json={"user_query": "", "count": 1})

        assert response.status_code == 422
