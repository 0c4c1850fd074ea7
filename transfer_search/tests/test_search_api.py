"""
End-to-end search through the HTTP API against the seeded catalog.
"""
import re

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from transfer_search.api.routes.search import get_catalog, get_search_service
from transfer_search.server import app
from transfer_search.services.catalog import SqlCatalogRepository


class TestSearchTransfers:

    @pytest.mark.asyncio
    async def test_ranked_options(self, client, search_body, seeded):
        response = await client.post("/api/public/search-transfers", json=search_body)

        assert response.status_code == 200
        options = response.json()["options"]
        assert [o["totalPrice"] for o in options] == [32.0, 40.25, 60.0]
        assert [o["supplier"]["name"] for o in options] == [
            "Dalmatia Shuttle", "Adriatic Transfers", "Adriatic Transfers"
        ]
        assert [o["vehicleType"] for o in options] == ["SEDAN", "SEDAN", "VAN"]

        first = options[0]
        assert first["supplier"] == {
            "id": seeded["suppliers"]["dalmatia"], "name": "Dalmatia Shuttle", "rating": 4.5, "ratingCount": 40
        }
        assert first["currency"] == "EUR"
        assert first["estimatedDurationMin"] == 30
        assert first["cancellationPolicy"] == "Free cancellation up to 24 hours before pickup"
        assert re.fullmatch(r"OPT-[0-9A-F]{12}", first["optionCode"])

    @pytest.mark.asyncio
    async def test_night_and_sunday_rules_in_local_time(self, client, search_body):
        # 23:30 on Sunday in Split
        search_body["pickupTime"] = "2030-07-14T21:30:00Z"

        response = await client.post("/api/public/search-transfers", json=search_body)

        assert response.status_code == 200
        assert [o["totalPrice"] for o in response.json()["options"]] == [40.25, 43.4, 60.0]

    @pytest.mark.asyncio
    async def test_early_hours_night_rule(self, client, search_body):
        # 01:30 on Monday in Split
        search_body["pickupTime"] = "2030-07-14T23:30:00Z"

        response = await client.post("/api/public/search-transfers", json=search_body)

        assert [o["totalPrice"] for o in response.json()["options"]] == [38.4, 40.25, 60.0]

    @pytest.mark.asyncio
    async def test_same_request_same_response(self, client, search_body):
        first = await client.post("/api/public/search-transfers", json=search_body)
        second = await client.post("/api/public/search-transfers", json=search_body)
        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_one_way_route(self, client, search_body, seeded):
        search_body["zoneId"] = seeded["zones"]["trogir"]

        response = await client.post("/api/public/search-transfers", json=search_body)
        assert response.status_code == 404
        assert response.json() == {"error": "No route found for this airport-zone combination"}

        search_body["direction"] = "TO_AIRPORT"
        response = await client.post("/api/public/search-transfers", json=search_body)
        assert response.status_code == 200
        options = response.json()["options"]
        assert [o["totalPrice"] for o in options] == [40.0]
        assert options[0]["estimatedDurationMin"] == 15

    @pytest.mark.asyncio
    async def test_inactive_route_not_found(self, client, search_body, seeded):
        search_body["zoneId"] = seeded["zones"]["makarska"]
        response = await client.post("/api/public/search-transfers", json=search_body)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_too_many_passengers_is_empty(self, client, search_body):
        search_body["paxAdults"] = 20
        response = await client.post("/api/public/search-transfers", json=search_body)
        assert response.status_code == 200
        assert response.json() == {"options": []}

    @pytest.mark.asyncio
    async def test_group_gets_minibus(self, client, search_body):
        search_body["paxAdults"] = 3
        search_body["paxChildren"] = 2

        response = await client.post("/api/public/search-transfers", json=search_body)

        # van: 55 + 4 x 5
        assert [(o["vehicleType"], o["totalPrice"]) for o in response.json()["options"]] == [
            ("VAN", 75.0), ("MINIBUS", 90.0)
        ]


class TestSearchErrors:

    @pytest.mark.asyncio
    async def test_past_pickup(self, client, search_body):
        search_body["pickupTime"] = "2020-01-01T10:00:00Z"
        response = await client.post("/api/public/search-transfers", json=search_body)
        assert response.status_code == 400
        assert response.json() == {"error": "Pickup time must be in the future"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field,value", [
        ("pickupTime", "next tuesday"),
        ("paxAdults", 0),
        ("paxChildren", -1),
        ("direction", "SIDEWAYS"),
        ("currency", "EURO"),
        ("airportId", 0),
    ])
    async def test_invalid_field(self, client, search_body, field, value):
        search_body[field] = value
        response = await client.post("/api/public/search-transfers", json=search_body)
        assert response.status_code == 400
        assert field in response.json()["error"]

    @pytest.mark.asyncio
    async def test_missing_field(self, client, search_body):
        del search_body["zoneId"]
        response = await client.post("/api/public/search-transfers", json=search_body)
        assert response.status_code == 400
        assert "zoneId" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_catalog_unavailable(self, client, search_body, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        app.dependency_overrides[get_catalog] = lambda: SqlCatalogRepository(factory)

        try:
            response = await client.post("/api/public/search-transfers", json=search_body)
        finally:
            await engine.dispose()

        assert response.status_code == 500
        assert response.json() == {"error": "Transfer catalog is unavailable"}

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self, client, search_body):
        class BrokenService:
            async def search(self, request):
                raise RuntimeError("boom")

        app.dependency_overrides[get_search_service] = lambda: BrokenService()

        response = await client.post("/api/public/search-transfers", json=search_body)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to search transfers"}
