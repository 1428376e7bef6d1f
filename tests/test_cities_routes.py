"""
CityInfo API: Cities and Health Endpoint Tests
==============================================

What:  HTTP-level tests for /api/cities, /health and the request-ID header.

What we test:
    ✅ City list ordered by name, summary shape only
    ✅ Single city, with and without nested points of interest
    ✅ 404 for unknown city, 400 for a malformed query flag
    ✅ Health report per store
    ✅ X-Request-ID echoed or generated, unusable client IDs replaced
    ✅ XML representation on request, JSON otherwise
    ✅ Ids beyond the storable range are 404
"""

import xml.etree.ElementTree as ET

import pytest

OVERSIZED_ID = 2 ** 63
XML = {"Accept": "application/xml"}


class TestGetCities:

    @pytest.mark.asyncio
    async def test_list_is_ordered_by_name(self, client):
        response = await client.get("/api/cities")
        assert response.status_code == 200
        assert response.json() == [
            {
                "id": 2,
                "name": "Antwerp",
                "description": "The one with the cathedral that was never really finished.",
            },
            {
                "id": 1,
                "name": "New York City",
                "description": "The one with that big park.",
            },
        ]


class TestGetCity:

    @pytest.mark.asyncio
    async def test_summary_by_default(self, client):
        response = await client.get("/api/cities/2")
        assert response.status_code == 200
        assert response.json() == {
            "id": 2,
            "name": "Antwerp",
            "description": "The one with the cathedral that was never really finished.",
        }

    @pytest.mark.asyncio
    async def test_include_points_of_interest(self, client):
        response = await client.get("/api/cities/2", params={"includePointsOfInterest": "true"})
        assert response.status_code == 200

        body = response.json()
        assert body["numberOfPointsOfInterest"] == 2
        assert [p["id"] for p in body["pointsOfInterest"]] == [1, 3]
        assert body["pointsOfInterest"][0]["name"] == "Cathedral"

    @pytest.mark.asyncio
    async def test_include_for_city_without_points(self, client):
        response = await client.get("/api/cities/1", params={"includePointsOfInterest": "true"})
        body = response.json()
        assert body["numberOfPointsOfInterest"] == 0
        assert body["pointsOfInterest"] == []

    @pytest.mark.asyncio
    async def test_explicit_false_returns_summary(self, client):
        response = await client.get("/api/cities/2", params={"includePointsOfInterest": "false"})
        assert "pointsOfInterest" not in response.json()

    @pytest.mark.asyncio
    async def test_unknown_city_is_404(self, client):
        response = await client.get("/api/cities/99")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert "99" in body["message"]

    @pytest.mark.asyncio
    async def test_malformed_flag_is_400(self, client):
        response = await client.get("/api/cities/2", params={"includePointsOfInterest": "maybe"})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestHealth:

    @pytest.mark.asyncio
    async def test_memory_store(self, memory_client):
        response = await memory_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["store"] == "memory"
        assert body["database"] == "not_used"

    @pytest.mark.asyncio
    async def test_database_store(self, database_client):
        response = await database_client.get("/health")
        body = response.json()
        assert body["status"] == "healthy"
        assert body["store"] == "database"
        assert body["database"] == "connected"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_client_id_is_echoed(self, memory_client):
        response = await memory_client.get("/api/cities", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_id_is_generated(self, memory_client):
        response = await memory_client.get("/api/cities")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_id_appears_in_error_body(self, memory_client):
        response = await memory_client.get("/api/cities/99", headers={"X-Request-ID": "trace-1"})
        assert response.json()["request_id"] == "trace-1"

    @pytest.mark.asyncio
    async def test_unusable_client_id_is_replaced(self, memory_client):
        response = await memory_client.get("/api/cities", headers={"X-Request-ID": "bad id with spaces"})
        assert response.headers["X-Request-ID"] != "bad id with spaces"
        assert len(response.headers["X-Request-ID"]) == 8


class TestCityXmlRepresentation:

    @pytest.mark.asyncio
    async def test_city_list_as_xml(self, client):
        response = await client.get("/api/cities", headers=XML)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")

        root = ET.fromstring(response.content)
        assert root.tag == "Cities"
        assert [city.findtext("Name") for city in root.findall("City")] == ["Antwerp", "New York City"]
        assert root.find("City").findtext("Id") == "2"

    @pytest.mark.asyncio
    async def test_full_city_as_xml(self, client):
        response = await client.get(
            "/api/cities/2", params={"includePointsOfInterest": "true"}, headers=XML
        )
        root = ET.fromstring(response.content)
        assert root.tag == "City"
        assert root.findtext("NumberOfPointsOfInterest") == "2"
        points = root.find("PointsOfInterest").findall("PointOfInterest")
        assert [p.findtext("Id") for p in points] == ["1", "3"]
        assert points[0].findtext("Name") == "Cathedral"

    @pytest.mark.asyncio
    async def test_text_xml_is_accepted(self, client):
        response = await client.get("/api/cities/1", headers={"Accept": "text/xml"})
        assert response.headers["content-type"].startswith("application/xml")
        assert ET.fromstring(response.content).findtext("Name") == "New York City"

    @pytest.mark.asyncio
    async def test_json_when_preferred_or_unspecified(self, client):
        preferred = await client.get(
            "/api/cities", headers={"Accept": "application/json, application/xml;q=0.5"}
        )
        assert preferred.headers["content-type"].startswith("application/json")

        wildcard = await client.get("/api/cities")
        assert wildcard.headers["content-type"].startswith("application/json")

    @pytest.mark.asyncio
    async def test_errors_stay_json(self, client):
        response = await client.get("/api/cities/99", headers=XML)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestOversizedIds:

    @pytest.mark.asyncio
    async def test_city_is_404(self, client):
        response = await client.get(f"/api/cities/{OVERSIZED_ID}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_city_with_points_is_404(self, client):
        response = await client.get(
            f"/api/cities/{OVERSIZED_ID}", params={"includePointsOfInterest": "true"}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_just_above_int32_is_404_on_database(self, database_client):
        response = await database_client.get(f"/api/cities/{2 ** 31}")
        assert response.status_code == 404
