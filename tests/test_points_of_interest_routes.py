"""
CityInfo API: Points of Interest Endpoint Tests
===============================================

What:  HTTP-level tests for /api/cities/{cityId}/pointsofinterest.
How:   Runs against both stores through the parametrized `client` fixture;
       store-specific behavior uses memory_client / database_client.

What we test:
    ✅ List / detail, including 404 for unknown city or point
    ✅ Create: 201 + Location, id allocation, validation, unknown city
    ✅ Full update, JSON Patch, and their validation paths
    ✅ Delete and the notification mail
    ✅ 500 responses for unexpected faults and failed saves
    ✅ XML representations of list, detail and create responses
    ✅ Ids beyond the storable range are 404 on every nested route
"""

import xml.etree.ElementTree as ET
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient, ASGITransport

from cityinfo.dependencies import get_city_info_repository
from cityinfo.main import create_app
from cityinfo.services.repository_base import CityInfoRepository
from cityinfo.services.validation import DESCRIPTION_EQUALS_NAME_MESSAGE

BASE = "/api/cities/2/pointsofinterest"
GENERIC_FAULT = "A problem happened while handling your request."
OVERSIZED_ID = 2 ** 63
XML = {"Accept": "application/xml"}


def _errors(response):
    return response.json()["details"]["errors"]


class TestReadPointsOfInterest:

    @pytest.mark.asyncio
    async def test_list_for_city(self, client):
        response = await client.get(BASE)
        assert response.status_code == 200
        assert response.json() == [
            {
                "id": 1,
                "name": "Cathedral",
                "description": "A Gothic style cathedral, conceived by architects Jan and Pieter Appelmans.",
            },
            {
                "id": 3,
                "name": "Antwerp Central Station",
                "description": "The finest example of railway architecture in Belgium.",
            },
        ]

    @pytest.mark.asyncio
    async def test_list_for_city_without_points_is_empty(self, client):
        response = await client.get("/api/cities/1/pointsofinterest")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_for_unknown_city_is_404(self, client):
        response = await client.get("/api/cities/99/pointsofinterest")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_get_single(self, client):
        response = await client.get(f"{BASE}/3")
        assert response.status_code == 200
        assert response.json()["name"] == "Antwerp Central Station"

    @pytest.mark.asyncio
    async def test_point_of_another_city_is_404(self, client):
        response = await client.get("/api/cities/1/pointsofinterest/1")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_point_is_404(self, client):
        response = await client.get(f"{BASE}/2")
        assert response.status_code == 404


class TestCreatePointOfInterest:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_location(self, client):
        response = await client.post(
            BASE, json={"name": "Rubens House", "description": "Home and studio of Rubens."}
        )
        assert response.status_code == 201
        body = response.json()
        assert body == {"id": 4, "name": "Rubens House", "description": "Home and studio of Rubens."}
        assert response.headers["Location"].endswith("/api/cities/2/pointsofinterest/4")

        fetched = await client.get(response.headers["Location"])
        assert fetched.status_code == 200
        assert fetched.json() == body

    @pytest.mark.asyncio
    async def test_created_point_appears_in_city(self, client):
        await client.post(BASE, json={"name": "Rubens House"})

        city = await client.get("/api/cities/2", params={"includePointsOfInterest": "true"})
        assert city.json()["numberOfPointsOfInterest"] == 3

    @pytest.mark.asyncio
    async def test_description_is_optional(self, client):
        response = await client.post(BASE, json={"name": "Zoo"})
        assert response.status_code == 201
        assert response.json()["description"] is None

    @pytest.mark.asyncio
    async def test_ids_are_unique_across_cities(self, client):
        first = await client.post("/api/cities/1/pointsofinterest", json={"name": "Central Park"})
        second = await client.post(BASE, json={"name": "Zoo"})
        assert first.json()["id"] == 4
        assert second.json()["id"] == 5

    @pytest.mark.asyncio
    async def test_description_equal_to_name_is_400(self, client):
        response = await client.post(BASE, json={"name": "Zoo", "description": "Zoo"})
        assert response.status_code == 400
        assert _errors(response) == {"Description": [DESCRIPTION_EQUALS_NAME_MESSAGE]}

    @pytest.mark.asyncio
    async def test_missing_name_is_400(self, client):
        response = await client.post(BASE, json={"description": "Nameless"})
        assert response.status_code == 400
        assert _errors(response)["Name"] == ["The Name field is required."]

    @pytest.mark.asyncio
    async def test_name_too_long_is_400(self, client):
        response = await client.post(BASE, json={"name": "x" * 51})
        assert response.status_code == 400
        assert "Name" in _errors(response)

    @pytest.mark.asyncio
    async def test_description_too_long_is_400(self, client):
        response = await client.post(BASE, json={"name": "Zoo", "description": "x" * 201})
        assert response.status_code == 400
        assert "Description" in _errors(response)

    @pytest.mark.asyncio
    async def test_unknown_city_is_404(self, client):
        response = await client.post("/api/cities/99/pointsofinterest", json={"name": "Zoo"})
        assert response.status_code == 404


class TestUpdatePointOfInterest:

    @pytest.mark.asyncio
    async def test_put_replaces_fields(self, client):
        response = await client.put(
            f"{BASE}/1", json={"name": "Our Lady", "description": "Cathedral of Our Lady."}
        )
        assert response.status_code == 204
        assert response.content == b""

        fetched = await client.get(f"{BASE}/1")
        assert fetched.json() == {"id": 1, "name": "Our Lady", "description": "Cathedral of Our Lady."}

    @pytest.mark.asyncio
    async def test_put_keeps_point_in_city(self, client):
        await client.put(f"{BASE}/1", json={"name": "Our Lady"})

        listing = await client.get(BASE)
        assert [p["id"] for p in listing.json()] == [1, 3]

    @pytest.mark.asyncio
    async def test_put_omitted_description_becomes_null(self, client):
        await client.put(f"{BASE}/1", json={"name": "Our Lady"})

        fetched = await client.get(f"{BASE}/1")
        assert fetched.json()["description"] is None

    @pytest.mark.asyncio
    async def test_put_description_equal_to_name_is_400(self, client):
        response = await client.put(f"{BASE}/1", json={"name": "Same", "description": "Same"})
        assert response.status_code == 400
        assert "Description" in _errors(response)

    @pytest.mark.asyncio
    async def test_put_unknown_point_is_404(self, client):
        response = await client.put(f"{BASE}/42", json={"name": "Ghost"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_put_unknown_city_is_404(self, client):
        response = await client.put("/api/cities/99/pointsofinterest/1", json={"name": "Ghost"})
        assert response.status_code == 404


class TestPatchPointOfInterest:

    @pytest.mark.asyncio
    async def test_replace_name(self, client):
        response = await client.patch(
            f"{BASE}/1", json=[{"op": "replace", "path": "/name", "value": "Updated - Cathedral"}]
        )
        assert response.status_code == 204

        fetched = (await client.get(f"{BASE}/1")).json()
        assert fetched["name"] == "Updated - Cathedral"
        assert fetched["description"].startswith("A Gothic style cathedral")

    @pytest.mark.asyncio
    async def test_member_names_are_case_insensitive(self, client):
        response = await client.patch(
            f"{BASE}/3", json=[{"op": "replace", "path": "/Description", "value": "Trains."}]
        )
        assert response.status_code == 204
        assert (await client.get(f"{BASE}/3")).json()["description"] == "Trains."

    @pytest.mark.asyncio
    async def test_remove_description(self, client):
        response = await client.patch(f"{BASE}/1", json=[{"op": "remove", "path": "/description"}])
        assert response.status_code == 204
        assert (await client.get(f"{BASE}/1")).json()["description"] is None

    @pytest.mark.asyncio
    async def test_empty_document_changes_nothing(self, client):
        before = (await client.get(f"{BASE}/1")).json()

        response = await client.patch(f"{BASE}/1", json=[])
        assert response.status_code == 204
        assert (await client.get(f"{BASE}/1")).json() == before

    @pytest.mark.asyncio
    async def test_patched_description_equal_to_name_is_400(self, client):
        response = await client.patch(
            f"{BASE}/1", json=[{"op": "replace", "path": "/description", "value": "Cathedral"}]
        )
        assert response.status_code == 400
        assert _errors(response) == {"Description": [DESCRIPTION_EQUALS_NAME_MESSAGE]}

        # Nothing was saved
        assert (await client.get(f"{BASE}/1")).json()["description"] != "Cathedral"

    @pytest.mark.asyncio
    async def test_removing_name_is_400(self, client):
        response = await client.patch(f"{BASE}/1", json=[{"op": "remove", "path": "/name"}])
        assert response.status_code == 400
        assert "Name" in _errors(response)

    @pytest.mark.asyncio
    async def test_unknown_member_is_400(self, client):
        response = await client.patch(
            f"{BASE}/1", json=[{"op": "replace", "path": "/country", "value": "Belgium"}]
        )
        assert response.status_code == 400
        assert "Country" in _errors(response)

    @pytest.mark.asyncio
    async def test_unknown_operation_is_400(self, client):
        response = await client.patch(
            f"{BASE}/1", json=[{"op": "frobnicate", "path": "/name", "value": "x"}]
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_patch_unknown_point_is_404(self, client):
        response = await client.patch(
            f"{BASE}/42", json=[{"op": "replace", "path": "/name", "value": "x"}]
        )
        assert response.status_code == 404


class TestDeletePointOfInterest:

    @pytest.mark.asyncio
    async def test_delete_removes_point_and_sends_mail(self, client, mock_mail_service):
        response = await client.delete(f"{BASE}/1")
        assert response.status_code == 204

        assert (await client.get(f"{BASE}/1")).status_code == 404
        assert [p["id"] for p in (await client.get(BASE)).json()] == [3]
        mock_mail_service.send.assert_called_once_with(
            "Point of interest deleted.",
            "Point of interest Cathedral with id 1 was deleted",
        )

    @pytest.mark.asyncio
    async def test_delete_unknown_point_is_404_without_mail(self, client, mock_mail_service):
        response = await client.delete(f"{BASE}/42")
        assert response.status_code == 404
        mock_mail_service.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_memory_ids_follow_the_current_maximum(self, memory_client):
        await memory_client.delete(f"{BASE}/3")

        response = await memory_client.post(BASE, json={"name": "Zoo"})
        assert response.json()["id"] == 2

    @pytest.mark.asyncio
    async def test_database_ids_are_not_reused(self, database_client):
        await database_client.delete(f"{BASE}/3")

        response = await database_client.post(BASE, json={"name": "Zoo"})
        assert response.json()["id"] == 4


class TestPointOfInterestXmlRepresentation:

    @pytest.mark.asyncio
    async def test_list_as_xml(self, client):
        response = await client.get(BASE, headers=XML)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")

        root = ET.fromstring(response.content)
        assert root.tag == "PointsOfInterest"
        assert [p.findtext("Name") for p in root.findall("PointOfInterest")] == [
            "Cathedral",
            "Antwerp Central Station",
        ]

    @pytest.mark.asyncio
    async def test_detail_as_xml(self, client):
        response = await client.get(f"{BASE}/3", headers=XML)
        root = ET.fromstring(response.content)
        assert root.tag == "PointOfInterest"
        assert root.findtext("Id") == "3"
        assert root.findtext("Description") == "The finest example of railway architecture in Belgium."

    @pytest.mark.asyncio
    async def test_create_as_xml(self, client):
        response = await client.post(BASE, json={"name": "Zoo"}, headers=XML)
        assert response.status_code == 201
        assert response.headers["content-type"].startswith("application/xml")
        assert response.headers["Location"].endswith("/api/cities/2/pointsofinterest/4")

        root = ET.fromstring(response.content)
        assert root.findtext("Id") == "4"
        assert root.findtext("Name") == "Zoo"
        assert root.find("Description").text is None


class TestOversizedIds:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", f"/api/cities/{OVERSIZED_ID}/pointsofinterest"),
            ("GET", f"/api/cities/{OVERSIZED_ID}/pointsofinterest/1"),
            ("GET", f"{BASE}/{OVERSIZED_ID}"),
            ("DELETE", f"{BASE}/{OVERSIZED_ID}"),
        ],
    )
    async def test_nested_routes_are_404(self, client, method, path):
        response = await client.request(method, path)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_create_in_oversized_city_is_404(self, client):
        response = await client.post(f"/api/cities/{OVERSIZED_ID}/pointsofinterest", json={"name": "Zoo"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_put_and_patch_are_404(self, client):
        put = await client.put(f"{BASE}/{OVERSIZED_ID}", json={"name": "Ghost"})
        patch = await client.patch(
            f"{BASE}/{OVERSIZED_ID}", json=[{"op": "replace", "path": "/name", "value": "x"}]
        )
        assert (put.status_code, patch.status_code) == (404, 404)


class TestFaults:

    @staticmethod
    def _client_with(repository):
        app = create_app(store_backend="memory", mail_service=MagicMock())

        async def override():
            yield repository

        app.dependency_overrides[get_city_info_repository] = override
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    @pytest.mark.asyncio
    async def test_list_fault_returns_generic_500(self):
        repository = MagicMock(spec=CityInfoRepository)
        repository.city_exists = AsyncMock(return_value=True)
        repository.get_points_of_interest_for_city = AsyncMock(side_effect=RuntimeError("disk on fire"))

        async with self._client_with(repository) as client:
            response = await client.get(BASE)

        assert response.status_code == 500
        assert response.json()["message"] == GENERIC_FAULT
        assert "disk on fire" not in response.text

    @pytest.mark.asyncio
    async def test_failed_save_returns_500(self):
        repository = MagicMock(spec=CityInfoRepository)
        repository.city_exists = AsyncMock(return_value=True)
        repository.add_point_of_interest_for_city = AsyncMock()
        repository.save = AsyncMock(return_value=False)

        async with self._client_with(repository) as client:
            response = await client.post(BASE, json={"name": "Zoo"})

        assert response.status_code == 500
        assert response.json()["message"] == GENERIC_FAULT
