"""HTTP contract tests for the city endpoints."""

import pytest
from bson import ObjectId

from city_manager.cities.service import CitiesService
from city_manager.cities.views import parse_page


async def _create(client, name, count=1):
    r = await client.post("/cities", json={"cityName": name, "count": count})
    assert r.status_code == 201, r.text
    return r.json()


class TestParsePage:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, 1),
            ("", 1),
            ("abc", 1),
            ("0", 1),
            ("-3", 1),
            ("2", 2),
            (" 3", 3),
            ("2abc", 2),
            ("4.7", 4),
        ],
    )
    def test_lenient_parsing(self, raw, expected):
        assert parse_page(raw) == expected


class TestListCities:

    async def test_defaults(self, client):
        for name in ("Boston", "Paris"):
            await _create(client, name)
        r = await client.get("/api/cities")
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 2
        assert data["page"] == 1
        assert data["totalPages"] == 1
        assert {c["cityName"] for c in data["cities"]} == {"Boston", "Paris"}
        assert all("_id" in c for c in data["cities"])

    async def test_page_two_of_seven(self, client):
        for i in range(7):
            await _create(client, f"City {i}")
        r = await client.get("/api/cities", params={"page": 2})
        data = r.json()
        assert len(data["cities"]) == 2
        assert data["totalPages"] == 2
        assert data["total"] == 7

    async def test_search_param(self, client):
        for name in ("Boston", "Paris", "New Boston"):
            await _create(client, name)
        r = await client.get("/api/cities", params={"search": "boston"})
        data = r.json()
        assert data["total"] == 2
        assert {c["cityName"] for c in data["cities"]} == {"Boston", "New Boston"}

    async def test_unparsable_page_defaults_to_one(self, client):
        await _create(client, "Boston")
        r = await client.get("/api/cities", params={"page": "abc"})
        assert r.status_code == 200
        assert r.json()["page"] == 1
        assert len(r.json()["cities"]) == 1

    async def test_out_of_range_page(self, client):
        await _create(client, "Boston")
        r = await client.get("/api/cities", params={"page": 9})
        assert r.status_code == 200
        assert r.json()["cities"] == []
        assert r.json()["page"] == 9

    async def test_store_failure_is_500_with_message(self, client, monkeypatch):
        async def broken(cls, term="", page=1):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(CitiesService, "search", classmethod(broken))
        r = await client.get("/api/cities")
        assert r.status_code == 500
        assert r.json() == {"message": "Server Error"}


class TestCreateCity:

    async def test_created(self, client):
        r = await client.post("/cities", json={"cityName": "Boston", "count": 3})
        assert r.status_code == 201
        data = r.json()
        assert data["cityName"] == "Boston"
        assert data["count"] == 3
        assert ObjectId.is_valid(data["_id"])

    async def test_duplicate_is_409(self, client):
        await _create(client, "Boston", 3)
        r = await client.post("/cities", json={"cityName": "boston", "count": 9})
        assert r.status_code == 409
        assert r.json() == {"error": "City with this name already exists."}

    @pytest.mark.parametrize(
        "body",
        [
            {"count": 1},
            {"cityName": "Boston"},
            {"cityName": "", "count": 1},
            {"cityName": "   ", "count": 1},
            {"cityName": "Boston", "count": -1},
            {"cityName": "Boston", "count": "many"},
        ],
    )
    async def test_invalid_body_is_400(self, client, body):
        r = await client.post("/cities", json=body)
        assert r.status_code == 400
        assert "error" in r.json()

    async def test_malformed_json_is_400(self, client):
        r = await client.post(
            "/cities", content=b"{not json", headers={"content-type": "application/json"}
        )
        assert r.status_code == 400

    async def test_store_failure_is_400(self, client, monkeypatch):
        async def broken(cls, name, count):
            raise RuntimeError("write failed")

        monkeypatch.setattr(CitiesService, "create", classmethod(broken))
        r = await client.post("/cities", json={"cityName": "Boston", "count": 1})
        assert r.status_code == 400
        assert r.json() == {"error": "Failed to create city"}

    async def test_long_name_accepted(self, client):
        name = "Llanfair" + "a" * 300
        r = await client.post("/cities", json={"cityName": name, "count": 1})
        assert r.status_code == 201
        assert r.json()["cityName"] == name

    async def test_oversized_body_is_413(self, client):
        r = await client.post("/cities", json={"cityName": "x" * 70000, "count": 1})
        assert r.status_code == 413


class TestGetCity:

    async def test_found(self, client):
        created = await _create(client, "Boston", 3)
        r = await client.get(f"/cities/{created['_id']}")
        assert r.status_code == 200
        assert r.json() == created

    async def test_not_found(self, client):
        r = await client.get(f"/cities/{ObjectId()}")
        assert r.status_code == 404
        assert r.json() == {"error": "City not found"}

    async def test_malformed_id_not_found(self, client):
        r = await client.get("/cities/not-an-id")
        assert r.status_code == 404

    async def test_store_failure_is_500(self, client, monkeypatch):
        async def broken(cls, city_id):
            raise RuntimeError("timeout")

        monkeypatch.setattr(CitiesService, "get_by_id", classmethod(broken))
        r = await client.get(f"/cities/{ObjectId()}")
        assert r.status_code == 500
        assert r.json() == {"error": "Failed to fetch city"}


class TestUpdateCity:

    async def test_updated(self, client):
        created = await _create(client, "Boston", 3)
        r = await client.put(f"/cities/{created['_id']}", json={"cityName": "Boston", "count": 4})
        assert r.status_code == 200
        assert r.json() == {**created, "count": 4}

    async def test_name_taken_is_409(self, client):
        boston = await _create(client, "Boston")
        await _create(client, "Paris")
        r = await client.put(f"/cities/{boston['_id']}", json={"cityName": "PARIS", "count": 1})
        assert r.status_code == 409
        assert r.json() == {"error": "City with this name already exists."}
        assert (await client.get(f"/cities/{boston['_id']}")).json()["cityName"] == "Boston"

    async def test_not_found(self, client):
        r = await client.put(f"/cities/{ObjectId()}", json={"cityName": "Boston", "count": 1})
        assert r.status_code == 404
        assert r.json() == {"error": "City not found"}

    async def test_invalid_body_is_400(self, client):
        created = await _create(client, "Boston")
        r = await client.put(f"/cities/{created['_id']}", json={"cityName": "Boston", "count": -2})
        assert r.status_code == 400

    async def test_store_failure_is_400(self, client, monkeypatch):
        async def broken(cls, city_id, name, count):
            raise RuntimeError("write failed")

        monkeypatch.setattr(CitiesService, "update", classmethod(broken))
        r = await client.put(f"/cities/{ObjectId()}", json={"cityName": "Boston", "count": 1})
        assert r.status_code == 400
        assert r.json() == {"error": "Failed to update city"}


class TestDeleteCity:

    async def test_deleted_then_404(self, client):
        created = await _create(client, "Boston")
        r = await client.delete(f"/cities/{created['_id']}")
        assert r.status_code == 200
        assert r.json() == {"message": "City deleted successfully"}

        r = await client.delete(f"/cities/{created['_id']}")
        assert r.status_code == 404
        assert r.json() == {"error": "City not found"}

    async def test_store_failure_is_500(self, client, monkeypatch):
        async def broken(cls, city_id):
            raise RuntimeError("timeout")

        monkeypatch.setattr(CitiesService, "delete", classmethod(broken))
        r = await client.delete(f"/cities/{ObjectId()}")
        assert r.status_code == 500
        assert r.json() == {"error": "Failed to delete city"}


class TestHealth:

    async def test_root(self, client):
        r = await client.get("/")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    async def test_health_reports_database(self, client):
        r = await client.get("/health")
        assert r.json()["database"] == "connected"
