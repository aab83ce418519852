"""
Tests for reference data: seeding, locations and container types.

Covers:
- Seed counts and idempotent re-seed
- /api/v1/locations lookups and CRUD
- /api/v1/container-types derived values, CRUD and weight helpers
"""

from decimal import Decimal

import pytest

from app.database_init import (
    DEFAULT_AIRPORTS,
    DEFAULT_CONTAINER_TYPES,
    DEFAULT_SEA_PORTS,
    seed_container_types,
    seed_locations,
)
from tests.factories import fcl_rate_payload


NEW_CONTAINER = {
    "code": "45hc",
    "name": "45ft High Cube",
    "length_m": "13.56",
    "width_m": "2.35",
    "height_m": "2.70",
    "max_gross_weight_kg": "32500",
    "tare_weight_kg": "4000",
}


# ── Seeding ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_seed_is_idempotent(session_factory):
    async with session_factory() as session:
        assert await seed_locations(session) == len(DEFAULT_SEA_PORTS) + len(DEFAULT_AIRPORTS)
        assert await seed_container_types(session) == len(DEFAULT_CONTAINER_TYPES)

    async with session_factory() as session:
        assert await seed_locations(session) == 0
        assert await seed_container_types(session) == 0


@pytest.mark.asyncio
async def test_seeded_container_types_have_derived_values(client, reference_data):
    resp = await client.get("/api/v1/container-types/code/20GP")
    assert resp.status_code == 200
    data = resp.json()
    # 5.90 x 2.35 x 2.39
    assert Decimal(data["volume_cbm"]) == Decimal("33.137")
    assert Decimal(data["max_payload_kg"]) == Decimal("28250")


# ── Locations ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_location_lookups(client, reference_data):
    resp = await client.get("/api/v1/locations/seaports")
    assert len(resp.json()) == len(DEFAULT_SEA_PORTS)

    resp = await client.get("/api/v1/locations/airports")
    assert {loc["location_type"] for loc in resp.json()} == {"AIRPORT"}

    resp = await client.get("/api/v1/locations/country-codes")
    assert "IND" in resp.json()
    assert resp.json() == sorted(resp.json())

    resp = await client.get("/api/v1/locations", params={"search": "rotterdam"})
    assert [loc["code"] for loc in resp.json()["items"]] == ["SHP_NLRTM"]

    resp = await client.get("/api/v1/locations/code/air_indel")
    assert resp.json()["id"] == reference_data["AIR_INDEL"]

    assert (await client.get("/api/v1/locations/99999")).status_code == 404


@pytest.mark.asyncio
async def test_location_filters(client, reference_data):
    resp = await client.get("/api/v1/locations", params={
        "country_code": "sgp",
        "location_type": "SEA_PORT",
    })
    body = resp.json()
    assert body["total"] == 1
    assert body["items"][0]["code"] == "SHP_SGSIN"


@pytest.mark.asyncio
async def test_create_update_delete_location(client, reference_data):
    resp = await client.post("/api/v1/locations", json={
        "code": "shp_lkcmb",
        "name": "Port of Colombo",
        "country": "Sri Lanka",
        "country_code": "lka",
        "location_type": "sea_port",
    })
    assert resp.status_code == 201
    created = resp.json()
    assert created["code"] == "SHP_LKCMB"
    assert created["location_type"] == "SEA_PORT"

    duplicate = await client.post("/api/v1/locations", json={
        "code": "SHP_LKCMB",
        "name": "Colombo again",
        "country": "Sri Lanka",
        "country_code": "LKA",
        "location_type": "SEA_PORT",
    })
    assert duplicate.status_code == 400

    resp = await client.put(f"/api/v1/locations/{created['id']}", json={"name": "Colombo Port"})
    assert resp.json()["name"] == "Colombo Port"

    resp = await client.delete(f"/api/v1/locations/{created['id']}")
    assert resp.status_code == 204
    assert (await client.get(f"/api/v1/locations/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_location_used_by_rate_cannot_be_deleted(client, reference_data):
    await client.post("/api/v1/courier-rates", json=fcl_rate_payload(reference_data))

    resp = await client.delete(f"/api/v1/locations/{reference_data['SHP_INMUN']}")
    assert resp.status_code == 400


# ── Container types ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_container_type_derives_volume_and_payload(client, reference_data):
    resp = await client.post("/api/v1/container-types", json=NEW_CONTAINER)
    assert resp.status_code == 201
    data = resp.json()
    assert data["code"] == "45HC"
    # 13.56 x 2.35 x 2.70
    assert Decimal(data["volume_cbm"]) == Decimal("86.038")
    assert Decimal(data["max_payload_kg"]) == Decimal("28500")

    resp = await client.put(f"/api/v1/container-types/{data['id']}", json={
        "height_m": "2.39",
        "tare_weight_kg": "5000",
    })
    assert resp.status_code == 200
    updated = resp.json()
    assert Decimal(updated["volume_cbm"]) == Decimal("76.160")
    assert Decimal(updated["max_payload_kg"]) == Decimal("27500")


@pytest.mark.asyncio
async def test_container_type_validation(client, reference_data):
    resp = await client.post("/api/v1/container-types", json={**NEW_CONTAINER, "code": "20GP"})
    assert resp.status_code == 400

    resp = await client.post("/api/v1/container-types", json={
        **NEW_CONTAINER, "tare_weight_kg": "32500",
    })
    assert resp.status_code == 400

    resp = await client.post("/api/v1/container-types", json={**NEW_CONTAINER, "length_m": "0"})
    assert resp.status_code == 422

    resp = await client.put(
        f"/api/v1/container-types/{reference_data['20GP']}",
        json={"tare_weight_kg": "40000"},
    )
    assert resp.status_code == 400

    assert (await client.put("/api/v1/container-types/999", json={"name": "x"})).status_code == 404


@pytest.mark.asyncio
async def test_container_type_used_by_fcl_rate_cannot_be_deleted(client, reference_data):
    await client.post("/api/v1/courier-rates", json=fcl_rate_payload(reference_data))

    resp = await client.delete(f"/api/v1/container-types/{reference_data['20GP']}")
    assert resp.status_code == 400

    resp = await client.delete(f"/api/v1/container-types/{reference_data['20FR']}")
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_list_and_search_container_types(client, reference_data):
    resp = await client.get("/api/v1/container-types")
    body = resp.json()
    assert body["total"] == len(DEFAULT_CONTAINER_TYPES)
    volumes = [Decimal(item["volume_cbm"]) for item in body["items"]]
    assert volumes == sorted(volumes)

    resp = await client.get("/api/v1/container-types/search", params={"q": "refrigerated"})
    assert {item["code"] for item in resp.json()} == {"20RF", "40RF", "40RH"}


@pytest.mark.asyncio
async def test_suitable_containers_smallest_first(client, reference_data):
    resp = await client.get("/api/v1/container-types/suitable", params={
        "weight_kg": "25000",
        "volume_cbm": "60",
    })
    codes = [item["code"] for item in resp.json()]
    assert codes[0] == "40RF"
    assert "40HC" in codes
    assert not any(code.startswith("20") for code in codes)


@pytest.mark.asyncio
async def test_chargeable_weight_helper(client):
    resp = await client.get("/api/v1/container-types/chargeable-weight", params={
        "gross_weight_kg": "10",
        "volume_cbm": "0.2",
    })
    data = resp.json()
    assert Decimal(data["volume_weight_kg"]) == Decimal("33.4")
    assert Decimal(data["chargeable_weight_kg"]) == Decimal("33.4")

    resp = await client.get("/api/v1/container-types/chargeable-weight")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(client, reference_data):
    resp = await client.get("/api/v1/locations", params={"search": "%"})
    assert resp.json()["total"] == 0

    resp = await client.get("/api/v1/locations", params={"search": "shp_usn"})
    assert [loc["code"] for loc in resp.json()["items"]] == ["SHP_USNY"]

    resp = await client.get("/api/v1/container-types/search", params={"q": "20_p"})
    assert resp.json() == []

    resp = await client.get("/api/v1/container-types/search", params={"q": "%"})
    assert resp.json() == []
