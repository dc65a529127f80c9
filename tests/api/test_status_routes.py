"""
Tests for GET /status and the operator endpoints under /api
"""

import pytest

TEST_CLIENT = "8c:aa:b5:7a:7d:13"
WHITE_TWO_LEDS = '{"TS":1,"Data":[{"Steps":1,"Colors":[16777215,16777215]}]}'


@pytest.mark.asyncio
async def test_status_returns_serialized_dictate(client):
    response = await client.get("/status", params={"id": TEST_CLIENT, "leds": "2", "len": "100"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.text == WHITE_TWO_LEDS


@pytest.mark.asyncio
async def test_status_id_is_case_insensitive(client):
    response = await client.get("/status", params={"id": TEST_CLIENT.upper(), "leds": "2", "len": "100"})
    assert response.status_code == 200
    assert response.text == WHITE_TWO_LEDS


@pytest.mark.asyncio
async def test_status_records_wire_parameters(client, registry):
    response = await client.get("/status", params={"id": TEST_CLIENT, "leds": "7", "len": "50"})
    assert response.status_code == 200

    endpoint = registry.resolve(TEST_CLIENT)
    assert endpoint.led_count == 7
    assert endpoint.step_duration_ms == 50


@pytest.mark.asyncio
@pytest.mark.parametrize("params,parameter", [
    ({"leds": "2", "len": "100"}, "id"),
    ({"id": "", "leds": "2", "len": "100"}, "id"),
    ({"id": TEST_CLIENT, "len": "100"}, "leds"),
    ({"id": TEST_CLIENT, "leds": "two", "len": "100"}, "leds"),
    ({"id": TEST_CLIENT, "leds": "-2", "len": "100"}, "leds"),
    ({"id": TEST_CLIENT, "leds": "2"}, "len"),
    ({"id": TEST_CLIENT, "leds": "2", "len": "1.5"}, "len"),
    ({"id": TEST_CLIENT, "leds": "65536", "len": "100"}, "leds"),
    ({"id": TEST_CLIENT, "leds": "9223372036854775808", "len": "100"}, "leds"),
    ({"id": TEST_CLIENT, "leds": "1" * 5000, "len": "100"}, "leds"),
    ({"id": TEST_CLIENT, "leds": "2", "len": "1" * 5000}, "len"),
])
async def test_status_invalid_parameters(client, registry, params, parameter):
    response = await client.get("/status", params=params)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_PARAMETER"
    assert error["details"]["parameter"] == parameter

    endpoint = registry.resolve(TEST_CLIENT)
    assert (endpoint.led_count, endpoint.step_duration_ms) == (2, 100)


@pytest.mark.asyncio
async def test_status_accepts_largest_wire_values(client, registry):
    response = await client.get("/status", params={"id": TEST_CLIENT, "leds": "65535", "len": "0065535"})
    assert response.status_code == 200

    endpoint = registry.resolve(TEST_CLIENT)
    assert (endpoint.led_count, endpoint.step_duration_ms) == (65535, 65535)


@pytest.mark.asyncio
async def test_status_unknown_endpoint(client):
    response = await client.get("/status", params={"id": "00:00:00:00:00:00", "leds": "2", "len": "100"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ENDPOINT_NOT_FOUND"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["endpoints"] == 2
    assert data["idle_refresher"] is False


@pytest.mark.asyncio
async def test_list_endpoints(client):
    response = await client.get("/api/endpoints")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    by_id = {e["id"]: e for e in data["endpoints"]}
    assert by_id[TEST_CLIENT]["name"] == "Test Client"
    assert by_id[TEST_CLIENT]["location"] == "TEST"
    assert by_id[TEST_CLIENT]["dictate_ts"] == 1
