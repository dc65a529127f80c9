"""
Tests for POST /update/<kind>/<id> and the static web UI
"""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from neodictate.api.main import create_app
from neodictate.managers import ServerSettings
from neodictate.services import ServiceContainer

TEST_CLIENT = "8c:aa:b5:7a:7d:13"
WHITE_TWO_LEDS = '{"TS":1,"Data":[{"Steps":1,"Colors":[16777215,16777215]}]}'


async def _status(client, leds="2", length="100"):
    response = await client.get("/status", params={"id": TEST_CLIENT, "leds": leds, "len": length})
    assert response.status_code == 200
    return response.text


# ============================================================================
# rgbtime
# ============================================================================

@pytest.mark.asyncio
async def test_rgbtime_then_status(client, clock):
    await _status(client)

    response = await client.post(
        f"/update/rgbtime/{TEST_CLIENT}",
        json={"Steps": [{"color": 16711680, "time": 1000}]},
    )
    assert response.status_code == 200
    assert response.text == "ok"

    body = await _status(client)
    assert body == f'{{"TS":{clock.now_ns},"Data":[{{"Steps":10,"Colors":[16711680,16711680]}}]}}'


@pytest.mark.asyncio
async def test_gutter_rgbtime_round_trip(client, clock):
    gutter = "8c:aa:b5:7a:bc:ad"
    await client.get("/status", params={"id": gutter, "leds": "2", "len": "100"})

    response = await client.post(
        f"/update/rgbtime/{gutter}",
        content=b'{"Steps":[{"color":16711680,"time":1000}]}',
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 200

    status = await client.get("/status", params={"id": gutter, "leds": "2", "len": "100"})
    assert status.status_code == 200
    assert status.text == f'{{"TS":{clock.now_ns},"Data":[{{"Steps":10,"Colors":[16711680,16711680]}}]}}'


@pytest.mark.asyncio
@pytest.mark.parametrize("kind,body", [
    ("basic", None),
    ("rgbtime", {"Steps": [{"color": 1, "time": 100}]}),
    ("hsvtime", {"Steps": [{"color": {"h": 0, "s": 0, "v": 100}, "time": 100}]}),
])
async def test_unknown_endpoint_on_every_kind(client, registry, kind, body):
    before = [e.serialized_dictate for e in registry.all()]

    response = await client.post(f"/update/{kind}/00:00:00:00:00:00", json=body)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ENDPOINT_NOT_FOUND"
    assert [e.serialized_dictate for e in registry.all()] == before


@pytest.mark.asyncio
async def test_unrouted_path_is_not_found(client):
    response = await client.get("/colors")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_rgbtime_uses_reported_wire_parameters(client):
    await _status(client, leds="3", length="250")

    response = await client.post(
        f"/update/rgbtime/{TEST_CLIENT}",
        json={"steps": [{"Color": 255, "Time": 1000}, {"color": 65280, "time": 100}]},
    )
    assert response.status_code == 200

    payload = json.loads(await _status(client, leds="3", length="250"))
    assert payload["Data"] == [
        {"Steps": 4, "Colors": [255, 255, 255]},
        {"Steps": 0, "Colors": [65280, 65280, 65280]},
    ]


@pytest.mark.asyncio
async def test_unknown_endpoint_leaves_state_unchanged(client, registry):
    response = await client.post(
        "/update/rgbtime/00:00:00:00:00:00",
        json={"Steps": [{"color": 16711680, "time": 1000}]},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ENDPOINT_NOT_FOUND"
    assert await _status(client) == WHITE_TWO_LEDS


@pytest.mark.asyncio
@pytest.mark.parametrize("body,code", [
    (b"not json", "MALFORMED_BODY"),
    (b'{"Steps": [{"color": 16777216, "time": 1}]}', "MALFORMED_BODY"),
    (b'{"Steps": [{"color": 1, "time": -1}]}', "MALFORMED_BODY"),
    (b'{"Steps": [{"color": 1}]}', "MALFORMED_BODY"),
    (b'{"Colors": []}', "MALFORMED_BODY"),
    (b'{"Steps": []}', "EMPTY_SEQUENCE"),
])
async def test_rgbtime_bad_body(client, body, code):
    response = await client.post(
        f"/update/rgbtime/{TEST_CLIENT}",
        content=body,
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == code
    assert await _status(client) == WHITE_TWO_LEDS


@pytest.mark.asyncio
async def test_rgbtime_requires_json_content_type(client):
    response = await client.post(
        f"/update/rgbtime/{TEST_CLIENT}",
        content=b'{"Steps": [{"color": 1, "time": 100}]}',
        headers={"content-type": "text/plain"},
    )

    assert response.status_code == 415
    assert response.json()["error"]["code"] == "UNSUPPORTED_MEDIA_TYPE"


@pytest.mark.asyncio
async def test_zero_step_length_is_conflict(client):
    await _status(client, length="0")

    response = await client.post(
        f"/update/rgbtime/{TEST_CLIENT}",
        json={"Steps": [{"color": 1, "time": 100}]},
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFIGURATION_ERROR"


# ============================================================================
# hsvtime
# ============================================================================

@pytest.mark.asyncio
async def test_hsvtime_plain_color(client):
    response = await client.post(
        f"/update/hsvtime/{TEST_CLIENT}",
        json={"Steps": [{"color": {"h": 120, "s": 100, "v": 100}, "time": 300}]},
    )
    assert response.status_code == 200
    assert response.text == "ok"

    payload = json.loads(await _status(client))
    assert payload["Data"] == [{"Steps": 3, "Colors": [0x00FF00, 0x00FF00]}]


@pytest.mark.asyncio
async def test_hsvtime_picker_color_object(client):
    picker_color = {"$": {"h": 0, "s": 100, "v": 100}, "initialValue": "#ffffff", "index": 0}
    response = await client.post(
        f"/update/hsvtime/{TEST_CLIENT}",
        json={"Steps": [{"color": picker_color, "time": 500}, {"color": picker_color, "time": 100}]},
    )
    assert response.status_code == 200

    payload = json.loads(await _status(client))
    assert payload["Data"] == [
        {"Steps": 5, "Colors": [0xFF0000, 0xFF0000]},
        {"Steps": 1, "Colors": [0xFF0000, 0xFF0000]},
    ]


@pytest.mark.asyncio
async def test_hsvtime_out_of_range(client):
    response = await client.post(
        f"/update/hsvtime/{TEST_CLIENT}",
        json={"Steps": [{"color": {"h": 0, "s": 101, "v": 100}, "time": 500}]},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MALFORMED_BODY"


# ============================================================================
# basic
# ============================================================================

@pytest.mark.asyncio
async def test_basic_assigns_random_palette_color(client, palette, clock):
    response = await client.post(f"/update/basic/{TEST_CLIENT}")

    assert response.status_code == 200
    assert response.text == "success SetColor"

    payload = json.loads(await _status(client))
    assert payload["TS"] == clock.now_ns
    (step,) = payload["Data"]
    assert step["Steps"] == 1
    assert len(step["Colors"]) == 2
    assert step["Colors"][0] in palette.colors.values()
    assert step["Colors"][0] == step["Colors"][1]


@pytest.mark.asyncio
async def test_basic_ignores_body_and_content_type(client):
    response = await client.post(
        f"/update/basic/{TEST_CLIENT.upper()}",
        content=b"whatever",
        headers={"content-type": "text/plain"},
    )
    assert response.status_code == 200


# ============================================================================
# Path shape
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("path", [
    "/update",
    "/update/",
    "/update/basic",
    "/update/rgbtime",
    f"/update/colors/{TEST_CLIENT}",
    f"/update/basic/{TEST_CLIENT}/extra",
    f"/update/basic/{TEST_CLIENT}/",
])
async def test_malformed_update_paths(client, path):
    response = await client.post(path)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MALFORMED_PATH"
    assert await _status(client) == WHITE_TWO_LEDS


@pytest.mark.asyncio
async def test_update_requires_post(client):
    response = await client.get(f"/update/basic/{TEST_CLIENT}")
    assert response.status_code == 405


# ============================================================================
# Static web UI
# ============================================================================

@pytest.mark.asyncio
async def test_root_without_static_dir(client):
    response = await client.get("/")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_root_serves_index(tmp_path, registry, palette):
    (tmp_path / "index.html").write_text("<html>picker</html>", encoding="utf-8")
    (tmp_path / "static").mkdir()
    (tmp_path / "static" / "iro.min.js").write_text("// iro", encoding="utf-8")

    services = ServiceContainer(
        registry=registry,
        palette=palette,
        settings=ServerSettings(static_dir=tmp_path),
    )
    app = create_app(services)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        index = await ac.get("/")
        asset = await ac.get("/static/iro.min.js")

    assert index.status_code == 200
    assert "picker" in index.text
    assert asset.status_code == 200
    assert asset.text == "// iro"
