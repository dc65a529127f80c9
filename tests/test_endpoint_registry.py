import asyncio
import json

import pytest

from conftest import GUTTER_KITCHEN, TEST_CLIENT
from neodictate.models import EndpointConfig, Location, Step
from neodictate.models.errors import EndpointNotFoundError, SerializationError
from neodictate.services import EndpointRegistry

WHITE_TWO_LEDS = '{"TS":1,"Data":[{"Steps":1,"Colors":[16777215,16777215]}]}'


def test_initialize_assigns_white(registry):
    endpoint = registry.resolve(TEST_CLIENT)

    assert endpoint.serialized_dictate == WHITE_TWO_LEDS
    assert endpoint.dictate_timestamp_ns == 1

    gutter = registry.resolve(GUTTER_KITCHEN)
    assert gutter.current_dictate.steps == (Step(1, (0xFFFFFF,) * 5),)


def test_initialize_defaults_to_clock(endpoint_configs, clock):
    reg = EndpointRegistry(endpoint_configs, clock=clock)
    reg.initialize()

    assert all(e.dictate_timestamp_ns == clock.now_ns for e in reg.all())


def test_resolve_is_case_insensitive(registry):
    assert registry.resolve(TEST_CLIENT.upper()) is registry.resolve(TEST_CLIENT)
    assert registry.get("8C:AA:B5:7A:BC:AD").display_name == "Gutter Kitchen"


def test_resolve_unknown(registry):
    with pytest.raises(EndpointNotFoundError) as exc_info:
        registry.resolve("00:00:00:00:00:00")
    assert exc_info.value.status_code == 400
    assert registry.get("") is None


def test_duplicate_ids_rejected(endpoint_configs):
    upper = EndpointConfig(
        id=TEST_CLIENT.upper(),
        display_name="Again",
        location=Location.TEST,
        led_count=1,
        step_duration_ms=100,
    )
    with pytest.raises(ValueError):
        EndpointRegistry(endpoint_configs + [upper])


def test_ids_are_stored_lower_case():
    config = EndpointConfig(
        id="AA:BB:CC:DD:EE:FF",
        display_name="Porch",
        location=Location.INDOOR,
        led_count=1,
        step_duration_ms=100,
    )
    reg = EndpointRegistry([config])
    assert reg.ids() == ["aa:bb:cc:dd:ee:ff"]
    assert reg.resolve("aa:bb:cc:dd:ee:ff").id == "aa:bb:cc:dd:ee:ff"


@pytest.mark.asyncio
async def test_apply_dictate_uses_clock(registry, clock):
    endpoint = registry.resolve(TEST_CLIENT)
    clock.advance(5)

    dictate = await registry.apply_dictate(endpoint, [Step(10, (16711680, 16711680))])

    assert dictate.timestamp_ns == clock.now_ns
    assert endpoint.current_dictate is dictate
    assert json.loads(endpoint.serialized_dictate) == {
        "TS": clock.now_ns,
        "Data": [{"Steps": 10, "Colors": [16711680, 16711680]}],
    }


@pytest.mark.asyncio
async def test_apply_dictate_explicit_timestamp(registry):
    endpoint = registry.resolve(TEST_CLIENT)
    await registry.apply_dictate(endpoint, [Step(1, (0, 0))], timestamp_ns=42)
    assert endpoint.serialized_dictate.startswith('{"TS":42,')


@pytest.mark.asyncio
async def test_same_dictate_serializes_identically(registry):
    endpoint = registry.resolve(GUTTER_KITCHEN)
    steps = [Step(1, (0xFF7F50,) * 5)]

    await registry.apply_dictate(endpoint, steps, timestamp_ns=7)
    first = endpoint.serialized_dictate
    await registry.apply_dictate(endpoint, steps, timestamp_ns=7)

    assert endpoint.serialized_dictate == first


@pytest.mark.asyncio
async def test_failed_serialization_keeps_previous_dictate(registry):
    endpoint = registry.resolve(TEST_CLIENT)
    before = endpoint.current_dictate

    with pytest.raises(SerializationError) as exc_info:
        await registry.apply_dictate(endpoint, [Step(1, (-1, -1))])
    assert exc_info.value.status_code == 500

    with pytest.raises(SerializationError):
        await registry.apply_dictate(endpoint, [])

    assert endpoint.current_dictate is before
    assert endpoint.serialized_dictate == WHITE_TWO_LEDS


@pytest.mark.asyncio
async def test_report_status_records_wire_parameters(registry):
    endpoint = registry.resolve(TEST_CLIENT)

    body = await registry.report_status(endpoint, 8, 50)

    assert body == WHITE_TWO_LEDS
    assert endpoint.led_count == 8
    assert endpoint.step_duration_ms == 50


@pytest.mark.asyncio
async def test_report_status_does_not_resize_active_dictate(registry):
    endpoint = registry.resolve(TEST_CLIENT)
    await registry.report_status(endpoint, 8, 50)

    assert await registry.report_status(endpoint, 8, 50) == WHITE_TWO_LEDS


@pytest.mark.asyncio
async def test_report_status_before_initialize(endpoint_configs):
    reg = EndpointRegistry(endpoint_configs)
    with pytest.raises(SerializationError):
        await reg.report_status(reg.resolve(TEST_CLIENT), 2, 100)


@pytest.mark.asyncio
async def test_set_wire_parameters(registry):
    endpoint = registry.resolve(GUTTER_KITCHEN)
    await registry.set_wire_parameters(endpoint, 30, 20)
    assert (endpoint.led_count, endpoint.step_duration_ms) == (30, 20)


@pytest.mark.asyncio
async def test_concurrent_writes_and_reads_stay_consistent(registry):
    """Every status body is a complete dictate from one write"""
    endpoint = registry.resolve(TEST_CLIENT)
    written = {1}

    async def write(ts):
        written.add(ts)
        await registry.apply_dictate(endpoint, [Step(ts, (ts, ts))], timestamp_ns=ts)

    async def read():
        return await registry.report_status(endpoint, 2, 100)

    results = await asyncio.gather(
        *(write(ts) for ts in range(100, 150)),
        *(read() for _ in range(50)),
    )

    for body in results[50:]:
        payload = json.loads(body)
        ts = payload["TS"]
        assert ts in written
        if ts != 1:
            assert payload["Data"] == [{"Steps": ts, "Colors": [ts, ts]}]

    assert endpoint.serialized_dictate == endpoint.current_dictate.serialize()


def test_snapshot(registry):
    entries = {e["id"]: e for e in registry.snapshot()}
    assert entries[TEST_CLIENT] == {
        "id": TEST_CLIENT,
        "name": "Test Client",
        "location": "TEST",
        "led_count": 2,
        "step_duration_ms": 100,
        "dictate_ts": 1,
        "steps": 1,
    }
