import json

import pytest

from neodictate.models.dictate import Dictate, Step


def test_serialize_is_compact_with_ts_first():
    dictate = Dictate(timestamp_ns=1, steps=(Step(1, (16777215, 16777215)),))
    assert dictate.serialize() == '{"TS":1,"Data":[{"Steps":1,"Colors":[16777215,16777215]}]}'


def test_serialize_large_timestamp_stays_integer():
    ts = 1_700_000_000_123_456_789
    payload = json.loads(Dictate(timestamp_ns=ts, steps=(Step(0, ()),)).serialize())
    assert payload == {"TS": ts, "Data": [{"Steps": 0, "Colors": []}]}


@pytest.mark.parametrize("dictate", [
    Dictate(timestamp_ns=1, steps=()),
    Dictate(timestamp_ns=1, steps=(Step(-1, (0,)),)),
    Dictate(timestamp_ns=1, steps=(Step(1, (0x1000000,)),)),
    Dictate(timestamp_ns=1, steps=(Step(1, (True,)),)),
    Dictate(timestamp_ns=1.5, steps=(Step(1, (0,)),)),
])
def test_validate_rejects_unsendable(dictate):
    with pytest.raises((ValueError, TypeError)):
        dictate.serialize()
