"""Dictate domain models"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Tuple

MAX_RGB = 0xFFFFFF


@dataclass(frozen=True)
class Step:
    """One hold-period: a color per LED shown for hold_count client steps"""
    hold_count: int
    colors: Tuple[int, ...]

    def to_wire(self) -> Dict[str, Any]:
        return {"Steps": self.hold_count, "Colors": list(self.colors)}


@dataclass(frozen=True)
class Dictate:
    """
    Timestamped color sequence assigned to an endpoint.

    Wire format (what the controller firmware parses):
        {"TS":1,"Data":[{"Steps":1,"Colors":[16777215,16777215]}]}
    """
    timestamp_ns: int
    steps: Tuple[Step, ...]

    def to_wire(self) -> Dict[str, Any]:
        return {
            "TS": self.timestamp_ns,
            "Data": [step.to_wire() for step in self.steps],
        }

    def validate(self) -> None:
        """Raise ValueError/TypeError if this dictate can't be sent to a controller"""
        if not self.steps:
            raise ValueError("dictate has no steps")
        if not _is_int(self.timestamp_ns):
            raise TypeError(f"timestamp must be int, got {type(self.timestamp_ns).__name__}")
        for index, step in enumerate(self.steps):
            if not _is_int(step.hold_count) or step.hold_count < 0:
                raise ValueError(f"step {index}: invalid hold count {step.hold_count!r}")
            for color in step.colors:
                if not _is_int(color) or not 0 <= color <= MAX_RGB:
                    raise ValueError(f"step {index}: invalid color {color!r}")

    def serialize(self) -> str:
        """Compact JSON, key order TS then Data"""
        self.validate()
        return json.dumps(self.to_wire(), separators=(",", ":"))


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
