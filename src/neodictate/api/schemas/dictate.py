"""
Dictate schemas - Pydantic models for update request bodies

Field names follow what the controllers' web UI posts. Both "Steps"/"steps"
and "color"/"Color", "time"/"Time" are accepted.
"""

from typing import Any, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from neodictate.models.dictate import MAX_RGB


class RGBTimeStep(BaseModel):
    """One packed RGB color held for `time` milliseconds"""
    color: int = Field(
        ge=0,
        le=MAX_RGB,
        validation_alias=AliasChoices("color", "Color"),
        description="Packed RGB color, e.g. 16711680 (0xFF0000) for red"
    )
    time: int = Field(
        ge=0,
        validation_alias=AliasChoices("time", "Time"),
        description="Duration in milliseconds"
    )

    def as_pair(self) -> Tuple[int, int]:
        return self.color, self.time


class RGBTimeRequest(BaseModel):
    """Body of POST /update/rgbtime/<id>"""
    steps: List[RGBTimeStep] = Field(
        validation_alias=AliasChoices("Steps", "steps"),
        description="Ordered steps, played back first to last"
    )

    model_config = ConfigDict(json_schema_extra={
        "example": {"Steps": [{"color": 16711680, "time": 1000}]}
    })


class HSVColor(BaseModel):
    """
    HSV color as the iro.js picker reports it

    h: degrees 0-360, s and v: percent 0-100.

    The picker's serialized color object nests the channels under "$"
    (alongside "initialValue" and "index"); that shape is unwrapped.
    """
    h: float = Field(ge=0, le=360)
    s: float = Field(ge=0, le=100)
    v: float = Field(ge=0, le=100)

    @model_validator(mode="before")
    @classmethod
    def unwrap_picker_color(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("$"), dict):
            return data["$"]
        return data

    def as_tuple(self) -> Tuple[float, float, float]:
        return self.h, self.s, self.v


class HSVTimeStep(BaseModel):
    """One HSV color held for `time` milliseconds"""
    color: HSVColor = Field(validation_alias=AliasChoices("color", "Color"))
    time: int = Field(
        ge=0,
        validation_alias=AliasChoices("time", "Time"),
        description="Duration in milliseconds"
    )

    def as_pair(self) -> Tuple[Tuple[float, float, float], int]:
        return self.color.as_tuple(), self.time


class HSVTimeRequest(BaseModel):
    """Body of POST /update/hsvtime/<id>"""
    steps: List[HSVTimeStep] = Field(
        validation_alias=AliasChoices("Steps", "steps"),
        description="Ordered steps, played back first to last"
    )

    model_config = ConfigDict(json_schema_extra={
        "example": {"Steps": [{"color": {"h": 0, "s": 100, "v": 100}, "time": 500}]}
    })


class EndpointSummary(BaseModel):
    """Read-only view of one endpoint"""
    id: str
    name: str
    location: str
    led_count: int
    step_duration_ms: int
    dictate_ts: Optional[int] = Field(None, description="Timestamp (ns) of the active dictate")
    steps: int = Field(description="Number of steps in the active dictate")


class EndpointListResponse(BaseModel):
    endpoints: List[EndpointSummary]
    count: int
