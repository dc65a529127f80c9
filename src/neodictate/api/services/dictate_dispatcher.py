"""
API Dictate Dispatcher - protocol layer between routes and the registry

EXPLANATION:
Routes only deal with HTTP. This dispatcher:
1. Validates query parameters and update paths
2. Resolves the endpoint in the EndpointRegistry
3. Decodes update bodies and runs them through the codec
4. Applies the resulting steps

Every validation failure raises a ClientError before any state is touched.
"""

import random
import re
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from neodictate.api.schemas.dictate import HSVTimeRequest, RGBTimeRequest
from neodictate.managers.palette_manager import PaletteManager
from neodictate.models.endpoint import Endpoint
from neodictate.models.enums import UpdateKind
from neodictate.models.errors import (
    InvalidParameterError,
    MalformedBodyError,
    MalformedPathError,
    UnsupportedMediaTypeError,
)
from neodictate.services import codec
from neodictate.services.endpoint_registry import EndpointRegistry
from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

BASIC_CONFIRMATION = "success SetColor"
TIMED_CONFIRMATION = "ok"

_DIGITS = re.compile(r"[0-9]+")

# Controllers report leds/len as 16-bit counters
MAX_WIRE_VALUE = 0xFFFF


@dataclass(frozen=True)
class UpdateTarget:
    """Parsed /update/<kind>/<id> path"""
    kind: UpdateKind
    endpoint_id: str


def parse_update_path(path: str) -> UpdateTarget:
    """
    Split an update path into its kind and endpoint id

    "/update/basic/8c:aa:b5:7a:bc:ad" -> UpdateTarget(BASIC, "8c:aa:b5:7a:bc:ad")

    Raises:
        MalformedPathError: Too few segments, unknown kind, or any segment
            count other than exactly /update/<kind>/<id>
    """
    parts = path.split("/")
    if len(parts) < 3:
        raise MalformedPathError(path)

    try:
        kind = UpdateKind(parts[2])
    except ValueError:
        raise MalformedPathError(path, "unknown update type")

    if len(parts) != 4:
        raise MalformedPathError(path)

    return UpdateTarget(kind=kind, endpoint_id=parts[3])


def parse_non_negative_int(name: str, value: Optional[str], maximum: int = MAX_WIRE_VALUE) -> int:
    """
    Raises:
        InvalidParameterError: Missing, empty, not a plain decimal number,
            or larger than maximum
    """
    if value is None or value == "":
        raise InvalidParameterError(name, value, "missing")
    if not _DIGITS.fullmatch(value):
        raise InvalidParameterError(name, value, "must be a non-negative integer")
    digits = value.lstrip("0")
    if len(digits) > len(str(maximum)) or int(digits or "0") > maximum:
        raise InvalidParameterError(name, value, f"must be at most {maximum}")
    return int(digits or "0")


def _is_json(content_type: Optional[str]) -> bool:
    if not content_type:
        return True
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def _validation_errors(ex: ValidationError) -> list:
    return [
        {"field": ".".join(str(x) for x in error["loc"]), "message": error["msg"]}
        for error in ex.errors()
    ]


class DictateDispatcher:
    """Handles /status and the three /update shapes"""

    def __init__(
        self,
        registry: EndpointRegistry,
        palette: PaletteManager,
        rng: Optional[random.Random] = None
    ):
        self.registry = registry
        self.palette = palette
        self.rng = rng

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    async def status(self, raw_id: Optional[str], leds: Optional[str], length: Optional[str]) -> str:
        """
        Record the controller's wiring and return its serialized dictate.

        Args:
            raw_id: Controller MAC address
            leds: LED count the controller drives
            length: Controller step period in ms

        Returns:
            Serialized dictate, verbatim

        Raises:
            InvalidParameterError: Missing or unparsable parameter
            EndpointNotFoundError: Unknown id
        """
        if not raw_id:
            raise InvalidParameterError("id", raw_id, "missing")
        led_count = parse_non_negative_int("leds", leds)
        step_duration_ms = parse_non_negative_int("len", length)

        endpoint = self.registry.resolve(raw_id)
        body = await self.registry.report_status(endpoint, led_count, step_duration_ms)

        log.debug(
            "Status request",
            endpoint=endpoint.display_name,
            leds=led_count,
            step_ms=step_duration_ms,
        )
        return body

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def update(self, path: str, body: bytes = b"", content_type: Optional[str] = None) -> str:
        """
        Apply an update request.

        Args:
            path: Request path, e.g. "/update/rgbtime/8c:aa:b5:7a:bc:ad"
            body: Raw request body (ignored for basic updates)
            content_type: Request Content-Type header

        Returns:
            Confirmation text for the response body
        """
        target = parse_update_path(path)
        endpoint = self.registry.resolve(target.endpoint_id)

        if target.kind == UpdateKind.BASIC:
            return await self._update_basic(endpoint)
        if target.kind == UpdateKind.RGB_TIME:
            return await self._update_rgb_time(endpoint, body, content_type)
        return await self._update_hsv_time(endpoint, body, content_type)

    async def _update_basic(self, endpoint: Endpoint) -> str:
        name, steps = codec.random_steps(self.palette, endpoint.led_count, self.rng)
        await self.registry.apply_dictate(endpoint, steps)
        log.info("Updated endpoint with random color", endpoint=endpoint.display_name, color=name)
        return BASIC_CONFIRMATION

    async def _update_rgb_time(self, endpoint: Endpoint, body: bytes, content_type: Optional[str]) -> str:
        if not _is_json(content_type):
            raise UnsupportedMediaTypeError(content_type)
        try:
            request = RGBTimeRequest.model_validate_json(body)
        except ValidationError as ex:
            raise MalformedBodyError("invalid rgbtime request", _validation_errors(ex))

        steps = codec.build_rgb_steps(
            [step.as_pair() for step in request.steps],
            endpoint.led_count,
            endpoint.step_duration_ms,
        )
        await self.registry.apply_dictate(endpoint, steps)
        return TIMED_CONFIRMATION

    async def _update_hsv_time(self, endpoint: Endpoint, body: bytes, content_type: Optional[str]) -> str:
        if not _is_json(content_type):
            raise UnsupportedMediaTypeError(content_type)
        try:
            request = HSVTimeRequest.model_validate_json(body)
        except ValidationError as ex:
            raise MalformedBodyError("invalid hsvtime request", _validation_errors(ex))

        steps = codec.build_hsv_steps(
            [step.as_pair() for step in request.steps],
            endpoint.led_count,
            endpoint.step_duration_ms,
        )
        await self.registry.apply_dictate(endpoint, steps)
        return TIMED_CONFIRMATION
