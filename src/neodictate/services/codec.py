"""
Color-sequence codec

Turns wire-level (color, duration_ms) pairs into the hold-steps a controller
plays back. The controller advances one step every `step_duration_ms`, so a
requested duration becomes `duration_ms // step_duration_ms` holds. Every step
carries one uniform color for all `led_count` pixels.

All functions here are pure; the caller passes the endpoint's wire
parameters as observed when the request was handled.
"""

import random
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from neodictate.managers.palette_manager import PaletteManager
from neodictate.models.dictate import Step
from neodictate.models.errors import ConfigurationError, EmptySequenceError
from neodictate.utils.colors import broadcast, hsv_to_packed
from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CODEC)

Number = Union[int, float]
HSV = Tuple[Number, Number, Number]


def hold_count(duration_ms: int, step_duration_ms: int) -> int:
    """
    Number of whole step periods covered by duration_ms

    A duration shorter than one step gives 0, which is kept as a zero-length
    step rather than rejected.

    Raises:
        ConfigurationError: If step_duration_ms is 0 (or negative)
    """
    if step_duration_ms <= 0:
        raise ConfigurationError(
            f"Step duration must be positive, got {step_duration_ms}ms",
            details={"step_duration_ms": step_duration_ms}
        )
    return duration_ms // step_duration_ms


def solid_step(color: int, led_count: int, holds: int = 1) -> Step:
    return Step(hold_count=holds, colors=tuple(broadcast(color, led_count)))


def _build(pairs: Iterable[Tuple[int, int]], led_count: int, step_duration_ms: int) -> List[Step]:
    steps = [
        solid_step(color, led_count, hold_count(duration_ms, step_duration_ms))
        for color, duration_ms in pairs
    ]
    if not steps:
        raise EmptySequenceError()
    return steps


def build_rgb_steps(
    pairs: Sequence[Tuple[int, int]],
    led_count: int,
    step_duration_ms: int
) -> List[Step]:
    """
    Build steps from packed RGB colors

    Args:
        pairs: [(packed_rgb, duration_ms), ...] in playback order
        led_count: Pixels on the target string
        step_duration_ms: Controller step period

    Example:
        build_rgb_steps([(0xFF0000, 1000)], led_count=2, step_duration_ms=100)
        # [Step(hold_count=10, colors=(0xFF0000, 0xFF0000))]
    """
    steps = _build(pairs, led_count, step_duration_ms)
    log.debug("Built RGB sequence", steps=len(steps), leds=led_count, step_ms=step_duration_ms)
    return steps


def build_hsv_steps(
    pairs: Sequence[Tuple[HSV, int]],
    led_count: int,
    step_duration_ms: int
) -> List[Step]:
    """
    Build steps from HSV colors

    Args:
        pairs: [((h, s, v), duration_ms), ...]; h in degrees 0-360,
               s and v in percent 0-100
        led_count: Pixels on the target string
        step_duration_ms: Controller step period
    """
    packed = [(hsv_to_packed(*hsv), duration_ms) for hsv, duration_ms in pairs]
    steps = _build(packed, led_count, step_duration_ms)
    log.debug("Built HSV sequence", steps=len(steps), leds=led_count, step_ms=step_duration_ms)
    return steps


def random_steps(
    palette: PaletteManager,
    led_count: int,
    rng: Optional[random.Random] = None
) -> Tuple[str, List[Step]]:
    """
    Single-step dictate with a random palette color at full brightness

    Returns:
        (color_name, steps)
    """
    name, color = palette.pick(rng)
    return name, [solid_step(color, led_count)]
