"""Constants and utility values for the simulator."""

from typing import Optional


class ConstUtils:
    """Bitwise masks and peripheral limits."""

    MASK_8_BITS = 0xFF
    """8-bit mask: 0xFF"""

    MOTOR_SPEED_MIN = 0
    """Lowest motor duty value."""

    MOTOR_SPEED_MAX = 255
    """Highest motor duty value (8-bit PWM)."""

    LCD_BLANK = " "
    """Character a cleared LCD cell holds."""


DEFAULT_PROFILE = "default"

# Per-advance cap on how many times one interval may fire
MAX_INTERVAL_CATCHUP = 1000


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into the inclusive range [low, high]."""
    return max(low, min(high, value))


def as_int(value: object) -> Optional[int]:
    """Best-effort integer conversion for values coming from user script.

    Returns None instead of raising so peripheral primitives can fail closed.
    """
    if isinstance(value, int):
        return value
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return None
