"""H-bridge motor driver output.

Pure output register: speed and direction are stored, no motion is
integrated.
"""

from __future__ import annotations

import logging

from mcusim.core.enums import MotorDirection
from mcusim.utils.consts import ConstUtils, as_int, clamp

logger = logging.getLogger(__name__)


class MotorDriver:
    def __init__(self):
        self.speed = 0
        self.direction = MotorDirection.STOP

    def set(self, speed: object, direction: object) -> bool:
        """Set duty and direction. Speed is clamped to [0, 255].

        Returns:
            False (and leaves the driver untouched) when either argument
            cannot be interpreted.
        """
        value = as_int(speed)
        drive = MotorDirection.coerce(direction)
        if value is None or drive is None:
            logger.debug("Ignoring setMotor(%r, %r)", speed, direction)
            return False
        self.speed = int(clamp(value, ConstUtils.MOTOR_SPEED_MIN, ConstUtils.MOTOR_SPEED_MAX))
        self.direction = drive
        return True
