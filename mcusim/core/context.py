"""Execution context: the capability surface handed to user script.

A CapabilitySurface is bound to exactly one MCUState. The controller builds
a new surface for every execution and invalidates the previous one on
reset, after which every capability is a no-op and every read returns a
neutral default. The names exposed to script are fixed:

    pinMode, digitalWrite, digitalRead, writeRegister, readRegister,
    serialWrite, lcdClear, lcdPrint, readTemperature, setMotor, delay,
    console.log / print, setInterval, clearInterval
"""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any, Callable, Optional

from mcusim.core.scheduler import IntervalScheduler
from mcusim.core.state import MCUState

logger = logging.getLogger(__name__)

NotifyFn = Callable[[], None]


class CapabilitySurface:
    """Capability functions closed over one live state model."""

    CAPABILITIES = (
        "pinMode",
        "digitalWrite",
        "digitalRead",
        "writeRegister",
        "readRegister",
        "serialWrite",
        "lcdClear",
        "lcdPrint",
        "readTemperature",
        "setMotor",
        "delay",
    )

    def __init__(
        self,
        state: MCUState,
        notify: NotifyFn,
        scheduler: Optional[IntervalScheduler] = None,
    ):
        self._state = state
        self._notify = notify
        self._scheduler = scheduler
        self._stale = False

    @property
    def state(self) -> MCUState:
        return self._state

    @property
    def stale(self) -> bool:
        return self._stale

    def invalidate(self) -> None:
        """Detach from the model; later calls do nothing."""
        self._stale = True

    def _changed(self, applied: bool) -> None:
        if applied:
            self._notify()

    # GPIO -----------------------------------------------------------------

    def pin_mode(self, pin: Any, mode: Any) -> None:
        if self._stale:
            return
        self._changed(self._state.gpio.set_mode(pin, mode))

    def digital_write(self, pin: Any, value: Any) -> None:
        if self._stale:
            return
        self._changed(self._state.gpio.write(pin, value))

    def digital_read(self, pin: Any) -> bool:
        if self._stale:
            return False
        return self._state.gpio.read(pin)

    # Registers --------------------------------------------------------------

    def write_register(self, address: Any, value: Any) -> None:
        if self._stale:
            return
        self._changed(self._state.registers.write(address, value))

    def read_register(self, address: Any) -> int:
        if self._stale:
            return 0
        return self._state.registers.read(address)

    # UART / LCD ---------------------------------------------------------------

    def serial_write(self, data: Any) -> None:
        if self._stale:
            return
        self._state.serial.write(data)
        self._notify()

    def lcd_clear(self) -> None:
        if self._stale:
            return
        self._state.lcd.clear()
        self._notify()

    def lcd_print(self, row: Any, col: Any, text: Any) -> None:
        if self._stale:
            return
        self._changed(self._state.lcd.print_at(row, col, text))

    # Sensors / actuators --------------------------------------------------------

    def read_temperature(self) -> float:
        if self._stale:
            return 0.0
        return self._state.temperature_sensor.read()

    def set_motor(self, speed: Any, direction: Any) -> None:
        if self._stale:
            return
        self._changed(self._state.motor.set(speed, direction))

    # Timing / logging ---------------------------------------------------------

    def delay(self, ms: Any) -> None:
        # Records intent only; simulated time is advanced by the host.
        logger.debug("delay(%s ms) requested", ms)

    def log(self, *args: Any, sep: str = " ") -> None:
        """Logging sink: one tx serial entry per call."""
        self.serial_write(sep.join(str(a) for a in args))

    def _print(self, *args: Any, sep: Optional[str] = " ", **_kwargs: Any) -> None:
        self.log(*args, sep=" " if sep is None else str(sep))

    def set_interval(self, callback: Callable[[], Any], period_ms: Any = 1) -> int:
        if self._scheduler is None:
            raise RuntimeError("setInterval() is not available in this context")
        if self._stale:
            return 0
        return self._scheduler.set_interval(callback, period_ms)

    def clear_interval(self, handle: Any) -> None:
        if self._scheduler is None or self._stale:
            return
        self._scheduler.clear_interval(handle)

    # -------------------------------------------------------------------------

    def namespace(self) -> dict[str, Any]:
        """Name -> callable mapping injected into script globals."""
        names: dict[str, Any] = {
            "pinMode": self.pin_mode,
            "digitalWrite": self.digital_write,
            "digitalRead": self.digital_read,
            "writeRegister": self.write_register,
            "readRegister": self.read_register,
            "serialWrite": self.serial_write,
            "lcdClear": self.lcd_clear,
            "lcdPrint": self.lcd_print,
            "readTemperature": self.read_temperature,
            "setMotor": self.set_motor,
            "delay": self.delay,
            "console": SimpleNamespace(log=self.log),
            "print": self._print,
        }
        if self._scheduler is not None:
            names["setInterval"] = self.set_interval
            names["clearInterval"] = self.clear_interval
        return names


def build_context(
    state: MCUState,
    notify: NotifyFn,
    scheduler: Optional[IntervalScheduler] = None,
) -> CapabilitySurface:
    """Create a capability surface bound to state."""
    return CapabilitySurface(state, notify, scheduler)
