"""GPIO bank: a fixed, ordered set of digital pins split into ports.

Pins are addressed by a flat index (``PA0`` is 0, ``PB0`` is 8, ...).
Every accessor bounds-checks the index and degrades to a no-op or a
``False`` read instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from mcusim.core.enums import PinMode
from mcusim.utils.consts import as_int


@dataclass(frozen=True)
class PinSnapshot:
    id: int
    mode: PinMode
    state: bool
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "mode": self.mode.value, "state": self.state, "name": self.name}


@dataclass
class GPIOPin:
    id: int
    name: str
    mode: PinMode = PinMode.INPUT
    state: bool = False

    def snapshot(self) -> PinSnapshot:
        return PinSnapshot(self.id, self.mode, self.state, self.name)


class GPIOBank:
    """All GPIO pins of the chip.

    Script-facing writes only reach pins configured as outputs; the
    external stimulus path (drive_input) only reaches pins configured as
    inputs.
    """

    def __init__(self, ports: Iterable[str], pins_per_port: int = 8):
        self._pins: list[GPIOPin] = []
        for port_index, port in enumerate(ports):
            for bit in range(pins_per_port):
                pin_id = port_index * pins_per_port + bit
                self._pins.append(GPIOPin(id=pin_id, name=f"P{port}{bit}"))

    @property
    def pin_count(self) -> int:
        return len(self._pins)

    def _pin(self, pin: object) -> Optional[GPIOPin]:
        index = as_int(pin)
        if index is None or not 0 <= index < len(self._pins):
            return None
        return self._pins[index]

    def get_pin(self, pin: int) -> Optional[GPIOPin]:
        """Return the pin at index, or None if out of range."""
        return self._pin(pin)

    def set_mode(self, pin: object, mode: object) -> bool:
        """Configure pin direction. Returns True if applied."""
        target = self._pin(pin)
        pin_mode = PinMode.coerce(mode)
        if target is None or pin_mode is None:
            return False
        target.mode = pin_mode
        return True

    def write(self, pin: object, value: object) -> bool:
        """Drive an output pin. Input pins ignore software writes."""
        target = self._pin(pin)
        if target is None or target.mode is not PinMode.OUTPUT:
            return False
        target.state = bool(value)
        return True

    def read(self, pin: object) -> bool:
        """Sample a pin. Out-of-range pins read as False."""
        target = self._pin(pin)
        return target.state if target is not None else False

    def drive_input(self, pin: object, value: object) -> bool:
        """Apply an external level to an input pin."""
        target = self._pin(pin)
        if target is None or target.mode is not PinMode.INPUT:
            return False
        target.state = bool(value)
        return True

    def snapshot(self) -> tuple[PinSnapshot, ...]:
        return tuple(pin.snapshot() for pin in self._pins)

    def __iter__(self):
        return iter(self._pins)

    def __len__(self) -> int:
        return len(self._pins)
