"""8-bit register abstraction.

Registers are named, byte-addressed storage cells modelling peripheral
control, status and data locations. Accesses never raise: unknown addresses
read as zero and swallow writes, like unmapped I/O on a small MCU.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from mcusim.utils.consts import ConstUtils, as_int


@dataclass(frozen=True)
class RegisterSnapshot:
    """Read-only view of a single register."""

    name: str
    address: int
    value: int
    description: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "address": self.address,
            "value": self.value,
            "description": self.description,
        }


class Register:
    """A single 8-bit register (plain storage, no side effects)."""

    def __init__(self, name: str, address: int, description: str = "", reset_value: int = 0):
        """Initialize a register.

        Args:
            name: Mnemonic, e.g. ``PORTA``
            address: Byte address, unique within a RegisterFile
            description: Free text shown by hosts
            reset_value: Value to return to on reset()
        """
        self.name = name
        self.address = address
        self.description = description
        self.reset_value = reset_value & ConstUtils.MASK_8_BITS
        self.value = self.reset_value

    def read(self) -> int:
        return self.value

    def write(self, val: int) -> None:
        self.value = val & ConstUtils.MASK_8_BITS

    def reset(self) -> None:
        self.value = self.reset_value

    def snapshot(self) -> RegisterSnapshot:
        return RegisterSnapshot(self.name, self.address, self.value, self.description)


class RegisterFile:
    """Storage and dispatch for a set of registers.

    Maps address -> Register, preserving insertion order for display.
    """

    def __init__(self):
        self._registers: dict[int, Register] = {}

    def add(self, reg: Register) -> None:
        """Add a register to this file.

        Raises:
            ValueError: If a register already exists at this address
        """
        if reg.address in self._registers:
            raise ValueError(f"Register at address 0x{reg.address:02X} already exists")
        self._registers[reg.address] = reg

    def read(self, address: object) -> int:
        """Read from address. Unknown addresses read as 0."""
        addr = as_int(address)
        reg = self._registers.get(addr) if addr is not None else None
        return reg.read() if reg is not None else 0

    def write(self, address: object, val: object) -> bool:
        """Write to address, masking the value to 8 bits.

        Writes to unknown addresses, or of values that are not integers,
        are silently ignored.

        Returns:
            True if a register was written.
        """
        addr = as_int(address)
        value = as_int(val)
        if addr is None or value is None or addr not in self._registers:
            return False
        self._registers[addr].write(value)
        return True

    def reset(self) -> None:
        """Reset all registers."""
        for reg in self._registers.values():
            reg.reset()

    def get_register(self, address: int) -> Optional[Register]:
        """Return the register at address, or None."""
        return self._registers.get(address)

    def find(self, name: str) -> Optional[Register]:
        """Return the register called name, or None."""
        for reg in self._registers.values():
            if reg.name == name:
                return reg
        return None

    def snapshot(self) -> tuple[RegisterSnapshot, ...]:
        return tuple(reg.snapshot() for reg in self._registers.values())

    def __iter__(self) -> Iterator[Register]:
        return iter(self._registers.values())

    def __len__(self) -> int:
        return len(self._registers)
