"""Peripheral state model: the aggregate root of all simulated hardware.

An MCUState is built fresh from a board profile on simulator creation and
on every reset. It is mutated in place by capability calls and controller
operations; observers only ever receive an immutable MCUSnapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcusim.core.enums import MotorDirection
from mcusim.core.gpio import GPIOBank, PinSnapshot
from mcusim.core.lcd import LCDDisplay, LCDSnapshot
from mcusim.core.motor import MotorDriver
from mcusim.core.register import Register, RegisterFile, RegisterSnapshot
from mcusim.core.sensors import TemperatureSensor
from mcusim.core.serial import SerialEntry, SerialLog
from mcusim.core.timer import Timer, TimerSnapshot
from mcusim.utils.config_loader import ProfileConfig


@dataclass(frozen=True)
class MCUSnapshot:
    """Read-only copy of the whole model at one instant."""

    running: bool
    frequency: int
    registers: tuple[RegisterSnapshot, ...]
    gpio: tuple[PinSnapshot, ...]
    timers: tuple[TimerSnapshot, ...]
    serial: tuple[SerialEntry, ...]
    lcd: LCDSnapshot
    temperature: float
    motor_speed: int
    motor_direction: MotorDirection

    def register(self, name: str) -> RegisterSnapshot:
        for reg in self.registers:
            if reg.name == name:
                return reg
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible record using the host-facing field names."""
        return {
            "running": self.running,
            "frequency": self.frequency,
            "registers": [r.to_dict() for r in self.registers],
            "gpio": [p.to_dict() for p in self.gpio],
            "timers": [t.to_dict() for t in self.timers],
            "serial": [e.to_dict() for e in self.serial],
            "lcd": self.lcd.to_dict(),
            "temperature": self.temperature,
            "motorSpeed": self.motor_speed,
            "motorDirection": self.motor_direction.value,
        }


class MCUState:
    """Mutable aggregate owning every peripheral."""

    def __init__(self, config: ProfileConfig):
        self.config = config
        self.running = False
        self.frequency = config.frequency

        self.registers = RegisterFile()
        for reg_cfg in config.registers:
            self.registers.add(
                Register(
                    name=reg_cfg.name,
                    address=reg_cfg.address,
                    description=reg_cfg.description,
                    reset_value=reg_cfg.reset_value,
                )
            )

        self.gpio = GPIOBank(config.gpio.ports, config.gpio.pins_per_port)
        self.timers = [
            Timer(id=t.id, period=t.period, prescaler=t.prescaler) for t in config.timers
        ]
        self.serial = SerialLog()
        self.lcd = LCDDisplay(config.lcd.width, config.lcd.height, config.lcd.backlight)
        self.temperature_sensor = TemperatureSensor(
            config.temperature.initial,
            config.temperature.min,
            config.temperature.max,
        )
        self.motor = MotorDriver()

    @property
    def temperature(self) -> float:
        return self.temperature_sensor.value

    @property
    def motor_speed(self) -> int:
        return self.motor.speed

    @property
    def motor_direction(self) -> MotorDirection:
        return self.motor.direction

    def snapshot(self) -> MCUSnapshot:
        return MCUSnapshot(
            running=self.running,
            frequency=self.frequency,
            registers=self.registers.snapshot(),
            gpio=self.gpio.snapshot(),
            timers=tuple(t.snapshot() for t in self.timers),
            serial=self.serial.snapshot(),
            lcd=self.lcd.snapshot(),
            temperature=self.temperature,
            motor_speed=self.motor_speed,
            motor_direction=self.motor_direction,
        )
