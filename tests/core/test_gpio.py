"""Tests for the GPIO bank."""

import pytest

from mcusim.core.enums import PinMode
from mcusim.core.gpio import GPIOBank


@pytest.fixture
def gpio():
    return GPIOBank(["A", "B", "C"], pins_per_port=8)


class TestGPIOInitialization:
    def test_has_24_pins(self, gpio):
        assert gpio.pin_count == 24
        assert len(gpio) == 24

    def test_pin_names_follow_ports(self, gpio):
        names = [pin.name for pin in gpio]
        assert names[0] == "PA0"
        assert names[7] == "PA7"
        assert names[8] == "PB0"
        assert names[23] == "PC7"

    def test_ids_are_stable_indices(self, gpio):
        assert [pin.id for pin in gpio] == list(range(24))

    def test_all_pins_start_as_low_inputs(self, gpio):
        for pin in gpio:
            assert pin.mode is PinMode.INPUT
            assert pin.state is False


class TestPinModeConfiguration:
    def test_set_mode_output(self, gpio):
        assert gpio.set_mode(3, "output") is True
        assert gpio.get_pin(3).mode is PinMode.OUTPUT

    def test_set_mode_accepts_enum(self, gpio):
        gpio.set_mode(3, PinMode.OUTPUT)
        gpio.set_mode(3, PinMode.INPUT)
        assert gpio.get_pin(3).mode is PinMode.INPUT

    def test_unknown_mode_is_ignored(self, gpio):
        assert gpio.set_mode(3, "analog") is False
        assert gpio.get_pin(3).mode is PinMode.INPUT


class TestDigitalIO:
    def test_write_output_pin(self, gpio):
        gpio.set_mode(0, "output")
        assert gpio.write(0, True) is True
        assert gpio.read(0) is True

    def test_write_coerces_truthiness(self, gpio):
        gpio.set_mode(0, "output")
        gpio.write(0, 1)
        assert gpio.read(0) is True
        gpio.write(0, 0)
        assert gpio.read(0) is False

    def test_write_to_input_pin_is_rejected(self, gpio):
        assert gpio.write(0, True) is False
        assert gpio.read(0) is False

    def test_drive_input_only_affects_inputs(self, gpio):
        assert gpio.drive_input(5, True) is True
        assert gpio.read(5) is True

        gpio.set_mode(6, "output")
        assert gpio.drive_input(6, True) is False
        assert gpio.read(6) is False


@pytest.mark.parametrize("pin", [-1, 24, 100, -24, "x", None, 3.5e9])
class TestOutOfRangePins:
    def test_operations_are_noops(self, gpio, pin):
        for i in range(0, 24, 2):
            gpio.set_mode(i, "output")
            gpio.write(i, True)
        before = gpio.snapshot()

        assert gpio.set_mode(pin, "output") is False
        assert gpio.write(pin, True) is False
        assert gpio.drive_input(pin, True) is False
        assert gpio.read(pin) is False
        assert gpio.get_pin(pin) is None
        assert gpio.snapshot() == before
