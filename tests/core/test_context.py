"""Tests for the capability surface."""

import logging

import pytest

from mcusim.core.context import CapabilitySurface, build_context
from mcusim.core.scheduler import IntervalScheduler

EXPECTED_NAMES = {
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
    "console",
    "print",
}


@pytest.fixture
def ctx(state, notify):
    return build_context(state, notify)


def test_namespace_is_the_fixed_surface(ctx):
    assert set(ctx.namespace()) == EXPECTED_NAMES
    assert set(CapabilitySurface.CAPABILITIES) <= EXPECTED_NAMES


def test_namespace_adds_scheduling_when_available(state, notify):
    ctx = build_context(state, notify, IntervalScheduler())
    assert set(ctx.namespace()) == EXPECTED_NAMES | {"setInterval", "clearInterval"}


def test_gpio_capabilities_mutate_and_notify(ctx, state, notify):
    ns = ctx.namespace()
    ns["pinMode"](0, "output")
    ns["digitalWrite"](0, True)

    assert state.gpio.read(0) is True
    assert ns["digitalRead"](0) is True
    assert notify.calls == 2


def test_out_of_range_pin_does_not_notify(ctx, state, notify):
    ns = ctx.namespace()
    ns["pinMode"](99, "output")
    ns["digitalWrite"](-1, True)
    assert ns["digitalRead"](99) is False
    assert notify.calls == 0


def test_register_capabilities(ctx, state, notify):
    ns = ctx.namespace()
    ns["writeRegister"](0x0A, 0x141)
    assert ns["readRegister"](0x0A) == 0x41
    assert notify.calls == 1

    ns["writeRegister"](0x7F, 1)
    assert ns["readRegister"](0x7F) == 0
    assert notify.calls == 1


def test_serial_and_logging_sink(ctx, state, notify):
    ns = ctx.namespace()
    ns["serialWrite"]("AT")
    ns["console"].log("temp", 25.5)
    ns["print"]("a", "b", sep="-")

    assert [e.data for e in state.serial] == ["AT", "temp 25.5", "a-b"]
    assert notify.calls == 3


def test_lcd_capabilities(ctx, state, notify):
    ns = ctx.namespace()
    ns["lcdPrint"](0, 14, "HELLO")
    ns["lcdPrint"](5, 0, "ignored")
    assert state.lcd.buffer[0][14:] == ["H", "E"]
    assert notify.calls == 1

    ns["lcdClear"]()
    assert state.lcd.lines() == [" " * 16, " " * 16]
    assert notify.calls == 2


def test_sensor_and_motor(ctx, state):
    ns = ctx.namespace()
    assert ns["readTemperature"]() == 25.0
    ns["setMotor"](300, "cw")
    assert state.motor_speed == 255
    ns["setMotor"](-5, "ccw")
    assert state.motor_speed == 0
    assert state.motor_direction == "ccw"


def test_delay_only_logs(ctx, state, notify, caplog):
    with caplog.at_level(logging.DEBUG, logger="mcusim.core.context"):
        assert ctx.namespace()["delay"](250) is None
    assert "delay(250 ms)" in caplog.text
    assert notify.calls == 0
    assert len(state.serial) == 0


def test_invalidated_context_never_mutates(ctx, state, notify):
    ns = ctx.namespace()
    ctx.invalidate()
    assert ctx.stale is True

    ns["pinMode"](0, "output")
    ns["digitalWrite"](0, True)
    ns["writeRegister"](0x00, 0xFF)
    ns["serialWrite"]("x")
    ns["console"].log("y")
    ns["lcdPrint"](0, 0, "z")
    ns["setMotor"](100, "cw")

    assert state.gpio.get_pin(0).mode == "input"
    assert state.registers.read(0x00) == 0
    assert len(state.serial) == 0
    assert state.motor_speed == 0
    assert notify.calls == 0
    assert ns["digitalRead"](0) is False
    assert ns["readRegister"](0x00) == 0


def test_set_interval_without_scheduler_raises(ctx):
    with pytest.raises(RuntimeError):
        ctx.set_interval(lambda: None, 10)


def test_set_and_clear_interval(state, notify):
    scheduler = IntervalScheduler()
    ns = build_context(state, notify, scheduler).namespace()
    handle = ns["setInterval"](lambda: None, 10)
    assert scheduler.active == [handle]
    ns["clearInterval"](handle)
    assert scheduler.active == []
