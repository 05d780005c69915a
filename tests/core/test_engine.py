"""Tests for the Python script engine."""

import ast
import textwrap
import time

import pytest

from mcusim.core.context import build_context
from mcusim.core.engine import PythonScriptEngine, check_script_safety
from mcusim.core.enums import PinMode
from mcusim.core.exceptions import ScriptSecurityError


@pytest.fixture
def engine():
    return PythonScriptEngine(timeout=0.5, grace=0.5)


@pytest.fixture
def ctx(state, notify):
    return build_context(state, notify)


def run(engine, ctx, source):
    return engine.run(textwrap.dedent(source), ctx)


class TestSuccessfulRuns:
    def test_top_level_statements_execute(self, engine, ctx, state):
        result = run(
            engine,
            ctx,
            """
            pinMode(0, 'output')
            digitalWrite(0, True)
            writeRegister(0x00, 0x1FF)
            lcdPrint(0, 0, 'Hi')
            """,
        )

        assert result.success is True
        assert result.output == "Code executed successfully"
        assert result.error is None
        assert state.gpio.read(0) is True
        assert state.registers.read(0x00) == 0xFF
        assert result.state.gpio[0].mode is PinMode.OUTPUT
        assert result.state.lcd.lines()[0].startswith("Hi")

    def test_functions_loops_and_builtins(self, engine, ctx, state):
        result = run(
            engine,
            ctx,
            """
            def blink(n):
                for i in range(n):
                    digitalWrite(i, True)
            for pin in range(4):
                pinMode(pin, 'output')
            blink(4)
            print('sum', sum([readRegister(a) for a in range(3)]))
            """,
        )
        assert result.success is True
        assert [state.gpio.read(i) for i in range(5)] == [True, True, True, True, False]
        assert state.serial.tail(1)[0].data == "sum 0"

    def test_class_definitions_work(self, engine, ctx, state):
        result = run(
            engine,
            ctx,
            """
            class Led:
                def __init__(self, pin):
                    self.pin = pin
                    pinMode(pin, 'output')
                def on(self):
                    digitalWrite(self.pin, True)
            Led(3).on()
            """,
        )
        assert result.success is True, result.error
        assert state.gpio.read(3) is True

    def test_f_strings_allowed(self, engine, ctx, state):
        result = run(engine, ctx, "serialWrite(f'{readTemperature():.1f} C')")
        assert result.success is True
        assert state.serial.tail(1)[0].data == "25.0 C"


class TestFailures:
    def test_syntax_error_executes_nothing(self, engine, ctx, state):
        result = engine.run("pinMode(0, 'output')\ndigitalWrite(0 True)\n", ctx)

        assert result.success is False
        assert result.error_kind == "syntax"
        assert result.error.startswith("SyntaxError")
        assert result.output == ""
        assert result.state is None
        pin = state.gpio.get_pin(0)
        assert pin.mode is PinMode.INPUT
        assert pin.state is False

    def test_runtime_error_keeps_prior_side_effects(self, engine, ctx, state):
        result = run(
            engine,
            ctx,
            """
            pinMode(0, 'output')
            digitalWrite(0, True)
            raise ValueError('boom')
            digitalWrite(1, True)
            """,
        )

        assert result.success is False
        assert result.error_kind == "runtime"
        assert result.error == "ValueError: boom"
        assert state.gpio.read(0) is True

    def test_unbound_name(self, engine, ctx):
        result = engine.run("undefinedThing()", ctx)
        assert result.success is False
        assert "NameError" in result.error

    def test_builtins_outside_the_safe_set_are_missing(self, engine, ctx):
        result = engine.run("x = type(1)", ctx)
        assert result.success is False
        assert "NameError" in result.error


@pytest.mark.parametrize(
    "source",
    [
        "import os",
        "from os import path",
        "().__class__.__bases__",
        "eval('1')",
        "open('/etc/passwd')",
        "__import__('os')",
        "getattr(pinMode, 'x')",
        "'{0.__class__}'.format(1)",
        "x = __builtins__",
    ],
)
def test_security_violations_are_rejected(engine, ctx, state, source):
    result = engine.run(source, ctx)
    assert result.success is False
    assert result.error_kind == "security"
    assert "not allowed" in result.error


def test_security_check_runs_before_any_statement(engine, ctx, state):
    result = engine.run("pinMode(0, 'output')\nimport os\n", ctx)
    assert result.success is False
    assert state.gpio.get_pin(0).mode is PinMode.INPUT


def test_check_script_safety_reports_lines():
    violations = check_script_safety(ast.parse("x = 1\nimport sys\n"))
    assert violations == ["line 2: imports are not allowed"]


def test_compile_raises_security_error(engine):
    with pytest.raises(ScriptSecurityError) as excinfo:
        engine.compile("import os")
    assert excinfo.value.violations


class TestTimeout:
    def test_infinite_loop_times_out(self, engine, ctx, state):
        result = run(
            engine,
            ctx,
            """
            pinMode(0, 'output')
            while True:
                pass
            """,
        )
        assert result.success is False
        assert result.error_kind == "timeout"
        assert "Execution timeout" in result.error
        # fail-dirty: the pinMode before the hang stays applied
        assert state.gpio.get_pin(0).mode is PinMode.OUTPUT

    def test_timeout_cannot_be_swallowed_by_except_exception(self, engine, ctx):
        result = run(
            engine,
            ctx,
            """
            while True:
                try:
                    while True:
                        pass
                except Exception:
                    pass
            """,
        )
        assert result.success is False
        assert result.error_kind == "timeout"

    def test_model_stays_quiet_after_bare_except_swallows_abort(self, engine, ctx, state, notify):
        result = run(
            engine,
            ctx,
            """
            try:
                while True:
                    writeRegister(0, 1)
            except:
                pass
            count = 0
            while count < 2000000:
                count += 1
                writeRegister(0, count & 0xFF)
                serialWrite(count)
            """,
        )
        assert result.error_kind == "timeout"
        assert ctx.stale is True

        register, entries, calls = state.registers.read(0), len(state.serial), notify.calls
        time.sleep(0.3)
        assert state.registers.read(0) == register == 1
        assert len(state.serial) == entries == 0
        assert notify.calls == calls

    def test_swallowed_abort_that_returns_is_still_a_timeout(self, engine, ctx):
        result = run(
            engine,
            ctx,
            """
            try:
                while True:
                    pass
            except:
                pass
            """,
        )
        assert result.success is False
        assert result.error_kind == "timeout"

    def test_invoke_applies_the_same_budget(self, engine, ctx):
        def spin():
            while True:
                pass

        result = engine.invoke(spin, ctx)
        assert result.error_kind == "timeout"

    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            PythonScriptEngine(timeout=0)


def test_invoke_success_returns_snapshot(engine, ctx, state):
    result = engine.invoke(lambda: state.serial.write("tick"), ctx)
    assert result.success is True
    assert result.state.serial[-1].data == "tick"


def test_invoke_failure(engine, ctx):
    def broken():
        raise RuntimeError("loop died")

    result = engine.invoke(broken, ctx)
    assert result.success is False
    assert result.error == "RuntimeError: loop died"


@pytest.mark.parametrize("method", ["run", "invoke"])
def test_runner_methods_are_marked_override(method):
    assert getattr(PythonScriptEngine, method).__override__ is True
