"""MCU Peripheral Simulator.

A software model of a generic microcontroller peripheral set (GPIO,
8-bit registers, timers, a 16x2 character LCD, a UART log, a temperature
sensor and a motor driver) plus an engine that runs user-written Python
programs against it.

Architecture:
- State model: MCUState aggregate, handed to observers as MCUSnapshot
- Capability surface: the fixed set of functions a program may call
- Script engine: restricted, time-budgeted execution behind ScriptRunner
- Controller: idle/running/stopped lifecycle, notification, stimulus

Getting started:
    from mcusim import MCUSimulator

    sim = MCUSimulator()
    result = sim.execute_code("pinMode(0, 'output'); digitalWrite(0, True)")
    if result.success:
        sim.start()
"""

from mcusim.core.context import CapabilitySurface, build_context
from mcusim.core.controller import MCUSimulator
from mcusim.core.engine import PythonScriptEngine
from mcusim.core.enums import MotorDirection, PinMode, SerialDirection, SimulationState
from mcusim.core.exceptions import (
    ConfigurationError,
    ExecutionTimeout,
    ScriptError,
    ScriptSecurityError,
    SimulatorError,
    TemplateNotFoundError,
)
from mcusim.core.result import ExecutionResult
from mcusim.core.state import MCUSnapshot, MCUState
from mcusim.interfaces.runner import ScriptRunner

__version__ = "0.1.0"

__all__ = [
    # Controller
    "MCUSimulator",
    # Model
    "MCUState",
    "MCUSnapshot",
    # Execution
    "CapabilitySurface",
    "build_context",
    "ScriptRunner",
    "PythonScriptEngine",
    "ExecutionResult",
    # Enums
    "PinMode",
    "MotorDirection",
    "SerialDirection",
    "SimulationState",
    # Errors
    "SimulatorError",
    "ConfigurationError",
    "ScriptError",
    "ScriptSecurityError",
    "ExecutionTimeout",
    "TemplateNotFoundError",
]
