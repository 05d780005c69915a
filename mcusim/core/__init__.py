"""Core modules for the simulator.

- register / gpio / timer / serial / lcd / sensors / motor: peripherals
- state: MCUState aggregate and MCUSnapshot
- context: capability surface exposed to programs
- engine: Python script engine
- scheduler: host-driven setInterval support
- controller: MCUSimulator lifecycle
"""

from mcusim.core.context import CapabilitySurface, build_context
from mcusim.core.controller import MCUSimulator
from mcusim.core.engine import PythonScriptEngine, check_script_safety
from mcusim.core.enums import MotorDirection, PinMode, SerialDirection, SimulationState
from mcusim.core.gpio import GPIOBank, GPIOPin
from mcusim.core.lcd import LCDDisplay
from mcusim.core.motor import MotorDriver
from mcusim.core.register import Register, RegisterFile
from mcusim.core.result import ExecutionResult
from mcusim.core.scheduler import IntervalScheduler
from mcusim.core.sensors import TemperatureSensor
from mcusim.core.serial import SerialEntry, SerialLog
from mcusim.core.state import MCUSnapshot, MCUState
from mcusim.core.timer import Timer

__all__ = [
    # Peripherals
    "Register",
    "RegisterFile",
    "GPIOBank",
    "GPIOPin",
    "Timer",
    "SerialEntry",
    "SerialLog",
    "LCDDisplay",
    "TemperatureSensor",
    "MotorDriver",
    # Aggregate
    "MCUState",
    "MCUSnapshot",
    # Execution
    "CapabilitySurface",
    "build_context",
    "PythonScriptEngine",
    "check_script_safety",
    "ExecutionResult",
    "IntervalScheduler",
    # Controller
    "MCUSimulator",
    # Enums
    "PinMode",
    "MotorDirection",
    "SerialDirection",
    "SimulationState",
]
