"""Simulation controller: lifecycle, notification and synthetic inputs.

States::

    IDLE --start()--> RUNNING --stop()--> STOPPED
      ^                  |                   |
      +-----reset()------+-------reset()-----+

start() does not check that a program ran successfully; hosts check the
ExecutionResult of execute_code() before starting.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from mcusim.core.context import CapabilitySurface, build_context
from mcusim.core.engine import PythonScriptEngine
from mcusim.core.enums import SerialDirection, SimulationState
from mcusim.core.result import ExecutionResult
from mcusim.core.scheduler import IntervalScheduler
from mcusim.core.state import MCUSnapshot, MCUState
from mcusim.interfaces.runner import ScriptRunner
from mcusim.utils.config_loader import ProfileConfig, get_config
from mcusim.utils.consts import DEFAULT_PROFILE

logger = logging.getLogger(__name__)

StateCallback = Callable[[MCUSnapshot], None]


class MCUSimulator:
    """Owns one state model and everything that may touch it."""

    def __init__(
        self,
        profile: str = DEFAULT_PROFILE,
        config: Optional[ProfileConfig] = None,
        runner: Optional[ScriptRunner] = None,
    ):
        self._config = config if config is not None else get_config(profile)
        self._runner = runner or PythonScriptEngine(timeout=self._config.execution.timeout)
        self._scheduler = IntervalScheduler()
        self._state = MCUState(self._config)
        self._context: Optional[CapabilitySurface] = None
        self._callback: Optional[StateCallback] = None
        self._status = SimulationState.IDLE

    @property
    def config(self) -> ProfileConfig:
        return self._config

    @property
    def state(self) -> MCUState:
        """The live model. Hosts in other threads should use get_state()."""
        return self._state

    @property
    def status(self) -> SimulationState:
        return self._status

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def scheduler(self) -> IntervalScheduler:
        return self._scheduler

    def get_state(self) -> MCUSnapshot:
        return self._state.snapshot()

    # Notification -----------------------------------------------------------

    def on_state_change(self, callback: Optional[StateCallback]) -> None:
        """Register the single state-change subscriber (None clears it)."""
        self._callback = callback

    def _notify_state_change(self) -> None:
        if self._callback is not None:
            self._callback(self._state.snapshot())

    # Execution --------------------------------------------------------------

    def build_context(self) -> CapabilitySurface:
        """Create a capability surface bound to the current model.

        The new surface replaces the previous program: the old surface is
        invalidated and the loops it registered are cancelled.
        """
        self._retire_context()
        context = build_context(self._state, self._notify_state_change, self._scheduler)
        self._context = context
        return context

    def _retire_context(self) -> None:
        if self._context is not None:
            self._context.invalidate()
            self._context = None
        self._scheduler.cancel_all()

    def execute_code(self, source: str) -> ExecutionResult:
        """Run a program's top-level code once. Never raises."""
        context = self.build_context()
        result = self._runner.run(source, context)
        if result.success:
            logger.info("Program loaded (%d interval(s) registered)", len(self._scheduler.active))
        return result

    def tick(self, elapsed_ms: int) -> Optional[ExecutionResult]:
        """Advance simulated time and run the intervals that fell due.

        Returns:
            None when the simulator is not running; otherwise the result of
            this batch. A failing interval stops the simulator.
        """
        if not self._state.running:
            return None
        if self._context is None:
            # intervals added through the scheduler directly, not by a program
            self._context = build_context(self._state, self._notify_state_change, self._scheduler)
        context = self._context
        for handle in self._scheduler.advance(elapsed_ms):
            callback = self._scheduler.get(handle)
            if callback is None:
                continue  # cleared by an earlier callback in this batch
            result = self._runner.invoke(callback, context)
            if not result.success:
                logger.warning("Interval %d failed, stopping: %s", handle, result.error)
                self.stop()
                return result
            if not self._state.running:
                break
        return ExecutionResult.ok(self._state.snapshot(), output="")

    # Lifecycle --------------------------------------------------------------

    def start(self) -> None:
        self._state.running = True
        self._status = SimulationState.RUNNING
        logger.info("Simulator started")
        self._notify_state_change()

    def stop(self) -> None:
        self._state.running = False
        self._scheduler.cancel_all()
        self._status = SimulationState.STOPPED
        logger.info("Simulator stopped")
        self._notify_state_change()

    def reset(self) -> None:
        self.stop()
        self._retire_context()
        self._state = MCUState(self._config)
        self._status = SimulationState.IDLE
        logger.info("Simulator reset")
        self._notify_state_change()

    # Synthetic stimulus -------------------------------------------------------

    def simulate_temperature_change(self, delta: float) -> float:
        """Drift the sensor by delta degrees, clamped to its rated range."""
        value = self._state.temperature_sensor.adjust(delta)
        self._notify_state_change()
        return value

    def simulate_gpio_input(self, pin: int, value: bool) -> bool:
        """Drive an input pin from outside. Output pins are left alone."""
        applied = self._state.gpio.drive_input(pin, value)
        if applied:
            self._notify_state_change()
        return applied

    def simulate_serial_input(self, data: str) -> None:
        """Record bytes received on the UART."""
        self._state.serial.write(data, SerialDirection.RX)
        self._notify_state_change()
