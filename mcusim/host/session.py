"""Host session: JSON request dispatch for external UIs."""

from __future__ import annotations

import threading
from typing import Any, Callable

from mcusim.core.controller import MCUSimulator
from mcusim.templates import get_template, list_templates, templates_by_category

PROTOCOL_VERSION = 1


class HostSession:
    """Synchronous command session bound to a single simulator.

    Requests are dicts ``{"id": ..., "cmd": ..., **args}``; responses are
    ``{"id", "ok", "result"}`` or ``{"id", "ok": False, "error"}``.
    """

    def __init__(self, simulator: MCUSimulator, lock: threading.RLock | None = None):
        self.simulator = simulator
        self._lock = lock or threading.RLock()

    def handle_request(self, request: dict[str, Any]) -> dict[str, Any]:
        req_id = request.get("id")
        cmd = request.get("cmd")

        handlers: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
            "hello": self._cmd_hello,
            "execute": self._cmd_execute,
            "start": self._cmd_start,
            "stop": self._cmd_stop,
            "reset": self._cmd_reset,
            "tick": self._cmd_tick,
            "state": self._cmd_state,
            "temperature": self._cmd_temperature,
            "gpio_input": self._cmd_gpio_input,
            "serial_input": self._cmd_serial_input,
            "templates": self._cmd_templates,
            "load_template": self._cmd_load_template,
        }

        try:
            if not isinstance(cmd, str):
                raise ValueError("Command must be a string")
            handler = handlers.get(cmd)
            if handler is None:
                raise ValueError(f"Unknown command '{cmd}'")
            with self._lock:
                result = handler(request)
            return {"id": req_id, "ok": True, "result": result}
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return {"id": req_id, "ok": False, "error": str(exc)}

    def _state(self) -> dict[str, Any]:
        return self.simulator.get_state().to_dict()

    def _cmd_hello(self, _request: dict[str, Any]) -> dict[str, Any]:
        return {
            "version": PROTOCOL_VERSION,
            "board": self.simulator.config.name,
            "status": self.simulator.status.value,
        }

    def _run_source(self, source: str, start: bool) -> dict[str, Any]:
        result = self.simulator.execute_code(source)
        if result.success and start:
            self.simulator.start()
        return result.to_dict()

    def _cmd_execute(self, request: dict[str, Any]) -> dict[str, Any]:
        source = request["source"]
        if not isinstance(source, str):
            raise ValueError("source must be a string")
        return self._run_source(source, bool(request.get("start", False)))

    def _cmd_start(self, _request: dict[str, Any]) -> dict[str, Any]:
        self.simulator.start()
        return {"status": self.simulator.status.value}

    def _cmd_stop(self, _request: dict[str, Any]) -> dict[str, Any]:
        self.simulator.stop()
        return {"status": self.simulator.status.value}

    def _cmd_reset(self, _request: dict[str, Any]) -> dict[str, Any]:
        self.simulator.reset()
        return {"status": self.simulator.status.value}

    def _cmd_tick(self, request: dict[str, Any]) -> dict[str, Any]:
        elapsed = int(request.get("ms", 1))
        result = self.simulator.tick(elapsed)
        if result is None:
            return {"ran": False, "state": self._state()}
        data = result.to_dict()
        data.setdefault("state", self._state())
        data["ran"] = True
        return data

    def _cmd_state(self, _request: dict[str, Any]) -> dict[str, Any]:
        return self._state()

    def _cmd_temperature(self, request: dict[str, Any]) -> dict[str, Any]:
        delta = float(request["delta"])
        return {"temperature": self.simulator.simulate_temperature_change(delta)}

    def _cmd_gpio_input(self, request: dict[str, Any]) -> dict[str, Any]:
        pin = int(request["pin"])
        value = bool(request["value"])
        return {"applied": self.simulator.simulate_gpio_input(pin, value)}

    def _cmd_serial_input(self, request: dict[str, Any]) -> dict[str, Any]:
        self.simulator.simulate_serial_input(str(request["data"]))
        return {"status": "ok"}

    def _cmd_templates(self, request: dict[str, Any]) -> dict[str, Any]:
        category = request.get("category")
        templates = templates_by_category(category) if category else list_templates()
        return {
            "templates": [
                {k: v for k, v in t.to_dict().items() if k != "code"} for t in templates
            ]
        }

    def _cmd_load_template(self, request: dict[str, Any]) -> dict[str, Any]:
        template = get_template(str(request["template"]))
        data: dict[str, Any] = {"template": template.to_dict()}
        if request.get("execute"):
            self.simulator.reset()
            data["execution"] = self._run_source(template.code, bool(request.get("start", True)))
        return data
