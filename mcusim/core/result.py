"""Structured outcome of running user script."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from mcusim.core.state import MCUSnapshot

SUCCESS_MESSAGE = "Code executed successfully"

ErrorKind = str  # "syntax" | "security" | "runtime" | "timeout"


@dataclass(frozen=True)
class ExecutionResult:
    success: bool
    output: str
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    state: Optional[MCUSnapshot] = None

    @classmethod
    def ok(cls, state: Optional[MCUSnapshot] = None, output: str = SUCCESS_MESSAGE) -> "ExecutionResult":
        return cls(success=True, output=output, state=state)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind = "runtime") -> "ExecutionResult":
        return cls(success=False, output="", error=error, error_kind=kind)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success, "output": self.output}
        if self.error is not None:
            data["error"] = self.error
            data["errorKind"] = self.error_kind
        if self.state is not None:
            data["state"] = self.state.to_dict()
        return data
