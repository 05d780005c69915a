"""Script runner abstraction - behavioral contract.

A ScriptRunner executes untrusted program text against a capability surface.
The concrete scripting technology (and its sandboxing) is swappable without
touching the peripheral model.

CONTRACT:
- run() performs one synchronous invocation of the program's top-level code
- Every fault (syntax, security, runtime, timeout) is returned as a failed
  ExecutionResult; nothing propagates to the caller
- Side effects applied before a fault are kept (no rollback)
- On success the result carries a snapshot of the bound state
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from mcusim.core.context import CapabilitySurface
    from mcusim.core.result import ExecutionResult


class ScriptRunner(ABC):
    """Base class for script execution engines."""

    @abstractmethod
    def run(self, source: str, capabilities: CapabilitySurface) -> ExecutionResult:
        """Execute source with the capability namespace in scope."""
        ...

    @abstractmethod
    def invoke(self, callback: Callable[[], Any], capabilities: CapabilitySurface) -> ExecutionResult:
        """Call a script-defined function (e.g. a registered loop) under the same guards."""
        ...
