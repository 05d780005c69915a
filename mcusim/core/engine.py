"""Python script engine.

Runs user programs written in plain Python against a CapabilitySurface:

1. ``ast`` safety pass rejecting imports, dunder access and reflective
   builtins (best-effort host isolation, not a security boundary)
2. ``exec`` with a restricted builtins table plus the capability namespace
3. Evaluation on a worker thread with a wall-clock budget enforced by a
   trace hook; overruns become an "execution timeout" failure

Faults never escape run()/invoke(); they are folded into ExecutionResult.
Mutations made before a fault stay applied.
"""

from __future__ import annotations

import ast
import builtins
import logging
import sys
import threading
import time
from typing import Any, Callable, Optional

from typing_extensions import override

from mcusim.core.context import CapabilitySurface
from mcusim.core.exceptions import ExecutionTimeout, ScriptError, ScriptSecurityError
from mcusim.core.result import ExecutionResult
from mcusim.interfaces.runner import ScriptRunner

logger = logging.getLogger(__name__)

SCRIPT_FILENAME = "<mcu-program>"

_SAFE_BUILTIN_NAMES = (
    "abs", "all", "any", "bin", "bool", "chr", "dict", "divmod", "enumerate",
    "filter", "float", "format", "hex", "int", "isinstance", "len", "list",
    "map", "max", "min", "oct", "ord", "pow", "range", "repr", "reversed",
    "round", "set", "slice", "sorted", "str", "sum", "tuple", "zip",
    "ArithmeticError", "Exception", "IndexError", "KeyError", "RuntimeError",
    "TypeError", "ValueError", "ZeroDivisionError",
)

SAFE_BUILTINS: dict[str, Any] = {name: getattr(builtins, name) for name in _SAFE_BUILTIN_NAMES}
# Needed by the interpreter for ``class`` statements
SAFE_BUILTINS["__build_class__"] = builtins.__build_class__

FORBIDDEN_CALLS = frozenset({
    "__import__", "breakpoint", "compile", "delattr", "eval", "exec", "getattr",
    "globals", "help", "input", "locals", "memoryview", "open", "setattr", "vars",
})

FORBIDDEN_ATTRIBUTES = frozenset({
    "ag_frame", "cr_frame", "f_back", "f_builtins", "f_code", "f_globals",
    "f_locals", "format", "format_map", "gi_code", "gi_frame", "mro", "tb_frame",
    "tb_next", "with_traceback",
})


class SafetyVisitor(ast.NodeVisitor):
    """Collects constructs user programs may not use."""

    def __init__(self):
        super().__init__()
        self.violations: list[str] = []

    def _flag(self, node: ast.AST, message: str) -> None:
        line = getattr(node, "lineno", "?")
        self.violations.append(f"line {line}: {message}")

    def visit_Import(self, node: ast.Import) -> None:
        self._flag(node, "imports are not allowed")
        self.generic_visit(node)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        self._flag(node, "imports are not allowed")
        self.generic_visit(node)

    def visit_Call(self, node: ast.Call) -> None:
        if isinstance(node.func, ast.Name) and node.func.id in FORBIDDEN_CALLS:
            self._flag(node, f"calling '{node.func.id}' is not allowed")
        self.generic_visit(node)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        attr = node.attr
        if attr.startswith("__") or attr in FORBIDDEN_ATTRIBUTES:
            self._flag(node, f"access to attribute '{attr}' is not allowed")
        self.generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if node.id.startswith("__") and node.id.endswith("__"):
            self._flag(node, f"access to name '{node.id}' is not allowed")
        self.generic_visit(node)


def check_script_safety(tree: ast.AST) -> list[str]:
    """Return the list of violations found in a parsed program."""
    visitor = SafetyVisitor()
    visitor.visit(tree)
    return visitor.violations


class _BudgetExceeded(BaseException):
    """Trace-hook abort signal. Not an Exception subclass."""


def _describe(exc: BaseException) -> str:
    if isinstance(exc, SyntaxError):
        return f"SyntaxError: {exc.msg} (line {exc.lineno}, offset {exc.offset})"
    if isinstance(exc, ScriptError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


class PythonScriptEngine(ScriptRunner):
    """Executes Python programs with a restricted namespace and a time budget."""

    def __init__(self, timeout: float = 2.0, grace: float = 0.5):
        """Initialize the engine.

        Args:
            timeout: Wall-clock budget in seconds per run()/invoke()
            grace: Extra seconds to wait for the worker to unwind after the
                budget before abandoning it
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self.grace = grace

    def compile(self, source: str) -> Any:
        """Parse, safety-check and compile source.

        Raises:
            SyntaxError: if source does not parse
            ScriptSecurityError: if the safety pass finds violations
        """
        tree = ast.parse(source, filename=SCRIPT_FILENAME, mode="exec")
        violations = check_script_safety(tree)
        if violations:
            raise ScriptSecurityError(violations)
        return compile(tree, SCRIPT_FILENAME, "exec")

    @override
    def run(self, source: str, capabilities: CapabilitySurface) -> ExecutionResult:
        try:
            code = self.compile(source)
            script_globals: dict[str, Any] = {
                "__builtins__": dict(SAFE_BUILTINS),
                "__name__": "__mcu__",
            }
            script_globals.update(capabilities.namespace())
            self._run_guarded(
                lambda: exec(code, script_globals), capabilities  # pylint: disable=exec-used
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return self._failure(exc)
        return ExecutionResult.ok(capabilities.state.snapshot())

    @override
    def invoke(self, callback: Callable[[], Any], capabilities: CapabilitySurface) -> ExecutionResult:
        try:
            self._run_guarded(callback, capabilities)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return self._failure(exc)
        return ExecutionResult.ok(capabilities.state.snapshot())

    def _failure(self, exc: Exception) -> ExecutionResult:
        if isinstance(exc, SyntaxError):
            kind = "syntax"
        elif isinstance(exc, ScriptError):
            kind = exc.kind
        else:
            kind = "runtime"
        message = _describe(exc)
        if kind == "timeout":
            logger.warning("Script aborted: %s", message)
        else:
            logger.error("Script failed (%s): %s", kind, message)
        return ExecutionResult.failure(message, kind)

    def _run_guarded(self, fn: Callable[[], Any], capabilities: CapabilitySurface) -> None:
        """Run fn on a worker thread under the wall-clock budget.

        Once the budget is spent the capability surface is invalidated before
        the abort is raised, so a program that swallows the abort (or a worker
        abandoned in native code) can no longer reach the model.

        Raises:
            ExecutionTimeout: budget exceeded
            Exception: whatever fn raised
        """
        deadline = time.monotonic() + self.timeout
        expired = threading.Event()
        outcome: dict[str, Optional[BaseException]] = {"error": None}

        def tracer(frame, event, arg):  # pylint: disable=unused-argument
            if not expired.is_set():
                if time.monotonic() <= deadline:
                    return tracer
                capabilities.invalidate()
                expired.set()
            raise _BudgetExceeded()

        def target() -> None:
            sys.settrace(tracer)
            try:
                fn()
            except BaseException as exc:  # pylint: disable=broad-exception-caught
                outcome["error"] = exc
            finally:
                sys.settrace(None)

        worker = threading.Thread(target=target, name="mcusim-script", daemon=True)
        worker.start()
        worker.join(self.timeout + self.grace)

        if worker.is_alive():
            # Stuck in native code or the abort was swallowed; abandon the daemon.
            capabilities.invalidate()
            raise ExecutionTimeout(self.timeout)

        error = outcome["error"]
        if expired.is_set():
            # A swallowed abort still counts as an overrun.
            raise ExecutionTimeout(self.timeout)
        if error is None:
            return
        if isinstance(error, Exception):
            raise error
        # SystemExit and friends stay inside the engine
        raise ScriptError(f"{type(error).__name__} raised by script")
