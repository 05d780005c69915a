"""Custom exceptions used throughout the mcusim package."""

from typing import Any, Optional


class SimulatorError(Exception):
    """Base exception for all simulator errors.

    All simulator-specific exceptions should inherit from this class.
    This allows catching all simulator errors with a single except clause.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """

        super().__init__(message)
        self.details = details or {}


class ConfigurationError(SimulatorError):
    """Raised when a board profile cannot be loaded or validated.

    This includes:
    - Unreadable or malformed YAML
    - Missing required profile keys
    - Duplicate register addresses, non-positive sizes, bad ranges
    """

    def __init__(
        self,
        config_key: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize configuration error.

        Args:
            config_key: The configuration key that caused the error
            message: Description of what's wrong. If omitted, config_key is
                treated as the message and the key defaults to "configuration".
            details: Additional context
        """
        if message is None:
            message = config_key or "Invalid configuration"
            config_key = "configuration"
        if config_key is None:
            config_key = "configuration"

        full_message = f"Configuration error for '{config_key}': {message}"
        super().__init__(message=full_message, details=details)
        self.config_key = config_key


class ScriptError(SimulatorError):
    """Base exception for failures raised while running user script.

    These never escape the execution engine; they are converted to a
    failed ExecutionResult carrying ``kind`` as its error kind.
    """

    kind = "runtime"


class ScriptSecurityError(ScriptError):
    """Raised when the safety check rejects a construct in user script.

    Examples:
    - ``import os``
    - ``().__class__.__bases__``
    - ``eval("...")``
    """

    kind = "security"

    def __init__(self, violations: list[str], details: Optional[dict[str, Any]] = None):
        message = "; ".join(violations) or "Script rejected by safety check"
        details = dict(details or {})
        details["violations"] = list(violations)
        super().__init__(message=message, details=details)
        self.violations = list(violations)


class ExecutionTimeout(ScriptError):
    """Raised when a script exceeds its wall-clock budget."""

    kind = "timeout"

    def __init__(self, budget: float, details: Optional[dict[str, Any]] = None):
        message = f"Execution timeout: script exceeded {budget:g}s budget"
        details = dict(details or {})
        details["budget"] = budget
        super().__init__(message=message, details=details)
        self.budget = budget


class TemplateNotFoundError(SimulatorError):
    """Raised when a program template id is not in the catalog."""

    def __init__(self, template_id: str, available: Optional[list[str]] = None):
        message = f"Unknown template '{template_id}'"
        if available is not None:
            message += f". Available: {available}"
        super().__init__(message=message, details={"template_id": template_id})
        self.template_id = template_id
