"""
Error types shared across the skill runtime.

Every error raised by the skill derives from ``AppError`` so that the
webhook and the CLI can report failures in one structured format.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """How serious an error is for the current request."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AppError(Exception):
    """Base class for all application errors."""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.cause = cause
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary."""
        result = {
            "error_type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.cause is not None:
            result["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        if self.context:
            result["context"] = self.context
        return result

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by {type(self.cause).__name__}: {self.cause})"
        return self.message


class RequestError(AppError):
    """Raised when an inbound request cannot be understood."""


class PlatformNotSupportedError(AppError):
    """Raised for a platform name that has no implementation."""


class HandlerNotFoundError(AppError):
    """Raised when no handler (not even Unhandled) matches a request."""

    def __init__(self, intent_name: str, state: Optional[str] = None):
        message = f"No handler found for intent '{intent_name}'"
        if state:
            message += f" in state '{state}'"
        super().__init__(message, context={"intent": intent_name, "state": state})
        self.intent_name = intent_name
        self.state = state


class RepositoryError(AppError):
    """Raised when user data cannot be read or written."""
