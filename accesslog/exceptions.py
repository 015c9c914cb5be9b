"""
AccessLog - Custom Exception Hierarchy
========================================

What:  Application-specific exceptions raised by the access-log package.
How:   Each exception carries a message and an optional context dict,
       mirroring how callers log and inspect them.
Who:   Raised by the formatter registry, the configuration layer and the
       capturing writer.

Exception Hierarchy:
    AccessLogError (base)
    ├── UnknownFormatError   → no formatter registered under the given name
    └── WriterClosedError    → write attempted after the writer was closed

Sink I/O failures are NOT part of this hierarchy. Whatever the underlying
output sink raises reaches the caller unchanged.
"""

from typing import Any, Dict, Iterable, Optional


class AccessLogError(Exception):
    """
    Base exception for all access-log errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, never formatted into access lines)
    """

    def __init__(
        self,
        message: str = "An access log error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnknownFormatError(AccessLogError):
    """
    Raised when a log format preset name is not registered.

    When:  get_formatter("apache") or ACCESS_LOG_FORMAT=apache in the environment.
    """

    def __init__(
        self,
        name: str,
        available: Iterable[str] = (),
        context: Optional[Dict[str, Any]] = None,
    ):
        choices = sorted(available)
        message = f"Unknown access log format '{name}'"
        if choices:
            message += f". Available: {', '.join(choices)}"
        ctx = dict(context or {})
        ctx["format"] = name
        ctx["available"] = choices
        super().__init__(message=message, context=ctx)
        self.name = name


class WriterClosedError(AccessLogError):
    """Raised when bytes are written to a LogWriter after close()."""

    def __init__(
        self,
        message: str = "Cannot write to a closed log writer",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
