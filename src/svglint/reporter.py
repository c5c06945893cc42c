"""Diagnostic collection shared by every rule of a lint run."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .document import Element

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Diagnostic severity levels."""
    WARNING = "warning"
    ERROR = "error"
    EXCEPTION = "exception"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding reported by a rule."""
    severity: Severity
    message: str
    rule: str | None = None
    element: Element | None = None
    node: Any = field(default=None, repr=False)
    error: BaseException | None = field(default=None, repr=False)

    @property
    def location(self) -> str | None:
        return self.element.path if self.element else None

    def __str__(self) -> str:
        rule = f" {self.rule}:" if self.rule else ""
        location = f" at {self.location}" if self.location else ""
        return f"[{self.severity.value.upper()}]{rule} {self.message}{location}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "severity": self.severity.value,
            "rule": self.rule,
            "message": self.message,
            "element": self.element.name if self.element else None,
            "location": self.location,
        }


class _Sink:
    """Storage behind a reporter and all of its scoped views."""

    def __init__(self):
        self.diagnostics: list[Diagnostic] = []
        self.closed = False


class Reporter:
    """Append-only sink of diagnostics.

    One reporter is created per lint run. Rules receive a scoped view from
    ``scoped()`` which tags every diagnostic with the rule name and appends to
    the same list. After ``close()`` every view ignores further reports.
    """

    def __init__(self, name: str | None = None, logger: logging.Logger | None = None,
                 _sink: _Sink | None = None):
        self.name = name
        self.logger = logger or logging.getLogger(__name__)
        self._sink = _sink or _Sink()

    def scoped(self, name: str) -> "Reporter":
        """Return a view that reports on behalf of rule ``name``."""
        return Reporter(name, self.logger.getChild(name), self._sink)

    @property
    def closed(self) -> bool:
        return self._sink.closed

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._sink.diagnostics)

    def close(self) -> None:
        self._sink.closed = True

    def warn(self, message: str, element: Element | None = None, node: Any = None) -> None:
        """Report a warning."""
        self._add(Diagnostic(Severity.WARNING, message, self.name, element, node))

    def error(self, message: str, element: Element | None = None, node: Any = None) -> None:
        """Report an error."""
        self._add(Diagnostic(Severity.ERROR, message, self.name, element, node))

    def exception(self, error: BaseException) -> None:
        """Report an exception raised while linting."""
        message = f"{type(error).__name__}: {error}"
        self._add(Diagnostic(Severity.EXCEPTION, message, self.name, error=error))

    def _add(self, diagnostic: Diagnostic) -> None:
        if self._sink.closed:
            self.logger.debug(f"Ignoring report after lint completed: {diagnostic}")
            return
        self.logger.debug(f"Reported {diagnostic}")
        self._sink.diagnostics.append(diagnostic)
