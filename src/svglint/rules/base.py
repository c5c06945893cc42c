"""Shared types for rules and the allowed/disallowed conflict resolution."""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from ..document import Document, Element
from ..reporter import Reporter

RuleFunction = Callable[[Reporter, Document, Any], Awaitable[None] | None]


class ConfigurationError(ValueError):
    """Raised when a rule or clause configuration has an unsupported shape."""


@dataclass(frozen=True)
class RuleElmResult:
    """Outcome for one element; ``element`` is None for node-less failures."""
    element: Element | None
    message: str = ""


@dataclass
class RuleExecution:
    """Elements allowed and disallowed by one clause."""
    allowed: list[RuleElmResult] = field(default_factory=list)
    disallowed: list[RuleElmResult] = field(default_factory=list)


@dataclass(frozen=True)
class RuleInstance:
    """One configured occurrence of a rule, ready to run."""
    name: str
    function: RuleFunction


def resolve_disallowed(executions: Iterable[RuleExecution]) -> list[RuleElmResult]:
    """Drop disallowed results whose element is allowed by any clause.

    Node-less results are always kept. Membership is by element handle.
    """
    executions = list(executions)
    allowed = {result.element for execution in executions for result in execution.allowed
               if result.element is not None}
    return [
        result
        for execution in executions
        for result in execution.disallowed
        if result.element is None or result.element not in allowed
    ]


def report_disallowed(reporter: Reporter, executions: Iterable[RuleExecution], tree: Any) -> None:
    """Report every result left after conflict resolution as an error."""
    for result in resolve_disallowed(executions):
        reporter.error(result.message, result.element, tree)
