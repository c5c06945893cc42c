"""Element rule: constrain how many elements a selector may match.

Configuration maps a selector to one of:

- ``True``: the selector must match at least one element
- ``False``: the selector must not match
- an integer: the selector must match exactly that many elements
- ``[min, max]``: the match count must lie in the inclusive range

An element disallowed by one selector but allowed by another is allowed, so
``{"title": False, "svg > title": True}`` only permits titles directly below
the root. This is by element, not by selector: ``{"b": 2, "a > b": True}``
fails on ``<b/><b/><a><b/><b/></a>`` because the two top-level ``b`` are
disallowed by the count and not allowed by ``a > b``.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..document import Document
from ..reporter import Reporter
from .base import ConfigurationError, RuleElmResult, RuleExecution, RuleFunction, report_disallowed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Required:
    pass


@dataclass(frozen=True)
class Forbidden:
    pass


@dataclass(frozen=True)
class ExactCount:
    count: int


@dataclass(frozen=True)
class CountRange:
    minimum: float
    maximum: float


ElmRequirement = Required | Forbidden | ExactCount | CountRange


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_requirement(selector: str, value: Any) -> ElmRequirement:
    """Turn a raw configuration value into a requirement.

    Raises:
        ConfigurationError: If the value is not a supported shape
    """
    if isinstance(value, bool):
        return Required() if value else Forbidden()
    if isinstance(value, int):
        return ExactCount(value)
    if isinstance(value, (list, tuple)) and len(value) == 2 and all(_is_number(v) for v in value):
        return CountRange(value[0], value[1])
    raise ConfigurationError(
        f"Unknown config type '{type(value).__name__}' for '{selector}' ({json.dumps(value, default=repr)})"
    )


def execute_clause(selector: str, requirement: ElmRequirement, document: Document) -> RuleExecution:
    """Classify the elements matched by ``selector``."""
    execution = RuleExecution()
    matches = document.find(selector)
    count = len(matches)

    if isinstance(requirement, Required):
        if matches:
            execution.allowed.extend(RuleElmResult(elm) for elm in matches)
        else:
            execution.disallowed.append(RuleElmResult(None, f"Expected '{selector}', none found"))
    elif isinstance(requirement, Forbidden):
        execution.disallowed.extend(RuleElmResult(elm, "Element disallowed") for elm in matches)
    elif isinstance(requirement, ExactCount):
        if count == requirement.count:
            execution.allowed.extend(RuleElmResult(elm) for elm in matches)
        else:
            message = f"Found {count} elements for '{selector}', expected {requirement.count}"
            if matches:
                execution.disallowed.extend(RuleElmResult(elm, message) for elm in matches)
            else:
                execution.disallowed.append(RuleElmResult(None, message))
    elif isinstance(requirement, CountRange):
        if requirement.minimum <= count <= requirement.maximum:
            execution.allowed.extend(RuleElmResult(elm) for elm in matches)
        else:
            execution.disallowed.append(RuleElmResult(
                None,
                f"Found {count} elements for '{selector}', "
                f"expected between {requirement.minimum} and {requirement.maximum}",
            ))

    logger.debug(f"'{selector}': {len(execution.allowed)} allowed, {len(execution.disallowed)} disallowed")
    return execution


def generate(config: Mapping[str, Any]) -> RuleFunction:
    """Generate a linting function from an element rule configuration.

    Raises:
        ConfigurationError: If the configuration is not a mapping
    """
    if not isinstance(config, Mapping):
        raise ConfigurationError(f"elm config must be a mapping, got '{type(config).__name__}'")

    clauses: list[tuple[str, ElmRequirement | ConfigurationError]] = []
    for selector, value in config.items():
        try:
            clauses.append((selector, parse_requirement(selector, value)))
        except ConfigurationError as e:
            clauses.append((selector, e))

    def elm_rule(reporter: Reporter, document: Document, tree: Any) -> None:
        reporter.logger.debug(f"Called with {len(clauses)} clauses")
        executions = []
        for selector, requirement in clauses:
            if isinstance(requirement, ConfigurationError):
                reporter.exception(requirement)
                continue
            try:
                executions.append(execute_clause(selector, requirement, document))
            except Exception as e:
                reporter.logger.debug(f"Clause '{selector}' failed: {e}")
                reporter.exception(e)
        report_disallowed(reporter, executions, tree)

    return elm_rule
