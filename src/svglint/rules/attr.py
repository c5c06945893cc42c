"""Attribute rule: constrain the attributes of the elements a selector matches.

Configuration maps attribute names to:

- ``True``: the attribute must be set
- ``False``: the attribute must not be set
- a string: the attribute must equal it
- a list of strings: the attribute must equal one of them

``rule::selector`` picks the elements (default ``"*"``). By default the rule
acts as a blacklist; with ``rule::whitelist`` set to ``True`` any attribute
not named in the configuration is disallowed as well.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..document import Document, Element
from ..reporter import Reporter
from .base import ConfigurationError, RuleElmResult, RuleExecution, RuleFunction, report_disallowed

logger = logging.getLogger(__name__)

SELECTOR_KEY = "rule::selector"
WHITELIST_KEY = "rule::whitelist"
DEFAULT_SELECTOR = "*"


@dataclass(frozen=True)
class Present:
    pass


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class Equals:
    value: str


@dataclass(frozen=True)
class OneOf:
    values: tuple[str, ...]


AttrRequirement = Present | Absent | Equals | OneOf


def parse_requirement(attribute: str, value: Any) -> AttrRequirement:
    """Turn a raw configuration value into a requirement.

    Raises:
        ConfigurationError: If the value is not a supported shape
    """
    if isinstance(value, bool):
        return Present() if value else Absent()
    if isinstance(value, str):
        return Equals(value)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return OneOf(tuple(value))
    raise ConfigurationError(
        f"Unknown config type '{type(value).__name__}' for attribute '{attribute}' "
        f"({json.dumps(value, default=repr)})"
    )


def check_attribute(element: Element, attribute: str, requirement: AttrRequirement) -> str | None:
    """Return why ``element`` fails the requirement, or None if it passes."""
    value = element.get(attribute)
    if isinstance(requirement, Absent):
        return f"Attribute '{attribute}' is disallowed" if value is not None else None
    if value is None:
        return f"Expected attribute '{attribute}', didn't find it"
    if isinstance(requirement, Equals) and value != requirement.value:
        return f"Expected attribute '{attribute}' to be '{requirement.value}', was '{value}'"
    if isinstance(requirement, OneOf) and value not in requirement.values:
        return f"Expected attribute '{attribute}' to be one of {list(requirement.values)}, was '{value}'"
    return None


def execute_rule(selector: str, requirements: Mapping[str, AttrRequirement], whitelist: bool,
                 document: Document, expected: frozenset[str] = frozenset()) -> RuleExecution:
    """Check every element matched by ``selector``.

    Args:
        selector: CSS selector picking the elements to check
        requirements: Attribute name to requirement
        whitelist: Whether attributes outside ``expected`` are disallowed
        document: Document to query
        expected: Attribute names allowed in whitelist mode, in addition to
            the keys of ``requirements``
    """
    execution = RuleExecution()
    allowed_names = expected | set(requirements)

    for element in document.find(selector):
        failures = []
        for attribute, requirement in requirements.items():
            message = check_attribute(element, attribute, requirement)
            if message:
                failures.append(RuleElmResult(element, message))
        if whitelist:
            for name in element.attrs:
                if name not in allowed_names:
                    failures.append(RuleElmResult(element, f"Found unexpected attribute '{name}'"))

        if failures:
            execution.disallowed.extend(failures)
        else:
            execution.allowed.append(RuleElmResult(element))

    logger.debug(f"'{selector}': {len(execution.allowed)} allowed, {len(execution.disallowed)} disallowed")
    return execution


def generate(config: Mapping[str, Any]) -> RuleFunction:
    """Generate a linting function from an attribute rule configuration.

    Raises:
        ConfigurationError: If the configuration, selector or whitelist flag is invalid
    """
    if not isinstance(config, Mapping):
        raise ConfigurationError(f"attr config must be a mapping, got '{type(config).__name__}'")

    selector = config.get(SELECTOR_KEY, DEFAULT_SELECTOR)
    whitelist = config.get(WHITELIST_KEY, False)
    if not isinstance(selector, str):
        raise ConfigurationError(f"'{SELECTOR_KEY}' must be a string, got {selector!r}")
    if not isinstance(whitelist, bool):
        raise ConfigurationError(f"'{WHITELIST_KEY}' must be a boolean, got {whitelist!r}")

    requirements: dict[str, AttrRequirement] = {}
    errors: list[ConfigurationError] = []
    for attribute, value in config.items():
        if attribute in (SELECTOR_KEY, WHITELIST_KEY):
            continue
        try:
            requirements[attribute] = parse_requirement(attribute, value)
        except ConfigurationError as e:
            errors.append(e)
    # Attributes with a broken requirement are still named, so not unexpected
    expected = frozenset(a for a in config if a not in (SELECTOR_KEY, WHITELIST_KEY))

    def attr_rule(reporter: Reporter, document: Document, tree: Any) -> None:
        reporter.logger.debug(f"Called on '{selector}' with {len(requirements)} attributes")
        for error in errors:
            reporter.exception(error)
        try:
            execution = execute_rule(selector, requirements, whitelist, document, expected)
        except Exception as e:
            reporter.logger.debug(f"Selector '{selector}' failed: {e}")
            reporter.exception(e)
            return
        report_disallowed(reporter, [execution], tree)

    return attr_rule
