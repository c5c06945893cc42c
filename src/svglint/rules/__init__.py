"""Lint rules and their registry.

Every rule module exposes ``generate(config)`` returning a function called as
``function(reporter, document, tree)``.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from . import attr, custom, elm, identity
from .base import (
    ConfigurationError,
    RuleElmResult,
    RuleExecution,
    RuleFunction,
    RuleInstance,
    resolve_disallowed,
)

logger = logging.getLogger(__name__)

RULES: dict[str, Callable[[Any], RuleFunction]] = {
    "attr": attr.generate,
    "elm": elm.generate,
    "identity": identity.generate,
    "custom": custom.generate,
}


def _failing_rule(error: Exception) -> RuleFunction:
    def failing_rule(reporter, document, tree) -> None:
        raise error

    return failing_rule


def build_rules(rules_config: Mapping[str, Any]) -> list[RuleInstance]:
    """Create one rule instance per configured rule.

    A list value creates one instance per item, named ``rule[index]``.
    Unknown rule names and configurations rejected by ``generate`` yield an
    instance that fails when run, so the problem is reported as an exception
    diagnostic of that instance.
    """
    instances = []
    for rule_name, value in rules_config.items():
        if isinstance(value, list):
            configs = [(f"{rule_name}[{i}]", item) for i, item in enumerate(value)]
        else:
            configs = [(rule_name, value)]

        for instance_name, config in configs:
            try:
                generate = RULES[rule_name]
            except KeyError:
                function = _failing_rule(ConfigurationError(f"Unknown rule '{rule_name}'"))
            else:
                try:
                    function = generate(config)
                except ConfigurationError as e:
                    logger.debug(f"Rule {instance_name} rejected its config: {e}")
                    function = _failing_rule(e)
            instances.append(RuleInstance(instance_name, function))

    return instances


__all__ = [
    "RULES",
    "ConfigurationError",
    "RuleElmResult",
    "RuleExecution",
    "RuleFunction",
    "RuleInstance",
    "build_rules",
    "resolve_disallowed",
]
