"""Custom rule: run a user supplied callable.

The callable receives ``(reporter, document, tree)`` like any generated rule
and may be a coroutine function; the lint run awaits whatever it returns.
"""

from typing import Any

from ..document import Document
from ..reporter import Reporter
from .base import ConfigurationError, RuleFunction


def generate(config: Any) -> RuleFunction:
    if not callable(config):
        raise ConfigurationError(f"custom rule must be callable, got '{type(config).__name__}'")
    name = getattr(config, "__name__", repr(config))

    def custom_rule(reporter: Reporter, document: Document, tree: Any):
        reporter.logger.debug(f"Calling {name}")
        return config(reporter, document, tree)

    return custom_rule
