"""Identity rule: report a fixed message, or nothing.

Configuration is ``{"method": "error" | "warn" | None, "message": str}``.
Mostly useful for exercising reporting and verdicts.
"""

from collections.abc import Mapping
from typing import Any

from ..document import Document
from ..reporter import Reporter
from .base import ConfigurationError, RuleFunction

METHODS = ("error", "warn")


def generate(config: Mapping[str, Any]) -> RuleFunction:
    if not isinstance(config, Mapping):
        raise ConfigurationError(f"identity config must be a mapping, got '{type(config).__name__}'")
    method = config.get("method")
    message = config.get("message", "")
    if method is not None and method not in METHODS:
        raise ConfigurationError(f"identity method must be one of {list(METHODS)} or null, got {method!r}")

    def identity_rule(reporter: Reporter, document: Document, tree: Any) -> None:
        reporter.logger.debug(f"Called with method {method!r}")
        if method:
            getattr(reporter, method)(message)

    return identity_rule
