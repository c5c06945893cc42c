"""Lint runs: execute every rule instance against a document and derive a verdict."""

import asyncio
import inspect
import logging
from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path

from .config import SvgLintConfig, coerce_config
from .document import Document
from .reporter import Diagnostic, Reporter, Severity
from .rules import RuleInstance, build_rules

logger = logging.getLogger(__name__)


class LintState(str, Enum):
    """State of a lint run. PENDING is initial, the others are terminal."""
    PENDING = "pending"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def derive_state(diagnostics: Sequence[Diagnostic]) -> LintState:
    """Error beats warning beats success; exceptions count as errors."""
    severities = {diagnostic.severity for diagnostic in diagnostics}
    if Severity.ERROR in severities or Severity.EXCEPTION in severities:
        return LintState.ERROR
    if Severity.WARNING in severities:
        return LintState.WARNING
    return LintState.SUCCESS


class Linting:
    """One lint run of a document.

    Rule instances run concurrently on the event loop. Each may finish
    synchronously or return an awaitable; an exception from an instance is
    reported as an exception diagnostic and the instance counts as finished.
    Once all instances are finished the state leaves PENDING, the reporter is
    closed and the done notification fires exactly once.
    """

    def __init__(self, document: Document, rules: Sequence[RuleInstance],
                 name: str | None = None, logger: logging.Logger | None = None):
        self.document = document
        self.rules = tuple(rules)
        self.name = name or document.name
        self.logger = logger or logging.getLogger(__name__)
        self.reporter = Reporter(self.name, self.logger)
        self.state = LintState.PENDING
        self._started = False
        self._done = asyncio.Event()
        self._callbacks: list[Callable[["Linting"], None]] = []

    @property
    def is_done(self) -> bool:
        return self.state != LintState.PENDING

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self.reporter.diagnostics

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def exceptions(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.EXCEPTION]

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = success/warning, 1 = error."""
        return 1 if self.state == LintState.ERROR else 0

    def on_done(self, callback: Callable[["Linting"], None]) -> None:
        """Call ``callback(linting)`` once the run is finished.

        Callbacks registered after the run finished are called immediately.
        """
        if self.is_done:
            callback(self)
        else:
            self._callbacks.append(callback)

    async def wait(self) -> LintState:
        """Wait for the run to finish and return the terminal state."""
        await self._done.wait()
        return self.state

    async def run(self) -> LintState:
        """Run every rule instance and return the terminal state.

        Raises:
            RuntimeError: If the run was already started
        """
        if self._started:
            raise RuntimeError(f"Linting of {self.name or 'source'} was already started")
        self._started = True

        self.logger.debug(f"Linting {self.name or 'source'} with {len(self.rules)} rules")
        await asyncio.gather(*(self._run_rule(rule) for rule in self.rules))
        self._finish()
        return self.state

    async def _run_rule(self, rule: RuleInstance) -> None:
        reporter = self.reporter.scoped(rule.name)
        try:
            outcome = rule.function(reporter, self.document, self.document.tree)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            reporter.logger.exception(f"Rule {rule.name} failed with error: {e}")
            reporter.exception(e)
        else:
            reporter.logger.debug("Finished")

    def _finish(self) -> None:
        self.state = derive_state(self.diagnostics)
        self.reporter.close()
        self.logger.debug(f"Linting of {self.name or 'source'} finished with state {self.state.value}")
        self._done.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "name": self.name,
            "state": self.state.value,
            "exit_code": self.exit_code,
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
        }


def create_linting(document: Document, config: SvgLintConfig | dict | None = None,
                   logger: logging.Logger | None = None) -> Linting:
    """Build a pending lint run of ``document`` for the configured rules."""
    config = coerce_config(config)
    return Linting(document, build_rules(config.rules), logger=logger)


async def alint_source(source: str | bytes, config: SvgLintConfig | dict | None = None,
                       name: str | None = None, logger: logging.Logger | None = None) -> Linting:
    """Lint markup and return the finished run.

    Raises:
        DocumentError: If the markup cannot be parsed
        ValueError: If ``config`` is not a valid configuration
    """
    linting = create_linting(Document.from_source(source, name=name), config, logger)
    await linting.run()
    return linting


async def alint_file(path: str | Path, config: SvgLintConfig | dict | None = None,
                     logger: logging.Logger | None = None) -> Linting:
    """Lint a file and return the finished run.

    Raises:
        FileNotFoundError: If the file does not exist
        DocumentError: If the file cannot be parsed
    """
    linting = create_linting(Document.from_file(path), config, logger)
    await linting.run()
    return linting


def lint_source(source: str | bytes, config: SvgLintConfig | dict | None = None,
                name: str | None = None, logger: logging.Logger | None = None) -> Linting:
    """Synchronous wrapper around ``alint_source``."""
    return asyncio.run(alint_source(source, config, name, logger))


def lint_file(path: str | Path, config: SvgLintConfig | dict | None = None,
              logger: logging.Logger | None = None) -> Linting:
    """Synchronous wrapper around ``alint_file``."""
    return asyncio.run(alint_file(path, config, logger))
