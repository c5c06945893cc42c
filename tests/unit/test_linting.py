"""Tests for lint runs: completion, verdicts and failure isolation."""

import asyncio
import logging

import pytest

from svglint.config import SvgLintConfig
from svglint.document import Document, DocumentError
from svglint.linting import (
    Linting,
    LintState,
    alint_source,
    create_linting,
    derive_state,
    lint_file,
    lint_source,
)
from svglint.reporter import Diagnostic, Severity
from svglint.rules.base import RuleInstance


class TestDeriveState:
    """Test the verdict derived from diagnostics."""

    def test_empty_is_success(self):
        assert derive_state([]) == LintState.SUCCESS

    def test_warning(self):
        assert derive_state([Diagnostic(Severity.WARNING, "w")]) == LintState.WARNING

    def test_error_beats_warning(self):
        diagnostics = [Diagnostic(Severity.WARNING, "w"), Diagnostic(Severity.ERROR, "e")]
        assert derive_state(diagnostics) == LintState.ERROR

    def test_exception_counts_as_error(self):
        assert derive_state([Diagnostic(Severity.EXCEPTION, "x")]) == LintState.ERROR


class TestLinting:
    """Test the Linting state machine."""

    def test_no_config_succeeds(self, test_svg):
        linting = lint_source(test_svg)

        assert linting.state == LintState.SUCCESS
        assert linting.diagnostics == ()
        assert linting.exit_code == 0

    def test_pending_until_run(self, document):
        linting = create_linting(document, {"rules": {"elm": {"svg": True}}})

        assert linting.state == LintState.PENDING
        assert not linting.is_done

    def test_rule_exception_does_not_stop_others(self, test_svg):
        def broken(reporter, document, tree):
            raise RuntimeError("rule bug")

        config = {"rules": {
            "custom": broken,
            "identity": {"method": "warn", "message": "still here"},
            "elm": {"circle": False},
        }}
        linting = lint_source(test_svg, config)

        assert linting.state == LintState.ERROR
        assert [d.message for d in linting.exceptions] == ["RuntimeError: rule bug"]
        assert [d.message for d in linting.warnings] == ["still here"]
        assert [d.message for d in linting.errors] == ["Element disallowed"]

    def test_async_rules_run_concurrently(self, test_svg):
        released = asyncio.Event()

        async def waiter(reporter, document, tree):
            await released.wait()
            reporter.warn("waiter")

        async def releaser(reporter, document, tree):
            await asyncio.sleep(0)
            released.set()
            reporter.warn("releaser")

        linting = lint_source(test_svg, {"rules": {"custom": [waiter, releaser]}})

        assert linting.state == LintState.WARNING
        assert [d.message for d in linting.diagnostics] == ["releaser", "waiter"]

    def test_async_rule_exception(self, test_svg):
        async def broken(reporter, document, tree):
            await asyncio.sleep(0)
            raise ValueError("late failure")

        linting = lint_source(test_svg, {"rules": {"custom": broken}})

        assert linting.state == LintState.ERROR
        assert [d.message for d in linting.exceptions] == ["ValueError: late failure"]

    def test_no_reports_after_done(self, test_svg):
        kept = {}

        def keep_reporter(reporter, document, tree):
            kept["reporter"] = reporter

        linting = lint_source(test_svg, {"rules": {"custom": keep_reporter}})
        kept["reporter"].error("too late")

        assert linting.state == LintState.SUCCESS
        assert linting.diagnostics == ()

    def test_done_callbacks(self, document):
        calls = []
        linting = create_linting(document, {"rules": {"identity": {"method": "warn", "message": "w"}}})
        linting.on_done(lambda l: calls.append(("before", l.state)))

        asyncio.run(linting.run())
        linting.on_done(lambda l: calls.append(("after", l.state)))

        assert calls == [("before", LintState.WARNING), ("after", LintState.WARNING)]

    def test_wait_resolves_after_run(self, document):
        async def main():
            linting = create_linting(document, {"rules": {"elm": {"title": True}}})
            task = asyncio.create_task(linting.run())
            state = await linting.wait()
            await task
            return linting, state

        linting, state = asyncio.run(main())

        assert state == LintState.ERROR
        assert linting.is_done

    def test_run_only_once(self, document):
        linting = Linting(document, [])

        async def main():
            await linting.run()
            await linting.run()

        with pytest.raises(RuntimeError, match="already started"):
            asyncio.run(main())
        assert linting.state == LintState.SUCCESS

    def test_rules_receive_injected_logger(self, document):
        names = []

        def record(reporter, document, tree):
            names.append(reporter.logger.name)

        linting = Linting(document, [RuleInstance("record", record)], logger=logging.getLogger("tests.lint"))
        asyncio.run(linting.run())

        assert names == ["tests.lint.record"]

    def test_idempotent_runs(self, test_svg):
        config = SvgLintConfig(rules={
            "elm": {"g": 1, "title": True},
            "attr": {"id": True, "rule::selector": "g"},
        })
        first = lint_source(test_svg, config)
        second = lint_source(test_svg, config)

        assert first.state == second.state == LintState.ERROR
        assert [str(d) for d in first.diagnostics] == [str(d) for d in second.diagnostics]

    def test_to_dict(self, test_svg):
        linting = lint_source(test_svg, {"rules": {"elm": {"circle": False}}}, name="icon.svg")
        data = linting.to_dict()

        assert data["name"] == "icon.svg"
        assert data["state"] == "error"
        assert data["exit_code"] == 1
        assert data["diagnostics"] == [{
            "severity": "error",
            "rule": "elm",
            "message": "Element disallowed",
            "element": "circle",
            "location": "/svg[1]/circle[1]",
        }]


class TestEntryPoints:
    """Test lint_source / lint_file and their async forms."""

    def test_alint_source(self, test_svg):
        linting = asyncio.run(alint_source(test_svg, {"rules": {"elm": {"svg": 1}}}))
        assert linting.state == LintState.SUCCESS

    def test_lint_file(self, tmp_path, test_svg):
        svg_file = tmp_path / "icon.svg"
        svg_file.write_text(test_svg, encoding="utf-8")

        linting = lint_file(svg_file, {"rules": {"elm": {"title": True}}})

        assert linting.name == str(svg_file)
        assert linting.state == LintState.ERROR

    def test_unparseable_source(self):
        with pytest.raises(DocumentError):
            lint_source("<svg>", {"rules": {"elm": {"svg": True}}})

    def test_invalid_config(self, test_svg):
        with pytest.raises(ValueError):
            lint_source(test_svg, {"rulez": {}})

    def test_shared_document(self, test_svg):
        document = Document.from_source(test_svg)
        first = create_linting(document, {"rules": {"elm": {"g": 2}}})
        second = create_linting(document, {"rules": {"elm": {"g": 3}}})

        assert asyncio.run(first.run()) == LintState.SUCCESS
        assert asyncio.run(second.run()) == LintState.ERROR
