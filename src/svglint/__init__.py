"""svglint - Lint SVG files against declarative structural rules.

Rules select elements with CSS selectors and constrain their attributes or
how many of them exist. A lint run reports diagnostics and ends in one of the
states success, warning or error.
"""

__version__ = "0.1.0"
__description__ = "Lint SVG files against declarative structural rules"

from svglint.config import SvgLintConfig, load_config
from svglint.document import Document, DocumentError, Element
from svglint.linting import (
    Linting,
    LintState,
    alint_file,
    alint_source,
    lint_file,
    lint_source,
)
from svglint.reporter import Diagnostic, Reporter, Severity

__all__ = [
    "__version__",
    "__description__",
    "Diagnostic",
    "Document",
    "DocumentError",
    "Element",
    "LintState",
    "Linting",
    "Reporter",
    "Severity",
    "SvgLintConfig",
    "alint_file",
    "alint_source",
    "lint_file",
    "lint_source",
    "load_config",
]
