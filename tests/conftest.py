"""Pytest configuration and fixtures for svglint tests."""

import pytest

from svglint.document import Document

TEST_SVG = """<svg role="img" viewBox="0 0 24 24">
    <g id="foo">
        <path d="bar"></path>
    </g>
    <g></g>
    <circle></circle>
</svg>"""


@pytest.fixture
def test_svg():
    """Sample SVG used across rule tests."""
    return TEST_SVG


@pytest.fixture
def document(test_svg):
    """Parsed sample SVG."""
    return Document.from_source(test_svg, name="test.svg")
