"""Parsed SVG documents and the selector query view handed to rules.

Markup is first checked with defusedxml so that entity expansion, external
entities and malformed input are rejected before the tree is built. The
queryable tree itself is a BeautifulSoup document built with the lxml XML
builder, which keeps attribute case (``viewBox``) and answers CSS selectors
through soupsieve.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from xml.etree.ElementTree import ParseError

from bs4 import BeautifulSoup, Tag
from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring as defused_fromstring

logger = logging.getLogger(__name__)


class DocumentError(ValueError):
    """Raised when markup cannot be turned into a document."""


@dataclass(eq=False)
class Element:
    """Stable handle for one element of a document.

    Handles are created once per tag when the document is built, so two
    handles compare equal only when they are the same object. Structurally
    identical markup (``<b/><b/>``) still yields distinct handles.
    """
    index: int
    path: str
    tag: Tag = field(repr=False)

    @property
    def name(self) -> str:
        return self.tag.name

    @property
    def attrs(self) -> dict[str, str]:
        return {name: _attribute_text(value) for name, value in self.tag.attrs.items()}

    def get(self, name: str) -> str | None:
        """Return the attribute value, or None when the attribute is absent."""
        value = self.tag.attrs.get(name)
        if value is None:
            return None
        return _attribute_text(value)

    def has(self, name: str) -> bool:
        return name in self.tag.attrs

    def __str__(self) -> str:
        return f"<{self.name}> at {self.path}"


def _attribute_text(value) -> str:
    # Multi-valued attributes come back as lists from some tree builders
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


@dataclass
class Document:
    """Read-only, queryable view of one parsed document."""
    tree: BeautifulSoup = field(repr=False)
    name: str | None = None
    elements: list[Element] = field(default_factory=list, repr=False)
    _handles: dict[int, Element] = field(default_factory=dict, repr=False)

    @classmethod
    def from_source(cls, source: str | bytes, name: str | None = None) -> "Document":
        """Parse markup into a document.

        Args:
            source: SVG markup
            name: Optional display name (usually the file path)

        Raises:
            DocumentError: If the markup is malformed or uses forbidden XML constructs
        """
        try:
            defused_fromstring(source)
        except DefusedXmlException as e:
            raise DocumentError(f"Unsafe XML in {name or 'source'}: {e}") from e
        except ParseError as e:
            raise DocumentError(f"Invalid XML in {name or 'source'}: {e}") from e

        tree = BeautifulSoup(source, "xml")
        document = cls(tree=tree, name=name)
        document._index()
        logger.debug(f"Parsed {name or 'source'} with {len(document.elements)} elements")
        return document

    @classmethod
    def from_file(cls, path: str | Path) -> "Document":
        """Read and parse a file.

        Raises:
            FileNotFoundError: If the file does not exist
            DocumentError: If the file content cannot be parsed
        """
        path = Path(path)
        return cls.from_source(path.read_bytes(), name=str(path))

    def _index(self) -> None:
        # Walk the tree once, in document order, assigning handles and paths
        positions: dict[int, dict[str, int]] = {}
        for index, tag in enumerate(self.tree.find_all(True)):
            parent = tag.parent
            siblings = positions.setdefault(id(parent), {})
            siblings[tag.name] = siblings.get(tag.name, 0) + 1
            parent_handle = self._handles.get(id(parent))
            prefix = parent_handle.path if parent_handle else ""
            element = Element(index=index, path=f"{prefix}/{tag.name}[{siblings[tag.name]}]", tag=tag)
            self.elements.append(element)
            self._handles[id(tag)] = element

    @property
    def root(self) -> Element | None:
        return self.elements[0] if self.elements else None

    def handle(self, tag: Tag) -> Element:
        """Return the handle of a tag belonging to this document."""
        try:
            return self._handles[id(tag)]
        except KeyError:
            raise ValueError(f"Tag <{tag.name}> does not belong to this document") from None

    def find(self, selector: str) -> list[Element]:
        """Return the elements matching a CSS selector, in document order.

        Raises:
            soupsieve.SelectorSyntaxError: If the selector is invalid
        """
        return [self.handle(tag) for tag in self.tree.select(selector)]
