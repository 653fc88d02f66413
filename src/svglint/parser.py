"""SVG parsing into an element tree for SVGLint."""
from __future__ import annotations

import asyncio
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path


class ParseError(Exception):
    """Raised when a source cannot be read or is not well-formed markup."""

    def __init__(self, message: str, *, file: Path | None = None) -> None:
        self.file: Path | None = file
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class Document:
    """A parsed SVG document. Tags and attribute names are namespace-free."""

    file: Path | None
    root: ET.Element
    source: str

    def select(self, selector: str) -> list[ET.Element]:
        """
        Return the elements matching a selector, in document order.

        Args:
            selector: Space-separated chain of tag names where each step
                matches any descendant of the previous one (``"svg title"``),
                ``"*"`` for any element, or an ElementTree path when the
                selector starts with ``.`` or ``/``.
        """
        # The root must be matchable by name, so search from a wrapper.
        wrapper: ET.Element = ET.Element("document")
        wrapper.append(self.root)
        stripped: str = selector.strip()
        path: str
        if stripped.startswith((".", "/")):
            path = stripped if stripped.startswith(".") else "." + stripped
        else:
            path = ".//" + "//".join(stripped.split())
        try:
            return list(wrapper.iterfind(path))
        except (SyntaxError, TypeError) as e:
            raise ValueError(f"Invalid selector '{selector}': {e}") from e


def describe(element: ET.Element) -> str:
    """Short human-readable description of an element, e.g. ``<rect id="a">``."""
    element_id: str | None = element.get("id")
    if element_id is not None:
        return f'<{element.tag} id="{element_id}">'
    return f"<{element.tag}>"


def _local_name(name: str) -> str:
    if name.startswith("{"):
        return name.split("}", 1)[1]
    return name


def _strip_namespaces(root: ET.Element) -> None:
    for element in root.iter():
        if isinstance(element.tag, str):
            element.tag = _local_name(element.tag)
        if any(key.startswith("{") for key in element.attrib):
            element.attrib = {
                _local_name(key): value for key, value in element.attrib.items()
            }


def _parse_tree(source: str) -> ET.Element:
    """Parse markup, keeping namespace declarations as xmlns attributes."""
    parser: ET.XMLPullParser = ET.XMLPullParser(events=("start-ns", "start"))
    parser.feed(source)
    parser.close()

    root: ET.Element | None = None
    declarations: list[tuple[str, str]] = []
    for event, item in parser.read_events():
        if event == "start-ns":
            prefix, uri = item
            declarations.append((f"xmlns:{prefix}" if prefix else "xmlns", uri))
            continue
        if root is None:
            root = item
        for name, uri in declarations:
            item.set(name, uri)
        declarations = []

    if root is None:
        raise ET.ParseError("no element found")
    return root


def parse_source(source: str, *, file: Path | None = None) -> Document:
    """Parse SVG text into a Document."""
    try:
        root: ET.Element = _parse_tree(source)
    except ET.ParseError as e:
        raise ParseError(f"Invalid markup: {e}", file=file) from e
    _strip_namespaces(root)
    return Document(file=file, root=root, source=source)


async def parse_file(file: Path) -> Document:
    """Read and parse an SVG file without blocking the event loop."""
    try:
        source: str = await asyncio.to_thread(file.read_text, encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"Encoding error: {e}", file=file) from e
    except OSError as e:
        raise ParseError(f"Cannot read file: {e}", file=file) from e
    return parse_source(source, file=file)
