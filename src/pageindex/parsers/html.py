"""Parse HTML into a document tree."""

from __future__ import annotations

import re

from pageindex.exceptions import ParseError
from pageindex.parsers.builder import TreeBuilder
from pageindex.schemas import ParsedDocument

try:
    from bs4 import BeautifulSoup
    from bs4.element import Comment, NavigableString, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


_HEADING_RE = re.compile(r"^h[1-6]$")
_BLOCK_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6", "p", "div"}
# Non-participating tags whose text should not run into its neighbours.
_SPACED_TAGS = {
    "br", "li", "td", "th", "tr", "dt", "dd", "pre", "blockquote",
    "section", "article", "header", "footer", "aside", "main", "ul", "ol",
    "table", "figure", "figcaption",
}
_UNWANTED_TAGS = ["script", "style", "noscript", "template"]


def parse_html(
    content: str | bytes, source: str, *, document_id: str | None = None
) -> ParsedDocument:
    """Build a section tree from HTML headings, paragraphs and divs.

    Only ``h1``-``h6``, ``p`` and ``div`` elements create nodes. Text of any
    other element is folded into its nearest enclosing participating element.
    Headings nest by level exactly like Markdown headings.

    Raises:
        ParseError: If the markup cannot be parsed.
    """
    try:
        soup = BeautifulSoup(content, "lxml")
    except Exception as exc:
        raise ParseError(source, "malformed HTML", exc) from exc

    for tag in soup.find_all(_UNWANTED_TAGS):
        tag.decompose()

    title = soup.title.get_text(" ", strip=True) if soup.title else None
    root = soup.body or soup
    builder = TreeBuilder(document_id, title=title or None)

    for element in root.find_all(list(_BLOCK_TAGS)):
        text = _own_text(element)
        if not text:
            continue
        if _HEADING_RE.match(element.name):
            builder.open_heading(text, int(element.name[1]))
        else:
            builder.add_content(text)

    full_text = root.get_text(" ", strip=True)
    return builder.finish(source=source, doc_type="html", full_text=full_text)


def _own_text(element: Tag) -> str:
    """Return the element's text, excluding nested participating elements."""
    return " ".join(_collect_text(element).split())


def _collect_text(element: Tag) -> str:
    parts: list[str] = []
    for child in element.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag):
            if child.name in _BLOCK_TAGS:
                continue
            text = _collect_text(child)
            if child.name in _SPACED_TAGS:
                text = f" {text} "
            parts.append(text)
    return "".join(parts)
