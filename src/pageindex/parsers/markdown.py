"""Parse Markdown into a document tree."""

from __future__ import annotations

import re

from pageindex.parsers.builder import TreeBuilder
from pageindex.schemas import NodeKind, ParsedDocument

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")
_LIST_ITEM_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
_SUBSECTION_LEVEL = 3


def parse_markdown(
    content: str, source: str, *, document_id: str | None = None
) -> ParsedDocument:
    """Build a section tree from Markdown headings.

    Heading lines (``#`` to ``######``) open sections; everything between two
    headings is flushed as one content node under the innermost open section.
    Fenced code blocks are kept verbatim as ``code`` nodes and are never
    scanned for headings; a text run made only of list items becomes a
    ``list`` node.
    """
    builder = TreeBuilder(document_id)
    pending: list[str] = []
    code: list[str] = []
    fence: str | None = None

    for line in content.split("\n"):
        if fence is not None:
            code.append(line)
            if _closes_fence(line, fence):
                _flush_code(builder, code)
                code = []
                fence = None
            continue

        fence_match = _FENCE_RE.match(line)
        if fence_match:
            _flush_text(builder, pending)
            pending = []
            fence = fence_match.group(1)
            code.append(line)
            continue

        heading = _HEADING_RE.match(line.rstrip("\r"))
        if heading is None:
            pending.append(line)
            continue

        _flush_text(builder, pending)
        pending = []
        level = len(heading.group(1))
        kind: NodeKind = "subsection" if level >= _SUBSECTION_LEVEL else "section"
        builder.open_heading(
            heading.group(2).strip(),
            level,
            content=line.strip(),
            kind=kind,
            consumed=len(line) + 1,
        )

    if code:
        _flush_code(builder, code, closed=False)
    _flush_text(builder, pending)

    return builder.finish(source=source, doc_type="markdown", full_text=content)


def _flush_text(builder: TreeBuilder, lines: list[str]) -> None:
    if not lines:
        return
    buffer = "".join(f"{line}\n" for line in lines)
    builder.add_content(buffer, kind=_text_kind(lines))


def _closes_fence(line: str, fence: str) -> bool:
    # Only a bare run of the opening character, at least as long; "```python" never closes.
    marker = line.strip()
    return len(marker) >= len(fence) and marker == fence[0] * len(marker)


def _flush_code(builder: TreeBuilder, lines: list[str], *, closed: bool = True) -> None:
    block = "".join(f"{line}\n" for line in lines)
    inner = lines[1:]
    if closed and inner:
        inner = inner[:-1]
    body = "\n".join(inner)
    builder.add_content(body, kind="code", consumed=len(block))


def _text_kind(lines: list[str]) -> NodeKind:
    items = [line for line in lines if line.strip()]
    if items and all(_LIST_ITEM_RE.match(line) for line in items):
        return "list"
    return "paragraph"
