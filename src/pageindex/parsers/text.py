"""Parse plain text into a flat paragraph tree."""

from __future__ import annotations

from pageindex.parsers.builder import TreeBuilder
from pageindex.schemas import ParsedDocument


def parse_text(
    content: str, source: str, *, document_id: str | None = None
) -> ParsedDocument:
    """Split text into paragraphs at blank lines.

    Lines of a paragraph are joined with single spaces. Every paragraph is a
    direct child of the root.
    """
    builder = TreeBuilder(document_id)
    paragraph = ""

    for line in content.split("\n"):
        if line.strip():
            paragraph += line.rstrip("\r") + " "
        elif paragraph:
            builder.add_content(paragraph)
            paragraph = ""

    if paragraph:
        builder.add_content(paragraph)

    return builder.finish(source=source, doc_type="text", full_text=content)
