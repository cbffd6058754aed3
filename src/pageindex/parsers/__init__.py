"""Document parsers: raw source -> :class:`ParsedDocument`."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from pageindex.exceptions import ParseError
from pageindex.parsers.builder import TreeBuilder, new_document_id
from pageindex.parsers.html import parse_html
from pageindex.parsers.markdown import parse_markdown
from pageindex.parsers.pdf import parse_pdf, parse_pdf_text, split_pdf_text
from pageindex.parsers.text import parse_text
from pageindex.schemas import DocumentType, ParsedDocument

logger = logging.getLogger(__name__)

_TYPE_BY_SUFFIX: dict[str, DocumentType] = {
    ".pdf": "pdf",
    ".md": "markdown",
    ".markdown": "markdown",
    ".html": "html",
    ".htm": "html",
    ".txt": "text",
}


def detect_document_type(source: str) -> DocumentType | None:
    """Return the format implied by the file extension of ``source``."""
    return _TYPE_BY_SUFFIX.get(Path(source).suffix.lower())


async def parse_document(
    source: str,
    content: str | bytes | None = None,
    *,
    doc_type: DocumentType | None = None,
    document_id: str | None = None,
) -> ParsedDocument:
    """Parse a document from a file path or from literal content.

    Without ``content`` the file at ``source`` is read and its format is
    sniffed from the extension (unknown extensions parse as plain text).
    With ``content``, ``source`` is only an identifier: the format is
    ``doc_type`` when given, else the extension of ``source`` when it is a
    known one, else plain text.

    Raises:
        ParseError: If the file cannot be read or its content cannot be parsed.
    """
    resolved_type = doc_type or detect_document_type(source) or "text"

    if content is None:
        try:
            content = await asyncio.to_thread(Path(source).read_bytes)
        except OSError as exc:
            raise ParseError(source, "cannot read file", exc) from exc

    logger.debug("Parsing %s as %s", source, resolved_type)

    if resolved_type == "pdf":
        if isinstance(content, bytes):
            return await asyncio.to_thread(
                parse_pdf, content, source, document_id=document_id
            )
        return parse_pdf_text(content, source, document_id=document_id)

    text = _decode(content, source)
    if resolved_type == "markdown":
        return parse_markdown(text, source, document_id=document_id)
    if resolved_type == "html":
        return parse_html(text, source, document_id=document_id)
    return parse_text(text, source, document_id=document_id)


def _decode(content: str | bytes, source: str) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(source, "content is not valid UTF-8", exc) from exc


__all__ = [
    "TreeBuilder",
    "detect_document_type",
    "new_document_id",
    "parse_document",
    "parse_html",
    "parse_markdown",
    "parse_pdf",
    "parse_pdf_text",
    "parse_text",
    "split_pdf_text",
]
