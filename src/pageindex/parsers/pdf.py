"""Parse PDF documents into page/section trees."""

from __future__ import annotations

import io
import logging
import re

from pageindex.config import PAGEINDEX_PDF_SECTION_CHARS
from pageindex.exceptions import ParseError
from pageindex.parsers.builder import TreeBuilder
from pageindex.schemas import ParsedDocument

try:
    from pypdf import PdfReader
    from pypdf.errors import PyPdfError
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError("pypdf is required for PDF parsing (pip install pypdf).") from exc

logger = logging.getLogger(__name__)

PAGE_BREAK = "\f"

# Tried in order; the first pattern that yields more segments wins. The
# lookahead keeps each chapter heading at the top of its own segment.
_CHAPTER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?=\n\s*CHAPTER\s+[IVXLCDM]+\n)", re.IGNORECASE),
    re.compile(r"(?=\n\s*Chapter\s+\d+\n)", re.IGNORECASE),
    re.compile(r"(?=\n\s*#\s+[A-Z][A-Z\s]+\n)"),
    re.compile(r"(?=\n\s*Part\s+[IVXLCDM]+\n)", re.IGNORECASE),
)
_TITLE_PREFIX_RE = re.compile(r"^(CHAPTER|Chapter|Part|#|\d+\.)\s+")
_TITLE_SCAN_LINES = 5
_TITLE_MIN_CHARS = 4
_TITLE_MAX_CHARS = 99


def extract_pdf_text(data: bytes, source: str) -> tuple[str, int, dict[str, str | None]]:
    """Extract the text of every page with pypdf.

    Returns:
        Tuple of (text, page_count, info) where pages are joined with a form
        feed and ``info`` holds the document ``title`` and ``author``.

    Raises:
        ParseError: If the PDF cannot be read.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages: list[str] = []
        for index, page in enumerate(reader.pages, start=1):
            try:
                pages.append(page.extract_text() or "")
            except (PyPdfError, ValueError, KeyError) as error:
                logger.warning("Failed to extract text from %s page %s: %s", source, index, error)
                pages.append("")
        info = reader.metadata
    except (PyPdfError, ValueError, OSError) as exc:
        raise ParseError(source, "unreadable PDF", exc) from exc

    details = {
        "title": (info.title or None) if info else None,
        "author": (info.author or None) if info else None,
    }
    return PAGE_BREAK.join(pages), len(pages), details


def split_pdf_text(
    text: str,
    page_count: int | None = None,
    *,
    section_chars: int = PAGEINDEX_PDF_SECTION_CHARS,
) -> list[str]:
    """Split extracted PDF text into page-like slices.

    Strategies, first success wins:

    1. explicit page-break characters;
    2. ``page_count`` equal-length slices when more than one page is known;
    3. chapter heading patterns;
    4. whole-line chunks of about ``section_chars`` when a single oversized
       segment remains.

    Slices may be blank; callers skip them but keep their index.
    """
    if PAGE_BREAK in text:
        return text.split(PAGE_BREAK)

    if page_count and page_count > 1:
        # Approximate: slices ignore word boundaries; the last one takes the rest.
        size = len(text) // page_count
        return [
            text[i * size : (i + 1) * size if i < page_count - 1 else len(text)]
            for i in range(page_count)
        ]

    segments = [text]
    for pattern in _CHAPTER_PATTERNS:
        candidate = [part for part in pattern.split(text) if part.strip()]
        if len(candidate) > len(segments):
            segments = candidate
            break

    if len(segments) == 1 and len(segments[0]) > section_chars:
        return _split_by_size(text, section_chars)
    return segments


def _split_by_size(text: str, section_chars: int) -> list[str]:
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        current += line + "\n"
        if len(current) >= section_chars:
            chunks.append(current.strip())
            current = ""
    if current.strip():
        chunks.append(current.strip())
    return chunks


def detect_section_title(text: str, index: int) -> str:
    """Guess a heading from the first lines of a slice.

    Picks the first short line that is all upper-case or starts like a
    heading (``CHAPTER``, ``Part``, ``#``, ``1.``); defaults to
    ``"Section <index>"``.
    """
    for line in text.strip().split("\n")[:_TITLE_SCAN_LINES]:
        candidate = line.strip()
        if not _TITLE_MIN_CHARS <= len(candidate) <= _TITLE_MAX_CHARS:
            continue
        if candidate.isupper() or _TITLE_PREFIX_RE.match(candidate):
            return candidate
    return f"Section {index}"


def parse_pdf_text(
    text: str,
    source: str,
    *,
    page_count: int | None = None,
    title: str | None = None,
    author: str | None = None,
    document_id: str | None = None,
) -> ParsedDocument:
    """Build a flat tree of level-1 sections from extracted PDF text."""
    builder = TreeBuilder(document_id, title=title)
    slices = split_pdf_text(text, page_count)
    cursor = 0

    for index, raw in enumerate(slices, start=1):
        content = raw.strip()
        if not content:
            continue
        offset = text.find(content, cursor)
        if offset < 0:
            offset = cursor
        builder.add_section(
            content,
            title=detect_section_title(content, index),
            page_number=index,
            position=offset,
        )
        cursor = offset + len(content)

    logger.debug("Split %s into %d PDF sections", source, len(builder.root.children))
    return builder.finish(
        source=source,
        doc_type="pdf",
        full_text=text,
        total_pages=page_count or len(slices),
        author=author,
    )


def parse_pdf(
    data: bytes, source: str, *, document_id: str | None = None
) -> ParsedDocument:
    """Parse raw PDF bytes.

    Raises:
        ParseError: If the PDF cannot be read.
    """
    text, page_count, info = extract_pdf_text(data, source)
    return parse_pdf_text(
        text,
        source,
        page_count=page_count,
        title=info["title"],
        author=info["author"],
        document_id=document_id,
    )
