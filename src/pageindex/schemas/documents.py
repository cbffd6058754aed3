"""Parsed document model."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from pageindex.schemas.nodes import DocumentNode

DocumentType = Literal["pdf", "markdown", "html", "text"]


class DocumentMetadata(BaseModel):
    """Document-level aggregates."""

    total_chars: int = Field(0, ge=0)
    total_words: int = Field(0, ge=0)
    total_pages: int | None = None
    language: str | None = None


class ParsedDocument(BaseModel):
    """One document tree plus its document-level metadata.

    Attributes:
        id: Document identifier; every node of ``tree`` carries it as
            ``document_id``.
        source: File path or caller-supplied identifier.
        title: Root title, or the file name when the format has none.
        author: Author, when the source format records one.
        created_at: When the document was parsed.
        type: Format tag of the source.
        tree: The root node.
        metadata: Aggregate size information.
    """

    id: str
    source: str
    title: str
    author: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    type: DocumentType
    tree: DocumentNode
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
