"""Incremental construction of document trees."""

from __future__ import annotations

import uuid
from pathlib import Path

from pageindex.config import NODE_ID_PREFIX
from pageindex.schemas import (
    DocumentMetadata,
    DocumentNode,
    DocumentType,
    NodeKind,
    NodeMetadata,
    ParsedDocument,
)


def new_document_id() -> str:
    """Return a fresh document identifier."""
    return uuid.uuid4().hex[:12]


def count_words(text: str) -> int:
    return len(text.split())


class TreeBuilder:
    """Build a document tree with an explicit ``(node, level)`` stack.

    Nodes are attached to the top of the stack. Headings pop every entry
    whose level is the same or deeper before being pushed, so a heading
    always lands under its nearest strictly-shallower ancestor. The root
    sits at level 0 and is never popped.

    ``position`` is the running character offset into the flattened source
    text; callers advance it by the number of characters each node consumed.
    """

    def __init__(self, document_id: str | None = None, *, title: str | None = None) -> None:
        self.document_id = document_id or new_document_id()
        self.position = 0
        self._sequence = 0
        self.root = DocumentNode(
            id=self.next_id(),
            kind="root",
            title=title,
            level=0,
            document_id=self.document_id,
        )
        self.stack: list[tuple[DocumentNode, int]] = [(self.root, 0)]

    def next_id(self) -> str:
        node_id = f"{NODE_ID_PREFIX}{self.document_id}-{self._sequence}"
        self._sequence += 1
        return node_id

    @property
    def top(self) -> DocumentNode:
        return self.stack[-1][0]

    @property
    def top_level(self) -> int:
        return self.stack[-1][1]

    def add_content(
        self,
        content: str,
        *,
        kind: NodeKind = "paragraph",
        consumed: int | None = None,
    ) -> DocumentNode | None:
        """Attach a content node under the current stack top.

        Blank content creates no node but still advances the position.
        """
        text = content.strip()
        node = None
        if text:
            node = self.top.add_child(
                self._make_node(kind=kind, content=text, level=self.top_level + 1)
            )
        self.position += len(content) if consumed is None else consumed
        return node

    def open_heading(
        self,
        title: str,
        level: int,
        *,
        content: str | None = None,
        kind: NodeKind = "section",
        consumed: int | None = None,
        page_number: int | None = None,
    ) -> DocumentNode:
        """Pop same-or-deeper headings, then push a new heading node."""
        level = max(level, 1)
        while len(self.stack) > 1 and self.top_level >= level:
            self.stack.pop()

        body = title if content is None else content
        node = self.top.add_child(
            self._make_node(
                kind=kind,
                content=body,
                level=level,
                title=title,
                page_number=page_number,
            )
        )
        self.stack.append((node, level))
        self.position += len(body) if consumed is None else consumed
        return node

    def add_section(
        self,
        content: str,
        *,
        title: str,
        page_number: int,
        position: int,
    ) -> DocumentNode:
        """Attach a flat level-1 section directly under the root."""
        self.position = max(self.position, position)
        node = self._make_node(
            kind="section",
            content=content,
            level=1,
            title=title,
            page_number=page_number,
        )
        self.position += len(content)
        return self.root.add_child(node)

    def finish(
        self,
        *,
        source: str,
        doc_type: DocumentType,
        full_text: str,
        total_pages: int | None = None,
        author: str | None = None,
    ) -> ParsedDocument:
        """Wrap the tree into a :class:`ParsedDocument`.

        The document title is the root title when the format supplied one,
        otherwise the file name of ``source``. The root carries the final
        title so citations can find it by walking up the tree.
        """
        title = self.root.title or Path(source).name or source or "Untitled"
        self.root.title = title
        return ParsedDocument(
            id=self.document_id,
            source=source,
            title=title,
            author=author,
            type=doc_type,
            tree=self.root,
            metadata=DocumentMetadata(
                total_chars=len(full_text),
                total_words=count_words(full_text),
                total_pages=total_pages,
            ),
        )

    def _make_node(
        self,
        *,
        kind: NodeKind,
        content: str,
        level: int,
        title: str | None = None,
        page_number: int | None = None,
    ) -> DocumentNode:
        return DocumentNode(
            id=self.next_id(),
            kind=kind,
            title=title,
            content=content,
            level=level,
            page_number=page_number,
            document_id=self.document_id,
            metadata=NodeMetadata(
                char_count=len(content),
                word_count=count_words(content),
                position=self.position,
            ),
        )
