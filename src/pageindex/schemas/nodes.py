"""Document tree node models."""

from __future__ import annotations

from typing import Iterator, Literal

from pydantic import BaseModel, Field, PrivateAttr, model_validator

NodeKind = Literal["root", "section", "subsection", "paragraph", "list", "code"]


class NodeMetadata(BaseModel):
    """Size and location of a node's own content."""

    char_count: int = Field(0, ge=0)
    word_count: int = Field(0, ge=0)
    # Character offset of the content within the flattened document text.
    position: int = Field(0, ge=0)


class DocumentNode(BaseModel):
    """A node in the hierarchical document tree.

    ``kind`` is a tag rather than a type hierarchy: every node has the same
    shape. Children are owned by their parent; the parent back-reference is
    a non-owning link that is rebuilt whenever a tree is validated, so a tree
    loaded from JSON behaves like a freshly parsed one.
    """

    id: str
    kind: NodeKind
    title: str | None = None
    content: str = ""
    level: int = Field(0, ge=0)
    page_number: int | None = Field(None, ge=1)
    document_id: str | None = None
    children: list["DocumentNode"] = Field(default_factory=list)
    metadata: NodeMetadata = Field(default_factory=NodeMetadata)

    _parent: DocumentNode | None = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _link_children(self) -> DocumentNode:
        for child in self.children:
            child._parent = self
        return self

    def __eq__(self, other: object) -> bool:
        # Parent links stay out of equality; comparing them would recurse
        # back into the parent's children.
        if not isinstance(other, DocumentNode):
            return NotImplemented
        return self.__dict__ == other.__dict__

    __hash__ = None  # type: ignore[assignment]

    @property
    def parent(self) -> DocumentNode | None:
        return self._parent

    @property
    def root(self) -> DocumentNode:
        """Walk parent links up to the top of the tree."""
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def add_child(self, child: DocumentNode) -> DocumentNode:
        """Attach ``child`` as the last child of this node and return it."""
        child._parent = self
        self.children.append(child)
        return child

    def iter_nodes(self) -> Iterator[DocumentNode]:
        """Yield this node and all descendants in pre-order (reading order)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, node_id: str) -> DocumentNode | None:
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def count_nodes(self) -> int:
        return sum(1 for _ in self.iter_nodes())


def iter_forest(forest: list[DocumentNode]) -> Iterator[DocumentNode]:
    """Yield every node of every tree in ``forest`` in pre-order."""
    for tree in forest:
        yield from tree.iter_nodes()


def find_node_by_id(forest: list[DocumentNode], node_id: str) -> DocumentNode | None:
    """Return the first node in pre-order whose id is ``node_id``."""
    for node in iter_forest(forest):
        if node.id == node_id:
            return node
    return None
