"""Test setup for pageindex."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pageindex.schemas import DocumentNode, LLMProvider, NodeMetadata  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (make real network calls)",
    )


@pytest.fixture
def provider() -> LLMProvider:
    """Provider settings that are never actually called over the network."""
    return LLMProvider(name="anthropic", model="test-model", api_key="test-key")


@pytest.fixture
def manual_forest() -> list[DocumentNode]:
    """A hand-built tree with short, predictable node ids."""
    root = DocumentNode(id="node-0", kind="root", title="Manual", document_id="doc1")
    contents = {
        "node-1": "Installation steps for the server",
        "node-3": "Configuring the server port",
        "node-5": "Troubleshooting client errors",
        "node-7": "Server port defaults and overrides",
    }
    for position, (node_id, content) in enumerate(contents.items()):
        root.add_child(
            DocumentNode(
                id=node_id,
                kind="paragraph",
                content=content,
                level=1,
                document_id="doc1",
                metadata=NodeMetadata(
                    char_count=len(content),
                    word_count=len(content.split()),
                    position=position * 40,
                ),
            )
        )
    return [root]


@pytest.fixture
def markdown_sample() -> str:
    return "# A\n\ntext1\n\n## B\n\ntext2\n\n# C\n\ntext3"
