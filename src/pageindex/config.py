"""Local configuration for pageindex."""

from __future__ import annotations

import os


DEFAULT_MAX_RESULTS = 10
DEFAULT_NODE_CONTENT_CHARS = 500
DEFAULT_CONTEXT_CHARS = 12000
DEFAULT_EXCERPT_CHARS = 200
DEFAULT_PDF_SECTION_CHARS = 5000
DEFAULT_LLM_TIMEOUT_S = 60.0
DEFAULT_LLM_RELEVANCE = 0.8
DEFAULT_LLM_MAX_TOKENS = 1024
DEFAULT_USER_AGENT = "pageindex/0.1"

NODE_ID_PREFIX = "node-"
ELLIPSIS = "..."
UNKNOWN_DOCUMENT_TITLE = "Unknown Document"
UNKNOWN_DOCUMENT_ID = "unknown"

PAGEINDEX_MAX_RESULTS = int(os.getenv("PAGEINDEX_MAX_RESULTS", str(DEFAULT_MAX_RESULTS)))
# Per-node content cap inside the serialized search context.
PAGEINDEX_NODE_CONTENT_CHARS = int(
    os.getenv("PAGEINDEX_NODE_CONTENT_CHARS", str(DEFAULT_NODE_CONTENT_CHARS))
)
# Hard cap on the whole serialized context sent to the LLM.
PAGEINDEX_CONTEXT_CHARS = int(os.getenv("PAGEINDEX_CONTEXT_CHARS", str(DEFAULT_CONTEXT_CHARS)))
PAGEINDEX_EXCERPT_CHARS = int(os.getenv("PAGEINDEX_EXCERPT_CHARS", str(DEFAULT_EXCERPT_CHARS)))
PAGEINDEX_PDF_SECTION_CHARS = int(
    os.getenv("PAGEINDEX_PDF_SECTION_CHARS", str(DEFAULT_PDF_SECTION_CHARS))
)
PAGEINDEX_LLM_TIMEOUT_S = float(os.getenv("PAGEINDEX_LLM_TIMEOUT_S", str(DEFAULT_LLM_TIMEOUT_S)))
PAGEINDEX_LLM_RELEVANCE = float(os.getenv("PAGEINDEX_LLM_RELEVANCE", str(DEFAULT_LLM_RELEVANCE)))
PAGEINDEX_USER_AGENT = os.getenv("PAGEINDEX_USER_AGENT", DEFAULT_USER_AGENT)
