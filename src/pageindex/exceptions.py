"""Custom exceptions for pageindex."""

from __future__ import annotations


class PageIndexError(Exception):
    """Base exception for pageindex operations."""


class ParseError(PageIndexError):
    """A document could not be read or parsed into a tree.

    Attributes:
        source: Path or identifier of the document that failed.
        cause: The underlying exception, if any.
    """

    def __init__(
        self, source: str, message: str, cause: BaseException | None = None
    ) -> None:
        self.source = source
        self.cause = cause
        detail = f"{message}: {cause}" if cause is not None else message
        super().__init__(f"Failed to parse {source!r}: {detail}")


class LLMInvocationError(PageIndexError):
    """The LLM call failed (network, timeout, non-success response)."""


class ProviderConfigurationError(LLMInvocationError):
    """The LLM provider is misconfigured (missing credential, unknown API)."""


class IndexPersistenceError(PageIndexError):
    """The index could not be saved to or loaded from disk."""
