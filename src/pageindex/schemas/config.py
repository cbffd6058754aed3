"""LLM provider and index configuration models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Awaitable, Callable, Literal, Union

from pydantic import BaseModel, Field, model_validator

from pageindex.config import DEFAULT_LLM_MAX_TOKENS, PAGEINDEX_LLM_TIMEOUT_S

ProviderAPI = Literal["anthropic-messages", "openai-completions", "google-generative-ai"]

# A caller-supplied LLM: takes the prompt, returns the raw response text.
LLMClientFunction = Callable[[str], Union[str, Awaitable[str]]]

_API_BY_NAME_HINT: tuple[tuple[str, ProviderAPI], ...] = (
    ("anthropic", "anthropic-messages"),
    ("claude", "anthropic-messages"),
    ("google", "google-generative-ai"),
    ("gemini", "google-generative-ai"),
    ("openai", "openai-completions"),
    ("azure", "openai-completions"),
    ("ollama", "openai-completions"),
)


class LLMProvider(BaseModel):
    """Connection settings for a vendor LLM API.

    When ``api`` is omitted it is inferred from ``name`` (``"anthropic"``,
    ``"openai"``, ``"gemini"``...). A provider whose API cannot be
    determined is rejected at call time, not at construction.
    """

    name: str
    model: str
    api: ProviderAPI | None = None
    api_key: str | None = None
    base_url: str | None = None
    max_tokens: int = Field(DEFAULT_LLM_MAX_TOKENS, ge=1)
    temperature: float = Field(0.0, ge=0.0, le=2.0)
    timeout: float | None = Field(PAGEINDEX_LLM_TIMEOUT_S, gt=0)

    @model_validator(mode="after")
    def _infer_api(self) -> LLMProvider:
        if self.api is None:
            lowered = self.name.lower()
            for hint, api in _API_BY_NAME_HINT:
                if hint in lowered:
                    self.api = api
                    break
        return self


class PageIndexConfig(BaseModel):
    """Configuration for a :class:`~pageindex.index.PageIndex`."""

    llm_provider: LLMProvider
    custom_llm_client: LLMClientFunction | None = None
    index_path: str | None = None
    debug: bool = False


class IndexStats(BaseModel):
    """Summary counters for an index."""

    total_documents: int
    total_nodes: int
    total_chars: int
    index_size: int
    last_updated: datetime

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
