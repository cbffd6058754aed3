"""Thin httpx adapters for vendor LLM APIs.

Each adapter turns a prompt into one POST request and pulls the response
text back out of the vendor's JSON envelope. No retries: a failed call is
reported once and the caller decides what to do.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Final

import httpx

from pageindex.config import PAGEINDEX_USER_AGENT
from pageindex.exceptions import LLMInvocationError, ProviderConfigurationError
from pageindex.schemas import LLMProvider

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION: Final[str] = "2023-06-01"

_MAX_ERROR_BODY: Final[int] = 200


@dataclass(frozen=True)
class _Adapter:
    default_base_url: str
    key_env_vars: tuple[str, ...]
    build: Callable[[str, LLMProvider, str | None, str], tuple[str, dict[str, str], dict[str, Any]]]
    extract: Callable[[dict[str, Any]], str]


def _anthropic_request(
    prompt: str, provider: LLMProvider, api_key: str | None, base_url: str
) -> tuple[str, dict[str, str], dict[str, Any]]:
    headers = {"anthropic-version": ANTHROPIC_VERSION}
    if api_key:
        headers["x-api-key"] = api_key
    payload = {
        "model": provider.model,
        "max_tokens": provider.max_tokens,
        "temperature": provider.temperature,
        "messages": [{"role": "user", "content": prompt}],
    }
    return f"{base_url}/v1/messages", headers, payload


def _anthropic_text(data: dict[str, Any]) -> str:
    blocks = data["content"]
    return "".join(block.get("text", "") for block in blocks if block.get("type") == "text")


def _openai_request(
    prompt: str, provider: LLMProvider, api_key: str | None, base_url: str
) -> tuple[str, dict[str, str], dict[str, Any]]:
    headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
    payload = {
        "model": provider.model,
        "max_tokens": provider.max_tokens,
        "temperature": provider.temperature,
        "messages": [{"role": "user", "content": prompt}],
    }
    return f"{base_url}/chat/completions", headers, payload


def _openai_text(data: dict[str, Any]) -> str:
    return data["choices"][0]["message"]["content"] or ""


def _google_request(
    prompt: str, provider: LLMProvider, api_key: str | None, base_url: str
) -> tuple[str, dict[str, str], dict[str, Any]]:
    headers = {"x-goog-api-key": api_key} if api_key else {}
    payload = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": provider.temperature,
            "maxOutputTokens": provider.max_tokens,
        },
    }
    return f"{base_url}/v1beta/models/{provider.model}:generateContent", headers, payload


def _google_text(data: dict[str, Any]) -> str:
    parts = data["candidates"][0]["content"]["parts"]
    return "".join(part.get("text", "") for part in parts)


ADAPTERS: Final[dict[str, _Adapter]] = {
    "anthropic-messages": _Adapter(
        default_base_url="https://api.anthropic.com",
        key_env_vars=("ANTHROPIC_API_KEY",),
        build=_anthropic_request,
        extract=_anthropic_text,
    ),
    "openai-completions": _Adapter(
        default_base_url="https://api.openai.com/v1",
        key_env_vars=("OPENAI_API_KEY",),
        build=_openai_request,
        extract=_openai_text,
    ),
    "google-generative-ai": _Adapter(
        default_base_url="https://generativelanguage.googleapis.com",
        key_env_vars=("GOOGLE_API_KEY", "GEMINI_API_KEY"),
        build=_google_request,
        extract=_google_text,
    ),
}


def resolve_api_key(provider: LLMProvider, adapter: _Adapter) -> str | None:
    """Return the provider's API key, falling back to the vendor env vars.

    Raises:
        ProviderConfigurationError: If the vendor's own endpoint is used and
            no key is available. Custom ``base_url`` endpoints (local or
            proxy servers) may run without a key.
    """
    if provider.api_key:
        return provider.api_key
    for name in adapter.key_env_vars:
        value = os.getenv(name)
        if value:
            return value
    if provider.base_url:
        return None
    raise ProviderConfigurationError(
        f"No API key for provider {provider.name!r}: set api_key or one of "
        f"{', '.join(adapter.key_env_vars)}"
    )


async def call_provider(
    prompt: str,
    provider: LLMProvider,
    *,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Send ``prompt`` to the vendor API selected by ``provider.api``.

    Args:
        prompt: The full prompt text.
        provider: Provider settings.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.

    Returns:
        The response text.

    Raises:
        ProviderConfigurationError: Unknown API or missing credential.
        LLMInvocationError: Transport failure, non-2xx status or an
            unexpected response body.
    """
    adapter = ADAPTERS.get(provider.api or "")
    if adapter is None:
        raise ProviderConfigurationError(
            f"Cannot determine the API for provider {provider.name!r}; "
            f"set 'api' to one of {', '.join(ADAPTERS)}"
        )

    api_key = resolve_api_key(provider, adapter)
    base_url = (provider.base_url or adapter.default_base_url).rstrip("/")
    url, headers, payload = adapter.build(prompt, provider, api_key, base_url)

    async def do_post(http_client: httpx.AsyncClient) -> str:
        try:
            response = await http_client.post(url, json=payload, headers=headers)
        except httpx.RequestError as exc:
            raise LLMInvocationError(f"Request to {provider.name} failed: {exc}") from exc

        if not response.is_success:
            raise LLMInvocationError(
                f"HTTP {response.status_code} from {provider.name}: "
                f"{response.text[:_MAX_ERROR_BODY]}"
            )

        try:
            return adapter.extract(response.json())
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            raise LLMInvocationError(
                f"Unexpected response body from {provider.name}: {exc}"
            ) from exc

    logger.debug(
        "Calling %s (%s, model=%s, prompt=%d chars)",
        provider.name,
        provider.api,
        provider.model,
        len(prompt),
    )

    if client is not None:
        return await do_post(client)

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(provider.timeout),
        headers={"User-Agent": PAGEINDEX_USER_AGENT},
    ) as new_client:
        return await do_post(new_client)
