"""Single-shot LLM invocation."""

from __future__ import annotations

import asyncio
import inspect

from pageindex.exceptions import LLMInvocationError
from pageindex.llm.providers import call_provider
from pageindex.schemas import LLMClientFunction, LLMProvider


async def invoke_llm(
    prompt: str,
    provider: LLMProvider,
    custom_client: LLMClientFunction | None = None,
    *,
    timeout: float | None = None,
) -> str:
    """Run one prompt through the custom client or the provider adapter.

    A custom client may be a plain function or a coroutine function; its
    return value is used verbatim. ``timeout`` (default: the provider's)
    bounds the whole call.

    Raises:
        LLMInvocationError: On timeout, adapter failure or a non-string
            reply from the custom client.
    """
    limit = timeout if timeout is not None else provider.timeout

    async def attempt() -> str:
        if custom_client is None:
            return await call_provider(prompt, provider)
        reply = custom_client(prompt)
        if inspect.isawaitable(reply):
            reply = await reply
        if not isinstance(reply, str):
            raise LLMInvocationError(
                f"Custom LLM client returned {type(reply).__name__}, expected str"
            )
        return reply

    try:
        return await asyncio.wait_for(attempt(), timeout=limit)
    except asyncio.TimeoutError as exc:
        raise LLMInvocationError(f"LLM call timed out after {limit}s") from exc
