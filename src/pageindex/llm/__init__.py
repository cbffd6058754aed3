"""LLM invocation: custom callables and vendor HTTP adapters."""

from pageindex.llm.client import invoke_llm
from pageindex.llm.providers import ADAPTERS, call_provider

__all__ = ["ADAPTERS", "call_provider", "invoke_llm"]
