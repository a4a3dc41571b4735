"""LLM provider adapters.

Two concrete implementations of ILLMProvider (src/interfaces/llm_provider.py):
    - OpenAILLMProvider    -- gpt-4o-mini (also any OpenAI-compatible API)
    - AnthropicLLMProvider -- Claude

At startup, main.py builds the first provider whose API key is configured
and hands it to the AI concert ranker.  With no key configured the ranker
is replaced by a no-op and searches run without the AI tier.
"""

from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider", "AnthropicLLMProvider"]
