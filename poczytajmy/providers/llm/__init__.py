"""Chat provider adapters.

Two concrete implementations of IChatProvider (poczytajmy/interfaces/llm_provider.py):
    - GroqChatProvider   -- llama-3.1-8b-instant over plain HTTP (latency leg)
    - OpenAIChatProvider -- gpt-4o-mini via the openai SDK (also vision OCR)

At startup, main.py builds every provider whose API key is set and hands
the list to ChatRaceService, which races them on each request.
"""

from poczytajmy.providers.llm.groq_provider import GroqChatProvider
from poczytajmy.providers.llm.openai_provider import OpenAIChatProvider

__all__ = ["GroqChatProvider", "OpenAIChatProvider"]
