"""Abstract base class for chat-completion providers.

Every generation endpoint races the configured providers against each other,
so implementations must be interchangeable: same prompt in, plain text out,
and a :class:`~poczytajmy.utils.errors.LLMError` for anything that is not a
usable answer (non-2xx status, transport error, empty text).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: GroqChatProvider, OpenAIChatProvider
# Located in: poczytajmy/providers/llm/
class IChatProvider(ABC):
    """Contract for chat-completion backends used by the generation race."""

    @abstractmethod
    async def complete(
        self,
        user_prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        top_p: float = 0.95,
        max_tokens: int = 64,
    ) -> str:
        """Generate a completion for *user_prompt*.

        Parameters
        ----------
        user_prompt:
            The prompt sent as the user message.
        system_prompt:
            Optional system message.  The reading prompts put all
            instructions in the user message and leave this empty.
        temperature:
            Sampling temperature.
        top_p:
            Nucleus sampling cut-off.
        max_tokens:
            Upper bound on the response length.

        Returns
        -------
        str
            The stripped, non-empty response text.

        Raises
        ------
        poczytajmy.utils.errors.LLMError
            If the call fails or the response carries no text.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the short id reported to clients, e.g. ``"groq"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured (no network call)."""
