"""Abstract base class for text-to-speech providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ISpeechSynthesisProvider(ABC):
    """Contract for services that turn a short text into audio bytes."""

    @abstractmethod
    async def synthesize(self, text: str, voice_id: str | None = None) -> bytes:
        """Return encoded audio (MP3) for *text* spoken by *voice_id*.

        Raises
        ------
        poczytajmy.utils.errors.ConfigurationError
            If no credential is configured.
        poczytajmy.utils.errors.SpeechSynthesisError
            If the upstream service answers with a non-success status.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"elevenlabs"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if a credential is configured."""
