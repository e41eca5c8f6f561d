"""Text-to-speech: short texts to base64-encoded MP3."""

from __future__ import annotations

import base64

from poczytajmy.interfaces.speech_provider import ISpeechSynthesisProvider
from poczytajmy.utils.errors import MissingInputError
from poczytajmy.utils.logging import get_logger


class TTSService:
    """Synthesizes speech for a text, capped at *max_chars* characters."""

    def __init__(self, provider: ISpeechSynthesisProvider, max_chars: int = 500) -> None:
        self._provider = provider
        self._max_chars = max_chars
        self._logger = get_logger(__name__)

    async def synthesize(self, text: str | None, voice_id: str | None = None) -> str:
        """Return the audio for *text* as a base64 string.

        Raises
        ------
        MissingInputError
            If *text* is empty after stripping.
        ConfigurationError
            If no ElevenLabs key is configured.
        SpeechSynthesisError
            If the upstream answers with a non-success status.
        """
        cleaned = (text or "").strip()
        if not cleaned:
            raise MissingInputError("EMPTY_TEXT")

        capped = cleaned[: self._max_chars]
        audio = await self._provider.synthesize(capped, voice_id=voice_id or None)
        self._logger.info(
            "tts_complete",
            provider=self._provider.get_provider_name(),
            chars=len(capped),
            truncated=len(cleaned) > len(capped),
        )
        return base64.b64encode(audio).decode("ascii")
