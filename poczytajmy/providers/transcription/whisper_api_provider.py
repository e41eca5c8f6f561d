"""Whisper-style transcription over an OpenAI-compatible API.

Groq (``whisper-large-v3``) and OpenAI (``whisper-1``) expose the same
``audio.transcriptions`` endpoint, so one adapter serves both: the Groq
instance is an ``AsyncOpenAI`` client pointed at Groq's base URL.

Word-level timestamps are requested with ``verbose_json`` and
``timestamp_granularities=["word"]``.  Backends that ignore the request
simply return no ``words`` and the speech service synthesizes placeholders.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import openai
import structlog

from poczytajmy.interfaces.transcription_provider import ITranscriptionProvider
from poczytajmy.models.speech import TranscriptionResult, WordTiming

logger = structlog.get_logger(logger_name=__name__)


def _field(item: Any, name: str, default: Any) -> Any:
    """Read *name* from an SDK object or a plain dict."""
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


class WhisperTranscriptionProvider(ITranscriptionProvider):
    """Transcription via an OpenAI-compatible Whisper endpoint.

    Parameters
    ----------
    client:
        Async OpenAI client (possibly with a custom ``base_url``).
    model:
        Transcription model id.
    provider_name:
        Id reported as ``source`` in the ASR response.
    """

    def __init__(self, client: openai.AsyncOpenAI, model: str, provider_name: str) -> None:
        self._client = client
        self._model = model
        self._provider_name = provider_name

    async def transcribe(
        self,
        audio_path: str,
        language: str | None = None,
    ) -> TranscriptionResult:
        """Transcribe *audio_path* and parse the verbose JSON response."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "response_format": "verbose_json",
            "timestamp_granularities": ["word"],
        }
        if language:
            kwargs["language"] = language

        with open(Path(audio_path), "rb") as f:
            response = await self._client.audio.transcriptions.create(file=f, **kwargs)

        words: list[WordTiming] = []
        for item in _field(response, "words", None) or []:
            word = str(_field(item, "word", "")).strip()
            if not word:
                continue
            start = float(_field(item, "start", 0.0) or 0.0)
            end = float(_field(item, "end", start) or start)
            words.append(WordTiming(word=word, start=start, end=max(start, end)))

        text = (_field(response, "text", "") or "").strip()
        detected_language = _field(response, "language", None) or language or "pl"

        logger.info(
            "transcription_complete",
            provider=self._provider_name,
            model=self._model,
            language=detected_language,
            words=len(words),
        )

        return TranscriptionResult(
            text=text,
            provider=self._provider_name,
            language=detected_language,
            words=words,
        )

    def get_provider_name(self) -> str:
        return self._provider_name

    def is_available(self) -> bool:
        return bool(self._client.api_key)
