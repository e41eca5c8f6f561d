"""ElevenLabs text-to-speech provider over plain HTTP."""

from __future__ import annotations

import re

import httpx
import structlog

from poczytajmy.config.settings import Settings
from poczytajmy.interfaces.speech_provider import ISpeechSynthesisProvider
from poczytajmy.utils.errors import (
    ConfigurationError,
    MissingInputError,
    SpeechSynthesisError,
)

logger = structlog.get_logger(logger_name=__name__)

# Voice ids are opaque alphanumeric tokens; anything else could reshape the URL.
_VOICE_ID_RE = re.compile(r"[A-Za-z0-9]+")


class ElevenLabsSpeechProvider(ISpeechSynthesisProvider):
    """Speech synthesis backed by the ElevenLabs REST API.

    Parameters
    ----------
    settings:
        Supplies the API key, base URL, default voice and model.
    http_client:
        Shared async client; owned and closed by the application lifespan.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._api_key = settings.elevenlabs_api_key
        self._base_url = settings.elevenlabs_base_url.rstrip("/")
        self._default_voice_id = settings.elevenlabs_voice_id
        self._model_id = settings.elevenlabs_model_id
        self._http = http_client

    async def synthesize(self, text: str, voice_id: str | None = None) -> bytes:
        if not self._api_key:
            raise ConfigurationError(
                message="ELEVENLABS_API_KEY is not configured",
                provider_name=self.get_provider_name(),
            )

        voice = voice_id or self._default_voice_id
        if not _VOICE_ID_RE.fullmatch(voice):
            raise MissingInputError(
                message="INVALID_VOICE_ID",
                provider_name=self.get_provider_name(),
            )
        url = f"{self._base_url}/text-to-speech/{voice}"
        headers = {
            "xi-api-key": self._api_key,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }
        payload = {"text": text, "model_id": self._model_id}

        try:
            response = await self._http.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise SpeechSynthesisError(
                message=f"ElevenLabs request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not response.is_success:
            raise SpeechSynthesisError(
                message=f"ELEVENLABS_HTTP_{response.status_code}: {response.text[:200]}",
                provider_name=self.get_provider_name(),
            )

        logger.info(
            "tts_synthesized",
            voice_id=voice,
            chars=len(text),
            audio_bytes=len(response.content),
        )
        return response.content

    def get_provider_name(self) -> str:
        return "elevenlabs"

    def is_available(self) -> bool:
        return bool(self._api_key)
