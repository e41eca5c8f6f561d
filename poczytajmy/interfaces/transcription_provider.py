"""Abstract base class for audio transcription providers.

Concrete implementations wrap a specific speech-to-text backend behind this
interface so the speech service does not care which one is configured.
Both Groq and OpenAI expose the same Whisper-style endpoint, so a single
implementation currently serves both.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from poczytajmy.models.speech import TranscriptionResult


class ITranscriptionProvider(ABC):
    """Contract for audio transcription backends."""

    @abstractmethod
    async def transcribe(
        self,
        audio_path: str,
        language: str | None = None,
    ) -> TranscriptionResult:
        """Transcribe an audio file to text.

        Parameters
        ----------
        audio_path:
            Path to the audio file on disk.  Providers need a real file
            handle, which is why the upload is spooled to a temp file.
        language:
            Optional ISO 639-1 language code (e.g. "pl").

        Returns
        -------
        TranscriptionResult
            Full text plus word timings when the backend provides them.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the short id reported to clients, e.g. ``"groq"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the provider is ready to accept transcription requests."""
