"""Speech recognition for read-aloud recordings.

Flow for one ``/asr`` request:

    upload bytes -> temp file rec-<ts>.<ext> -> first configured provider
    (Groq whisper-large-v3, else OpenAI whisper-1) -> word timings
    -> accuracy against the expected text

Providers are tried in preference order but never chained: the first
configured one answers or the request fails.
"""

from __future__ import annotations

from poczytajmy.config.reading_content import MOCK_TRANSCRIPT
from poczytajmy.interfaces.transcription_provider import ITranscriptionProvider
from poczytajmy.models.speech import RecognitionResult, TranscriptionResult, WordTiming
from poczytajmy.utils.audio import pick_audio_extension, temporary_recording
from poczytajmy.utils.errors import (
    MissingInputError,
    NoProviderError,
    PoczytajmyError,
    TranscriptionError,
)
from poczytajmy.utils.logging import get_logger
from poczytajmy.utils.text_normalizer import jaccard_similarity

# Placeholder timing when the provider returns no word timestamps.
WORD_DURATION_S = 0.4
WORD_GAP_S = 0.1


def reading_accuracy(recognized: str, expected: str | None) -> int:
    """Token-set Jaccard of *recognized* vs *expected*, as 0-100."""
    if not expected or not expected.strip():
        return 0
    return round(jaccard_similarity(recognized, expected) * 100)


def placeholder_timings(text: str) -> list[WordTiming]:
    """Evenly spaced word windows over the whitespace tokens of *text*."""
    timings: list[WordTiming] = []
    cursor = 0.0
    for word in text.split():
        end = cursor + WORD_DURATION_S
        timings.append(WordTiming(word=word, start=round(cursor, 3), end=round(end, 3)))
        cursor = end + WORD_GAP_S
    return timings


class SpeechService:
    """Transcribes a recording and scores it.

    Parameters
    ----------
    providers:
        Transcription providers in preference order.  Only available ones
        are considered.
    language:
        Language hint passed to the provider.
    mock:
        Return the canned transcript without calling any provider.
    """

    def __init__(
        self,
        providers: list[ITranscriptionProvider],
        language: str = "pl",
        mock: bool = False,
    ) -> None:
        self._providers = providers
        self._language = language
        self._mock = mock
        self._logger = get_logger(__name__)

    async def recognize(
        self,
        audio: bytes | None,
        filename: str | None = None,
        content_type: str | None = None,
        expected_text: str | None = None,
    ) -> RecognitionResult:
        """Transcribe *audio* and score it against *expected_text*.

        Raises
        ------
        MissingInputError
            If no audio was uploaded.
        NoProviderError
            If no transcription provider is configured.
        TranscriptionError
            If the provider call raised.
        """
        if not audio:
            raise MissingInputError('Brak pliku w polu "audio".')

        if self._mock:
            transcription = TranscriptionResult(text=MOCK_TRANSCRIPT, provider="mock")
        else:
            transcription = await self._transcribe(audio, filename, content_type)

        words = transcription.words or placeholder_timings(transcription.text)
        accuracy = reading_accuracy(transcription.text, expected_text)

        self._logger.info(
            "speech_recognized",
            source=transcription.provider,
            words=len(words),
            accuracy=accuracy,
            provider_timings=bool(transcription.words),
        )
        return RecognitionResult(
            text=transcription.text,
            source=transcription.provider,
            word_count=len(words),
            words=words,
            accuracy=accuracy,
        )

    def _select_provider(self) -> ITranscriptionProvider:
        for provider in self._providers:
            if provider.is_available():
                return provider
        raise NoProviderError("NO_PROVIDER")

    async def _transcribe(
        self,
        audio: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> TranscriptionResult:
        provider = self._select_provider()
        extension = pick_audio_extension(filename, content_type)

        with temporary_recording(audio, extension) as path:
            try:
                return await provider.transcribe(path, language=self._language)
            except PoczytajmyError:
                raise
            except Exception as exc:
                self._logger.error(
                    "transcription_failed",
                    provider=provider.get_provider_name(),
                    error=str(exc),
                )
                raise TranscriptionError(
                    f"ASR_FAILED: {exc}",
                    provider_name=provider.get_provider_name(),
                ) from exc
