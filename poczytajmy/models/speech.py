"""Speech recognition models.

These models represent the two stages of the ``/asr`` endpoint:
    1. A transcription provider turns an audio file into text   → TranscriptionResult
    2. The speech service scores it against the expected text  → RecognitionResult

Word timings use seconds from the start of the recording.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WordTiming(BaseModel):
    """Start/end window for one recognized word."""

    model_config = ConfigDict(frozen=True)

    word: str
    start: float = Field(ge=0.0)
    end: float = Field(ge=0.0)


class TranscriptionResult(BaseModel):
    """Raw result from a transcription provider.

    ``words`` is empty when the provider did not return word-level timing;
    the speech service fills in placeholders in that case.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    provider: str
    language: str = "pl"
    words: list[WordTiming] = Field(default_factory=list)


class RecognitionResult(BaseModel):
    """What the client receives for one recording.

    ``word_count`` always equals ``len(words)`` so the UI can highlight
    word by word without bounds checks.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    source: str
    word_count: int = Field(ge=0)
    words: list[WordTiming] = Field(default_factory=list)
    # Token-set Jaccard against the expected text, 0-100.
    accuracy: int = Field(ge=0, le=100)
