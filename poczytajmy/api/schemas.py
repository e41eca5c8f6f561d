"""Pydantic request/response schemas for the poczytajmy API.

The mobile client speaks camelCase (``expectedText``, ``characterName``,
``voiceId``, ``audioB64``, ``wordCount``).  Fields carry those names as
aliases and accept the snake_case names too (``populate_by_name``);
FastAPI serializes responses by alias.

Numeric inputs coming from the client are lenient: ``"6"`` becomes ``6``
and anything unparsable becomes ``None`` instead of a 422.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from poczytajmy.models.speech import RecognitionResult


def _lenient_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class GreetingRequest(_CamelModel):
    name: str = ""
    age: int | None = None
    character: str | None = None

    @field_validator("age", mode="before")
    @classmethod
    def _coerce_age(cls, value: Any) -> int | None:
        return _lenient_int(value)


class MotivationRequest(_CamelModel):
    age: int | None = None
    accuracy: int | None = None
    text: str = ""
    character_name: str | None = Field(default=None, alias="characterName")
    lang: str = "pl"

    @field_validator("age", "accuracy", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> int | None:
        return _lenient_int(value)


class ReadingTextRequest(_CamelModel):
    language: str = "pl"
    level: str = "A1"


class TTSRequest(_CamelModel):
    text: str = ""
    voice_id: str | None = Field(default=None, alias="voiceId")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    ok: bool = True
    service: str = "poczytajmy-backend"
    version: str


class GenerationResponse(BaseModel):
    """Greeting and motivation answers."""

    ok: bool = True
    text: str
    source: str


class ReadingTextResponse(BaseModel):
    ok: bool = True
    text: str
    level: str
    language: str
    source: str


class WordTimingOut(BaseModel):
    word: str
    start: float
    end: float


class ASRResponse(_CamelModel):
    ok: bool = True
    text: str
    source: str
    word_count: int = Field(alias="wordCount")
    words: list[WordTimingOut] = Field(default_factory=list)
    accuracy: int

    @classmethod
    def from_result(cls, result: RecognitionResult) -> ASRResponse:
        return cls(
            text=result.text,
            source=result.source,
            word_count=result.word_count,
            words=[WordTimingOut(**w.model_dump()) for w in result.words],
            accuracy=result.accuracy,
        )


class OCRResponse(BaseModel):
    ok: bool = True
    text: str
    confidence: float | None = None


class TTSResponse(_CamelModel):
    ok: bool = True
    audio_b64: str = Field(alias="audioB64")


class ErrorResponse(BaseModel):
    """Body of every error answer.

    ``timed_out`` is only present for deadline errors and ``fallback`` only
    on the motivation endpoint.
    """

    ok: bool = False
    error: str
    details: str | None = None
    timed_out: bool | None = None
    fallback: str | None = None
