"""Unit tests for request/response schemas and the error body builder."""

from __future__ import annotations

from poczytajmy.api.middleware import error_response
from poczytajmy.api.schemas import (
    ASRResponse,
    GreetingRequest,
    MotivationRequest,
    TTSRequest,
    TTSResponse,
)
from poczytajmy.models.speech import RecognitionResult, WordTiming
from poczytajmy.utils.errors import DeadlineExceededError, MissingInputError


class TestRequests:
    def test_lenient_age(self) -> None:
        assert GreetingRequest(age="7").age == 7
        assert GreetingRequest(age="siedem").age is None
        assert GreetingRequest(age="").age is None
        assert GreetingRequest(age=6.0).age == 6

    def test_camel_case_aliases(self) -> None:
        body = MotivationRequest.model_validate({"characterName": "Miś", "accuracy": "88"})
        assert body.character_name == "Miś"
        assert body.accuracy == 88
        assert body.lang == "pl"

        assert TTSRequest.model_validate({"text": "x", "voiceId": "v"}).voice_id == "v"
        assert TTSRequest.model_validate({"text": "x", "voice_id": "v"}).voice_id == "v"


class TestResponses:
    def test_asr_from_result_serializes_camel_case(self) -> None:
        result = RecognitionResult(
            text="Ala ma",
            source="groq",
            word_count=2,
            words=[WordTiming(word="Ala", start=0.0, end=0.4), WordTiming(word="ma", start=0.5, end=0.9)],
            accuracy=67,
        )
        dumped = ASRResponse.from_result(result).model_dump(by_alias=True)
        assert dumped["wordCount"] == 2
        assert dumped["words"][0] == {"word": "Ala", "start": 0.0, "end": 0.4}
        assert dumped["accuracy"] == 67

    def test_tts_alias(self) -> None:
        assert TTSResponse(audio_b64="QUJD").model_dump(by_alias=True) == {
            "ok": True,
            "audioB64": "QUJD",
        }


class TestErrorResponse:
    def test_plain_error(self) -> None:
        body = error_response(MissingInputError("NO_FILE")).model_dump(exclude_none=True)
        assert body == {"ok": False, "error": "MISSING_INPUT", "details": "NO_FILE"}

    def test_deadline_marks_timed_out(self) -> None:
        body = error_response(DeadlineExceededError(), fallback="Brawo!").model_dump(exclude_none=True)
        assert body["timed_out"] is True
        assert body["fallback"] == "Brawo!"
        assert body["error"] == "DEADLINE_EXCEEDED"
