"""FastAPI route definitions for the poczytajmy API.

Every endpoint delegates to one service; services are resolved from
``app.state`` (populated in ``main.py``'s lifespan) via ``Depends`` using
the ``Annotated`` pattern.  Errors raised by services are rendered by
:class:`~poczytajmy.api.middleware.ErrorHandlingMiddleware`, except on
``/agent/motivate``, which ships a fallback sentence in its error body.

# Endpoint                    Method  Description
# ─────────────────────────────────────────────────────────────────
# /health                     GET     Liveness + version
# /asr                        POST    Recording -> text, timings, accuracy
# /agent/generate-greeting    POST    Novel greeting for a child profile
# /agent/motivate             POST    One short encouraging message
# /agent/generate-text        POST    Sentence to read at level A1/A2/B1
# /generate-text              POST    307 -> /agent/generate-text
# /ocr                        POST    Page photo -> text
# /tts                        POST    Text -> base64 MP3
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, RedirectResponse

from poczytajmy import __version__
from poczytajmy.api.middleware import error_response
from poczytajmy.api.schemas import (
    ASRResponse,
    ErrorResponse,
    GenerationResponse,
    GreetingRequest,
    HealthResponse,
    MotivationRequest,
    OCRResponse,
    ReadingTextRequest,
    ReadingTextResponse,
    TTSRequest,
    TTSResponse,
)
from poczytajmy.config.reading_content import motivation_fallback
from poczytajmy.models.ocr import PageImage
from poczytajmy.services.greeting_service import GreetingService
from poczytajmy.services.motivation_service import MotivationService
from poczytajmy.services.ocr_service import OCRService
from poczytajmy.services.reading_text_service import ReadingTextService
from poczytajmy.services.speech_service import SpeechService
from poczytajmy.services.tts_service import TTSService
from poczytajmy.utils.errors import DeadlineExceededError, PoczytajmyError
from poczytajmy.utils.logging import get_logger
from poczytajmy.utils.sanitizers import tighten_motivation

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


# ---------------------------------------------------------------------------
# Dependency injection helpers (resolve singletons from app.state)
# ---------------------------------------------------------------------------


def _get_speech_service(request: Request) -> SpeechService:
    return request.app.state.speech_service


def _get_greeting_service(request: Request) -> GreetingService:
    return request.app.state.greeting_service


def _get_motivation_service(request: Request) -> MotivationService:
    return request.app.state.motivation_service


def _get_reading_text_service(request: Request) -> ReadingTextService:
    return request.app.state.reading_text_service


def _get_ocr_service(request: Request) -> OCRService:
    return request.app.state.ocr_service


def _get_tts_service(request: Request) -> TTSService:
    return request.app.state.tts_service


SpeechDep = Annotated[SpeechService, Depends(_get_speech_service)]
GreetingDep = Annotated[GreetingService, Depends(_get_greeting_service)]
MotivationDep = Annotated[MotivationService, Depends(_get_motivation_service)]
ReadingTextDep = Annotated[ReadingTextService, Depends(_get_reading_text_service)]
OCRDep = Annotated[OCRService, Depends(_get_ocr_service)]
TTSDep = Annotated[TTSService, Depends(_get_tts_service)]


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health() -> HealthResponse:
    return HealthResponse(version=__version__)


# ---------------------------------------------------------------------------
# Speech recognition
# ---------------------------------------------------------------------------


@router.post(
    "/asr",
    response_model=ASRResponse,
    responses=_ERROR_RESPONSES,
    summary="Transcribe a read-aloud recording",
)
async def recognize_speech(
    speech_service: SpeechDep,
    audio: Annotated[UploadFile | None, File()] = None,
    expected_text: Annotated[str | None, Form(alias="expectedText")] = None,
) -> ASRResponse:
    """Transcribe the ``audio`` upload and score it against ``expectedText``."""
    data = await audio.read() if audio is not None else None
    result = await speech_service.recognize(
        data,
        filename=audio.filename if audio is not None else None,
        content_type=audio.content_type if audio is not None else None,
        expected_text=expected_text,
    )
    return ASRResponse.from_result(result)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


@router.post(
    "/agent/generate-greeting",
    response_model=GenerationResponse,
    responses=_ERROR_RESPONSES,
    summary="Generate a greeting the child has not heard recently",
)
async def generate_greeting(
    greeting_service: GreetingDep,
    body: GreetingRequest | None = None,
) -> GenerationResponse:
    body = body or GreetingRequest()
    text, source = await greeting_service.generate(
        name=body.name,
        age=body.age,
        character=body.character,
    )
    return GenerationResponse(text=text, source=source)


@router.post(
    "/agent/motivate",
    response_model=GenerationResponse,
    responses=_ERROR_RESPONSES,
    summary="Generate a short motivational message",
)
async def motivate(
    motivation_service: MotivationDep,
    body: MotivationRequest | None = None,
) -> GenerationResponse | JSONResponse:
    """Return an encouraging message; failures carry a ``fallback`` sentence."""
    body = body or MotivationRequest()
    try:
        text, source = await motivation_service.generate(
            age=body.age,
            accuracy=body.accuracy,
            text=body.text,
            character=body.character_name,
            lang=body.lang,
        )
    except PoczytajmyError as exc:
        status_code = 504 if isinstance(exc, DeadlineExceededError) else 502
        _logger.warning(
            "motivation_fallback_served",
            code=exc.code,
            message=exc.message,
            provider=exc.provider_name,
        )
        payload = error_response(exc, fallback=motivation_fallback(body.lang))
        return JSONResponse(
            status_code=status_code,
            content=payload.model_dump(exclude_none=True),
        )

    # Tightened again at the boundary the client sees.
    text = tighten_motivation(text, max_chars=motivation_service.max_chars)
    return GenerationResponse(text=text, source=source)


@router.post(
    "/agent/generate-text",
    response_model=ReadingTextResponse,
    responses=_ERROR_RESPONSES,
    summary="Generate one sentence to read aloud",
)
async def generate_reading_text(
    reading_text_service: ReadingTextDep,
    body: ReadingTextRequest | None = None,
) -> ReadingTextResponse:
    body = body or ReadingTextRequest()
    text, level, source = await reading_text_service.generate(
        level=body.level,
        language=body.language,
    )
    return ReadingTextResponse(text=text, level=level, language=body.language, source=source)


@router.post("/generate-text", include_in_schema=False)
async def generate_text_alias() -> RedirectResponse:
    return RedirectResponse(url="/agent/generate-text", status_code=307)


# ---------------------------------------------------------------------------
# OCR
# ---------------------------------------------------------------------------


@router.post(
    "/ocr",
    response_model=OCRResponse,
    responses=_ERROR_RESPONSES,
    summary="Extract text from a book-page photo",
)
async def extract_page_text(
    ocr_service: OCRDep,
    image: Annotated[UploadFile | None, File()] = None,
) -> OCRResponse:
    page: PageImage | None = None
    if image is not None:
        data = await image.read()
        if data:
            page = PageImage.from_bytes(data, filename=image.filename, content_type=image.content_type)

    result = await ocr_service.extract_text(page)
    return OCRResponse(text=result.text, confidence=result.confidence)


# ---------------------------------------------------------------------------
# Text-to-speech
# ---------------------------------------------------------------------------


@router.post(
    "/tts",
    response_model=TTSResponse,
    responses=_ERROR_RESPONSES,
    summary="Synthesize speech for a short text",
)
async def text_to_speech(
    tts_service: TTSDep,
    body: TTSRequest | None = None,
) -> TTSResponse:
    body = body or TTSRequest()
    audio_b64 = await tts_service.synthesize(body.text, voice_id=body.voice_id)
    return TTSResponse(audio_b64=audio_b64)
