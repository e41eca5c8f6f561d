"""poczytajmy FastAPI application entry point.

Wires together all providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml``, configures
structured logging, and serves the status page from ``frontend/``.
"""

from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
import openai
import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.responses import FileResponse

from poczytajmy import __version__
from poczytajmy.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from poczytajmy.api.routes import router as api_router
from poczytajmy.config.loader import generation_params, load_config
from poczytajmy.config.settings import Settings
from poczytajmy.interfaces.llm_provider import IChatProvider
from poczytajmy.interfaces.transcription_provider import ITranscriptionProvider
from poczytajmy.providers.cache.greeting_history import GreetingHistory
from poczytajmy.providers.llm.groq_provider import GroqChatProvider
from poczytajmy.providers.llm.openai_provider import OpenAIChatProvider
from poczytajmy.providers.ocr.tesseract_provider import TesseractOCRProvider
from poczytajmy.providers.ocr.vision_provider import VisionOCRProvider
from poczytajmy.providers.speech.elevenlabs_provider import ElevenLabsSpeechProvider
from poczytajmy.providers.transcription.whisper_api_provider import WhisperTranscriptionProvider
from poczytajmy.services.chat_race import ChatRaceService
from poczytajmy.services.greeting_service import GreetingService
from poczytajmy.services.keepalive import KeepAlivePinger
from poczytajmy.services.motivation_service import MotivationService
from poczytajmy.services.ocr_service import OCRService
from poczytajmy.services.reading_text_service import ReadingTextService
from poczytajmy.services.speech_service import SpeechService
from poczytajmy.services.tts_service import TTSService
from poczytajmy.utils.concurrency import build_ocr_gate
from poczytajmy.utils.image_preprocessor import ImagePreprocessor
from poczytajmy.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_FRONTEND_DIR = Path(__file__).resolve().parent.parent / "frontend"

# Upstream calls are bounded by the race deadline; this only caps stragglers
# and the keep-alive pings.
_HTTP_TIMEOUT = httpx.Timeout(20.0, connect=5.0)

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider construction
# ---------------------------------------------------------------------------


def _build_chat_providers(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
    openai_chat: OpenAIChatProvider | None,
) -> list[IChatProvider]:
    """Every chat provider with a key, Groq first (ties go to list order)."""
    providers: list[IChatProvider] = []
    if app_settings.groq_api_key:
        providers.append(GroqChatProvider(settings=app_settings, http_client=http_client))
    if openai_chat is not None:
        providers.append(openai_chat)
    return providers


def _build_transcription_providers(app_settings: Settings) -> list[ITranscriptionProvider]:
    """Transcription providers in preference order: Groq, then OpenAI."""
    providers: list[ITranscriptionProvider] = []
    if app_settings.groq_api_key:
        groq_client = openai.AsyncOpenAI(
            api_key=app_settings.groq_api_key,
            base_url=app_settings.groq_base_url,
        )
        providers.append(
            WhisperTranscriptionProvider(
                client=groq_client,
                model=app_settings.groq_transcription_model,
                provider_name="groq",
            )
        )
    if app_settings.openai_api_key:
        providers.append(
            WhisperTranscriptionProvider(
                client=openai.AsyncOpenAI(api_key=app_settings.openai_api_key),
                model=app_settings.openai_transcription_model,
                provider_name="openai",
            )
        )
    return providers


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, config: dict | None = None) -> dict[str, Any]:
    """Construct every provider and service; returned keys go onto ``app.state``."""
    config = config if config is not None else load_config(settings=app_settings)

    http_client = httpx.AsyncClient(
        timeout=_HTTP_TIMEOUT,
        limits=httpx.Limits(max_keepalive_connections=10, keepalive_expiry=30.0),
    )

    openai_chat = (
        OpenAIChatProvider(settings=app_settings) if app_settings.openai_api_key else None
    )
    chat_providers = _build_chat_providers(app_settings, http_client, openai_chat)
    deadline_ms = config.get("race", {}).get("deadline_ms", app_settings.fast_timeout_ms)
    race = ChatRaceService(chat_providers, deadline=deadline_ms / 1000.0)

    greeting_history = GreetingHistory(
        max_profiles=app_settings.greeting_history_profiles,
        max_entries=app_settings.greeting_history_size,
    )

    preprocessor = ImagePreprocessor(
        width=app_settings.ocr_width,
        threshold=app_settings.ocr_threshold,
        threshold_value=app_settings.ocr_threshold_value,
        linear_a=app_settings.ocr_linear_a,
        linear_b=app_settings.ocr_linear_b,
    )
    ocr_service = OCRService(
        local_provider=TesseractOCRProvider(settings=app_settings, preprocessor=preprocessor),
        gate=build_ocr_gate(app_settings.ocr_max_concurrency),
        vision_provider=VisionOCRProvider(openai_chat) if openai_chat is not None else None,
        use_vision=app_settings.use_openai_ocr,
        mock=app_settings.mock_ocr,
    )

    speech_service = SpeechService(
        providers=_build_transcription_providers(app_settings),
        language=app_settings.asr_language,
        mock=app_settings.mock_asr,
    )

    tts_service = TTSService(
        provider=ElevenLabsSpeechProvider(settings=app_settings, http_client=http_client),
        max_chars=app_settings.tts_max_chars,
    )

    warm_provider = next(
        (p for p in chat_providers if p.get_provider_name() == "groq"), None
    )
    pinger = KeepAlivePinger(
        http_client=http_client,
        warm_provider=warm_provider,
        base_url=app_settings.base_url,
        interval_minutes=app_settings.prewarm_every_min,
        params=generation_params(config, "prewarm"),
    )

    return {
        "settings": app_settings,
        "config": config,
        "http_client": http_client,
        "chat_race": race,
        "chat_provider_names": race.provider_names,
        "race_deadline_ms": deadline_ms,
        "greeting_history": greeting_history,
        "greeting_service": GreetingService(
            race=race,
            history=greeting_history,
            params=generation_params(config, "greeting"),
        ),
        "motivation_service": MotivationService(
            race=race,
            params=generation_params(config, "motivation"),
            max_chars=app_settings.motivation_max_chars,
        ),
        "reading_text_service": ReadingTextService(
            race=race,
            params=generation_params(config, "reading_text"),
            mock=app_settings.mock_text,
        ),
        "speech_service": speech_service,
        "ocr_service": ocr_service,
        "tts_service": tts_service,
        "keepalive": pinger,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    keepalive_task = asyncio.create_task(components["keepalive"].run_forever())

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        chat_providers=components["chat_provider_names"],
        deadline_ms=components["race_deadline_ms"],
        mock_asr=settings.mock_asr,
        mock_ocr=settings.mock_ocr,
        mock_text=settings.mock_text,
    )

    yield

    # -- Shutdown: stop the pinger, close the shared httpx client --
    keepalive_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await keepalive_task

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(lifespan: Any = _lifespan) -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="poczytajmy-backend",
        version=__version__,
        description=(
            "Reading-practice backend: speech recognition, greetings, "
            "motivation, reading sentences, OCR and text-to-speech."
        ),
        lifespan=lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    # -- Status page --
    if (_FRONTEND_DIR / "index.html").exists():

        @application.get("/", include_in_schema=False)
        async def serve_index() -> FileResponse:
            return FileResponse(str(_FRONTEND_DIR / "index.html"))

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "poczytajmy.main:app",
        host=settings.app_host,
        port=settings.port,
        reload=(settings.app_env == "development"),
    )
