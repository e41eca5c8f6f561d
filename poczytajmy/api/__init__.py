"""poczytajmy API layer: routes, schemas, and middleware."""

from poczytajmy.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from poczytajmy.api.routes import router
from poczytajmy.api.schemas import (
    ASRResponse,
    ErrorResponse,
    GenerationResponse,
    HealthResponse,
    OCRResponse,
    ReadingTextResponse,
    TTSResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ASRResponse",
    "ErrorResponse",
    "GenerationResponse",
    "HealthResponse",
    "OCRResponse",
    "ReadingTextResponse",
    "TTSResponse",
]
