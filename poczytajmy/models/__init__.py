"""Pydantic v2 models shared by providers, services and routes."""

from poczytajmy.models.generation import ProviderResult
from poczytajmy.models.ocr import OCRResult, PageImage
from poczytajmy.models.speech import RecognitionResult, TranscriptionResult, WordTiming

__all__ = [
    "OCRResult",
    "PageImage",
    "ProviderResult",
    "RecognitionResult",
    "TranscriptionResult",
    "WordTiming",
]
