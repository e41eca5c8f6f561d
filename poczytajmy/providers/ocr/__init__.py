"""OCR provider implementations for book-page photos.

Two implementations of IOCRProvider; ocr_service.py picks one per request:
    1. TesseractOCRProvider -- local Tesseract (``pol+eng``) after a single
       preprocessing pass. Default.
    2. VisionOCRProvider -- OpenAI vision model, enabled by USE_OPENAI_OCR=1
       when an OpenAI key is configured.
"""

from poczytajmy.providers.ocr.tesseract_provider import TesseractOCRProvider
from poczytajmy.providers.ocr.vision_provider import VisionOCRProvider

__all__ = ["TesseractOCRProvider", "VisionOCRProvider"]
