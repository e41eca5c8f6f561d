"""OpenAI vision OCR provider.

Opt-in alternative to Tesseract (``USE_OPENAI_OCR=1``).  The raw upload is
sent as-is: vision models cope with rotation and lighting on their own, so
the Tesseract preprocessing would only cost time.
"""

from __future__ import annotations

import time

from poczytajmy.interfaces.ocr_provider import IOCRProvider
from poczytajmy.models.ocr import OCRResult, PageImage
from poczytajmy.providers.llm.openai_provider import OpenAIChatProvider
from poczytajmy.utils.errors import OCRExtractionError
from poczytajmy.utils.logging import get_logger

_VISION_PROMPT = "Wyodrębnij czysty tekst z obrazu (po polsku). Zwróć tylko tekst."


class VisionOCRProvider(IOCRProvider):
    """OCR provider that delegates to the OpenAI vision model."""

    def __init__(self, llm_provider: OpenAIChatProvider) -> None:
        self._llm_provider = llm_provider
        self._logger = get_logger(__name__)

    async def extract_text(self, image: PageImage) -> OCRResult:
        start = time.perf_counter()
        image_bytes = image.image_data
        if not image_bytes:
            raise OCRExtractionError(
                "No image data provided",
                provider_name=self.get_provider_name(),
            )

        # LLMError propagates unchanged: a vision failure is an upstream failure.
        text = await self._llm_provider.vision_extract(image_bytes, _VISION_PROMPT)

        elapsed = time.perf_counter() - start
        self._logger.info(
            "ocr_extraction_complete",
            provider=self.get_provider_name(),
            chars=len(text),
            processing_time=round(elapsed, 3),
        )
        return OCRResult(
            text=text,
            confidence=None,
            provider_used=self.get_provider_name(),
            processing_time=elapsed,
        )

    def get_provider_name(self) -> str:
        return "openai-vision"

    def is_available(self) -> bool:
        return self._llm_provider.is_available()
