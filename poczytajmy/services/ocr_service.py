"""OCR of book-page photos.

Provider selection per request:

    1. MOCK_OCR=1                              -> canned sentence
    2. USE_OPENAI_OCR=1 and OpenAI configured  -> vision model
    3. otherwise                               -> Tesseract, behind the OCR gate

The gate is an ``asyncio.Semaphore`` created once at startup; requests over
the limit wait for a slot rather than failing.
"""

from __future__ import annotations

import asyncio

from poczytajmy.config.reading_content import MOCK_OCR_TEXT
from poczytajmy.interfaces.ocr_provider import IOCRProvider
from poczytajmy.models.ocr import OCRResult, PageImage
from poczytajmy.utils.errors import MissingInputError
from poczytajmy.utils.logging import get_logger


class OCRService:
    """Routes a page image to the right OCR backend.

    Parameters
    ----------
    local_provider:
        The Tesseract provider.
    gate:
        Semaphore bounding concurrent local OCR jobs.
    vision_provider:
        Optional vision provider, used only when *use_vision* is set and
        the provider reports itself available.
    use_vision:
        Value of ``USE_OPENAI_OCR``.
    mock:
        Value of ``MOCK_OCR``.
    """

    def __init__(
        self,
        local_provider: IOCRProvider,
        gate: asyncio.Semaphore,
        vision_provider: IOCRProvider | None = None,
        use_vision: bool = False,
        mock: bool = False,
    ) -> None:
        self._local_provider = local_provider
        self._gate = gate
        self._vision_provider = vision_provider
        self._use_vision = use_vision
        self._mock = mock
        self._logger = get_logger(__name__)

    async def extract_text(self, image: PageImage | None) -> OCRResult:
        """Extract text from *image*.

        Raises
        ------
        MissingInputError
            If no image was uploaded.
        OCRExtractionError
            If Tesseract fails.
        LLMError
            If the vision model call fails.
        """
        if image is None or not image.image_data:
            raise MissingInputError("NO_FILE")

        if self._mock:
            return OCRResult(text=MOCK_OCR_TEXT, confidence=None, provider_used="mock")

        if (
            self._use_vision
            and self._vision_provider is not None
            and self._vision_provider.is_available()
        ):
            return await self._vision_provider.extract_text(image)

        async with self._gate:
            self._logger.debug("ocr_gate_acquired", filename=image.filename)
            return await self._local_provider.extract_text(image)
