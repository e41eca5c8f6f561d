"""Abstract base class for OCR providers.

Two backends exist: the local Tesseract engine (default) and an OpenAI
vision model (opt-in via ``USE_OPENAI_OCR``).  The OCR service picks one per
request; it does not chain them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from poczytajmy.models.ocr import OCRResult, PageImage


# Concrete implementations: TesseractOCRProvider, VisionOCRProvider
# Located in: poczytajmy/providers/ocr/
class IOCRProvider(ABC):
    """Contract for OCR services that extract text from book-page photos."""

    @abstractmethod
    async def extract_text(self, image: PageImage) -> OCRResult:
        """Run OCR on *image* and return the extraction result.

        Raises
        ------
        poczytajmy.utils.errors.OCRExtractionError
            If the engine fails or the image cannot be decoded.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"tesseract"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the engine or credentials are present."""
