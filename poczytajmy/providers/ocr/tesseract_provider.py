"""Tesseract OCR provider for book-page photos.

Runs a single preprocessing pass (see :class:`ImagePreprocessor`) and one
Tesseract call in a worker thread.  Page photos of children's books are
mostly clean printed Polish, so the multi-pass machinery needed for
stylized text is not used here.
"""

from __future__ import annotations

import asyncio
import shlex
import time

import pytesseract
from PIL import Image

from poczytajmy.config.settings import Settings
from poczytajmy.interfaces.ocr_provider import IOCRProvider
from poczytajmy.models.ocr import OCRResult, PageImage
from poczytajmy.utils.errors import OCRExtractionError
from poczytajmy.utils.image_preprocessor import ImagePreprocessor
from poczytajmy.utils.logging import get_logger

# Polish and English letters, digits and the punctuation found in reading books.
CHAR_WHITELIST = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZĄĆĘŁŃÓŚŹŻ"
    "abcdefghijklmnopqrstuvwxyząćęłńóśźż"
    "0123456789"
    " .,:;!?„”\"'()-–—/\\[]{}…"
)


def build_tesseract_config(psm: int, lang_path: str = "") -> str:
    """Return the Tesseract command-line config string."""
    parts = [
        f"--psm {psm}",
        "-c preserve_interword_spaces=1",
        "-c user_defined_dpi=300",
        "-c " + shlex.quote(f"tessedit_char_whitelist={CHAR_WHITELIST}"),
    ]
    if lang_path:
        parts.append("--tessdata-dir " + shlex.quote(lang_path))
    return " ".join(parts)


class TesseractOCRProvider(IOCRProvider):
    """OCR provider backed by Google Tesseract via pytesseract."""

    def __init__(self, settings: Settings, preprocessor: ImagePreprocessor) -> None:
        self._preprocessor = preprocessor
        self._languages = settings.ocr_languages
        self._config = build_tesseract_config(settings.ocr_psm, settings.ocr_lang_path)
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # IOCRProvider interface
    # ------------------------------------------------------------------

    async def extract_text(self, image: PageImage) -> OCRResult:
        """Preprocess *image* and run Tesseract on it off the event loop."""
        start = time.perf_counter()
        image_bytes = image.image_data
        if not image_bytes:
            raise OCRExtractionError(
                "No image data provided",
                provider_name=self.get_provider_name(),
            )

        try:
            text, confidence = await asyncio.to_thread(self._run_ocr, image_bytes)
        except Exception as exc:
            elapsed = time.perf_counter() - start
            self._logger.error(
                "ocr_extraction_failed",
                provider="tesseract",
                error=str(exc),
                processing_time=round(elapsed, 3),
            )
            raise OCRExtractionError(
                f"Tesseract OCR failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        elapsed = time.perf_counter() - start
        self._logger.info(
            "ocr_extraction_complete",
            provider="tesseract",
            confidence=confidence,
            chars=len(text),
            processing_time=round(elapsed, 3),
        )
        return OCRResult(
            text=text,
            confidence=confidence,
            provider_used=self.get_provider_name(),
            processing_time=elapsed,
        )

    def get_provider_name(self) -> str:
        return "tesseract"

    def is_available(self) -> bool:
        """Check that the Tesseract binary can be found."""
        try:
            pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError):
            return False
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run_ocr(self, image_bytes: bytes) -> tuple[str, float | None]:
        prepared = self._preprocessor.prepare_for_ocr(image_bytes)
        return self._run_tesseract(prepared)

    def _run_tesseract(self, image: Image.Image) -> tuple[str, float | None]:
        """Run Tesseract once and rebuild the text from word-level data.

        ``image_to_data`` gives both the words and their confidences, so
        Tesseract runs only once per page.  Lines are joined with newlines.
        """
        data = pytesseract.image_to_data(
            image,
            lang=self._languages,
            config=self._config,
            output_type=pytesseract.Output.DICT,
        )

        lines: list[list[str]] = []
        confidences: list[float] = []
        prev_line: tuple[int, int, int] | None = None

        for i, raw_word in enumerate(data["text"]):
            word = raw_word.strip()
            conf = float(data["conf"][i])
            # conf == -1 marks layout rows that carry no word
            if not word or conf < 0:
                continue
            line_key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            if line_key != prev_line:
                lines.append([])
                prev_line = line_key
            lines[-1].append(word)
            confidences.append(conf)

        text = "\n".join(" ".join(words) for words in lines).strip()
        confidence = round(sum(confidences) / len(confidences), 1) if confidences else None
        return text, confidence
