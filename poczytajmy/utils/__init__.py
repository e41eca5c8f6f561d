"""Utility modules for poczytajmy.

- **errors** -- exception hierarchy rooted at PoczytajmyError; each class
  carries the error code and HTTP status the API renders for it.
- **concurrency** -- the race-with-deadline dispatcher and the OCR gate.
- **text_normalizer** -- normalization, Jaccard similarity, candidate-list
  parsing and novelty selection.
- **sanitizers** -- greeting/name stripping and the motivation tightener.
- **image_preprocessor** -- single-pass Pillow/numpy cleanup before OCR.
- **audio** (not re-exported here) -- upload extension detection and the
  self-deleting temp recording.
- **logging** -- structlog setup with coloured console output in
  development and JSON in production.
"""

# -- Race dispatcher and OCR gate -------------------------------------------
from poczytajmy.utils.concurrency import build_ocr_gate, race_first_success

# -- Domain exception hierarchy --------------------------------------------
from poczytajmy.utils.errors import (
    ConfigurationError,
    DeadlineExceededError,
    EmptyGenerationError,
    LLMError,
    LocalProcessingError,
    MissingInputError,
    NoProviderError,
    OCRExtractionError,
    PoczytajmyError,
    SpeechSynthesisError,
    TranscriptionError,
    UpstreamFailureError,
)

# -- Image preprocessing for OCR -------------------------------------------
from poczytajmy.utils.image_preprocessor import ImagePreprocessor

# -- Structured logging setup ----------------------------------------------
from poczytajmy.utils.logging import configure_logging, get_logger

# -- Text heuristics --------------------------------------------------------
from poczytajmy.utils.sanitizers import strip_greeting_and_name, tighten_motivation
from poczytajmy.utils.text_normalizer import (
    choose_most_novel,
    jaccard_similarity,
    normalize_text,
    parse_candidate_list,
)

__all__ = [
    "ConfigurationError",
    "DeadlineExceededError",
    "EmptyGenerationError",
    "ImagePreprocessor",
    "LLMError",
    "LocalProcessingError",
    "MissingInputError",
    "NoProviderError",
    "OCRExtractionError",
    "PoczytajmyError",
    "SpeechSynthesisError",
    "TranscriptionError",
    "UpstreamFailureError",
    "build_ocr_gate",
    "choose_most_novel",
    "configure_logging",
    "get_logger",
    "jaccard_similarity",
    "normalize_text",
    "parse_candidate_list",
    "race_first_success",
    "strip_greeting_and_name",
    "tighten_motivation",
]
