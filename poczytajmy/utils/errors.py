"""Custom exception hierarchy for the poczytajmy backend.

All application exceptions inherit from :class:`PoczytajmyError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "groq", "openai", "tesseract") caused the failure.
Every class also declares the machine-readable ``code`` and the HTTP
``status_code`` that :class:`~poczytajmy.api.middleware.ErrorHandlingMiddleware`
renders for it.

    PoczytajmyError  (base)
    +-- MissingInputError        400  MISSING_INPUT
    +-- NoProviderError          502  NO_PROVIDER
    |   +-- ConfigurationError   500  NO_PROVIDER  (credential missing)
    +-- DeadlineExceededError    504  DEADLINE_EXCEEDED
    +-- UpstreamFailureError     502  UPSTREAM_FAILURE
    |   +-- LLMError
    |   +-- SpeechSynthesisError
    +-- EmptyGenerationError     502  EMPTY_GENERATION
    +-- TranscriptionError       500  UPSTREAM_FAILURE
    +-- LocalProcessingError     500  LOCAL_FAILURE
        +-- OCRExtractionError

Nothing in the service retries: a raised error goes straight to the caller.
"""


class PoczytajmyError(Exception):
    """Base exception for all poczytajmy errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[groq] GROQ_HTTP_503``.
    """

    code: str = "LOCAL_FAILURE"
    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Client errors
# ---------------------------------------------------------------------------

class MissingInputError(PoczytajmyError):
    """Raised when a required upload or body field is absent."""

    code = "MISSING_INPUT"
    status_code = 400

    def __init__(
        self,
        message: str = "Required input is missing",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Provider availability
# ---------------------------------------------------------------------------

class NoProviderError(PoczytajmyError):
    """Raised when no provider is configured for a required capability."""

    code = "NO_PROVIDER"
    status_code = 502

    def __init__(
        self,
        message: str = "No provider configured",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(NoProviderError):
    """Raised when a credential needed for a local call is not configured."""

    status_code = 500

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Race / upstream failures
# ---------------------------------------------------------------------------

class DeadlineExceededError(PoczytajmyError):
    """Raised when no race participant succeeded before the deadline."""

    code = "DEADLINE_EXCEEDED"
    status_code = 504

    def __init__(
        self,
        message: str = "DEADLINE_EXCEEDED",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UpstreamFailureError(PoczytajmyError):
    """Raised when a configured provider returned a non-success or empty payload."""

    code = "UPSTREAM_FAILURE"
    status_code = 502

    def __init__(
        self,
        message: str = "Upstream provider failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(UpstreamFailureError):
    """Raised when a chat-completion call fails or returns no text."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class SpeechSynthesisError(UpstreamFailureError):
    """Raised when the text-to-speech service answers with a non-success status."""

    def __init__(
        self,
        message: str = "Speech synthesis failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmptyGenerationError(PoczytajmyError):
    """Raised when a provider answered but nothing usable survived filtering."""

    code = "EMPTY_GENERATION"
    status_code = 502

    def __init__(
        self,
        message: str = "EMPTY_GENERATION",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class TranscriptionError(PoczytajmyError):
    """Raised when the speech-to-text call throws."""

    code = "UPSTREAM_FAILURE"
    status_code = 500

    def __init__(
        self,
        message: str = "Transcription failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Local processing
# ---------------------------------------------------------------------------

class LocalProcessingError(PoczytajmyError):
    """Raised when image or audio handling inside the process fails."""

    code = "LOCAL_FAILURE"
    status_code = 500

    def __init__(
        self,
        message: str = "Local processing failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class OCRExtractionError(LocalProcessingError):
    """Raised when OCR text extraction fails (Tesseract or vision model)."""

    def __init__(
        self,
        message: str = "OCR text extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
