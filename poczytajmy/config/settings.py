"""Application settings loaded from environment variables via pydantic-settings.

Two sources, in priority order:

  1. Environment variables, e.g. ``GROQ_API_KEY=gsk_...`` (always win)
  2. ``.env`` file in the working directory (local development)

Field ``groq_api_key`` maps to env var ``GROQ_API_KEY``.  Flags accept the
``1``/``0`` style used by the deployment (``MOCK_TEXT=1``).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """poczytajmy backend settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # === Chat / ASR providers ===
    # Empty string = "not configured": the provider is left out of races.
    openai_api_key: str = ""
    openai_chat_model: str = "gpt-4o-mini"
    openai_vision_model: str = "gpt-4o-mini"
    openai_transcription_model: str = "whisper-1"
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.1-8b-instant"
    groq_transcription_model: str = "whisper-large-v3"
    asr_language: str = "pl"

    # === Speech synthesis ===
    elevenlabs_api_key: str = ""
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"
    elevenlabs_voice_id: str = "21m00Tcm4TlvDq8ikWAM"
    elevenlabs_model_id: str = "eleven_multilingual_v2"
    tts_max_chars: int = 500

    # === Mock modes (canned output, no provider calls) ===
    mock_asr: bool = False
    mock_ocr: bool = False
    mock_text: bool = False

    # === OCR ===
    use_openai_ocr: bool = False
    ocr_width: int = 2000
    ocr_threshold: bool = False
    ocr_threshold_value: int = 185
    ocr_linear_a: float = 1.25
    ocr_linear_b: float = -12.0
    ocr_psm: int = 6
    ocr_max_concurrency: int = 2
    # Local tessdata directory; empty = Tesseract's built-in default.
    ocr_lang_path: str = ""
    ocr_languages: str = "pol+eng"

    # === Race / generation budgets ===
    fast_timeout_ms: int = 1200
    max_tokens_fast: int = 64
    motivation_max_chars: int = 160

    # === Greeting history ===
    greeting_history_size: int = 20
    greeting_history_profiles: int = 1000

    # === Anti-sleep pinger ===
    # 0 = ping once at startup only.
    prewarm_every_min: int = 5
    base_url: str = ""

    # === App Config ===
    app_host: str = "0.0.0.0"
    port: int = 3001
    app_env: str = "development"
    log_level: str = "INFO"
