"""Speech-to-text adapters.

WhisperTranscriptionProvider serves both Groq (whisper-large-v3) and OpenAI
(whisper-1); the speech service uses the first one that is configured.
"""

from poczytajmy.providers.transcription.whisper_api_provider import WhisperTranscriptionProvider

__all__ = ["WhisperTranscriptionProvider"]
