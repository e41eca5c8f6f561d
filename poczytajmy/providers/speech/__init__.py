"""Text-to-speech adapters."""

from poczytajmy.providers.speech.elevenlabs_provider import ElevenLabsSpeechProvider

__all__ = ["ElevenLabsSpeechProvider"]
