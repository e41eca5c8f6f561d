"""Provider interfaces (adapter contracts) for every external capability."""

from poczytajmy.interfaces.llm_provider import IChatProvider
from poczytajmy.interfaces.ocr_provider import IOCRProvider
from poczytajmy.interfaces.speech_provider import ISpeechSynthesisProvider
from poczytajmy.interfaces.transcription_provider import ITranscriptionProvider

__all__ = [
    "IChatProvider",
    "IOCRProvider",
    "ISpeechSynthesisProvider",
    "ITranscriptionProvider",
]
