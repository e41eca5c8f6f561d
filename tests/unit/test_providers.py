"""Unit tests for the provider adapters.

HTTP providers run against ``httpx.MockTransport``; SDK-backed providers get
a mocked client.  No test touches the network or a Tesseract binary.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from poczytajmy.models.ocr import PageImage
from poczytajmy.providers.llm.groq_provider import GroqChatProvider
from poczytajmy.providers.llm.openai_provider import OpenAIChatProvider, _detect_media_type
from poczytajmy.providers.ocr.tesseract_provider import (
    CHAR_WHITELIST,
    TesseractOCRProvider,
    build_tesseract_config,
)
from poczytajmy.providers.ocr.vision_provider import VisionOCRProvider
from poczytajmy.providers.speech.elevenlabs_provider import ElevenLabsSpeechProvider
from poczytajmy.providers.transcription.whisper_api_provider import (
    WhisperTranscriptionProvider,
)
from poczytajmy.utils.errors import (
    ConfigurationError,
    LLMError,
    MissingInputError,
    OCRExtractionError,
    SpeechSynthesisError,
)
from poczytajmy.utils.image_preprocessor import ImagePreprocessor
from tests.conftest import make_page_photo, make_settings


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _chat_completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(total_tokens=12),
    )


# ======================================================================
# Groq
# ======================================================================


class TestGroqChatProvider:
    @pytest.mark.asyncio
    async def test_success(self) -> None:
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"choices": [{"message": {"content": "  Brawo!  "}}], "usage": {"total_tokens": 9}},
            )

        async with _mock_client(handler) as client:
            provider = GroqChatProvider(make_settings(groq_api_key="gsk_test"), client)
            text = await provider.complete("Napisz zdanie", temperature=0.9, top_p=0.9, max_tokens=32)

        assert text == "Brawo!"
        assert captured["url"] == "https://api.groq.com/openai/v1/chat/completions"
        assert captured["auth"] == "Bearer gsk_test"
        assert captured["body"]["model"] == "llama-3.1-8b-instant"
        assert captured["body"]["max_tokens"] == 32
        assert captured["body"]["messages"] == [{"role": "user", "content": "Napisz zdanie"}]

    @pytest.mark.asyncio
    async def test_prompt_is_compacted(self) -> None:
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

        async with _mock_client(handler) as client:
            provider = GroqChatProvider(make_settings(groq_api_key="k"), client)
            await provider.complete("a   b\n\n" + "x" * 2000)

        content = captured["body"]["messages"][0]["content"]
        assert len(content) == 1200
        assert content.endswith("x")

    @pytest.mark.asyncio
    async def test_non_success_status(self) -> None:
        async with _mock_client(lambda request: httpx.Response(503, text="busy")) as client:
            provider = GroqChatProvider(make_settings(groq_api_key="k"), client)
            with pytest.raises(LLMError) as exc_info:
                await provider.complete("prompt")

        assert exc_info.value.message == "GROQ_HTTP_503"
        assert exc_info.value.provider_name == "groq"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_empty_content(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": [{"message": {"content": "   "}}]})

        async with _mock_client(handler) as client:
            provider = GroqChatProvider(make_settings(groq_api_key="k"), client)
            with pytest.raises(LLMError, match="GROQ_EMPTY"):
                await provider.complete("prompt")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [["x"], {"choices": "abc"}, {"choices": [{"message": "hi"}]}])
    async def test_unexpected_body_shape(self, body: object) -> None:
        async with _mock_client(lambda request: httpx.Response(200, json=body)) as client:
            provider = GroqChatProvider(make_settings(groq_api_key="k"), client)
            with pytest.raises(LLMError) as exc_info:
                await provider.complete("prompt")

        assert exc_info.value.provider_name == "groq"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _mock_client(handler) as client:
            provider = GroqChatProvider(make_settings(groq_api_key="k"), client)
            with pytest.raises(LLMError):
                await provider.complete("prompt")

    def test_availability_follows_key(self) -> None:
        client = MagicMock(spec=httpx.AsyncClient)
        assert GroqChatProvider(make_settings(groq_api_key="k"), client).is_available()
        assert not GroqChatProvider(make_settings(), client).is_available()


# ======================================================================
# OpenAI
# ======================================================================


class TestOpenAIChatProvider:
    @pytest.mark.asyncio
    async def test_complete(self) -> None:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=_chat_completion(" Super! "))
        provider = OpenAIChatProvider(make_settings(openai_api_key="sk"), client=client)

        text = await provider.complete("prompt", system_prompt="sys", max_tokens=20)

        assert text == "Super!"
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == 20
        assert kwargs["messages"][0] == {"role": "system", "content": "sys"}

    @pytest.mark.asyncio
    async def test_empty_content(self) -> None:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=_chat_completion(None))
        provider = OpenAIChatProvider(make_settings(openai_api_key="sk"), client=client)

        with pytest.raises(LLMError, match="OPENAI_EMPTY"):
            await provider.complete("prompt")

    @pytest.mark.asyncio
    async def test_api_error_wrapped(self) -> None:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(
                request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
            )
        )
        provider = OpenAIChatProvider(make_settings(openai_api_key="sk"), client=client)

        with pytest.raises(LLMError) as exc_info:
            await provider.complete("prompt")
        assert exc_info.value.provider_name == "openai"

    @pytest.mark.asyncio
    async def test_vision_sends_data_url(self) -> None:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=_chat_completion("Ala ma kota"))
        provider = OpenAIChatProvider(make_settings(openai_api_key="sk"), client=client)

        text = await provider.vision_extract(make_page_photo(), "Wyodrębnij tekst")

        assert text == "Ala ma kota"
        content = client.chat.completions.create.await_args.kwargs["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "Wyodrębnij tekst"}
        assert content[1]["image_url"]["url"].startswith("data:image/png;base64,")

    def test_detect_media_type(self) -> None:
        assert _detect_media_type(b"\x89PNG\r\n\x1a\n....") == "image/png"
        assert _detect_media_type(b"\xff\xd8\xff\xe0") == "image/jpeg"
        assert _detect_media_type(b"RIFF\x00\x00\x00\x00WEBP") == "image/webp"


# ======================================================================
# Whisper transcription
# ======================================================================


class TestWhisperTranscriptionProvider:
    @pytest.fixture()
    def audio_file(self, tmp_path) -> str:
        path = tmp_path / "rec.webm"
        path.write_bytes(b"webm-audio")
        return str(path)

    @pytest.mark.asyncio
    async def test_words_from_sdk_objects(self, audio_file: str) -> None:
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(
            return_value=SimpleNamespace(
                text=" Ala ma kota ",
                language="polish",
                words=[
                    SimpleNamespace(word="Ala", start=0.0, end=0.3),
                    SimpleNamespace(word=" ma", start=0.4, end=0.5),
                    SimpleNamespace(word="kota", start=0.6, end=0.9),
                ],
            )
        )
        provider = WhisperTranscriptionProvider(client, "whisper-large-v3", "groq")

        result = await provider.transcribe(audio_file, language="pl")

        assert result.text == "Ala ma kota"
        assert result.provider == "groq"
        assert [w.word for w in result.words] == ["Ala", "ma", "kota"]
        kwargs = client.audio.transcriptions.create.await_args.kwargs
        assert kwargs["model"] == "whisper-large-v3"
        assert kwargs["language"] == "pl"
        assert kwargs["response_format"] == "verbose_json"
        assert kwargs["timestamp_granularities"] == ["word"]

    @pytest.mark.asyncio
    async def test_words_from_dicts_and_blank_words_skipped(self, audio_file: str) -> None:
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(
            return_value={
                "text": "Miś je",
                "words": [
                    {"word": "Miś", "start": 0.1, "end": 0.4},
                    {"word": " ", "start": 0.4, "end": 0.5},
                    {"word": "je", "start": 0.6, "end": None},
                ],
            }
        )
        provider = WhisperTranscriptionProvider(client, "whisper-1", "openai")

        result = await provider.transcribe(audio_file)

        assert [(w.word, w.start, w.end) for w in result.words] == [
            ("Miś", 0.1, 0.4),
            ("je", 0.6, 0.6),
        ]
        assert "language" not in client.audio.transcriptions.create.await_args.kwargs

    @pytest.mark.asyncio
    async def test_no_words_returned(self, audio_file: str) -> None:
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(
            return_value=SimpleNamespace(text="Ala ma kota", words=None)
        )
        provider = WhisperTranscriptionProvider(client, "whisper-1", "openai")

        result = await provider.transcribe(audio_file)

        assert result.words == []


# ======================================================================
# ElevenLabs
# ======================================================================


class TestElevenLabsSpeechProvider:
    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        async with _mock_client(lambda request: httpx.Response(200)) as client:
            provider = ElevenLabsSpeechProvider(make_settings(), client)
            with pytest.raises(ConfigurationError) as exc_info:
                await provider.synthesize("Ala ma kota")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["key"] = request.headers["xi-api-key"]
            captured["accept"] = request.headers["accept"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, content=b"ID3mp3")

        async with _mock_client(handler) as client:
            provider = ElevenLabsSpeechProvider(make_settings(elevenlabs_api_key="el"), client)
            audio = await provider.synthesize("Ala ma kota", voice_id="voice123")

        assert audio == b"ID3mp3"
        assert captured["url"] == "https://api.elevenlabs.io/v1/text-to-speech/voice123"
        assert captured["key"] == "el"
        assert captured["accept"] == "audio/mpeg"
        assert captured["body"] == {"text": "Ala ma kota", "model_id": "eleven_multilingual_v2"}

    @pytest.mark.asyncio
    async def test_default_voice(self) -> None:
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            return httpx.Response(200, content=b"mp3")

        async with _mock_client(handler) as client:
            provider = ElevenLabsSpeechProvider(make_settings(elevenlabs_api_key="el"), client)
            await provider.synthesize("tekst")

        assert captured["path"].endswith("/text-to-speech/21m00Tcm4TlvDq8ikWAM")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "voice_id",
        ["../../user/subscription?x=", "voice/../../models", "abc%2F..", "voice123\n"],
    )
    async def test_voice_id_cannot_leave_tts_path(self, voice_id: str) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, content=b"secret")

        async with _mock_client(handler) as client:
            provider = ElevenLabsSpeechProvider(make_settings(elevenlabs_api_key="el"), client)
            with pytest.raises(MissingInputError) as exc_info:
                await provider.synthesize("tekst", voice_id=voice_id)

        assert requested == []
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_non_success_status(self) -> None:
        async with _mock_client(lambda request: httpx.Response(401, text="bad key")) as client:
            provider = ElevenLabsSpeechProvider(make_settings(elevenlabs_api_key="el"), client)
            with pytest.raises(SpeechSynthesisError) as exc_info:
                await provider.synthesize("tekst")

        assert "ELEVENLABS_HTTP_401" in exc_info.value.message
        assert exc_info.value.status_code == 502


# ======================================================================
# Tesseract
# ======================================================================


def _tesseract_data() -> dict:
    return {
        "text": ["", "Ala", "ma", "kota.", "Miś", "je", "  "],
        "conf": ["-1", "96", "90", "84", "80", "70", "-1"],
        "block_num": [1, 1, 1, 1, 1, 1, 1],
        "par_num": [1, 1, 1, 1, 1, 1, 1],
        "line_num": [0, 1, 1, 1, 2, 2, 2],
    }


class TestTesseractOCRProvider:
    def test_config_string(self) -> None:
        config = build_tesseract_config(6)
        assert config.startswith("--psm 6")
        assert "preserve_interword_spaces=1" in config
        assert "user_defined_dpi=300" in config
        assert "--tessdata-dir" not in config
        assert "ĄĆĘŁŃÓŚŹŻ" in CHAR_WHITELIST

        assert "--tessdata-dir /opt/tessdata" in build_tesseract_config(4, "/opt/tessdata")

    @pytest.mark.asyncio
    async def test_lines_and_confidence(self) -> None:
        provider = TesseractOCRProvider(make_settings(), ImagePreprocessor())
        page = PageImage.from_bytes(make_page_photo(), filename="strona.png")

        with patch(
            "poczytajmy.providers.ocr.tesseract_provider.pytesseract.image_to_data",
            return_value=_tesseract_data(),
        ) as image_to_data:
            result = await provider.extract_text(page)

        assert result.text == "Ala ma kota.\nMiś je"
        assert result.confidence == 84.0
        assert result.provider_used == "tesseract"
        assert image_to_data.call_args.kwargs["lang"] == "pol+eng"

    @pytest.mark.asyncio
    async def test_no_words_means_no_confidence(self) -> None:
        provider = TesseractOCRProvider(make_settings(), ImagePreprocessor())
        empty = {"text": [""], "conf": ["-1"], "block_num": [0], "par_num": [0], "line_num": [0]}

        with patch(
            "poczytajmy.providers.ocr.tesseract_provider.pytesseract.image_to_data",
            return_value=empty,
        ):
            result = await provider.extract_text(PageImage.from_bytes(make_page_photo()))

        assert result.text == ""
        assert result.confidence is None

    @pytest.mark.asyncio
    async def test_failure_wrapped(self) -> None:
        provider = TesseractOCRProvider(make_settings(), ImagePreprocessor())
        with pytest.raises(OCRExtractionError) as exc_info:
            await provider.extract_text(PageImage.from_bytes(b"not an image"))
        assert exc_info.value.status_code == 500
        assert exc_info.value.provider_name == "tesseract"


# ======================================================================
# Vision OCR
# ======================================================================


class TestVisionOCRProvider:
    @pytest.mark.asyncio
    async def test_delegates_to_openai(self) -> None:
        llm = MagicMock(spec=OpenAIChatProvider)
        llm.vision_extract = AsyncMock(return_value="Kot śpi na kanapie.")
        provider = VisionOCRProvider(llm)
        data = make_page_photo()

        result = await provider.extract_text(PageImage.from_bytes(data))

        assert result.text == "Kot śpi na kanapie."
        assert result.confidence is None
        assert result.provider_used == "openai-vision"
        assert llm.vision_extract.await_args.args[0] == data

    @pytest.mark.asyncio
    async def test_llm_error_propagates(self) -> None:
        llm = MagicMock(spec=OpenAIChatProvider)
        llm.vision_extract = AsyncMock(side_effect=LLMError("boom", provider_name="openai"))
        provider = VisionOCRProvider(llm)

        with pytest.raises(LLMError):
            await provider.extract_text(PageImage.from_bytes(make_page_photo()))

    def test_availability(self) -> None:
        llm = MagicMock(spec=OpenAIChatProvider)
        llm.is_available.return_value = False
        assert VisionOCRProvider(llm).is_available() is False
