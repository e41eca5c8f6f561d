"""Shared pytest fixtures for the poczytajmy test suite."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image, ImageDraw

from poczytajmy.config.settings import Settings
from poczytajmy.interfaces.llm_provider import IChatProvider
from poczytajmy.interfaces.transcription_provider import ITranscriptionProvider
from poczytajmy.models.speech import TranscriptionResult


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


def make_settings(**overrides: Any) -> Settings:
    """Settings with every credential blanked unless overridden.

    ``_env_file=None`` keeps a developer's local ``.env`` out of the tests.
    """
    defaults: dict[str, Any] = {
        "openai_api_key": "",
        "groq_api_key": "",
        "elevenlabs_api_key": "",
        "prewarm_every_min": 0,
        "base_url": "",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


def make_chat_provider(
    name: str,
    text: str | None = None,
    delay: float = 0.0,
    error: Exception | None = None,
) -> MagicMock:
    """A chat provider mock that answers *text* after *delay* seconds, or raises."""

    async def _complete(*_args: Any, **_kwargs: Any) -> str:
        if delay:
            await asyncio.sleep(delay)
        if error is not None:
            raise error
        return text or ""

    provider = MagicMock(spec=IChatProvider)
    provider.complete = AsyncMock(side_effect=_complete)
    provider.get_provider_name.return_value = name
    provider.is_available.return_value = True
    return provider


def make_transcription_provider(
    name: str,
    result: TranscriptionResult | None = None,
    error: Exception | None = None,
    available: bool = True,
) -> MagicMock:
    provider = MagicMock(spec=ITranscriptionProvider)
    if error is not None:
        provider.transcribe = AsyncMock(side_effect=error)
    else:
        provider.transcribe = AsyncMock(
            return_value=result or TranscriptionResult(text="Ala ma kota", provider=name)
        )
    provider.get_provider_name.return_value = name
    provider.is_available.return_value = available
    return provider


def make_page_photo(width: int = 400, height: int = 300, fmt: str = "PNG") -> bytes:
    """A light-grey page with a few dark text-like bars."""
    img = Image.new("RGB", (width, height), (225, 222, 215))
    draw = ImageDraw.Draw(img)
    for row in range(3):
        top = 40 + row * 60
        draw.rectangle([30, top, width - 30, top + 18], fill=(30, 30, 30))
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()
