"""OpenAI chat provider adapter.

Wraps the ``openai`` async client to implement :class:`IChatProvider`, and
also exposes :meth:`vision_extract` for the opt-in vision OCR path.
"""

from __future__ import annotations

import base64

import openai
import structlog

from poczytajmy.config.settings import Settings
from poczytajmy.interfaces.llm_provider import IChatProvider
from poczytajmy.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)


def _detect_media_type(image_bytes: bytes) -> str:
    """Detect the MIME type of an image from its magic bytes.

    PNG starts with 89 50 4E 47, WEBP with RIFF....WEBP, JPEG with FF D8.
    """
    if image_bytes[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:2] == b"\xff\xd8":
        return "image/jpeg"
    return "image/jpeg"


class OpenAIChatProvider(IChatProvider):
    """Chat provider backed by the OpenAI API (``gpt-4o-mini`` by default).

    The client timeout is kept short: a call that outlives the race deadline
    is cancelled anyway, and the vision OCR path has its own budget.
    """

    def __init__(self, settings: Settings, client: openai.AsyncOpenAI | None = None) -> None:
        self._api_key = settings.openai_api_key
        self._client = client or openai.AsyncOpenAI(
            api_key=self._api_key,
            timeout=openai.Timeout(25.0, connect=5.0),
        )
        self._text_model = settings.openai_chat_model
        self._vision_model = settings.openai_vision_model

    # ------------------------------------------------------------------
    # IChatProvider implementation
    # ------------------------------------------------------------------

    async def complete(
        self,
        user_prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        top_p: float = 0.95,
        max_tokens: int = 64,
    ) -> str:
        messages: list[dict] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        try:
            response = await self._client.chat.completions.create(
                model=self._text_model,
                messages=messages,
                temperature=temperature,
                top_p=top_p,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            raise LLMError(
                message=f"OpenAI API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = (response.choices[0].message.content or "").strip() if response.choices else ""
        if not content:
            raise LLMError(message="OPENAI_EMPTY", provider_name=self.get_provider_name())

        logger.info(
            "openai_completion",
            model=self._text_model,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    async def vision_extract(self, image_bytes: bytes, prompt: str) -> str:
        """Extract text from an image with the vision model."""
        b64 = base64.b64encode(image_bytes).decode("utf-8")
        media_type = _detect_media_type(image_bytes)
        try:
            response = await self._client.chat.completions.create(
                model=self._vision_model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:{media_type};base64,{b64}"},
                            },
                        ],
                    }
                ],
                max_tokens=1000,
            )
        except openai.APIError as exc:
            raise LLMError(
                message=f"OpenAI vision API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = (response.choices[0].message.content or "").strip() if response.choices else ""
        logger.info(
            "openai_vision_extract",
            model=self._vision_model,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    def is_available(self) -> bool:
        return bool(self._api_key)

    def get_provider_name(self) -> str:
        return "openai"
