"""Groq chat provider over plain HTTP.

Groq's chat endpoint is OpenAI-compatible, but the call is made directly
with the shared keep-alive ``httpx.AsyncClient`` instead of an SDK: Groq is
the latency leg of the race, and skipping SDK retries and per-call client
setup keeps it that way.
"""

from __future__ import annotations

import httpx
import structlog

from poczytajmy.config.settings import Settings
from poczytajmy.interfaces.llm_provider import IChatProvider
from poczytajmy.utils.errors import LLMError
from poczytajmy.utils.text_normalizer import trim_user_content

logger = structlog.get_logger(logger_name=__name__)


class GroqChatProvider(IChatProvider):
    """Chat provider backed by Groq (``llama-3.1-8b-instant`` by default).

    Parameters
    ----------
    settings:
        Supplies the API key, base URL and model.
    http_client:
        Shared async client; owned and closed by the application lifespan.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._api_key = settings.groq_api_key
        self._url = settings.groq_base_url.rstrip("/") + "/chat/completions"
        self._model = settings.groq_model
        self._http = http_client

    async def complete(
        self,
        user_prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        top_p: float = 0.95,
        max_tokens: int = 64,
    ) -> str:
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        # Groq bills and queues by prompt size, so prompts are compacted.
        messages.append({"role": "user", "content": trim_user_content(user_prompt)})

        payload = {
            "model": self._model,
            "temperature": temperature,
            "top_p": top_p,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            response = await self._http.post(self._url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise LLMError(
                message=f"Groq request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not response.is_success:
            raise LLMError(
                message=f"GROQ_HTTP_{response.status_code}",
                provider_name=self.get_provider_name(),
            )

        try:
            data = response.json()
            choices = data.get("choices") or [{}]
            content = ((choices[0].get("message") or {}).get("content") or "").strip()
            tokens = (data.get("usage") or {}).get("total_tokens")
        except (ValueError, AttributeError, TypeError, IndexError, KeyError) as exc:
            raise LLMError(
                message="Groq returned an unexpected body",
                provider_name=self.get_provider_name(),
            ) from exc
        if not content:
            raise LLMError(message="GROQ_EMPTY", provider_name=self.get_provider_name())

        logger.info(
            "groq_completion",
            model=self._model,
            tokens=tokens,
        )
        return content

    def is_available(self) -> bool:
        return bool(self._api_key)

    def get_provider_name(self) -> str:
        return "groq"
