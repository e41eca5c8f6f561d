"""Chat-completion race across every configured provider.

Each request fans the same prompt out to Groq and OpenAI (whichever have
keys) and serves whichever answers first.  Nothing is retried: a race that
produces no winner before the deadline is a ``DeadlineExceededError``.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable

from poczytajmy.interfaces.llm_provider import IChatProvider
from poczytajmy.models.generation import ProviderResult
from poczytajmy.utils.concurrency import race_first_success
from poczytajmy.utils.errors import LLMError, PoczytajmyError
from poczytajmy.utils.logging import get_logger


class ChatRaceService:
    """Races chat providers under a shared deadline.

    Parameters
    ----------
    providers:
        Configured chat providers.  Order only matters for ties within a
        single scheduler tick.
    deadline:
        Seconds allowed for the whole race.
    """

    def __init__(self, providers: list[IChatProvider], deadline: float) -> None:
        self._providers = providers
        self._deadline = deadline
        self._logger = get_logger(__name__)

    @property
    def provider_names(self) -> list[str]:
        return [p.get_provider_name() for p in self._providers]

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        top_p: float = 0.95,
        max_tokens: int = 64,
    ) -> ProviderResult:
        """Send *prompt* to all providers and return the first good answer.

        Raises
        ------
        NoProviderError
            If no chat provider is configured.
        DeadlineExceededError
            If no provider answered successfully in time.
        UpstreamFailureError
            If every provider failed before the deadline.
        """
        operations = [
            self._make_operation(provider, prompt, temperature, top_p, max_tokens)
            for provider in self._providers
        ]
        result = await race_first_success(operations, self._deadline, logger=self._logger)

        self._logger.info(
            "chat_race_won",
            provider=result.provider_id,
            latency_ms=result.latency_ms,
            participants=len(operations),
        )
        return result

    def _make_operation(
        self,
        provider: IChatProvider,
        prompt: str,
        temperature: float,
        top_p: float,
        max_tokens: int,
    ) -> Callable[[], Awaitable[ProviderResult]]:
        async def _run() -> ProviderResult:
            started = time.perf_counter()
            try:
                text = await provider.complete(
                    prompt,
                    temperature=temperature,
                    top_p=top_p,
                    max_tokens=max_tokens,
                )
            except PoczytajmyError:
                raise
            except Exception as exc:
                # Every failure leaving the race must be a PoczytajmyError.
                raise LLMError(
                    message=f"Chat provider failed: {exc}",
                    provider_name=provider.get_provider_name(),
                ) from exc
            return ProviderResult(
                provider_id=provider.get_provider_name(),
                text=text,
                latency_ms=round((time.perf_counter() - started) * 1000),
            )

        return _run
