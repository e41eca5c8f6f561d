"""Keep-alive pinger for sleep-prone hosting.

Free-tier hosts put idle instances to sleep and Groq's first call after a
pause is slow.  Once at startup and then every ``PREWARM_EVERY_MIN``
minutes the pinger sends a tiny Groq completion and, when ``BASE_URL`` is
set, hits the service's own ``/health``.  Failures are logged and ignored.
"""

from __future__ import annotations

import asyncio

import httpx

from poczytajmy.interfaces.llm_provider import IChatProvider
from poczytajmy.utils.logging import get_logger


class KeepAlivePinger:
    """Periodic provider pre-warm and self-ping."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        warm_provider: IChatProvider | None = None,
        base_url: str = "",
        interval_minutes: int = 5,
        params: dict | None = None,
    ) -> None:
        self._http = http_client
        self._warm_provider = warm_provider
        self._health_url = f"{base_url.rstrip('/')}/health" if base_url else ""
        self._interval_minutes = interval_minutes
        params = params or {}
        self._params = {
            "temperature": params.get("temperature", 0.0),
            "top_p": params.get("top_p", 1.0),
            "max_tokens": params.get("max_tokens", 8),
        }
        self._logger = get_logger(__name__)

    async def ping_once(self) -> None:
        """Warm the chat provider and ping ``/health``; never raises."""
        if self._warm_provider is not None and self._warm_provider.is_available():
            try:
                await self._warm_provider.complete("ping", **self._params)
            except Exception as exc:
                self._logger.warning(
                    "prewarm_failed",
                    provider=self._warm_provider.get_provider_name(),
                    error=str(exc),
                )

        if self._health_url:
            try:
                await self._http.get(self._health_url)
            except Exception as exc:
                self._logger.warning("self_ping_failed", url=self._health_url, error=str(exc))

    async def run_forever(self) -> None:
        """Ping at startup, then every interval; interval 0 pings once."""
        await self.ping_once()
        if self._interval_minutes <= 0:
            return

        self._logger.info(
            "keepalive_started",
            every_min=self._interval_minutes,
            health_url=self._health_url or None,
        )
        while True:
            await asyncio.sleep(self._interval_minutes * 60)
            await self.ping_once()
