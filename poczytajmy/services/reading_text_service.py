"""Reading-practice sentence generation (CEFR levels A1, A2, B1)."""

from __future__ import annotations

import random
import re

from poczytajmy.config.reading_content import bank_for_level, normalize_level
from poczytajmy.services.chat_race import ChatRaceService
from poczytajmy.utils.errors import EmptyGenerationError
from poczytajmy.utils.logging import get_logger

_WRAPPING_QUOTES_RE = re.compile(r"^[\"'„”]+|[\"'„”]+$")


def build_reading_prompt(level: str, language: str = "pl") -> str:
    language_name = "polsku" if language == "pl" else "angielsku"
    return (
        f"Napisz jedno proste zdanie po {language_name} na poziomie {level} "
        "do głośnego czytania przez dziecko.\n"
        "Zasady: jedno zdanie, jasno i naturalnie, bez cudzysłowów, 12–16 słów."
    )


def strip_wrapping_quotes(text: str) -> str:
    return _WRAPPING_QUOTES_RE.sub("", text or "").strip()


class ReadingTextService:
    """Serves one sentence to read aloud.

    In mock mode the sentence comes from the fixed bank for the level and
    no provider is contacted.
    """

    def __init__(
        self,
        race: ChatRaceService,
        params: dict | None = None,
        mock: bool = False,
    ) -> None:
        params = params or {}
        self._params = {
            "temperature": params.get("temperature", 0.7),
            "top_p": params.get("top_p", 0.95),
            "max_tokens": params.get("max_tokens", 60),
        }
        self._race = race
        self._mock = mock
        self._logger = get_logger(__name__)

    async def generate(self, level: str | None = None, language: str = "pl") -> tuple[str, str, str]:
        """Return ``(sentence, level, provider_id)``; unknown levels become A1."""
        level = normalize_level(level)

        if self._mock:
            return random.choice(bank_for_level(level)), level, "mock"

        winner = await self._race.generate(build_reading_prompt(level, language), **self._params)
        text = strip_wrapping_quotes(winner.text)
        if not text:
            raise EmptyGenerationError(provider_name=winner.provider_id)

        self._logger.info("reading_text_generated", provider=winner.provider_id, level=level)
        return text, level, winner.provider_id
