"""Short motivational messages after a reading attempt."""

from __future__ import annotations

from poczytajmy.config.reading_content import DEFAULT_CHARACTER
from poczytajmy.services.chat_race import ChatRaceService
from poczytajmy.utils.errors import EmptyGenerationError
from poczytajmy.utils.logging import get_logger
from poczytajmy.utils.sanitizers import DEFAULT_MOTIVATION_MAX_CHARS, tighten_motivation
from poczytajmy.utils.text_normalizer import trim_user_content

# Reading excerpts are only context for the model; a sentence or two is enough.
_EXCERPT_CHARS = 200


def build_motivation_prompt(
    age: int | None,
    accuracy: int | None,
    text: str,
    character: str,
    lang: str = "pl",
) -> str:
    excerpt = trim_user_content(text, limit=_EXCERPT_CHARS)
    age_label = age if age is not None else "X"
    score = accuracy if accuracy is not None else "?"

    if lang == "en":
        return (
            f"You are {character}, a friendly reading buddy for a child (age: {age_label}).\n"
            f"The child just read aloud: {excerpt}\n"
            f"Reading accuracy: {score}/100.\n"
            "Write ONE short, warm, encouraging sentence in English (max 2 sentences, "
            "at most 1 emoji). No quotes, no name, no greeting."
        )
    return (
        f"Jesteś {character}, przyjacielem dziecka, które uczy się czytać (wiek: {age_label}).\n"
        f"Dziecko właśnie przeczytało na głos: {excerpt}\n"
        f"Poprawność czytania: {score}/100.\n"
        "Napisz JEDNO krótkie, ciepłe zdanie motywujące po polsku (max 2 zdania, "
        "najwyżej 1 emoji). Bez cudzysłowów, bez imienia, bez powitania."
    )


class MotivationService:
    """Generates and tightens one encouraging message per reading attempt."""

    def __init__(
        self,
        race: ChatRaceService,
        params: dict | None = None,
        max_chars: int = DEFAULT_MOTIVATION_MAX_CHARS,
    ) -> None:
        params = params or {}
        self._params = {
            "temperature": params.get("temperature", 0.8),
            "top_p": params.get("top_p", 0.95),
            "max_tokens": params.get("max_tokens", 64),
        }
        self._race = race
        self._max_chars = max_chars
        self._logger = get_logger(__name__)

    @property
    def max_chars(self) -> int:
        return self._max_chars

    async def generate(
        self,
        age: int | None = None,
        accuracy: int | None = None,
        text: str = "",
        character: str | None = None,
        lang: str = "pl",
    ) -> tuple[str, str]:
        """Return ``(message, provider_id)``.

        Raises
        ------
        EmptyGenerationError
            If nothing is left after tightening.
        DeadlineExceededError, UpstreamFailureError, NoProviderError
            Propagated from the race.
        """
        prompt = build_motivation_prompt(
            age=age,
            accuracy=accuracy,
            text=text,
            character=character or DEFAULT_CHARACTER,
            lang=lang,
        )
        winner = await self._race.generate(prompt, **self._params)

        message = tighten_motivation(winner.text, max_chars=self._max_chars)
        if not message:
            raise EmptyGenerationError(provider_name=winner.provider_id)

        self._logger.info(
            "motivation_generated",
            provider=winner.provider_id,
            chars=len(message),
        )
        return message, winner.provider_id
