"""Greeting generation with per-child novelty.

One provider call returns a batch of candidate greetings.  The candidate
least similar to what this child has already heard is picked, stripped of
any greeting word or name the model slipped in, and remembered.
"""

from __future__ import annotations

import random

from poczytajmy.config.reading_content import (
    DEFAULT_CHARACTER,
    READING_TOPICS,
    theme_for_character,
)
from poczytajmy.providers.cache.greeting_history import GreetingHistory, profile_key
from poczytajmy.services.chat_race import ChatRaceService
from poczytajmy.utils.errors import EmptyGenerationError
from poczytajmy.utils.logging import get_logger
from poczytajmy.utils.sanitizers import strip_greeting_and_name
from poczytajmy.utils.text_normalizer import (
    choose_most_novel,
    parse_candidate_list,
    split_sentences_fallback,
)

DEFAULT_CANDIDATES = 12


def _tone_for_age(age: int | None) -> str:
    if age is not None and age <= 5:
        return "proste, ciepłe, zabawowe; rytm mowy dziecka; onomatopeje OK"
    if age is not None and age <= 8:
        return "żywe, motywujące; mini-misja; 1–2 emoji"
    return "pewne, partnerskie; cel, sprawczość; max 1–2 emoji"


def build_greeting_prompt(
    age: int | None,
    character: str = DEFAULT_CHARACTER,
    theme: str = "",
    topic: str | None = None,
    n: int = DEFAULT_CANDIDATES,
) -> str:
    """Build the Polish prompt asking for *n* distinct reading-themed greetings."""
    hero_hint = f"Delikatny klimat bohatera: {theme}." if theme else ""
    chosen_topic = topic or random.choice(READING_TOPICS)
    age_label = age if age is not None else "X"

    return (
        f"Wymyśl {n} ZUPEŁNIE różnych, krótkich powitań po polsku dla dziecka (wiek: {age_label}).\n"
        f"Mówi {character}. Styl: {_tone_for_age(age)}. {hero_hint}\n"
        f"Temat przewodni: {chosen_topic}.\n"
        "\n"
        "⚡ Każde powitanie MUSI odnosić się do czytania i książek, np. słowa: książka, "
        "czytanie, rozdział, bajka, historia, sylaba, słowo, zdanie, ilustracje, narrator, "
        "zakładka, biblioteka, księgarnia, opowieść, litery.\n"
        "⚡ NIE używaj motywów typu: las, bieganie, sport, piknik, podróże — tylko świat książek.\n"
        "⚡ Zakaz: nie używaj słów powitalnych (cześć, hej, witaj, siema, halo) oraz NIE używaj "
        "imienia dziecka w żadnej formie.\n"
        "\n"
        "📚 Przykłady:\n"
        "- Dziś razem odkryjemy nowy rozdział bajki. 📖\n"
        "- Zajrzymy do książki pełnej czarodziejskich słów. ✨\n"
        "- Sprawdzimy, ile sylab ma najdłuższe słowo w opowieści. 🚀\n"
        "\n"
        "Zasady: jedno zdanie, 6–14 wyrazów, bez cudzysłowów i bez wstępów.\n"
        'Każde powitanie w osobnej linii poprzedzone myślnikiem "- ".'
    )


class GreetingService:
    """Generates a fresh greeting for a child profile.

    Parameters
    ----------
    race:
        The chat race used for the single generation call.
    history:
        Per-profile record of greetings already served.
    params:
        Sampling parameters (``temperature``, ``top_p``, ``max_tokens``,
        ``candidates``) from the ``generation.greeting`` config section.
    """

    def __init__(
        self,
        race: ChatRaceService,
        history: GreetingHistory,
        params: dict | None = None,
    ) -> None:
        params = dict(params or {})
        self._candidates = int(params.pop("candidates", DEFAULT_CANDIDATES))
        self._params = {
            "temperature": params.get("temperature", 0.9),
            "top_p": params.get("top_p", 0.95),
            "max_tokens": params.get("max_tokens", 180),
        }
        self._race = race
        self._history = history
        self._logger = get_logger(__name__)

    async def generate(
        self,
        name: str = "",
        age: int | None = None,
        character: str | None = None,
    ) -> tuple[str, str]:
        """Return ``(greeting, provider_id)`` for the given child.

        Raises
        ------
        EmptyGenerationError
            If the winning response contains no usable candidate.
        DeadlineExceededError, UpstreamFailureError, NoProviderError
            Propagated from the race.
        """
        character = character or DEFAULT_CHARACTER
        prompt = build_greeting_prompt(
            age=age,
            character=character,
            theme=theme_for_character(character),
            n=self._candidates,
        )
        winner = await self._race.generate(prompt, **self._params)

        candidates = parse_candidate_list(winner.text)
        if not candidates and winner.text:
            candidates = split_sentences_fallback(winner.text)
        if not candidates:
            raise EmptyGenerationError(provider_name=winner.provider_id)

        # No await between reading and writing the history below.
        key = profile_key(name, age)
        history = self._history.get(key)
        picked = choose_most_novel(candidates, history)
        greeting = strip_greeting_and_name(name, picked) or picked
        self._history.remember(key, greeting)

        self._logger.info(
            "greeting_generated",
            provider=winner.provider_id,
            candidates=len(candidates),
            history=len(history),
        )
        return greeting, winner.provider_id or "unknown"
