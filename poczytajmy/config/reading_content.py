"""Static content tables for the reading-practice prompts.

Hero themes, reading topics, the mock sentence banks and the hard-coded
motivational fallbacks.  All data is built once at import time and only
read afterwards; the helpers here are pure.
"""

from __future__ import annotations

# ═════════════════════════════════════════════════════════════════════════
# 1. HERO THEMES
# ═════════════════════════════════════════════════════════════════════════
# Maps the character id sent by the client to a short personality hint that
# colours the greeting.  Unknown characters get no hint.

HERO_THEMES: dict[str, str] = {
    "Miś": "przytulny i cierpliwy, kocha bajki na dobranoc",
    "Labuś": "energiczny i wesoły, lubi książki przygodowe",
    "Króliczek": "ciekawski i szybki, uwielbia zagadki w opowieściach",
    "Jeżyk": "ostrożny i mądry, kocha opowieści z morałem",
}

DEFAULT_CHARACTER = "Twój przyjaciel"

# ═════════════════════════════════════════════════════════════════════════
# 2. READING TOPICS
# ═════════════════════════════════════════════════════════════════════════
# One topic is drawn at random per greeting prompt so consecutive batches
# of candidates do not all circle the same idea.

READING_TOPICS: tuple[str, ...] = (
    "książki pełne magii i zaklęć",
    "czytanie bajek na głos",
    "szukanie nowych słów w opowiadaniu",
    "przeżywanie przygód z bohaterami książek",
    "poznawanie liter i sylab",
    "czytanie komiksów z obrazkami",
    "odkrywanie tajemnic w bibliotece",
    "pisanie własnej bajki po przeczytaniu książki",
    "czytanie rozdziałów z przygodami",
    "opowiadanie przeczytanej historii przyjaciołom",
)

# ═════════════════════════════════════════════════════════════════════════
# 3. SENTENCE BANKS (mock text mode)
# ═════════════════════════════════════════════════════════════════════════

READING_LEVELS: tuple[str, ...] = ("A1", "A2", "B1")
DEFAULT_LEVEL = "A1"

SENTENCE_BANKS: dict[str, tuple[str, ...]] = {
    "A1": (
        "Ala ma kota.",
        "Miś je miodek.",
        "Piłka leży na trawie.",
        "Pies biegnie do domu.",
        "Słońce świeci jasno.",
    ),
    "A2": (
        "W ogrodzie rosną kolorowe kwiaty.",
        "Kasia czyta ciekawą książkę o zwierzętach.",
        "Na spacerze spotkaliśmy wesołego psa.",
        "Dziś po południu pojedziemy na rowerach.",
    ),
    "B1": (
        "Choć padał deszcz, wybraliśmy się na długi spacer.",
        "Lubię zagadki, bo rozwijają wyobraźnię i spostrzegawczość.",
        "Z zachwytem obserwowałem, jak motyl siada na liściu.",
        "Po kolacji wspólnie ułożyliśmy plan jutrzejszej wycieczki.",
    ),
}

# ═════════════════════════════════════════════════════════════════════════
# 4. MOTIVATION FALLBACKS
# ═════════════════════════════════════════════════════════════════════════
# Shipped inside the error body of /agent/motivate so the client always has
# something encouraging to show.

MOTIVATION_FALLBACKS: dict[str, str] = {
    "pl": "Świetnie Ci idzie! Czytaj dalej, jestem z Ciebie dumny.",
    "en": "Great job! Keep reading, I am proud of you.",
}

# Mock OCR / ASR canned output.
MOCK_TRANSCRIPT = "Ala ma kota"
MOCK_OCR_TEXT = "Przykładowy tekst z OCR."


def normalize_level(level: str | None) -> str:
    """Upper-case *level*; anything outside the enumeration becomes A1."""
    candidate = str(level or "").strip().upper()
    return candidate if candidate in SENTENCE_BANKS else DEFAULT_LEVEL


def bank_for_level(level: str | None) -> tuple[str, ...]:
    return SENTENCE_BANKS[normalize_level(level)]


def theme_for_character(character: str | None) -> str:
    return HERO_THEMES.get(character or "", "")


def motivation_fallback(lang: str | None) -> str:
    return MOTIVATION_FALLBACKS.get((lang or "pl").lower(), MOTIVATION_FALLBACKS["pl"])
