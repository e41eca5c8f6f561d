"""Deterministic post-filters applied to model output before it reaches a child.

The prompts already forbid greetings, the child's name, markup and long
answers, but the models do not always comply.  These filters are the second
pass that the client can rely on.
"""

from __future__ import annotations

import re

FORBIDDEN_GREETINGS: tuple[str, ...] = ("cześć", "hej", "witaj", "siema", "halo")

# Suffixes appended to the literal name ("Jan" -> "Janu", "Janku", ...).
_NAME_SUFFIXES: tuple[str, ...] = ("", "u", "o", "e", "a", "ku")
# Case endings that replace the final "a" of names like "Zosia" -> "Zosiu".
# "e" is left out: "Ala" -> "Ale", "Ola" -> "Ole" are ordinary words.
_STEM_ENDINGS: tuple[str, ...] = ("u", "o", "y", "i", "ę", "ą")
# Short stems also skip "i" ("Ala" -> "Ali").
_SHORT_STEM_ENDINGS: tuple[str, ...] = ("u", "o", "y", "ę", "ą")
_SHORT_STEM_LEN = 2

_GREETING_RE = re.compile(
    r"^\s*(?:" + "|".join(FORBIDDEN_GREETINGS) + r")\b[\s,!.?–—-]*",
    re.IGNORECASE,
)
_LEADING_PUNCT_RE = re.compile(r"^[,–—\-|:;!.\s]+")
_MULTISPACE_RE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([,.!?])")

# -- motivation ----------------------------------------------------------

_QUOTED_SPAN_RE = re.compile(r"„[^”\"]*[”\"]|“[^”]*”|«[^»]*»|\"[^\"]*\"")
_WRAPPING_QUOTES_RE = re.compile(r"^[\"'„”“«»]+|[\"'„”“«»]+$")
_QUOTE_PAREN_CHARS_RE = re.compile(r"[„”“\"«»()\[\]{}]")
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?…])\s+")
_EMOJI_RE = re.compile(
    "(?:[\U0001F000-\U0001FAFF\u2300-\u23FF\u2600-\u27BF\u2B00-\u2BFF]"
    "[\uFE0F\u200D]?)"
)
_TRAILING_EMOJI_RE = re.compile(r"(?:\s*" + _EMOJI_RE.pattern + r")+\s*$")
_TERMINAL_RUN_RE = re.compile(r"[.!?…]+$")
_DANGLING_RE = re.compile(r"[\s,;:–—-]+$")

DEFAULT_MOTIVATION_MAX_CHARS = 160


def name_forms(name: str) -> list[str]:
    """Return the inflected forms of *name* that must not appear in output."""
    base = name.strip()
    if not base:
        return []
    forms = [base + suffix for suffix in _NAME_SUFFIXES]
    if base[-1].lower() == "a" and len(base) > 2:
        stem = base[:-1]
        endings = _SHORT_STEM_ENDINGS if len(stem) <= _SHORT_STEM_LEN else _STEM_ENDINGS
        forms.extend(stem + ending for ending in endings)
    # Longest first so the alternation never stops at a shorter prefix.
    return sorted(set(forms), key=len, reverse=True)


def strip_greeting_and_name(name: str | None, text: str | None) -> str:
    """Remove a leading greeting word and every form of the child's name."""
    result = (text or "").strip()
    result = _GREETING_RE.sub("", result, count=1).strip()

    forms = name_forms(name or "")
    if forms:
        name_re = re.compile(
            r"\b(?:" + "|".join(re.escape(f) for f in forms) + r")\b[\s,!.?]*",
            re.IGNORECASE,
        )
        result = name_re.sub("", result).strip()

    result = _LEADING_PUNCT_RE.sub("", result)
    result = _MULTISPACE_RE.sub(" ", result)
    result = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", result)
    return result.strip()


def _keep_first_emoji(text: str) -> str:
    seen = False

    def _replace(match: re.Match[str]) -> str:
        nonlocal seen
        if seen:
            return ""
        seen = True
        return match.group(0)

    return _EMOJI_RE.sub(_replace, text)


def _truncate_at_word(text: str, budget: int) -> str:
    if len(text) <= budget:
        return text
    cut = text[:budget]
    # Only cut inside the text when the next character is not a space,
    # i.e. the budget landed mid-word.
    if text[budget] != " ":
        boundary = cut.rfind(" ")
        if boundary > 0:
            cut = cut[:boundary]
    return _DANGLING_RE.sub("", cut)


def _ensure_terminal(text: str) -> str:
    """End *text* in sentence punctuation, placing a trailing emoji before it."""
    trailing = _TRAILING_EMOJI_RE.search(text)
    core = (text[: trailing.start()] if trailing else text).rstrip()
    if not core:
        return text.strip()
    terminal = _TERMINAL_RUN_RE.search(core)
    punct = terminal.group(0) if terminal else "."
    if not trailing:
        return core if terminal else core + punct
    body = core[: terminal.start()].rstrip() if terminal else core
    return f"{body} {trailing.group(0).strip()}{punct}"


def tighten_motivation(
    text: str | None,
    max_chars: int = DEFAULT_MOTIVATION_MAX_CHARS,
) -> str:
    """Clamp a motivational message to something the client UI can render.

    At most two sentences, at most one emoji, no quotes or brackets, no
    longer than *max_chars*, always ending in sentence punctuation.
    """
    result = _WRAPPING_QUOTES_RE.sub("", (text or "").strip())
    result = _QUOTED_SPAN_RE.sub("", result)
    result = _QUOTE_PAREN_CHARS_RE.sub("", result)
    result = re.sub(r"\s+", " ", result).strip()
    if not result:
        return ""

    sentences = [s for s in _SENTENCE_BOUNDARY_RE.split(result) if s.strip()]
    result = " ".join(sentences[:2])

    result = _keep_first_emoji(result)
    result = _MULTISPACE_RE.sub(" ", result)
    result = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", result).strip()

    trimmed = _truncate_at_word(result, max_chars)
    result = _ensure_terminal(trimmed)
    budget = max_chars
    while len(result) > max_chars and budget > 1:
        # The appended period pushed it over; give up one more word.
        budget -= 1
        result = _ensure_terminal(_truncate_at_word(trimmed, budget))
    return result
