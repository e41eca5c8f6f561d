"""Text normalization and novelty heuristics for generated reading prompts.

This module handles three related concerns:

1. **Normalization** -- lowercase, strip a fixed set of punctuation and quote
   characters, collapse whitespace.  The same form is used for word-count
   filtering and for similarity.

2. **Candidate extraction** -- turn one model response (a dash-prefixed list
   of short sentences) into a deduplicated, length-filtered candidate list,
   with a sentence-split fallback for responses that ignore the list format.

3. **Novelty selection** -- token-set Jaccard similarity, used to pick the
   candidate least similar to what a profile has recently been shown.
"""

import re

# Characters removed by normalize_text.  Mirrors the punctuation the models
# actually produce in Polish output (typographic quotes and dashes included).
_STRIP_CHARS_RE = re.compile(r"[„”\"!?.,;:()\-–—\[\]{}…]")
_WHITESPACE_RE = re.compile(r"\s+")

# Leading list markers: "- ", "* ", "• ", "1. ", "2) ", "3.)" ...
_LIST_MARKER_RE = re.compile(r"^[-*•\d.)]+\s*")
_LINE_SPLIT_RE = re.compile(r"\r?\n")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?…\n]")

MIN_CANDIDATE_WORDS = 5
MAX_CANDIDATE_WORDS = 16
MAX_CANDIDATES = 20


def normalize_text(text: str | None) -> str:
    """Normalize *text* for comparison.

    >>> normalize_text("  Ala, ma KOTA!  ")
    'ala ma kota'
    """
    lowered = (text or "").lower()
    stripped = _STRIP_CHARS_RE.sub("", lowered)
    return _WHITESPACE_RE.sub(" ", stripped).strip()


def tokenize(text: str | None) -> list[str]:
    """Split the normalized form of *text* into whitespace-delimited tokens."""
    return [tok for tok in normalize_text(text).split(" ") if tok]


def word_count(text: str | None) -> int:
    return len(tokenize(text))


def jaccard_similarity(a: str | None, b: str | None) -> float:
    """Return the Jaccard index of the normalized token sets of *a* and *b*.

    Two strings with no tokens at all are treated as identical (1.0).
    """
    set_a = set(tokenize(a))
    set_b = set(tokenize(b))
    if not set_a and not set_b:
        return 1.0
    intersection = len(set_a & set_b)
    return intersection / (len(set_a) + len(set_b) - intersection)


def parse_candidate_list(
    text: str | None,
    min_words: int = MIN_CANDIDATE_WORDS,
    max_words: int = MAX_CANDIDATE_WORDS,
    limit: int = MAX_CANDIDATES,
) -> list[str]:
    """Parse a list-formatted model response into usable candidate sentences.

    Lines are trimmed, stripped of list markers, deduplicated on the exact
    string and kept only when their normalized word count lies in
    ``[min_words, max_words]``.  First-seen order is preserved.
    """
    seen: set[str] = set()
    candidates: list[str] = []
    for raw_line in _LINE_SPLIT_RE.split(text or ""):
        line = _LIST_MARKER_RE.sub("", raw_line.strip()).strip()
        if not line or line in seen:
            continue
        seen.add(line)
        if min_words <= word_count(line) <= max_words:
            candidates.append(line)
    return candidates[:limit]


def split_sentences_fallback(text: str | None) -> list[str]:
    """Secondary candidate source: split raw text on sentence ends and newlines."""
    parts = (part.strip() for part in _SENTENCE_SPLIT_RE.split(text or ""))
    return [part for part in parts if part]


def choose_most_novel(candidates: list[str], history: list[str]) -> str:
    """Return the candidate least similar to anything in *history*.

    Each candidate is scored by its maximum Jaccard similarity against every
    history entry; the lowest score wins, ties going to the earliest
    candidate.  With no history the first candidate is returned.

    Raises:
        ValueError: If *candidates* is empty.
    """
    if not candidates:
        raise ValueError("choose_most_novel() needs at least one candidate")
    if not history:
        return candidates[0]

    def _max_similarity(candidate: str) -> float:
        return max(jaccard_similarity(candidate, past) for past in history)

    # min() keeps the first of equal keys, which gives first-seen tie-breaking.
    return min(candidates, key=_max_similarity)


def trim_user_content(text: str | None, limit: int = 1200) -> str:
    """Collapse whitespace and keep at most the last *limit* characters."""
    compact = _WHITESPACE_RE.sub(" ", text or "").strip()
    return compact[-limit:] if len(compact) > limit else compact
