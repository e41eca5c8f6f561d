"""Unit tests for normalization, candidate parsing and novelty selection."""

from __future__ import annotations

import pytest

from poczytajmy.utils.text_normalizer import (
    choose_most_novel,
    jaccard_similarity,
    normalize_text,
    parse_candidate_list,
    split_sentences_fallback,
    tokenize,
    trim_user_content,
    word_count,
)


# ======================================================================
# normalize_text / tokenize
# ======================================================================


class TestNormalizeText:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert normalize_text("  Ala, ma KOTA!  ") == "ala ma kota"

    def test_strips_typographic_quotes_and_dashes(self) -> None:
        assert normalize_text("„Bajka” — (nowa) [1] {x}…") == "bajka nowa 1 x"

    def test_collapses_whitespace(self) -> None:
        assert normalize_text("jeden\t\tdwa\n trzy") == "jeden dwa trzy"

    def test_none_is_empty(self) -> None:
        assert normalize_text(None) == ""

    def test_keeps_polish_letters(self) -> None:
        assert normalize_text("Żółć ŚĆIĘŁ") == "żółć ścięł"

    def test_tokenize_and_word_count(self) -> None:
        assert tokenize("Miś je miodek.") == ["miś", "je", "miodek"]
        assert word_count("  - , ") == 0


# ======================================================================
# jaccard_similarity
# ======================================================================


class TestJaccardSimilarity:
    def test_identical_is_one(self) -> None:
        assert jaccard_similarity("Ala ma kota", "ala ma kota!") == 1.0

    def test_disjoint_is_zero(self) -> None:
        assert jaccard_similarity("ala ma kota", "pies biegnie szybko") == 0.0

    def test_both_empty_is_one(self) -> None:
        assert jaccard_similarity("", "...") == 1.0

    def test_one_empty_is_zero(self) -> None:
        assert jaccard_similarity("", "ala") == 0.0

    def test_symmetric(self) -> None:
        a, b = "ala ma kota i psa", "kot ma ale"
        assert jaccard_similarity(a, b) == jaccard_similarity(b, a)

    def test_partial_overlap(self) -> None:
        # {ala, ma, kota} vs {ala, ma, psa}: 2 shared of 4 total
        assert jaccard_similarity("Ala ma kota", "Ala ma psa") == pytest.approx(0.5)

    def test_duplicates_counted_once(self) -> None:
        assert jaccard_similarity("kot kot kot", "kot") == 1.0


# ======================================================================
# parse_candidate_list
# ======================================================================


class TestParseCandidateList:
    def test_strips_markers_and_keeps_order(self) -> None:
        raw = (
            "- Dziś razem odkryjemy nowy rozdział bajki. 📖\n"
            "* Zajrzymy do książki pełnej czarodziejskich słów.\n"
            "3. Sprawdzimy, ile sylab ma najdłuższe słowo w opowieści.\n"
            "• Poszukamy w bibliotece książki o smokach.\n"
        )
        result = parse_candidate_list(raw)
        assert result == [
            "Dziś razem odkryjemy nowy rozdział bajki. 📖",
            "Zajrzymy do książki pełnej czarodziejskich słów.",
            "Sprawdzimy, ile sylab ma najdłuższe słowo w opowieści.",
            "Poszukamy w bibliotece książki o smokach.",
        ]

    def test_word_count_bounds(self) -> None:
        raw = "\n".join(
            [
                "- Za krótko tu.",
                "- Dokładnie pięć słów w zdaniu.",
                "- " + " ".join(["słowo"] * 16),
                "- " + " ".join(["słowo"] * 17),
            ]
        )
        result = parse_candidate_list(raw)
        assert result == ["Dokładnie pięć słów w zdaniu.", " ".join(["słowo"] * 16)]

    def test_exact_duplicates_removed(self) -> None:
        line = "Czytamy razem nową ciekawą bajkę."
        result = parse_candidate_list(f"- {line}\n- {line}\n1) {line}")
        assert result == [line]

    def test_blank_lines_and_crlf(self) -> None:
        raw = "\r\n- Otwórzmy dziś książkę z kolorowymi ilustracjami.\r\n\r\n"
        assert parse_candidate_list(raw) == [
            "Otwórzmy dziś książkę z kolorowymi ilustracjami."
        ]

    def test_capped_at_twenty(self) -> None:
        raw = "\n".join(f"- Zdanie numer {i} o czytaniu książek." for i in range(30))
        result = parse_candidate_list(raw)
        assert len(result) == 20
        assert result[0] == "Zdanie numer 0 o czytaniu książek."

    def test_empty_input(self) -> None:
        assert parse_candidate_list("") == []
        assert parse_candidate_list(None) == []


class TestSplitSentencesFallback:
    def test_splits_on_terminal_punctuation_and_newlines(self) -> None:
        raw = "Pierwsze zdanie. Drugie!  Trzecie?\nCzwarte… "
        assert split_sentences_fallback(raw) == ["Pierwsze zdanie", "Drugie", "Trzecie", "Czwarte"]

    def test_drops_empty_parts(self) -> None:
        assert split_sentences_fallback("...\n\n") == []


# ======================================================================
# choose_most_novel
# ======================================================================


class TestChooseMostNovel:
    def test_empty_history_returns_first(self) -> None:
        assert choose_most_novel(["a b c", "d e f"], []) == "a b c"

    def test_picks_lowest_max_similarity(self) -> None:
        history = ["Dziś czytamy bajkę o smoku"]
        candidates = [
            "Dziś czytamy bajkę o smoku",
            "Dziś czytamy bajkę o kocie",
            "Zajrzymy do biblioteki pełnej liter",
        ]
        assert choose_most_novel(candidates, history) == "Zajrzymy do biblioteki pełnej liter"

    def test_scores_against_every_history_entry(self) -> None:
        history = ["ala ma kota", "pies ma piłkę"]
        # "pies ma piłkę" is new w.r.t. the first entry but a repeat of the second.
        candidates = ["pies ma piłkę", "słońce świeci jasno"]
        assert choose_most_novel(candidates, history) == "słońce świeci jasno"

    def test_ties_go_to_first_candidate(self) -> None:
        history = ["ala ma kota"]
        candidates = ["pies biegnie", "słońce świeci"]
        assert choose_most_novel(candidates, history) == "pies biegnie"

    def test_result_is_always_a_candidate(self) -> None:
        candidates = ["x y", "y z", "z x"]
        assert choose_most_novel(candidates, ["x y z"]) in candidates

    def test_empty_candidates_raise(self) -> None:
        with pytest.raises(ValueError):
            choose_most_novel([], ["anything"])


# ======================================================================
# trim_user_content
# ======================================================================


class TestTrimUserContent:
    def test_collapses_whitespace(self) -> None:
        assert trim_user_content("  a \n\n b\tc ") == "a b c"

    def test_keeps_tail_when_too_long(self) -> None:
        text = "x" * 50 + "KONIEC"
        assert trim_user_content(text, limit=10) == "xxxxKONIEC"

    def test_short_text_untouched(self) -> None:
        assert trim_user_content("krótki tekst") == "krótki tekst"
