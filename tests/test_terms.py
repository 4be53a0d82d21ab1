from __future__ import annotations

import pytest
from django.test import override_settings

from apps.research.terms import (
    ERROR_EMPTY,
    ERROR_INVALID_CHARS,
    ERROR_TOO_LONG,
    TermValidationError,
    normalize_term,
    validate_term,
)


def test_normalize_collapses_whitespace_and_case() -> None:
    assert normalize_term("  Machine   Learning ") == normalize_term("machine learning")
    assert normalize_term("  Machine   Learning ") == "machine learning"


@pytest.mark.parametrize("raw", ["Deep  RL", "  graph\tneural   nets ", "", "ALREADY normal"])
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize_term(raw)
    assert normalize_term(once) == once


def test_normalize_returns_empty_for_non_strings() -> None:
    assert normalize_term(None) == ""
    assert normalize_term(42) == ""


@pytest.mark.parametrize("raw", [None, 42, "", "   ", ["machine learning"]])
def test_validate_rejects_empty_input(raw) -> None:
    with pytest.raises(TermValidationError) as exc_info:
        validate_term(raw)

    assert exc_info.value.code == ERROR_EMPTY


def test_validate_rejects_terms_over_limit() -> None:
    with pytest.raises(TermValidationError) as exc_info:
        validate_term("a" * 501)

    assert exc_info.value.code == ERROR_TOO_LONG


def test_validate_accepts_term_at_limit() -> None:
    assert validate_term("a" * 500) == "a" * 500


@override_settings(RESEARCH_INTEREST_MAX_LENGTH=10)
def test_validate_uses_configured_limit() -> None:
    with pytest.raises(TermValidationError) as exc_info:
        validate_term("quantum computing")

    assert exc_info.value.code == ERROR_TOO_LONG


@pytest.mark.parametrize(
    "raw",
    ["machine\nlearning", "machine\tlearning", "bad\x00term", "del\x7f", "machine\x85learning", "csi\x9b"],
)
def test_validate_rejects_control_characters(raw: str) -> None:
    with pytest.raises(TermValidationError) as exc_info:
        validate_term(raw)

    assert exc_info.value.code == ERROR_INVALID_CHARS


def test_validate_returns_normalized_term() -> None:
    assert validate_term("  Protein   Folding ") == "protein folding"
