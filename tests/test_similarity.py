from __future__ import annotations

import pytest

from apps.documents.similarity import cosine_similarity


def test_identical_vectors_score_one() -> None:
    assert cosine_similarity([0.3, -1.2, 4.0], [0.3, -1.2, 4.0]) == pytest.approx(1.0)


def test_orthogonal_vectors_score_zero() -> None:
    assert cosine_similarity([1.0, 0.0], [0.0, 2.5]) == pytest.approx(0.0)


def test_opposite_vectors_score_minus_one() -> None:
    assert cosine_similarity([1.0, 2.0, 3.0], [-1.0, -2.0, -3.0]) == pytest.approx(-1.0)


def test_mismatched_lengths_score_exactly_zero() -> None:
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0


def test_zero_vector_scores_exactly_zero() -> None:
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
    assert cosine_similarity([1.0, 1.0], [0.0, 0.0]) == 0.0


def test_empty_vectors_score_exactly_zero() -> None:
    assert cosine_similarity([], []) == 0.0


def test_score_is_clamped_and_deterministic() -> None:
    a = [0.1, 0.2, 0.3]
    first = cosine_similarity(a, a)
    second = cosine_similarity(a, a)

    assert first == second
    assert -1.0 <= first <= 1.0
