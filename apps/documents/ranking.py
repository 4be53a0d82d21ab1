"""Similarity ranking and pagination of candidate papers.

Ranking is a linear scan: every candidate with a usable embedding is scored
against the query with cosine similarity. Candidates are wrapped in
``ScoredPaper`` values, so concurrent requests never share a mutable score on
the ``Paper`` instance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from apps.documents.models import Paper
from apps.documents.similarity import cosine_similarity

DEFAULT_PAGE_SIZE = 25

MODE_TOP_N = "top_n"
MODE_PAGED = "paged"


@dataclass(frozen=True)
class ScoredPaper:
    paper: Paper
    similarity_score: float | None = None


@dataclass(frozen=True)
class Pagination:
    mode: str
    current: int
    total_pages: int
    total_count: int
    prev_page: int | None = None
    next_page: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "current": self.current,
            "total_pages": self.total_pages,
            "total_count": self.total_count,
            "prev_page": self.prev_page,
            "next_page": self.next_page,
        }


@dataclass(frozen=True)
class RankedResult:
    papers: list[ScoredPaper]
    pagination: Pagination


def parse_top_n(raw: Any) -> int | None:
    """Return a positive integer or ``None`` for anything else."""

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    if isinstance(raw, str):
        text = raw.strip()
        if not (text.isascii() and text.isdecimal()):
            return None
        value = int(text)
        return value if value > 0 else None
    return None


def rank_papers(
    candidates: Iterable[Paper],
    *,
    query_embedding: Sequence[float] | None = None,
    top_n: Any = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> RankedResult:
    if page_size <= 0:
        raise ValueError("page_size must be greater than zero.")

    papers = list(candidates)
    if not query_embedding:
        scored = [ScoredPaper(paper=paper) for paper in papers]
        return _paginate(scored, page=page, page_size=page_size)

    scored = [
        ScoredPaper(paper=paper, similarity_score=_score(query_embedding, paper))
        for paper in papers
    ]

    limit = parse_top_n(top_n)
    if limit is None:
        return _paginate(scored, page=page, page_size=page_size)

    ordered = sort_by_score(scored)[:limit]
    return RankedResult(
        papers=ordered,
        pagination=Pagination(
            mode=MODE_TOP_N,
            current=1,
            total_pages=1,
            total_count=len(ordered),
        ),
    )


def sort_by_score(scored: Sequence[ScoredPaper]) -> list[ScoredPaper]:
    """Descending by score; unscored last. Stable, so ties keep input order."""

    with_score = [item for item in scored if item.similarity_score is not None]
    without_score = [item for item in scored if item.similarity_score is None]
    with_score.sort(key=lambda item: item.similarity_score, reverse=True)
    return with_score + without_score


def _score(query_embedding: Sequence[float], paper: Paper) -> float | None:
    embedding = paper.embedding
    if not isinstance(embedding, (list, tuple)) or not embedding:
        return None
    if len(embedding) != len(query_embedding):
        return None
    try:
        return cosine_similarity(query_embedding, embedding)
    except (TypeError, ValueError):
        return None


def _paginate(items: list[ScoredPaper], *, page: int, page_size: int) -> RankedResult:
    current = max(int(page), 1)
    total_count = len(items)
    total_pages = math.ceil(total_count / page_size)
    start = (current - 1) * page_size

    return RankedResult(
        papers=items[start : start + page_size],
        pagination=Pagination(
            mode=MODE_PAGED,
            current=current,
            total_pages=total_pages,
            total_count=total_count,
            prev_page=current - 1 if current > 1 else None,
            next_page=current + 1 if current < total_pages else None,
        ),
    )
