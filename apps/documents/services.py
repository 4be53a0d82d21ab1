"""Core services for listing ranked papers and seeding the paper store."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone as dt_timezone
from typing import Any, Iterable, Sequence

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils.dateparse import parse_date, parse_datetime

from apps.documents.models import Paper
from apps.documents.ranking import RankedResult, rank_papers
from apps.documents.repository import PaperRepository

logger = logging.getLogger(__name__)


class PaperListingError(Exception):
    """Raised when candidate papers cannot be loaded or ranked."""


class IngestionError(Exception):
    """Raised when ingestion input or persistence fails."""


class ListPapersService:
    def __init__(self, *, repository: PaperRepository | None = None) -> None:
        self._repository = repository or PaperRepository()

    def list(
        self,
        *,
        journals: Sequence[str],
        page: int = 1,
        query_embedding: Sequence[float] | None = None,
        top_n: Any = None,
        min_date: date | None = None,
        max_date: date | None = None,
        page_size: int | None = None,
    ) -> RankedResult:
        try:
            candidates = self._repository.find_by_categories(
                journals,
                min_date=min_date,
                max_date=max_date,
            )
        except DatabaseError as exc:
            logger.exception("Paper lookup failed journals=%s", list(journals))
            raise PaperListingError("Failed to load candidate papers.") from exc

        try:
            result = rank_papers(
                candidates,
                query_embedding=query_embedding,
                top_n=top_n,
                page=page,
                page_size=page_size or settings.PAPERS_PAGE_SIZE,
            )
        except (TypeError, ValueError) as exc:
            logger.exception("Paper ranking failed.")
            raise PaperListingError("Failed to rank papers.") from exc

        logger.debug(
            "Listed papers mode=%s count=%d top=%s",
            result.pagination.mode,
            len(result.papers),
            [(item.paper.title, item.similarity_score) for item in result.papers[:5]],
        )
        return result


@dataclass(frozen=True)
class IngestInput:
    origin_id: str
    title: str
    journal: str
    summary: str = ""
    short_summary: str = ""
    published: datetime | None = None
    authors: tuple[str, ...] = ()
    links: tuple[dict[str, str], ...] = ()
    concepts: tuple[str, ...] = ()
    embedding: tuple[float, ...] = ()
    two_dim_embedding: tuple[float, ...] = ()

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "IngestInput":
        if not isinstance(record, dict):
            raise IngestionError("Each paper record must be an object.")
        return cls(
            origin_id=str(record.get("origin_id") or record.get("id") or "").strip(),
            title=str(record.get("title") or "").strip(),
            journal=str(record.get("journal") or "").strip(),
            summary=str(record.get("summary") or "").strip(),
            short_summary=str(record.get("short_summary") or "").strip(),
            published=_parse_published(record.get("published")),
            authors=tuple(_string_list(record.get("authors"))),
            links=tuple(_links(record.get("links"))),
            concepts=tuple(_string_list(record.get("concepts"))),
            embedding=tuple(_float_list(record.get("embedding"), field_name="embedding")),
            two_dim_embedding=tuple(
                _float_list(record.get("two_dim_embedding"), field_name="two_dim_embedding")
            ),
        )


class PaperIngestionService:
    """Create or update papers keyed by ``origin_id``."""

    def ingest(self, items: Iterable[IngestInput]) -> dict[str, int]:
        stats = {"created": 0, "updated": 0}

        for item in items:
            self._validate(item)
            try:
                with transaction.atomic():
                    _, created = Paper.objects.update_or_create(
                        origin_id=item.origin_id,
                        defaults={
                            "title": item.title,
                            "journal": item.journal,
                            "summary": item.summary,
                            "short_summary": item.short_summary,
                            "published": item.published,
                            "authors": list(item.authors),
                            "links": [dict(link) for link in item.links],
                            "concepts": list(item.concepts),
                            "embedding": list(item.embedding),
                            "two_dim_embedding": list(item.two_dim_embedding),
                        },
                    )
            except DatabaseError as exc:
                logger.exception("Failed to persist paper origin_id=%s", item.origin_id)
                raise IngestionError(f"Failed to persist paper {item.origin_id}.") from exc

            stats["created" if created else "updated"] += 1

        logger.info("Paper ingestion finished created=%d updated=%d", stats["created"], stats["updated"])
        return stats

    @staticmethod
    def _validate(item: IngestInput) -> None:
        if not item.origin_id:
            raise IngestionError("Paper origin_id cannot be empty.")
        if not item.title:
            raise IngestionError(f"Paper {item.origin_id} title cannot be empty.")
        if not item.journal:
            raise IngestionError(f"Paper {item.origin_id} journal cannot be empty.")
        if item.two_dim_embedding and len(item.two_dim_embedding) != 2:
            raise IngestionError(f"Paper {item.origin_id} two_dim_embedding must have 2 values.")


def _parse_published(raw: Any) -> datetime | None:
    if raw in (None, ""):
        return None
    text = str(raw).strip()
    parsed = parse_datetime(text)
    if parsed is None:
        day = parse_date(text)
        if day is None:
            raise IngestionError(f"Invalid published date: {raw!r}")
        parsed = datetime(day.year, day.month, day.day)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed


def _string_list(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(item).strip() for item in raw if item is not None and str(item).strip()]


def _links(raw: Any) -> list[dict[str, str]]:
    if not isinstance(raw, list):
        return []
    links: list[dict[str, str]] = []
    for item in raw:
        if isinstance(item, dict) and item.get("href"):
            links.append({"href": str(item["href"]), "type": str(item.get("type") or "")})
    return links


def _float_list(raw: Any, *, field_name: str) -> list[float]:
    if raw in (None, ""):
        return []
    if not isinstance(raw, list):
        raise IngestionError(f"{field_name} must be a list of numbers.")
    values: list[float] = []
    for item in raw:
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise IngestionError(f"{field_name} must contain only numbers.")
        value = float(item)
        if not math.isfinite(value):
            raise IngestionError(f"{field_name} must contain only finite numbers.")
        values.append(value)
    return values
