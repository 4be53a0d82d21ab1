"""Lifecycle of research-interest embedding jobs.

A job moves ``queued -> processing -> completed | failed`` and never leaves a
terminal state. Every transition is a single conditional ``UPDATE`` keyed on
the current status, so concurrent workers in separate processes can race on
the same job and exactly one of them wins the claim.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence, Union

from django.db import DatabaseError
from django.utils import timezone

from apps.research.codec import EmbeddingCodecError, pack_embedding, unpack_embedding
from apps.research.models import JobStatus, ResearchInterestJob

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Queued:
    status = JobStatus.QUEUED.value


@dataclass(frozen=True)
class Processing:
    status = JobStatus.PROCESSING.value


@dataclass(frozen=True)
class Completed:
    vector_2d: tuple[float, float]
    embedding: tuple[float, ...] | None = None
    concepts: tuple[str, ...] = ()

    status = JobStatus.COMPLETED.value

    def __post_init__(self) -> None:
        if len(self.vector_2d) != 2:
            raise ValueError("Completed jobs require a 2-D vector.")

    @property
    def embedding_dim(self) -> int | None:
        return len(self.embedding) if self.embedding else None


@dataclass(frozen=True)
class Failed:
    reason: str

    status = JobStatus.FAILED.value


JobState = Union[Queued, Processing, Completed, Failed]


@dataclass(frozen=True)
class EmbeddingJob:
    job_id: str
    term: str
    state: JobState
    created_at: datetime
    updated_at: datetime

    @property
    def status(self) -> str:
        return self.state.status

    @property
    def is_completed(self) -> bool:
        return isinstance(self.state, Completed)

    @property
    def vector_2d(self) -> tuple[float, float] | None:
        return self.state.vector_2d if isinstance(self.state, Completed) else None

    @property
    def embedding(self) -> tuple[float, ...] | None:
        return self.state.embedding if isinstance(self.state, Completed) else None

    @property
    def embedding_dim(self) -> int | None:
        return self.state.embedding_dim if isinstance(self.state, Completed) else None

    @property
    def concepts(self) -> tuple[str, ...]:
        return self.state.concepts if isinstance(self.state, Completed) else ()

    @property
    def error_message(self) -> str | None:
        return self.state.reason if isinstance(self.state, Failed) else None


class JobCoordinator:
    """Single owner of job creation and state transitions."""

    def create(self, term: str, *, job_id: str | None = None) -> str:
        new_id = job_id or str(uuid.uuid4())
        ResearchInterestJob.objects.create(job_id=new_id, term=term, status=JobStatus.QUEUED)
        logger.debug("Created research interest job job_id=%s term=%r", new_id, term)
        return new_id

    def find(self, job_id: str) -> EmbeddingJob | None:
        row = ResearchInterestJob.objects.filter(job_id=job_id).first()
        return to_domain(row) if row is not None else None

    def find_completed_by_term(self, normalized_term: str) -> EmbeddingJob | None:
        if not normalized_term:
            return None

        try:
            row = (
                ResearchInterestJob.objects.filter(
                    status=JobStatus.COMPLETED,
                    term__iexact=normalized_term,
                )
                .order_by("-updated_at", "-id")
                .first()
            )
        except DatabaseError:
            logger.warning(
                "Completed-job lookup failed for term=%r; treating as cache miss.",
                normalized_term,
                exc_info=True,
            )
            return None
        return to_domain(row) if row is not None else None

    def try_claim(self, job_id: str) -> bool:
        updated = ResearchInterestJob.objects.filter(
            job_id=job_id,
            status=JobStatus.QUEUED,
        ).update(status=JobStatus.PROCESSING, updated_at=timezone.now())
        return updated == 1

    def mark_completed(
        self,
        job_id: str,
        vector_2d: Sequence[float],
        *,
        embedding: Sequence[float] | None = None,
        concepts: Sequence[str] | None = None,
    ) -> bool:
        if len(vector_2d) != 2:
            raise ValueError("vector_2d must contain exactly two values.")

        packed: bytes | None = None
        embedding_dim: int | None = None
        if embedding:
            packed = pack_embedding(embedding)
            embedding_dim = len(embedding)

        updated = ResearchInterestJob.objects.filter(
            job_id=job_id,
            status=JobStatus.PROCESSING,
        ).update(
            status=JobStatus.COMPLETED,
            vector_x=float(vector_2d[0]),
            vector_y=float(vector_2d[1]),
            embedding=packed,
            embedding_dim=embedding_dim,
            concepts_json=json.dumps([str(concept) for concept in (concepts or [])]),
            error_message="",
            updated_at=timezone.now(),
        )
        if updated != 1:
            logger.warning(
                "Ignoring completion for job_id=%s: job is not processing.", job_id
            )
            return False
        return True

    def mark_failed(self, job_id: str, reason: object) -> bool:
        message = str(reason) or reason.__class__.__name__
        updated = ResearchInterestJob.objects.filter(
            job_id=job_id,
            status=JobStatus.PROCESSING,
        ).update(
            status=JobStatus.FAILED,
            error_message=message,
            updated_at=timezone.now(),
        )
        if updated != 1:
            logger.warning("Ignoring failure for job_id=%s: job is not processing.", job_id)
            return False
        return True


def to_domain(row: ResearchInterestJob) -> EmbeddingJob:
    state: JobState
    if row.status == JobStatus.COMPLETED:
        state = Completed(
            vector_2d=(float(row.vector_x or 0.0), float(row.vector_y or 0.0)),
            embedding=_decode_embedding(row),
            concepts=tuple(parse_concepts(row.concepts_json)),
        )
    elif row.status == JobStatus.FAILED:
        state = Failed(reason=row.error_message or "Unknown error")
    elif row.status == JobStatus.PROCESSING:
        state = Processing()
    else:
        state = Queued()

    return EmbeddingJob(
        job_id=row.job_id,
        term=row.term,
        state=state,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def parse_concepts(raw: str | None) -> list[str]:
    try:
        parsed = json.loads(raw or "[]")
    except (TypeError, ValueError) as exc:
        logger.error("Concepts parse error: %s - %s", exc.__class__.__name__, exc)
        return []

    if not isinstance(parsed, list):
        logger.error("Concepts parse error: expected a list, got %s", type(parsed).__name__)
        return []
    return [item for item in parsed if isinstance(item, str)]


def _decode_embedding(row: ResearchInterestJob) -> tuple[float, ...] | None:
    if not row.embedding:
        return None

    try:
        values = unpack_embedding(row.embedding, dim=row.embedding_dim)
    except EmbeddingCodecError:
        logger.error("Stored embedding for job_id=%s is unreadable.", row.job_id, exc_info=True)
        return None
    return tuple(values) or None
