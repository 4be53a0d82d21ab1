from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from apps.research.jobs import EmbeddingJob, JobCoordinator
from apps.research.queue import publish_embedding_request
from apps.research.terms import validate_term

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    job: EmbeddingJob
    cached: bool


class ResearchInterestSubmissionService:
    """Validates a term and either reuses a completed job or queues a new one.

    Raises ``TermValidationError`` before any job is touched, and
    ``QueuePublishError`` when the broker refuses the message. In the latter
    case the new job row stays ``queued``; submitting the term again is the
    retry path.
    """

    def __init__(self, *, coordinator: JobCoordinator | None = None) -> None:
        self._coordinator = coordinator or JobCoordinator()

    def submit(self, raw_term: Any) -> SubmissionResult:
        term = validate_term(raw_term)

        cached = self._coordinator.find_completed_by_term(term)
        if cached is not None:
            logger.info("Research interest cache hit term=%r job_id=%s", term, cached.job_id)
            return SubmissionResult(job=cached, cached=True)

        job_id = self._coordinator.create(term)
        publish_embedding_request(job_id=job_id, term=term)

        job = self._coordinator.find(job_id)
        if job is None:
            raise LookupError(f"Job {job_id} disappeared right after creation.")
        return SubmissionResult(job=job, cached=False)
