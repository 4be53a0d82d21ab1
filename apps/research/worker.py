"""Consumer side: turns a queued job into a completed or failed one."""

from __future__ import annotations

import json
import logging
import time
from enum import Enum
from typing import Any, Mapping

from apps.research.embedding_client import (
    EmbeddingServiceClient,
    EmbeddingServiceError,
)
from apps.research.jobs import JobCoordinator
from apps.research.queue import MESSAGE_TYPE

logger = logging.getLogger(__name__)


class WorkerOutcome(str, Enum):
    IGNORED = "ignored"
    SKIPPED = "skipped"
    COMPLETED = "completed"
    FAILED = "failed"


class EmbedResearchInterestWorker:
    def __init__(
        self,
        *,
        coordinator: JobCoordinator | None = None,
        client: EmbeddingServiceClient | None = None,
    ) -> None:
        self._coordinator = coordinator or JobCoordinator()
        self._client = client

    def perform(self, body: str | Mapping[str, Any]) -> WorkerOutcome:
        payload = self._parse_body(body)
        if payload is None or payload.get("type") != MESSAGE_TYPE:
            logger.debug("Ignoring message with unexpected shape or type: %r", body)
            return WorkerOutcome.IGNORED

        job_id = payload.get("job_id")
        term = payload.get("term")
        if not isinstance(job_id, str) or not job_id or not isinstance(term, str):
            logger.error("Ignoring embedding message without job_id/term: %r", payload)
            return WorkerOutcome.IGNORED

        enqueued_at_ms = payload.get("client_enqueued_at_ms")
        if isinstance(enqueued_at_ms, (int, float)):
            logger.debug(
                "Worker received job_id=%s queue_delay_s=%.2f",
                job_id,
                time.time() - enqueued_at_ms / 1000.0,
            )

        if not self._coordinator.try_claim(job_id):
            logger.info("Skipping job_id=%s (already processing/completed/failed)", job_id)
            return WorkerOutcome.SKIPPED

        try:
            result = self._get_client().embed(term, request_id=job_id)
        except EmbeddingServiceError as exc:
            logger.error("Embedding failed job_id=%s error=%s", job_id, exc)
            self._coordinator.mark_failed(job_id, exc)
            return WorkerOutcome.FAILED
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error while embedding job_id=%s", job_id)
            self._coordinator.mark_failed(job_id, f"{exc.__class__.__name__}: {exc}")
            return WorkerOutcome.FAILED

        try:
            completed = self._coordinator.mark_completed(
                job_id,
                result.vector_2d,
                embedding=result.embedding,
                concepts=result.concepts,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("Could not store embedding for job_id=%s", job_id)
            self._coordinator.mark_failed(job_id, f"{exc.__class__.__name__}: {exc}")
            return WorkerOutcome.FAILED

        if not completed:
            return WorkerOutcome.SKIPPED

        logger.info(
            "Completed job_id=%s vector_2d=%s embedding_dim=%s concepts=%d",
            job_id,
            result.vector_2d,
            len(result.embedding) if result.embedding else None,
            len(result.concepts),
        )
        return WorkerOutcome.COMPLETED

    def _get_client(self) -> EmbeddingServiceClient:
        if self._client is None:
            self._client = EmbeddingServiceClient()
        return self._client

    @staticmethod
    def _parse_body(body: str | Mapping[str, Any]) -> Mapping[str, Any] | None:
        if isinstance(body, Mapping):
            return body
        if isinstance(body, (str, bytes)):
            try:
                parsed = json.loads(body)
            except ValueError:
                logger.error("Ignoring message with invalid JSON body.")
                return None
            return parsed if isinstance(parsed, Mapping) else None
        return None
