"""Producer side of the research-interest embedding queue."""

from __future__ import annotations

import logging
import time
from typing import Any

from django.conf import settings

logger = logging.getLogger(__name__)

MESSAGE_TYPE = "embed_research_interest"


class QueuePublishError(Exception):
    """Raised when an embedding request cannot be handed to the broker."""


def build_message(*, job_id: str, term: str) -> dict[str, Any]:
    return {
        "type": MESSAGE_TYPE,
        "job_id": job_id,
        "term": term,
        "client_enqueued_at_ms": int(time.time() * 1000),
    }


def publish_embedding_request(*, job_id: str, term: str) -> dict[str, Any]:
    from apps.research.tasks import embed_research_interest

    message = build_message(job_id=job_id, term=term)
    try:
        result = embed_research_interest.apply_async(
            args=[message],
            queue=settings.RESEARCH_INTEREST_QUEUE,
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to publish embedding request job_id=%s", job_id)
        raise QueuePublishError(f"Failed to publish embedding request: {exc}") from exc

    logger.debug(
        "Published embedding request job_id=%s task_id=%s queue=%s",
        job_id,
        getattr(result, "id", None),
        settings.RESEARCH_INTEREST_QUEUE,
    )
    return message
