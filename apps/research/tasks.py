from __future__ import annotations

from typing import Any

from celery import shared_task

from apps.research.worker import EmbedResearchInterestWorker


@shared_task(name="research.embed_research_interest", ignore_result=True)
def embed_research_interest(message: dict[str, Any] | str) -> str:
    outcome = EmbedResearchInterestWorker().perform(message)
    return outcome.value
