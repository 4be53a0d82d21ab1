"""Health check services for app dependencies."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Literal, TypedDict

import redis
from django.conf import settings
from django.db import connection
from django.db.models import Count
from django.utils import timezone

from apps.documents.models import Paper
from apps.research.models import JobStatus, ResearchInterestJob


class CheckResult(TypedDict):
    status: Literal["ok", "error"]
    detail: str


class HealthReport(TypedDict):
    status: Literal["ok", "degraded"]
    checks: dict[str, CheckResult]
    metrics: dict[str, Any]


class HealthCheckService:
    """Runs lightweight checks for each required dependency."""

    def check(self) -> HealthReport:
        checks: dict[str, CheckResult] = {
            "database": self._check_database(),
            "redis": self._check_redis(),
            "papers": self._check_embedded_papers(),
        }
        overall = "ok" if all(item["status"] == "ok" for item in checks.values()) else "degraded"
        return {"status": overall, "checks": checks, "metrics": self._collect_metrics()}

    @staticmethod
    def _check_database() -> CheckResult:
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
            return {"status": "ok", "detail": "database reachable"}
        except Exception as exc:  # noqa: BLE001
            return {"status": "error", "detail": f"database check failed: {exc}"}

    @staticmethod
    def _check_redis() -> CheckResult:
        client: redis.Redis[Any]
        try:
            client = redis.Redis.from_url(
                settings.REDIS_URL,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            client.ping()
            return {"status": "ok", "detail": "redis reachable"}
        except Exception as exc:  # noqa: BLE001
            return {"status": "error", "detail": f"redis check failed: {exc}"}

    @staticmethod
    def _check_embedded_papers() -> CheckResult:
        try:
            count = Paper.objects.exclude(embedding=[]).count()
        except Exception as exc:  # noqa: BLE001
            return {"status": "error", "detail": f"papers check failed: {exc}"}

        if count > 0:
            return {"status": "ok", "detail": f"embedded papers present ({count})"}

        return {"status": "error", "detail": "no embedded papers present"}

    @staticmethod
    def _collect_metrics() -> dict[str, Any]:
        try:
            by_status = {
                row["status"]: row["total"]
                for row in ResearchInterestJob.objects.values("status").annotate(total=Count("id"))
            }
            # Processing rows older than the hard task limit have no live worker behind them.
            stale_cutoff = timezone.now() - timedelta(seconds=settings.CELERY_TASK_TIME_LIMIT)
            stale_processing = ResearchInterestJob.objects.filter(
                status=JobStatus.PROCESSING,
                updated_at__lt=stale_cutoff,
            ).count()
            return {
                "papers": Paper.objects.count(),
                "jobs": {choice: by_status.get(choice, 0) for choice in JobStatus.values},
                "stale_processing_jobs": stale_processing,
            }
        except Exception as exc:  # noqa: BLE001
            return {
                "papers": 0,
                "jobs": {choice: 0 for choice in JobStatus.values},
                "stale_processing_jobs": 0,
                "error": f"metrics collection failed: {exc}",
            }
