from __future__ import annotations

from datetime import timedelta
from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command
from django.utils import timezone

from apps.documents.models import Paper
from apps.health.services import HealthCheckService
from apps.research.jobs import JobCoordinator
from apps.research.models import ResearchInterestJob


def test_healthz_ok(client):
    with patch(
        "apps.health.views.HealthCheckService.check",
        return_value={
            "status": "ok",
            "checks": {
                "database": {"status": "ok", "detail": "database reachable"},
                "papers": {"status": "ok", "detail": "embedded papers present (2)"},
                "redis": {"status": "ok", "detail": "redis reachable"},
            },
            "metrics": {},
        },
    ):
        response = client.get("/healthz")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["data"]["status"] == "ok"


def test_health_degraded(client):
    with patch(
        "apps.health.views.HealthCheckService.check",
        return_value={
            "status": "degraded",
            "checks": {
                "database": {"status": "ok", "detail": "database reachable"},
                "papers": {"status": "error", "detail": "no embedded papers present"},
                "redis": {"status": "ok", "detail": "redis reachable"},
            },
            "metrics": {},
        },
    ):
        response = client.get("/health")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "service_unavailable"
    assert body["data"]["checks"]["papers"]["status"] == "error"


@pytest.mark.django_db
def test_health_service_reports_jobs_and_papers() -> None:
    Paper.objects.create(origin_id="p1", title="Embedded", journal="Cell", embedding=[1.0])
    Paper.objects.create(origin_id="p2", title="Bare", journal="Cell")
    coordinator = JobCoordinator()
    coordinator.create("queued term")
    stuck = coordinator.create("stuck term")
    coordinator.try_claim(stuck)
    ResearchInterestJob.objects.filter(job_id=stuck).update(
        updated_at=timezone.now() - timedelta(hours=1)
    )

    with patch(
        "apps.health.services.HealthCheckService._check_redis",
        return_value={"status": "ok", "detail": "redis reachable"},
    ):
        report = HealthCheckService().check()

    assert report["status"] == "ok"
    assert report["checks"]["papers"]["detail"] == "embedded papers present (1)"
    assert report["metrics"]["papers"] == 2
    assert report["metrics"]["jobs"] == {"queued": 1, "processing": 1, "completed": 0, "failed": 0}
    assert report["metrics"]["stale_processing_jobs"] == 1


@pytest.mark.django_db
def test_health_service_flags_missing_papers() -> None:
    with patch(
        "apps.health.services.HealthCheckService._check_redis",
        return_value={"status": "ok", "detail": "redis reachable"},
    ):
        report = HealthCheckService().check()

    assert report["status"] == "degraded"
    assert report["checks"]["papers"]["status"] == "error"


@pytest.mark.django_db
def test_startup_check_warns_about_missing_papers() -> None:
    output = StringIO()
    with patch(
        "apps.health.services.HealthCheckService._check_redis",
        return_value={"status": "error", "detail": "redis check failed: refused"},
    ):
        call_command("startup_check", stdout=output)

    text = output.getvalue()
    assert "Startup status: degraded" in text
    assert "WARNING: redis" in text
    assert "seed_papers" in text
    assert "queued=0" in text
