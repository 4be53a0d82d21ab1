from __future__ import annotations

from typing import Any

from django.core.management.base import BaseCommand

from apps.health.services import HealthCheckService


class Command(BaseCommand):
    help = "Run lightweight startup diagnostics and warn if papers or dependencies are missing."

    def handle(self, *args: Any, **options: Any) -> None:
        report = HealthCheckService().check()
        self.stdout.write(f"Startup status: {report['status']}")

        for name, result in report["checks"].items():
            if result["status"] == "ok":
                self.stdout.write(self.style.SUCCESS(f"{name}: {result['detail']}"))
            else:
                self.stdout.write(self.style.WARNING(f"WARNING: {name}: {result['detail']}"))

        if report["checks"]["papers"]["status"] != "ok":
            self.stdout.write(
                self.style.WARNING("No embedded papers found. Run 'python manage.py seed_papers'.")
            )

        metrics = report["metrics"]
        jobs = metrics["jobs"]
        self.stdout.write(
            "Research interest jobs: "
            + ", ".join(f"{status}={count}" for status, count in jobs.items())
        )
        if metrics["stale_processing_jobs"]:
            self.stdout.write(
                self.style.WARNING(
                    f"WARNING: {metrics['stale_processing_jobs']} job(s) stuck in processing."
                )
            )
