from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from apps.documents.services import IngestInput, IngestionError, PaperIngestionService

DEFAULT_FIXTURE = Path(__file__).resolve().parents[2] / "fixtures" / "sample_papers.json"


class Command(BaseCommand):
    help = "Seed papers (with precomputed embeddings) from a JSON fixture so listing works immediately."

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--fixture",
            type=str,
            default=str(DEFAULT_FIXTURE),
            help="Path to seed fixture JSON file.",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        fixture_path = Path(options["fixture"])
        records = self._load_fixture(fixture_path)

        try:
            items = [IngestInput.from_record(row) for row in records]
            stats = PaperIngestionService().ingest(items)
        except IngestionError as exc:
            raise CommandError(f"Paper seed failed: {exc}") from exc

        self.stdout.write(
            self.style.SUCCESS(
                f"Paper seed complete: created={stats['created']}, updated={stats['updated']}"
            )
        )

    def _load_fixture(self, fixture_path: Path) -> list[dict[str, Any]]:
        if not fixture_path.exists():
            raise CommandError(f"Fixture file does not exist: {fixture_path}")

        try:
            payload = json.loads(fixture_path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise CommandError(f"Could not read fixture file {fixture_path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CommandError(f"Invalid JSON in fixture file {fixture_path}: {exc}") from exc

        if not isinstance(payload, list) or not payload:
            raise CommandError("Fixture JSON must contain a non-empty list of papers.")
        return payload
