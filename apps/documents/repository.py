from __future__ import annotations

from datetime import date, datetime, time, timezone as dt_timezone
from typing import Sequence

from django.db.models import QuerySet

from apps.documents.models import Paper


class PaperRepository:
    """Read access to stored papers, filtered the way the listing endpoint needs."""

    def find_by_categories(
        self,
        journals: Sequence[str],
        min_date: date | None = None,
        max_date: date | None = None,
    ) -> list[Paper]:
        queryset: QuerySet[Paper] = Paper.objects.all()

        names = [name.strip() for name in journals if name and name.strip()]
        if names:
            queryset = queryset.filter(journal__in=names)
        if min_date is not None:
            queryset = queryset.filter(published__gte=_start_of_day(min_date))
        if max_date is not None:
            queryset = queryset.filter(published__lte=_end_of_day(max_date))

        return list(queryset.order_by("-published", "id"))


def _start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=dt_timezone.utc)


def _end_of_day(value: date) -> datetime:
    return datetime.combine(value, time.max, tzinfo=dt_timezone.utc)
