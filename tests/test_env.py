from __future__ import annotations

import pytest
from django.core.exceptions import ImproperlyConfigured

from apps.common.env import get_bool, get_float, get_int, get_list


def test_get_int_enforces_minimum(monkeypatch) -> None:
    monkeypatch.setenv("PAPERS_PAGE_SIZE", "0")

    with pytest.raises(ImproperlyConfigured):
        get_int("PAPERS_PAGE_SIZE", default=25, minimum=1)


def test_get_int_rejects_garbage(monkeypatch) -> None:
    monkeypatch.setenv("PAPERS_PAGE_SIZE", "many")

    with pytest.raises(ImproperlyConfigured):
        get_int("PAPERS_PAGE_SIZE", default=25)


def test_get_float_parses_and_rejects_non_finite(monkeypatch) -> None:
    monkeypatch.setenv("EMBED_SERVICE_TIMEOUT_SECONDS", " 2.5 ")
    assert get_float("EMBED_SERVICE_TIMEOUT_SECONDS", default=30.0) == 2.5

    monkeypatch.setenv("EMBED_SERVICE_TIMEOUT_SECONDS", "inf")
    with pytest.raises(ImproperlyConfigured):
        get_float("EMBED_SERVICE_TIMEOUT_SECONDS", default=30.0)


def test_defaults_apply_when_unset(monkeypatch) -> None:
    monkeypatch.delenv("PAPER_RADAR_UNSET", raising=False)

    assert get_int("PAPER_RADAR_UNSET", default=10, minimum=0) == 10
    assert get_float("PAPER_RADAR_UNSET", default=1.5) == 1.5
    assert get_bool("PAPER_RADAR_UNSET", default=True) is True
    assert get_list("PAPER_RADAR_UNSET", default=["a"]) == ["a"]


def test_get_bool_rejects_unknown_values(monkeypatch) -> None:
    monkeypatch.setenv("CELERY_TASK_ALWAYS_EAGER", "sometimes")

    with pytest.raises(ImproperlyConfigured):
        get_bool("CELERY_TASK_ALWAYS_EAGER")
