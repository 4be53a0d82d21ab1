"""Normalization and validation of research-interest terms."""

from __future__ import annotations

import re
from typing import Any

from django.conf import settings

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")

ERROR_EMPTY = "empty"
ERROR_TOO_LONG = "too_long"
ERROR_INVALID_CHARS = "invalid_chars"


class TermValidationError(Exception):
    """Raised when a submitted term is rejected; ``code`` names the reason."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def normalize_term(text: Any) -> str:
    """Trim, collapse whitespace and lower-case. Idempotent."""

    if not isinstance(text, str):
        return ""
    return " ".join(text.split()).lower()


def validate_term(raw: Any, *, max_length: int | None = None) -> str:
    limit = max_length if max_length is not None else settings.RESEARCH_INTEREST_MAX_LENGTH

    if not isinstance(raw, str) or not normalize_term(raw):
        raise TermValidationError(ERROR_EMPTY, "Research interest term cannot be empty.")
    if len(raw) > limit:
        raise TermValidationError(
            ERROR_TOO_LONG,
            f"Research interest term must be at most {limit} characters.",
        )
    if _CONTROL_CHARS.search(raw):
        raise TermValidationError(
            ERROR_INVALID_CHARS,
            "Research interest term contains invalid control characters.",
        )
    return normalize_term(raw)
