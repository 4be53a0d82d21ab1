from __future__ import annotations

import math
from typing import Sequence


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``, in ``[-1, 1]``.

    Returns ``0.0`` when the lengths differ, either vector is empty, or either
    has zero magnitude.
    """

    if len(a) != len(b) or not a:
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for left, right in zip(a, b):
        x = float(left)
        y = float(right)
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    denominator = math.sqrt(norm_a) * math.sqrt(norm_b)
    if denominator == 0.0 or not math.isfinite(denominator):
        return 0.0
    return max(-1.0, min(1.0, dot / denominator))
