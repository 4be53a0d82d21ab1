"""Compact storage format for job embeddings.

Layout: ``embedding_dim`` consecutive IEEE-754 binary32 values in
little-endian byte order, no header or padding. The element count is stored
next to the blob (``embedding_dim``), so a blob of ``n`` bytes always holds
``n / 4`` values. Base64 (standard alphabet, padded) of the same bytes is used
where the blob has to travel through JSON, e.g. the session.
"""

from __future__ import annotations

import base64
import binascii
import math
import struct
from typing import Sequence

FLOAT32_SIZE = 4


class EmbeddingCodecError(Exception):
    """Raised when an embedding cannot be packed or unpacked."""


def pack_embedding(values: Sequence[float]) -> bytes:
    try:
        floats = [float(value) for value in values]
    except (TypeError, ValueError) as exc:
        raise EmbeddingCodecError("Embedding contains non-numeric values.") from exc

    if any(not math.isfinite(value) for value in floats):
        raise EmbeddingCodecError("Embedding contains non-finite values.")

    try:
        return struct.pack(f"<{len(floats)}f", *floats)
    except (OverflowError, struct.error) as exc:
        raise EmbeddingCodecError("Embedding value does not fit in float32.") from exc


def unpack_embedding(data: bytes | bytearray | memoryview, *, dim: int | None = None) -> list[float]:
    raw = bytes(data)
    if len(raw) % FLOAT32_SIZE != 0:
        raise EmbeddingCodecError(
            f"Embedding blob length {len(raw)} is not a multiple of {FLOAT32_SIZE}."
        )

    count = len(raw) // FLOAT32_SIZE
    if dim is not None and dim != count:
        raise EmbeddingCodecError(f"Embedding blob holds {count} values, expected {dim}.")
    return list(struct.unpack(f"<{count}f", raw))


def encode_embedding_b64(values: Sequence[float]) -> str:
    return base64.b64encode(pack_embedding(values)).decode("ascii")


def decode_embedding_b64(encoded: str) -> list[float]:
    try:
        raw = base64.b64decode(encoded.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise EmbeddingCodecError("Embedding is not valid base64.") from exc
    return unpack_embedding(raw)
