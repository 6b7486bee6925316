"""Fixed-width hexadecimal byte decoding for the fifo payloads."""

from __future__ import annotations

import re
from typing import Optional

import numpy as np

from alefifo.errors import MalformedField, Truncated

_HEX_RE = re.compile(r"[0-9A-Fa-f]*")


def byte_at(text: str, ptr: int) -> int:
    """Parse the two hex digits starting at ``ptr``."""

    if ptr < 0 or ptr + 2 > len(text):
        raise Truncated(f"need 2 hex digits at offset {ptr}, field has {len(text)}")
    pair = text[ptr : ptr + 2]
    if not _HEX_RE.fullmatch(pair):
        raise MalformedField(f"invalid hex byte {pair!r} at offset {ptr}")
    return int(pair, 16)


def decode_hex(text: str, count: Optional[int] = None) -> np.ndarray:
    """Decode a run of hex byte pairs into a ``uint8`` array.

    With ``count`` set, exactly ``2 * count`` characters are consumed and a
    shorter field raises :class:`Truncated`; trailing characters are left for
    the caller to judge.
    """

    if count is not None:
        needed = 2 * count
        if len(text) < needed:
            raise Truncated(f"expected {needed} hex digits, got {len(text)}")
        text = text[:needed]
    if not _HEX_RE.fullmatch(text):
        raise MalformedField("field contains non-hex characters")
    if len(text) % 2:
        raise Truncated(f"odd number of hex digits ({len(text)})")
    return np.frombuffer(bytes.fromhex(text), dtype=np.uint8).copy()


def encode_hex(values: "np.ndarray") -> str:
    """Inverse of :func:`decode_hex`, upper-case like the simulator emits."""

    return np.asarray(values, dtype=np.uint8).tobytes().hex().upper()


__all__ = ["byte_at", "decode_hex", "encode_hex"]
