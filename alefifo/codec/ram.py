"""Console RAM field decoding."""

from __future__ import annotations

import numpy as np

from alefifo.codec.hexcodec import decode_hex
from alefifo.errors import MalformedField
from alefifo.types import RAM_SIZE


def decode_ram(text: str, size: int = RAM_SIZE) -> np.ndarray:
    """Decode ``<r0><r1>...<r127>`` (two hex digits per byte) into ``size`` bytes."""

    ram = decode_hex(text, count=size)
    if len(text) > 2 * size:
        raise MalformedField(f"RAM field has {len(text)} hex digits, expected {2 * size}")
    return ram


__all__ = ["decode_ram"]
