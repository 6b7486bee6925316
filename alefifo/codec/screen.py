"""Screen field decoding: full raster and run-length encoded frames.

Both formats carry palette indices as hex byte pairs. Pixels are written in
blue, green, red channel order into a ``(height, width, 3)`` ``uint8`` buffer,
the layout native image libraries such as OpenCV expect. Decoders validate the
whole field before touching ``out`` so a bad payload leaves the previous frame
intact.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from alefifo.codec.hexcodec import decode_hex
from alefifo.errors import FrameSizeMismatch, Truncated
from alefifo.screen.palette import ColorPalette
from alefifo.types import SessionDimensions


def _frame_buffer(dims: SessionDimensions, out: Optional[np.ndarray]) -> np.ndarray:
    if out is None:
        return np.empty(dims.frame_shape, dtype=np.uint8)
    if out.shape != dims.frame_shape or out.dtype != np.uint8:
        raise ValueError(f"output buffer must be uint8 {dims.frame_shape}, got {out.dtype} {out.shape}")
    return out


def decode_screen_raster(
    text: str,
    dims: SessionDimensions,
    palette: ColorPalette,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Decode one hex palette index per pixel, row-major."""

    expected = 2 * dims.pixels
    if len(text) > expected:
        raise FrameSizeMismatch(f"raster field has {len(text)} hex digits, expected {expected}")
    indices = decode_hex(text, count=dims.pixels)
    frame = _frame_buffer(dims, out)
    frame[...] = palette.bgr[indices].reshape(dims.frame_shape)
    return frame


def decode_screen_rle(
    text: str,
    dims: SessionDimensions,
    palette: ColorPalette,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Decode ``<index><run-length>`` records, four hex digits each."""

    if len(text) % 4:
        raise Truncated(f"RLE field length {len(text)} is not a multiple of 4")
    records = decode_hex(text).reshape(-1, 2)
    colors = records[:, 0]
    runs = records[:, 1].astype(np.int64)
    total = int(runs.sum())
    if total != dims.pixels:
        raise FrameSizeMismatch(f"RLE runs cover {total} pixels, frame has {dims.pixels}")
    indices = np.repeat(colors, runs)
    frame = _frame_buffer(dims, out)
    frame[...] = palette.bgr[indices].reshape(dims.frame_shape)
    return frame


def decode_screen(
    text: str,
    dims: SessionDimensions,
    palette: ColorPalette,
    use_rle: bool,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    if use_rle:
        return decode_screen_rle(text, dims, palette, out)
    return decode_screen_raster(text, dims, palette, out)


def encode_screen_rle(indices: "np.ndarray") -> str:
    """Run-length encode a flat array of palette indices, runs capped at 255."""

    flat = np.asarray(indices, dtype=np.uint8).ravel()
    parts = []
    start = 0
    while start < len(flat):
        color = flat[start]
        end = start
        while end < len(flat) and flat[end] == color and end - start < 0xFF:
            end += 1
        parts.append(f"{int(color):02X}{end - start:02X}")
        start = end
    return "".join(parts)


__all__ = [
    "decode_screen",
    "decode_screen_raster",
    "decode_screen_rle",
    "encode_screen_rle",
]
