"""Payload codec exports."""

from .hexcodec import byte_at, decode_hex, encode_hex
from .ram import decode_ram
from .screen import decode_screen, decode_screen_raster, decode_screen_rle, encode_screen_rle
from .signal import decode_signal

__all__ = [
    "byte_at",
    "decode_hex",
    "encode_hex",
    "decode_ram",
    "decode_screen",
    "decode_screen_raster",
    "decode_screen_rle",
    "encode_screen_rle",
    "decode_signal",
]
