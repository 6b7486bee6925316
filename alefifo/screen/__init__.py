"""Screen palette and pooling exports."""

from .palette import ColorPalette, NTSCPalette
from .pooling import pool_frames

__all__ = [
    "ColorPalette",
    "NTSCPalette",
    "pool_frames",
]
