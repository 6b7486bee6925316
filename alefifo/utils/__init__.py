"""Utility exports."""

from .frames import bgr_to_rgb, save_frame

__all__ = [
    "bgr_to_rgb",
    "save_frame",
]
