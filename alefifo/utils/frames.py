"""Helpers for exporting decoded frames as images."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image


def bgr_to_rgb(frame: np.ndarray) -> np.ndarray:
    return np.ascontiguousarray(frame[..., ::-1])


def save_frame(frame: np.ndarray, path: Union[str, Path]) -> Path:
    """Write a B,G,R frame as an RGB PNG, creating parent directories."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(bgr_to_rgb(frame)).save(path)
    return path


__all__ = ["bgr_to_rgb", "save_frame"]
