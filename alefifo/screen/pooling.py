"""Temporal pooling over the two most recent raw frames."""

from __future__ import annotations

from typing import Optional

import numpy as np

from alefifo.types import PoolingMethod


def pool_frames(
    frame_a: np.ndarray,
    frame_b: Optional[np.ndarray],
    method: PoolingMethod,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Combine the current frame ``frame_a`` with the previous ``frame_b``.

    ``frame_b`` is None until two raw frames have been captured, in which case
    the result is ``frame_a`` whatever the method. MEAN rounds half to even.
    """

    if out is None:
        out = np.empty_like(frame_a)
    if frame_b is None or method is PoolingMethod.NONE:
        np.copyto(out, frame_a)
    elif method is PoolingMethod.MAX:
        np.maximum(frame_a, frame_b, out=out)
    elif method is PoolingMethod.MEAN:
        mean = 0.5 * frame_a.astype(np.float32) + 0.5 * frame_b.astype(np.float32)
        np.copyto(out, np.rint(mean).astype(np.uint8))
    else:
        raise ValueError(f"Unsupported pooling method {method}")
    return out


__all__ = ["pool_frames"]
