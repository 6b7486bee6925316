import numpy as np
import pytest

from alefifo.screen import pool_frames
from alefifo.types import PoolingMethod


def _pair() -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(0)
    a = rng.integers(0, 256, size=(5, 7, 3), dtype=np.uint8)
    b = rng.integers(0, 256, size=(5, 7, 3), dtype=np.uint8)
    return a, b


@pytest.mark.parametrize("method", list(PoolingMethod))
def test_single_frame_passes_through(method: PoolingMethod) -> None:
    a, _ = _pair()
    out = pool_frames(a, None, method)
    assert np.array_equal(out, a)
    assert out is not a


def test_none_returns_most_recent() -> None:
    a, b = _pair()
    assert np.array_equal(pool_frames(a, b, PoolingMethod.NONE), a)


def test_max_is_elementwise() -> None:
    a, b = _pair()
    out = pool_frames(a, b, PoolingMethod.MAX)
    assert np.array_equal(out, np.maximum(a, b))


def test_mean_rounds_instead_of_truncating() -> None:
    a, b = _pair()
    out = pool_frames(a, b, PoolingMethod.MEAN)
    expected = np.rint((a.astype(np.float64) + b) / 2).astype(np.uint8)
    assert np.array_equal(out, expected)
    assert np.all(np.abs(out.astype(int) - (a.astype(int) + b) / 2) <= 0.5)


def test_mean_known_values() -> None:
    a = np.array([[[1, 3, 255]]], dtype=np.uint8)
    b = np.array([[[2, 4, 254]]], dtype=np.uint8)
    out = pool_frames(a, b, PoolingMethod.MEAN)
    assert out.tolist() == [[[2, 4, 254]]]


def test_pool_into_output_buffer() -> None:
    a, b = _pair()
    out = np.zeros_like(a)
    result = pool_frames(a, b, PoolingMethod.MAX, out=out)
    assert result is out
    assert np.array_equal(out, np.maximum(a, b))


def test_parse_pooling_names() -> None:
    assert PoolingMethod.parse("MAX") is PoolingMethod.MAX
    with pytest.raises(ValueError):
        PoolingMethod.parse("median")
