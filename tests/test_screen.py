import numpy as np
import pytest

from alefifo.codec import decode_screen, decode_screen_raster, decode_screen_rle, encode_hex, encode_screen_rle
from alefifo.errors import FrameSizeMismatch, Truncated
from alefifo.screen import NTSCPalette
from alefifo.types import SessionDimensions

DIMS = SessionDimensions(width=4, height=3)
PALETTE = NTSCPalette()


def _indices() -> np.ndarray:
    return np.array(
        [
            [0x00, 0x0E, 0x0E, 0x44],
            [0x44, 0x44, 0x44, 0x44],
            [0x1F, 0x80, 0x80, 0x00],
        ],
        dtype=np.uint8,
    )


def test_palette_even_and_grayscale_entries() -> None:
    assert PALETTE.get(0x00) == (0, 0, 0)
    assert PALETTE.get(0x0E) == (0xEC, 0xEC, 0xEC)
    assert PALETTE.get(0x40) == (0x94, 0x00, 0x00)
    r, g, b = PALETTE.get(0x41)
    assert r == g == b
    assert PALETTE.bgr.shape == (256, 3)
    assert tuple(PALETTE.bgr[0x40]) == (0x00, 0x00, 0x94)


def test_raster_writes_bgr_per_pixel() -> None:
    indices = _indices()
    frame = decode_screen_raster(encode_hex(indices), DIMS, PALETTE)
    assert frame.shape == (3, 4, 3)
    assert frame.dtype == np.uint8
    for y in range(DIMS.height):
        for x in range(DIMS.width):
            r, g, b = PALETTE.get(indices[y, x])
            assert tuple(frame[y, x]) == (b, g, r)


def test_rle_matches_raster() -> None:
    indices = _indices()
    rle = encode_screen_rle(indices)
    assert rle == "0001" "0E02" "4405" "1F01" "8002" "0001"
    raster = decode_screen_raster(encode_hex(indices), DIMS, PALETTE)
    expanded = decode_screen_rle(rle, DIMS, PALETTE)
    assert np.array_equal(raster, expanded)


def test_rle_long_runs_are_split() -> None:
    dims = SessionDimensions(width=300, height=1)
    indices = np.full(300, 0x0E, dtype=np.uint8)
    rle = encode_screen_rle(indices)
    assert rle == "0EFF" "0E2D"
    frame = decode_screen_rle(rle, dims, PALETTE)
    assert np.all(frame == 0xEC)


def test_decode_into_caller_buffer() -> None:
    out = np.zeros(DIMS.frame_shape, dtype=np.uint8)
    result = decode_screen("0E0C", DIMS, PALETTE, use_rle=True, out=out)
    assert result is out
    assert np.all(out == 0xEC)


def test_rle_run_sum_mismatch_leaves_buffer_untouched() -> None:
    out = np.full(DIMS.frame_shape, 7, dtype=np.uint8)
    with pytest.raises(FrameSizeMismatch):
        decode_screen_rle("0E0B", DIMS, PALETTE, out=out)
    with pytest.raises(FrameSizeMismatch):
        decode_screen_rle("0E0D", DIMS, PALETTE, out=out)
    assert np.all(out == 7)


def test_rle_partial_record_is_truncated() -> None:
    with pytest.raises(Truncated):
        decode_screen_rle("0E0C0E", DIMS, PALETTE)


def test_raster_length_checks() -> None:
    full = encode_hex(_indices())
    with pytest.raises(Truncated):
        decode_screen_raster(full[:-2], DIMS, PALETTE)
    with pytest.raises(FrameSizeMismatch):
        decode_screen_raster(full + "00", DIMS, PALETTE)


def test_wrong_output_shape_rejected() -> None:
    with pytest.raises(ValueError):
        decode_screen_rle("0E0C", DIMS, PALETTE, out=np.zeros((4, 3, 3), dtype=np.uint8))
