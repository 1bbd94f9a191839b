# pixel_stream/bit_depth.py
from __future__ import annotations

"""
Bit-depth normalizer.

Turns a raw sample buffer into rows of native-depth samples and provides the
depth -> 8-bit rescale used wherever a sample becomes a colour or alpha value.

Exports:
  require_depth(depth)           -> raises UnsupportedBitDepth
  to_byte(value, depth)          -> int in 0..255
  scale_to_byte(values, depth)   -> uint8 array, same mapping vectorized
  byte_lut(depth)                -> cached uint8 lookup table of size 2**depth
  row_stride(width, channels, depth), required_bytes(...)
  sample_buffer(data, depth)     -> flat numpy view/copy of the input
  check_sample_length(...)       -> raises TruncatedData
  iter_sample_rows(...)          -> lazy rows of samples
  unpack_samples(...)            -> every sample in one flat array

Notes:
  Rows are byte-aligned. At depths 1/2/4 the bits left over at the end of a
  row are dropped and the next row starts on a fresh byte.
"""

from functools import lru_cache
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from .constants import DEPTH16_DIVISOR, SUBBYTE_DEPTHS, SUPPORTED_DEPTHS
from .core_types import SampleData, SampleRow
from .errors import InvalidSampleData, TruncatedData, UnsupportedBitDepth


def require_depth(depth: int) -> None:
    """Raise UnsupportedBitDepth unless depth is one of 1, 2, 4, 8, 16."""
    if depth not in SUPPORTED_DEPTHS:
        raise UnsupportedBitDepth(
            f"Unsupported bit depth: {depth} (expected one of {SUPPORTED_DEPTHS})"
        )


#  Rescale


def to_byte(value: int, depth: int) -> int:
    """
    Rescale one native-depth sample to 0..255.

    depth 8 is the identity, depth 16 divides by 257, depths 1/2/4 stretch
    0..2**depth-1 linearly. Rounds half up; none of the divisors can produce
    an exact half for integer input.
    """
    require_depth(depth)
    value = int(value)
    if depth == 8:
        return value
    if depth == 16:
        return (value + DEPTH16_DIVISOR // 2) // DEPTH16_DIVISOR
    max_value = (1 << depth) - 1
    return (value * 255 + max_value // 2) // max_value


def scale_to_byte(values: NDArray[np.generic], depth: int) -> NDArray[np.uint8]:
    """Vectorized to_byte()."""
    require_depth(depth)
    arr = np.asarray(values).astype(np.int64, copy=False)
    if depth == 8:
        return arr.astype(np.uint8)
    if depth == 16:
        return ((arr + DEPTH16_DIVISOR // 2) // DEPTH16_DIVISOR).astype(np.uint8)
    max_value = (1 << depth) - 1
    return ((arr * 255 + max_value // 2) // max_value).astype(np.uint8)


@lru_cache(maxsize=None)
def byte_lut(depth: int) -> NDArray[np.uint8]:
    """Read-only table mapping every native sample value to its 8-bit value."""
    lut = scale_to_byte(np.arange(1 << depth, dtype=np.int64), depth)
    lut.setflags(write=False)
    return lut


#  Buffer geometry


def row_stride(width: int, channels: int, depth: int) -> int:
    """Bytes per row: ceil(width * channels * depth / 8)."""
    return (width * channels * depth + 7) // 8


def required_bytes(width: int, height: int, channels: int, depth: int) -> int:
    """Bytes a byte-aligned raster of this shape occupies."""
    return row_stride(width, channels, depth) * height


def _is_raw_bytes(data: SampleData) -> bool:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return True
    return isinstance(data, np.ndarray) and data.dtype == np.uint8


def _raw_bytes(data: SampleData) -> NDArray[np.uint8]:
    if isinstance(data, np.ndarray):
        return data.ravel()
    return np.frombuffer(data, dtype=np.uint8)


def _sample_elements(data: SampleData, depth: int) -> np.ndarray:
    # Element input (lists, non-uint8 arrays): integers that fit one sample
    # container, uint16 at depth 16 and one byte below.
    arr = np.asarray(data).ravel()
    dtype = np.uint16 if depth == 16 else np.uint8
    if arr.size == 0:
        return arr.astype(dtype)
    if not np.issubdtype(arr.dtype, np.integer):
        raise InvalidSampleData(f"Sample data must be integers, got dtype {arr.dtype}")
    limit = int(np.iinfo(dtype).max)
    low, high = int(arr.min()), int(arr.max())
    if low < 0 or high > limit:
        raise InvalidSampleData(
            f"Sample values must lie in 0..{limit} at depth {depth}, got {low}..{high}"
        )
    return arr.astype(dtype)


def sample_buffer(data: SampleData, depth: int) -> np.ndarray:
    """
    Flatten the input buffer into a numpy array.

    depth 16: one uint16 element per sample. Raw bytes are copied and widened
    in native byte order; element sequences/arrays are copied as uint16.
    depth <= 8: one uint8 per byte. Sub-byte depths stay packed.

    Raises InvalidSampleData for element input that is not integral or does
    not fit the container (0..65535 at depth 16, 0..255 otherwise).
    """
    require_depth(depth)
    if not _is_raw_bytes(data):
        return _sample_elements(data, depth)
    if depth == 16:
        raw = np.ascontiguousarray(_raw_bytes(data))
        usable = raw.size - raw.size % 2
        return raw[:usable].view(np.uint16).copy()
    return _raw_bytes(data)


def _required_length(width: int, height: int, channels: int, depth: int) -> int:
    # Units of sample_buffer(): elements at depth >= 8, bytes below.
    if depth >= 8:
        return width * channels * height
    return required_bytes(width, height, channels, depth)


def check_sample_length(
    buffer: np.ndarray, width: int, height: int, channels: int, depth: int
) -> None:
    """Raise TruncatedData unless buffer covers every row of the raster."""
    needed = _required_length(width, height, channels, depth)
    if buffer.size < needed:
        unit = "samples" if depth >= 8 else "bytes"
        raise TruncatedData(
            f"Sample data is truncated (expected at least {needed} {unit}, got {buffer.size})"
        )


#  Unpacking


def _unpack_row(row_bytes: NDArray[np.uint8], samples: int, depth: int) -> SampleRow:
    # MSB-first; 1/2/4 divide 8 so no sample straddles a byte boundary.
    bits = np.unpackbits(row_bytes)[: samples * depth].reshape(samples, depth)
    weights = 1 << np.arange(depth - 1, -1, -1, dtype=np.uint16)
    return (bits.astype(np.uint16) * weights).sum(axis=1).astype(np.uint16)


def iter_sample_rows(
    buffer: np.ndarray, width: int, height: int, channels: int, depth: int
) -> Iterator[np.ndarray]:
    """
    Yield one row of width*channels native samples at a time, top to bottom.

    buffer comes from sample_buffer() and must already have passed
    check_sample_length().
    """
    samples = width * channels
    if depth in SUBBYTE_DEPTHS:
        stride = row_stride(width, channels, depth)
        for row in range(height):
            start = row * stride
            yield _unpack_row(buffer[start : start + stride], samples, depth)
        return
    for row in range(height):
        start = row * samples
        yield buffer[start : start + samples]


def unpack_samples(
    data: SampleData, width: int, height: int, channels: int, depth: int
) -> np.ndarray:
    """Every sample of the raster, row-major, as one flat array."""
    buffer = sample_buffer(data, depth)
    check_sample_length(buffer, width, height, channels, depth)
    rows = list(iter_sample_rows(buffer, width, height, channels, depth))
    if not rows:
        return np.zeros((0,), dtype=np.uint16 if depth == 16 else np.uint8)
    out = np.concatenate(rows)
    return out if depth == 16 else out.astype(np.uint8, copy=False)


__all__ = [
    "require_depth",
    "to_byte",
    "scale_to_byte",
    "byte_lut",
    "row_stride",
    "required_bytes",
    "sample_buffer",
    "check_sample_length",
    "iter_sample_rows",
    "unpack_samples",
]
