# pixel_stream/core_types.py
from __future__ import annotations

"""
Core type aliases, the decoded image record, and lightweight helpers.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBAPixel = Tuple[int, int, int, int]  # (r, g, b, a), each 0..255
RGBTuple = Tuple[int, int, int]
HexStr = str

SampleRow = NDArray[np.uint16]  # one row of native-depth samples
U8Image = NDArray[np.uint8]  # (H, W, 4)
U8Palette = NDArray[np.uint8]  # (P, 3) or (P, 4)

SampleData = Union[bytes, bytearray, memoryview, Sequence[int], NDArray[np.generic]]
PaletteInput = Union[Sequence[Sequence[int]], NDArray[np.generic]]

# Value objects


@dataclass(frozen=True)
class DecodedImage:
    """
    Image record produced by a container decoder.

    data holds raw sample bytes (rows byte-aligned). For depth 16 it may
    instead hold native 16-bit elements, one per sample.
    palette, when set, marks the image as indexed.
    transparency is a native-depth key: 1 sample for grey, 3 for RGB.
    """

    width: int
    height: int
    channels: int
    depth: int
    data: SampleData
    palette: Optional[PaletteInput] = None
    transparency: Optional[Sequence[int]] = None

    @property
    def is_indexed(self) -> bool:
        return self.palette is not None


class ChannelLayout(IntEnum):
    """The four interleaved sample layouts, valued by channel count."""

    GREY = 1
    GREY_ALPHA = 2
    RGB = 3
    RGBA = 4

    @property
    def has_alpha(self) -> bool:
        return self in (ChannelLayout.GREY_ALPHA, ChannelLayout.RGBA)


# Small helpers


def rgb_to_hex(rgb: Sequence[int]) -> HexStr:
    """RGB triple to lowercase hex string '#rrggbb'."""
    return f"#{int(rgb[0]):02x}{int(rgb[1]):02x}{int(rgb[2]):02x}"


# Callable signatures

# (sample window, scale lut, raw key or None) -> pixel
PixelAssembler = Callable[
    [Sequence[int], Sequence[int], Optional[Tuple[int, ...]]],
    RGBAPixel,
]

__all__ = [
    # aliases / types
    "RGBAPixel",
    "RGBTuple",
    "HexStr",
    "SampleRow",
    "U8Image",
    "U8Palette",
    "SampleData",
    "PaletteInput",
    # value objects
    "DecodedImage",
    "ChannelLayout",
    # helpers
    "rgb_to_hex",
    # callable signatures
    "PixelAssembler",
]
