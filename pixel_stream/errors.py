# pixel_stream/errors.py
"""
Decode errors.

Every failure is fatal for the image being decoded: the stream raises before
yielding its first pixel and never falls back to default colours.
"""

from __future__ import annotations


class SampleDecodeError(ValueError):
    """Base class for malformed image records."""


class MissingPalette(SampleDecodeError):
    """Indexed image whose palette is empty."""


class UnsupportedPaletteFormat(SampleDecodeError):
    """Palette entries are mixed width, not 3/4 components, or out of range."""


class IndexOutOfRange(SampleDecodeError):
    """An index sample points past the end of the palette."""


class TruncatedData(SampleDecodeError):
    """Sample buffer shorter than width*height*channels samples require."""


class UnsupportedChannelCount(SampleDecodeError):
    """Channel count outside {1, 2, 3, 4}."""


class UnsupportedBitDepth(SampleDecodeError):
    """Bit depth outside {1, 2, 4, 8, 16}."""


class InvalidTransparency(SampleDecodeError):
    """Transparency key with the wrong component count or range."""


class InvalidDimensions(SampleDecodeError):
    """Width or height is not a positive integer."""


class InvalidSampleData(SampleDecodeError):
    """Sample elements that are not integers or do not fit 8/16 bits."""


__all__ = [
    "SampleDecodeError",
    "MissingPalette",
    "UnsupportedPaletteFormat",
    "IndexOutOfRange",
    "TruncatedData",
    "UnsupportedChannelCount",
    "UnsupportedBitDepth",
    "InvalidTransparency",
    "InvalidDimensions",
    "InvalidSampleData",
]
