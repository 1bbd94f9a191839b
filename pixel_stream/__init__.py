# pixel_stream/__init__.py
"""
pixel_stream package.

Purpose:
  Decode already-parsed image records of any bit depth (1/2/4/8/16), channel
  layout (grey, grey+alpha, RGB, RGBA) or palette into a lazy stream of 8-bit
  RGBA pixels. See rgba_dump.py for the CLI.

Public API:
  rgba_pixels   : forward-only pixel stream for a DecodedImage.
  DecodedImage  : input record (width, height, channels, depth, data, palette, transparency).
  to_byte       : native-depth sample -> 0..255 rescale.
  bit_depth     : sample unpacking and rescaling.
  channels      : per-layout pixel assembly and transparency keys.
  palette       : palette validation and index expansion.
  analysis      : stream consumers (opaque filter, ARGB packing, colour usage).
  image_io      : Pillow adapter producing DecodedImage records.
  errors        : SampleDecodeError and its subclasses.

Quick start:
  from pixel_stream import DecodedImage, rgba_pixels
  pixels = rgba_pixels(DecodedImage(2, 1, 4, 8, bytes([10, 20, 30, 40, 200, 210, 220, 230])))
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import analysis
from . import bit_depth
from . import channels
from . import core_types
from . import errors
from . import image_io
from . import palette
from . import utils

from .bit_depth import to_byte
from .core_types import ChannelLayout, DecodedImage, RGBAPixel
from .errors import (
    IndexOutOfRange,
    InvalidDimensions,
    InvalidSampleData,
    InvalidTransparency,
    MissingPalette,
    SampleDecodeError,
    TruncatedData,
    UnsupportedBitDepth,
    UnsupportedChannelCount,
    UnsupportedPaletteFormat,
)
from .stream import rgba_pixels

__all__ = [
    "__version__",
    "analysis",
    "bit_depth",
    "channels",
    "core_types",
    "errors",
    "image_io",
    "palette",
    "utils",
    "to_byte",
    "ChannelLayout",
    "DecodedImage",
    "RGBAPixel",
    "rgba_pixels",
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
