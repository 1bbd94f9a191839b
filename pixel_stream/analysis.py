# pixel_stream/analysis.py
from __future__ import annotations

"""
Consumers of the RGBA stream: opaque filtering, ARGB packing, raster
collection and colour usage counts.
"""

from itertools import islice
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .constants import OPAQUE
from .core_types import RGBAPixel, RGBTuple, U8Image, rgb_to_hex

# ==========
# Filtering
# ==========
def opaque_pixels(pixels: Iterable[RGBAPixel]) -> Iterator[RGBAPixel]:
    """Keep fully opaque pixels only. Lazy."""
    return (p for p in pixels if p[3] == OPAQUE)


def take(pixels: Iterable[RGBAPixel], limit: Optional[int]) -> Iterator[RGBAPixel]:
    """First `limit` pixels, or all of them when limit is None."""
    if limit is None:
        return iter(pixels)
    return islice(pixels, max(0, int(limit)))


# ===========
# ARGB ints
# ===========
def argb_from_rgb(red: int, green: int, blue: int) -> int:
    """Pack 8-bit RGB into 0xAARRGGBB with alpha 0xff."""
    return (0xFF << 24) | ((red & 0xFF) << 16) | ((green & 0xFF) << 8) | (blue & 0xFF)


def rgb_from_argb(argb: int) -> RGBTuple:
    return ((argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF)


def opaque_argb(pixels: Iterable[RGBAPixel]) -> Iterator[int]:
    """Opaque pixels packed as ARGB ints, ready for a colour quantizer."""
    return (argb_from_rgb(r, g, b) for r, g, b, _a in opaque_pixels(pixels))


# ===================
# Raster / statistics
# ===================
def rgba_array(pixels: Iterable[RGBAPixel], width: int, height: int) -> U8Image:
    """
    Collect a pixel stream into a (H, W, 4) uint8 array.

    The stream must hold exactly width*height pixels.
    """
    flat = np.fromiter(
        (c for p in pixels for c in p), dtype=np.uint8, count=width * height * 4
    )
    return flat.reshape(height, width, 4)


def colour_usage(
    pixels: Iterable[RGBAPixel], top_k: Optional[int] = None
) -> List[Tuple[str, int]]:
    """
    Count colours of visible (alpha > 0) pixels.

    Returns a list of (hex, count) sorted by count descending, then hex.
    """
    packed = np.fromiter(
        (argb_from_rgb(r, g, b) for r, g, b, a in pixels if a > 0), dtype=np.uint32
    )
    if packed.size == 0:
        return []
    uniques, counts = np.unique(packed, return_counts=True)
    order = np.lexsort((uniques, -counts))
    if top_k is not None:
        order = order[: max(0, int(top_k))]
    return [
        (rgb_to_hex(rgb_from_argb(int(uniques[i]))), int(counts[i])) for i in order
    ]


__all__ = [
    "opaque_pixels",
    "take",
    "argb_from_rgb",
    "rgb_from_argb",
    "opaque_argb",
    "rgba_array",
    "colour_usage",
]
