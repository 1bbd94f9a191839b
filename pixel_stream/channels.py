# pixel_stream/channels.py
from __future__ import annotations

"""
Channel assembler for non-indexed images.

Each ChannelLayout has exactly one pure function turning a window of native
samples into an RGBA pixel:

  GREY       (Y)      -> (y, y, y, 255 | 0 on key match)
  GREY_ALPHA (Y, A)   -> (y, y, y, a)
  RGB        (R, G, B)-> (r, g, b, 255 | 0 on key match)
  RGBA       (R,G,B,A)-> (r, g, b, a)

Key matching compares raw samples, before rescaling. At depth 16 many raw
values share one byte value, so only the native sample identifies the key.
"""

from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .bit_depth import byte_lut
from .constants import KEY_COMPONENTS, OPAQUE, SUPPORTED_CHANNELS, TRANSPARENT
from .core_types import ChannelLayout, PixelAssembler, RGBAPixel
from .errors import InvalidTransparency, UnsupportedChannelCount

Key = Optional[Tuple[int, ...]]


def _assemble_grey(window: Sequence[int], lut: Sequence[int], key: Key) -> RGBAPixel:
    grey = window[0]
    alpha = TRANSPARENT if key is not None and grey == key[0] else OPAQUE
    y = lut[grey]
    return (y, y, y, alpha)


def _assemble_grey_alpha(
    window: Sequence[int], lut: Sequence[int], key: Key
) -> RGBAPixel:
    y = lut[window[0]]
    return (y, y, y, lut[window[1]])


def _assemble_rgb(window: Sequence[int], lut: Sequence[int], key: Key) -> RGBAPixel:
    red, green, blue = window[0], window[1], window[2]
    alpha = OPAQUE
    if key is not None and red == key[0] and green == key[1] and blue == key[2]:
        alpha = TRANSPARENT
    return (lut[red], lut[green], lut[blue], alpha)


def _assemble_rgba(window: Sequence[int], lut: Sequence[int], key: Key) -> RGBAPixel:
    return (lut[window[0]], lut[window[1]], lut[window[2]], lut[window[3]])


ASSEMBLERS: Dict[ChannelLayout, PixelAssembler] = {
    ChannelLayout.GREY: _assemble_grey,
    ChannelLayout.GREY_ALPHA: _assemble_grey_alpha,
    ChannelLayout.RGB: _assemble_rgb,
    ChannelLayout.RGBA: _assemble_rgba,
}


@lru_cache(maxsize=None)
def _lut_values(depth: int) -> Tuple[int, ...]:
    return tuple(byte_lut(depth).tolist())


def channel_layout(channels: int) -> ChannelLayout:
    """Resolve a channel count to its layout, or raise UnsupportedChannelCount."""
    try:
        return ChannelLayout(int(channels))
    except ValueError:
        raise UnsupportedChannelCount(
            f"Unknown channel count: {channels} (expected one of {SUPPORTED_CHANNELS})"
        ) from None


def transparency_key(
    transparency: Optional[Sequence[int]], layout: ChannelLayout, depth: int
) -> Key:
    """
    Validate a native-depth transparency key for layout.

    Returns None when no key applies: none declared, an empty declaration,
    or a layout that carries its own alpha channel.
    """
    if transparency is None or layout.has_alpha:
        return None
    values = [int(v) for v in transparency]
    if not values:
        return None
    expected = KEY_COMPONENTS[int(layout)]
    if len(values) != expected:
        raise InvalidTransparency(
            f"Transparency key for {layout.name} needs {expected} component(s), got {len(values)}"
        )
    max_value = (1 << depth) - 1
    for v in values:
        if v < 0 or v > max_value:
            raise InvalidTransparency(
                f"Transparency key component {v} outside 0..{max_value} for depth {depth}"
            )
    return tuple(values)


def assemble_pixel(
    window: Sequence[int], layout: ChannelLayout, depth: int, key: Key = None
) -> RGBAPixel:
    """Single-pixel form of iter_channel_pixels(); window holds raw samples."""
    return ASSEMBLERS[layout]([int(v) for v in window], _lut_values(depth), key)


def iter_channel_pixels(
    rows: Iterable[np.ndarray], layout: ChannelLayout, depth: int, key: Key = None
) -> Iterator[RGBAPixel]:
    """Yield RGBA pixels from rows of native samples, in raster order."""
    assemble = ASSEMBLERS[layout]
    step = int(layout)
    lut = _lut_values(depth)
    for row in rows:
        samples: List[int] = row.tolist()
        for offset in range(0, len(samples), step):
            yield assemble(samples[offset : offset + step], lut, key)


__all__ = [
    "ASSEMBLERS",
    "channel_layout",
    "transparency_key",
    "assemble_pixel",
    "iter_channel_pixels",
]
