# pixel_stream/constants.py
"""
Format constants shared across the decoder.

- SUPPORTED_DEPTHS, SUBBYTE_DEPTHS
- SUPPORTED_CHANNELS, PALETTE_WIDTHS
- OPAQUE / TRANSPARENT alpha values
"""
from __future__ import annotations

from typing import Dict, Tuple

SUPPORTED_DEPTHS: Tuple[int, ...] = (1, 2, 4, 8, 16)
SUBBYTE_DEPTHS: Tuple[int, ...] = (1, 2, 4)
SUPPORTED_CHANNELS: Tuple[int, ...] = (1, 2, 3, 4)

# Components per palette entry: RGB or RGBA
PALETTE_WIDTHS: Tuple[int, ...] = (3, 4)
MAX_PALETTE_DEPTH = 8

OPAQUE = 255
TRANSPARENT = 0

# 16-bit samples map onto 0..255 by dividing by 65535 / 255
DEPTH16_DIVISOR = 257

# Transparency key components by channel count (alpha layouts take none)
KEY_COMPONENTS: Dict[int, int] = {1: 1, 3: 3}

__all__ = [
    "SUPPORTED_DEPTHS",
    "SUBBYTE_DEPTHS",
    "SUPPORTED_CHANNELS",
    "PALETTE_WIDTHS",
    "MAX_PALETTE_DEPTH",
    "OPAQUE",
    "TRANSPARENT",
    "DEPTH16_DIVISOR",
    "KEY_COMPONENTS",
]
