# pixel_stream/palette.py
from __future__ import annotations

"""
Palette expander for indexed images.

Exports:
  palette_table(palette)            -> uint8 [P,3|4], validated
  rgba_table(table)                 -> tuple of RGBA pixels, alpha 255 for RGB entries
  check_indices(rows, palette_size) -> raises IndexOutOfRange
  iter_palette_pixels(rows, table)  -> RGBA pixels in raster order

Notes:
  Palette transparency (tRNS for indexed images) is expected to arrive folded
  into 4-component entries; it is not re-derived here.
"""

from typing import Iterable, Iterator, List, Tuple

import numpy as np

from .constants import OPAQUE, PALETTE_WIDTHS
from .core_types import PaletteInput, RGBAPixel, U8Palette
from .errors import IndexOutOfRange, MissingPalette, UnsupportedPaletteFormat


def palette_table(palette: PaletteInput) -> U8Palette:
    """
    Validate palette entries and return them as a (P, 3) or (P, 4) uint8 array.

    Raises:
      MissingPalette           : no entries
      UnsupportedPaletteFormat : mixed widths, widths other than 3/4, or
                                 components outside 0..255
    """
    if isinstance(palette, np.ndarray):
        if palette.ndim != 2:
            raise UnsupportedPaletteFormat(
                f"Palette array must be 2-D (P, 3|4), got shape {palette.shape}"
            )
        if palette.shape[0] == 0:
            raise MissingPalette("Indexed image is missing a colour palette")
        widths = {int(palette.shape[1])}
        rows = palette.astype(np.int64)
    else:
        entries = [list(entry) for entry in palette]
        if not entries:
            raise MissingPalette("Indexed image is missing a colour palette")
        widths = {len(entry) for entry in entries}
        if len(widths) != 1:
            raise UnsupportedPaletteFormat(
                f"Palette entries have mixed component counts: {sorted(widths)}"
            )
        rows = np.array(entries, dtype=np.int64)

    width = next(iter(widths))
    if width not in PALETTE_WIDTHS:
        raise UnsupportedPaletteFormat(f"Unsupported palette channel count: {width}")
    if rows.size and (rows.min() < 0 or rows.max() > 255):
        raise UnsupportedPaletteFormat("Palette components must lie in 0..255")
    return rows.astype(np.uint8)


def rgba_table(table: U8Palette) -> Tuple[RGBAPixel, ...]:
    """One RGBA tuple per palette entry."""
    if table.shape[1] == 4:
        return tuple((r, g, b, a) for r, g, b, a in table.tolist())
    return tuple((r, g, b, OPAQUE) for r, g, b in table.tolist())


def check_indices(rows: Iterable[np.ndarray], palette_size: int) -> None:
    """Scan every index sample; raise IndexOutOfRange on the first one past the table."""
    for row_number, row in enumerate(rows):
        if row.size == 0 or int(row.max()) < palette_size:
            continue
        column = int(np.flatnonzero(row.astype(np.int64) >= palette_size)[0])
        raise IndexOutOfRange(
            f"Palette index {int(row[column])} at ({column}, {row_number}) "
            f"out of range for palette of {palette_size} entries"
        )


def iter_palette_pixels(
    rows: Iterable[np.ndarray], table: Tuple[RGBAPixel, ...]
) -> Iterator[RGBAPixel]:
    """Yield table[index] for each index sample, in raster order."""
    for row in rows:
        indices: List[int] = row.tolist()
        for index in indices:
            yield table[index]


__all__ = ["palette_table", "rgba_table", "check_indices", "iter_palette_pixels"]
