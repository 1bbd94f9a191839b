# pixel_stream/stream.py
from __future__ import annotations

"""
Pixel stream producer.

rgba_pixels(image) validates a DecodedImage up front and returns a lazy,
single-pass iterator of exactly width*height (r, g, b, a) tuples in raster
order. Validation errors are raised by the call itself, so a malformed image
yields no pixels at all. Samples are unpacked one row at a time as the
consumer pulls; nothing holds the whole pixel raster.
"""

import numbers
from typing import Iterator

from .bit_depth import check_sample_length, iter_sample_rows, require_depth, sample_buffer
from .channels import channel_layout, iter_channel_pixels, transparency_key
from .constants import MAX_PALETTE_DEPTH
from .core_types import ChannelLayout, DecodedImage, RGBAPixel
from .errors import InvalidDimensions, UnsupportedBitDepth, UnsupportedChannelCount
from .palette import check_indices, iter_palette_pixels, palette_table, rgba_table


def _check_dimension(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise InvalidDimensions(f"Image {name} must be a positive integer, got {value!r}")


def _indexed_pixels(image: DecodedImage) -> Iterator[RGBAPixel]:
    table = palette_table(image.palette)  # type: ignore[arg-type]
    if image.channels != ChannelLayout.GREY:
        raise UnsupportedChannelCount(
            f"Indexed images carry one index sample per pixel, got {image.channels} channels"
        )
    if image.depth > MAX_PALETTE_DEPTH:
        raise UnsupportedBitDepth(
            f"Indexed images are limited to {MAX_PALETTE_DEPTH}-bit indices, got {image.depth}"
        )

    shape = (image.width, image.height, 1, image.depth)
    buffer = sample_buffer(image.data, image.depth)
    check_sample_length(buffer, *shape)
    # Full index scan before the first pixel; rows are re-unpacked when streaming.
    check_indices(iter_sample_rows(buffer, *shape), table.shape[0])
    return iter_palette_pixels(iter_sample_rows(buffer, *shape), rgba_table(table))


def _direct_pixels(image: DecodedImage) -> Iterator[RGBAPixel]:
    layout = channel_layout(image.channels)
    shape = (image.width, image.height, int(layout), image.depth)
    buffer = sample_buffer(image.data, image.depth)
    check_sample_length(buffer, *shape)
    key = transparency_key(image.transparency, layout, image.depth)
    return iter_channel_pixels(
        iter_sample_rows(buffer, *shape), layout, image.depth, key
    )


def rgba_pixels(image: DecodedImage) -> Iterator[RGBAPixel]:
    """
    Decode image into a forward-only stream of 8-bit RGBA tuples.

    Indexed images (palette set) go through the palette table exclusively;
    everything else is assembled from its channel samples.

    Raises:
      InvalidDimensions, UnsupportedBitDepth, UnsupportedChannelCount,
      MissingPalette, UnsupportedPaletteFormat, IndexOutOfRange,
      TruncatedData, InvalidSampleData, InvalidTransparency
    """
    _check_dimension("width", image.width)
    _check_dimension("height", image.height)
    require_depth(image.depth)
    if image.is_indexed:
        return _indexed_pixels(image)
    return _direct_pixels(image)


__all__ = ["rgba_pixels"]
