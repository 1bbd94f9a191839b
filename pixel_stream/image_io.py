# pixel_stream/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from .bit_depth import to_byte
from .core_types import DecodedImage
from .utils import warn

"""
Pillow adapter: builds DecodedImage records from Pillow images.

Pillow does the container work (chunks, zlib, CRC, interlace). This module
maps each Pillow mode onto channels/depth/data and folds palette
transparency into 4-component palette entries. Colour-key transparency is
re-expressed against the 8-bit samples Pillow hands back.

  "1"                      -> depth 1, grey, packed rows
  "L" / "LA" / "RGB"/"RGBA"-> depth 8, 1/2/3/4 channels
  "I;16*" / "I"            -> depth 16, grey, native uint16 elements
  "P"                      -> depth 8 indices + palette
  "PA" and anything else   -> converted to RGBA first (with a warning)
"""

_DIRECT_MODES = {"L": 1, "LA": 2, "RGB": 3, "RGBA": 4}
_DEPTH16_DTYPES = {"I;16": "<u2", "I;16L": "<u2", "I;16B": ">u2", "I;16N": "=u2"}


def _source_rawmode(im: Image.Image) -> Optional[str]:
    # Only available until the image is loaded; load() clears the tile list.
    tile = getattr(im, "tile", None) or []
    if not tile:
        return None
    args = tile[0][3]
    if isinstance(args, tuple):
        args = args[0] if args else None
    return args if isinstance(args, str) else None


def _source_depth(rawmode: Optional[str]) -> int:
    """Bits per sample in the file, read from a rawmode such as "L;2" or "RGB;16B"."""
    if rawmode is None:
        return 8
    if rawmode == "1":
        return 1
    suffix = rawmode.partition(";")[2]
    if suffix.startswith("16"):
        return 16
    if suffix in ("1", "2", "4"):
        return int(suffix)
    return 8


def _key_components(value: object) -> Optional[List[int]]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return None
    if isinstance(value, int):
        return [value]
    return [int(v) for v in value]  # type: ignore[union-attr]


def _eight_bit_key(value: object, source_depth: int) -> Optional[List[int]]:
    """
    Express a file's native-depth key against Pillow's 8-bit samples.

    Sub-byte grey is stretched by Pillow with the same linear map as
    to_byte(), so the key is stretched too. 16-bit samples are cut to their
    high byte, which many raw values share; no 8-bit key can stand in for the
    raw one there, so the key is dropped.
    """
    key = _key_components(value)
    if key is None or source_depth == 8:
        return key
    if source_depth == 16:
        warn("16-bit transparency key cannot be matched on 8-bit samples; ignoring it")
        return None
    return [to_byte(v, source_depth) for v in key]


def _palette_entries(im: Image.Image) -> List[Tuple[int, ...]]:
    width = 4 if im.palette is not None and im.palette.mode == "RGBA" else 3
    flat: Sequence[int] = im.getpalette("RGBA" if width == 4 else "RGB") or []
    entries = [tuple(flat[i : i + width]) for i in range(0, len(flat) - width + 1, width)]

    trns = im.info.get("transparency")
    if trns is None or not entries:
        return entries

    alphas = [e[3] if width == 4 else 255 for e in entries]
    if isinstance(trns, (bytes, bytearray)):
        for i, a in enumerate(trns[: len(alphas)]):
            alphas[i] = a
    elif isinstance(trns, int) and 0 <= trns < len(alphas):
        alphas[trns] = 0
    return [(e[0], e[1], e[2], a) for e, a in zip(entries, alphas)]


def decoded_image_from_pil(
    im: Image.Image, source_rawmode: Optional[str] = None
) -> DecodedImage:
    """
    Describe a Pillow image as a DecodedImage without changing its samples.

    source_rawmode is the file's raw sample layout (e.g. "L;2", "RGB;16B").
    When omitted it is read from the image's tile list, which only exists
    until the image is loaded; a loaded image is taken to hold 8-bit samples.
    """
    if source_rawmode is None:
        source_rawmode = _source_rawmode(im)
    source_depth = _source_depth(source_rawmode)
    width, height = im.size
    mode = im.mode

    if mode == "1":
        key = _key_components(im.info.get("transparency"))
        return DecodedImage(
            width,
            height,
            1,
            1,
            im.tobytes(),
            transparency=[1 if key[0] else 0] if key else None,
        )

    if mode in _DIRECT_MODES:
        return DecodedImage(
            width,
            height,
            _DIRECT_MODES[mode],
            8,
            im.tobytes(),
            transparency=_eight_bit_key(im.info.get("transparency"), source_depth),
        )

    if mode in _DEPTH16_DTYPES:
        samples = np.frombuffer(im.tobytes(), dtype=_DEPTH16_DTYPES[mode])
        return DecodedImage(
            width,
            height,
            1,
            16,
            samples.astype(np.uint16),
            transparency=_key_components(im.info.get("transparency")),
        )

    if mode == "I":
        samples = np.asarray(im, dtype=np.int64).ravel()
        if samples.size and 0 <= samples.min() and samples.max() <= 0xFFFF:
            return DecodedImage(
                width,
                height,
                1,
                16,
                samples.astype(np.uint16),
                transparency=_key_components(im.info.get("transparency")),
            )

    if mode == "P":
        return DecodedImage(
            width, height, 1, 8, im.tobytes(), palette=_palette_entries(im)
        )

    warn(f"mode {mode} has no direct sample layout; converting to RGBA")
    return decoded_image_from_pil(im.convert("RGBA"))


def load_decoded_image(path: Path) -> DecodedImage:
    """Open an image file with Pillow and describe it as a DecodedImage."""
    with Image.open(path) as im:
        return decoded_image_from_pil(im)


def decoded_image_from_bytes(blob: bytes) -> DecodedImage:
    """Same as load_decoded_image() for an in-memory file."""
    with Image.open(io.BytesIO(blob)) as im:
        return decoded_image_from_pil(im)


__all__ = ["decoded_image_from_pil", "load_decoded_image", "decoded_image_from_bytes"]
