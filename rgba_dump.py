#!/usr/bin/env python3
"""
rgba_dump.py
Stream the RGBA pixels of an image and report what the stream contains.

Usage:
  python rgba_dump.py INPUT [--limit N] [--opaque-only] [--top K] [--debug]

Input:
  Any Pillow-readable image, or "-" to read the file from stdin. Pillow parses
  the container; pixel_stream turns the samples into 8-bit RGBA.

Output:
  Image layout (size, depth, channels, indexed), pixel counts (total, opaque,
  transparent) and the most used visible colours.

Notes:
  --limit stops pulling from the stream after N pixels; the rest of the
  image is never decoded.
  Exit codes: 0 ok, 1 decode error, 2 input not found.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from pixel_stream import DecodedImage, RGBAPixel, SampleDecodeError, rgba_pixels
from pixel_stream.analysis import colour_usage, opaque_pixels, take
from pixel_stream.image_io import decoded_image_from_bytes, load_decoded_image
from pixel_stream.utils import (
    debug_log,
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: input path, or "-" for stdin
        limit: optional max pixels to pull from the stream
        opaque_only: bool, keep alpha=255 pixels only
        top: number of colours to list
        debug: bool for timing and layout details
    """
    parser = argparse.ArgumentParser(
        prog="rgba_dump",
        description="Decode an image to a lazy 8-bit RGBA stream and summarise it.",
    )
    parser.add_argument("src", help='Input image, or "-" for stdin')
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Stop after N pixels. Omit to decode the whole image.",
    )
    parser.add_argument(
        "--opaque-only",
        action="store_true",
        help="Only count fully opaque pixels (alpha=255).",
    )
    parser.add_argument(
        "--top", type=int, default=10, help="Number of colours to list"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def _load(src: str) -> DecodedImage:
    if src == "-":
        return decoded_image_from_bytes(sys.stdin.buffer.read())
    return load_decoded_image(Path(src))


def _counted(pixels: Iterable[RGBAPixel], counts: Dict[str, int]) -> Iterator[RGBAPixel]:
    for p in pixels:
        counts["Pixels"] += 1
        if p[3] == 255:
            counts["Opaque"] += 1
        elif p[3] == 0:
            counts["Transparent"] += 1
        yield p


def summarise(
    image: DecodedImage,
    limit: Optional[int],
    opaque_only: bool,
    top: int,
    debug: bool,
) -> None:
    """Decode image in one pass and log counts plus the top colours."""
    print_config_line(
        "image",
        [
            ("Size", f"{image.width}x{image.height}"),
            ("Depth", image.depth),
            ("Channels", image.channels),
            ("Indexed", image.is_indexed),
        ],
        debug=False,
    )

    t_start = time.perf_counter()
    counts = {"Pixels": 0, "Opaque": 0, "Transparent": 0}
    stream = _counted(take(rgba_pixels(image), limit), counts)
    if opaque_only:
        stream = opaque_pixels(stream)
    usage = colour_usage(stream, top_k=top)
    t_done = time.perf_counter()

    log(key_value_pairs_to_string(counts.items()))
    log("Colours used:")
    for hex_code, count in usage:
        log(f"  {hex_code}: {count:,}")

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Decode", format_seconds_compact(t_done - t_start)),
                    ("Limit", limit if limit is not None else "-"),
                    ("Opaque only", opaque_only),
                ]
            )
        )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = parse_cli_args(argv)

    if args.src != "-" and not Path(args.src).exists():
        error(f"not found: {args.src}")
        return 2

    print_banner("stdin" if args.src == "-" else Path(args.src).name)
    try:
        image = _load(args.src)
        summarise(image, args.limit, args.opaque_only, args.top, args.debug)
    except SampleDecodeError as e:
        error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
