# pixel_stream/utils.py
from __future__ import annotations

"""
Shared utilities for pixel_stream.

Compact formatting for timings and counts, plus tidy line-oriented logging
used by the rgba_dump CLI. The decoder modules themselves never log.
"""

import sys
from typing import Any, Iterable, List, Tuple


#  Formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_value(value: Any) -> str:
    """'on'/'off' for bools, 1,234 for ints, trimmed floats, str() otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """Format (name, value) pairs as 'Name: value' blocks separated by sep."""
    out: List[str] = [f"{name}{eq}{format_value(value)}" for name, value in pairs]
    return sep.join(out)


#  Logging


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit one config line, e.g.:
      [image] Size: 640x480  Depth: 8  Channels: 4  Indexed: off
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "format_value",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
