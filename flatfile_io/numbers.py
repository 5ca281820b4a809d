"""
Strict number parsing for flatfile-io typed getters.

Stored values are plain strings. The typed getters (``get_int``,
``get_uint``, ``get_float32``, ``get_float64``) convert them with the
functions below, which are deliberately stricter than Python's own
``int()`` / ``float()``:

- No surrounding whitespace (values are already trimmed on load).
- No ``_`` digit separators.
- Integers are range-checked against 64-bit signed / unsigned limits.
- Floats that overflow their width are rejected instead of silently
  becoming ``inf``.

Every function raises ``ValueError`` naming the offending text.
"""

from __future__ import annotations

import math
import re

import numpy as np

_INT_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
_UINT_PATTERN = re.compile(r"\d+", re.ASCII)
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE | re.ASCII,
)

_INT64 = np.iinfo(np.int64)
_UINT64 = np.iinfo(np.uint64)


def parse_int(text: str) -> int:
    """Parse a signed 64-bit decimal integer."""
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid syntax for int: {text!r}")
    value = int(text)
    if not _INT64.min <= value <= _INT64.max:
        raise ValueError(f"value out of range for int: {text!r}")
    return value


def parse_uint(text: str) -> int:
    """Parse an unsigned 64-bit decimal integer (no sign allowed)."""
    if not _UINT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid syntax for uint: {text!r}")
    value = int(text)
    if value > _UINT64.max:
        raise ValueError(f"value out of range for uint: {text!r}")
    return value


def _parse_float(text: str, kind: str) -> float:
    if not _FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid syntax for {kind}: {text!r}")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise ValueError(f"value out of range for {kind}: {text!r}")
    return value


def parse_float64(text: str) -> float:
    """Parse a double-precision float (decimal, exponent, inf or nan)."""
    return _parse_float(text, "float64")


def parse_float32(text: str) -> np.float32:
    """Parse a float and narrow it to single precision.

    A finite input that only overflows after narrowing is rejected.
    """
    value = _parse_float(text, "float32")
    with np.errstate(over="ignore"):
        narrowed = np.float32(value)
    if np.isinf(narrowed) and math.isfinite(value):
        raise ValueError(f"value out of range for float32: {text!r}")
    return narrowed
