"""
Filename and size helpers.

File type:  lower-case extension of the upload name, e.g. ``trades.XML`` → ``xml``
File size:  kilobytes with two decimals, rendered as ``"12.34 KB"``
"""

import os
import re
from decimal import ROUND_HALF_UP, Decimal

# Pattern: "<number> KB"  (unit optional, surrounding whitespace ignored)
_SIZE_RE = re.compile(
    r"^\s*(?P<value>[+-]?(?:\d+(?:\.\d*)?|\.\d+))\s*(?:KB)?\s*$",
    re.IGNORECASE,
)


def file_type_for(filename: str) -> str:
    """Return the extension of *filename* without the dot, lower-cased."""
    _, ext = os.path.splitext(os.path.basename(filename))
    return ext.lstrip(".").lower()


def round_half_up(value: float, places: int) -> float:
    """Round like JavaScript's ``toFixed``: exact halves go away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def bytes_to_kb(size_bytes: int) -> float:
    return round_half_up(size_bytes / 1024, 2)


def format_kb(size_kb: float, unit: str = "KB") -> str:
    return f"{size_kb:.2f} {unit}"


def format_size_kb(size_bytes: int) -> str:
    """Render a byte count the way file sizes are displayed: ``"1.50 KB"``."""
    return format_kb(bytes_to_kb(size_bytes))


def parse_size_kb(text: str) -> float:
    """
    Recover the numeric value from a formatted size like ``"12.34 KB"``.

    Raises ``ValueError`` when *text* is not a size.
    """
    m = _SIZE_RE.match(text or "")
    if not m:
        raise ValueError(f"Not a file size: {text!r}")
    return float(m.group("value"))
