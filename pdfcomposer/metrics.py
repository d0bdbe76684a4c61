"""
Text Metrics
============
Advance widths for the built-in Helvetica font.

Widths are in glyph-space units (1/1000 of the font size) for the
printable ASCII range 32-126. Anything outside that range is measured
with an average width.
"""

from __future__ import annotations

# ─── Width Table ──────────────────────────────────────────────────────────────

FIRST_CHAR = 32
LAST_CHAR = 126
FALLBACK_WIDTH = 556

WIDTHS: tuple[int, ...] = (
    278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 278, 278, 584, 584, 584, 556,
    1015, 667, 667, 722, 722, 667, 611, 778, 722, 278, 500, 667, 556, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 278, 278, 278, 469, 556,
    333, 556, 556, 500, 556, 556, 278, 556, 556, 222, 222, 500, 222, 833, 556, 556,
    556, 556, 333, 500, 278, 556, 500, 722, 500, 500, 500, 334, 260, 334, 584,
)


def char_width(char: str) -> int:
    """Advance width of a single character in glyph-space units."""
    code = ord(char)
    if FIRST_CHAR <= code <= LAST_CHAR:
        return WIDTHS[code - FIRST_CHAR]
    return FALLBACK_WIDTH


def measure_text(text: str, size: float) -> float:
    """
    Measure the width of a run of text in points.

    Args:
        text: Characters to measure.
        size: Font size in points.

    Returns:
        Sum of the glyph advances scaled by ``size / 1000``.
    """
    total = sum(char_width(c) for c in text)
    return total * size / 1000
