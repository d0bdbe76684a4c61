"""
Color Codec
===========
Parses ``#rgb`` / ``#rrggbb`` tokens into normalized RGB channels and
formats them as content-stream paint operators.

An unparseable token is not an error: it yields ``None`` and the caller
skips the paint operation.
"""

from __future__ import annotations

import re
from typing import Optional

RGB = tuple[float, float, float]

HEX_PATTERN = re.compile(r"[0-9a-fA-F]{6}")

BLACK: RGB = (0.0, 0.0, 0.0)


def parse_color(token: Optional[str]) -> Optional[RGB]:
    """
    Parse a hex color token.

    Accepts ``"#1a2b3c"``, ``"1a2b3c"``, ``"#abc"`` and ``"abc"``.
    Returns ``None`` for ``None``, ``"none"`` or anything malformed.
    """
    if token is None:
        return None
    token = token.strip()
    if token.lower() == "none":
        return None
    if token.startswith("#"):
        token = token[1:]
    if len(token) == 3:
        token = "".join(c * 2 for c in token)
    if not HEX_PATTERN.fullmatch(token):
        return None
    return (
        int(token[0:2], 16) / 255,
        int(token[2:4], 16) / 255,
        int(token[4:6], 16) / 255,
    )


def color_operator(rgb: RGB, stroke: bool = False) -> str:
    """Format ``rgb`` as a fill (``rg``) or stroke (``RG``) operator."""
    op = "RG" if stroke else "rg"
    r, g, b = rgb
    return f"{r:.3f} {g:.3f} {b:.3f} {op}"
