"""
Value Serializer
================
In-memory PDF values and their textual encoding.

Python values map onto PDF values as follows:

    None            -> null (omitted when it is the value of a mapping entry)
    bool            -> true / false
    int, float      -> number
    str             -> literal string, escaped and parenthesized
    Name            -> name token (/Type)
    list, tuple     -> array
    Ref             -> indirect reference (12 0 R)
    dict            -> dictionary

Direct nesting must be acyclic; cycles go through ``Ref``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Name:
    """A PDF name object. Stored without the leading slash."""

    value: str

    def __str__(self) -> str:
        return f"/{self.value}"


@dataclass(frozen=True)
class Ref:
    """Indirect reference to an allocated object id."""

    id: int

    def __str__(self) -> str:
        return f"{self.id} 0 R"


_ESCAPES = {
    "\\": "\\\\",
    "(": "\\(",
    ")": "\\)",
    "\r": "\\r",
    "\n": "\\n",
}


def pdf_string(text: str) -> str:
    """Escape ``text`` and wrap it in parentheses."""
    return "(" + "".join(_ESCAPES.get(c, c) for c in text) + ")"


def format_number(value: float) -> str:
    """Integers verbatim, fractions to at most four decimal places."""
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot serialize non-finite number {value!r}")
    if value.is_integer():
        return str(int(value))
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def serialize(value: Any) -> str:
    """Encode a value tree as PDF syntax."""
    if value is None:
        return "null"
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, Name):
        return str(value)
    if isinstance(value, Ref):
        return str(value)
    if isinstance(value, str):
        return pdf_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(serialize(v) for v in value) + "]"
    if isinstance(value, dict):
        pairs = [
            f"/{key} {serialize(v)}"
            for key, v in value.items()
            if v is not None
        ]
        if not pairs:
            return "<< >>"
        return "<<\n" + "\n".join(pairs) + "\n>>"
    raise TypeError(f"Cannot serialize {type(value).__name__} as a PDF value")
