"""
Cross-Reference Writer
======================
Serializes a finished object list into a classic PDF file.

Output layout:
    header
    N 0 obj ... endobj        (in id order)
    xref table                (fixed-width offsets)
    trailer / startxref / %%EOF

The writer is single-pass and append-only. Each object's offset is the
running byte count at the moment its first byte is written.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from .values import Ref, serialize

if TYPE_CHECKING:
    from .document import PdfObject

logger = logging.getLogger(__name__)

HEADER = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"
TEXT_ENCODING = "latin-1"


def encode_text(text: str) -> bytes:
    """Encode PDF syntax text; characters outside Latin-1 become ``?``."""
    return text.encode(TEXT_ENCODING, errors="replace")


class PdfWriter:
    """
    Single-use serializer for one object list.
    """

    def __init__(self):
        self._buffer = bytearray()
        self._offset = 0
        self._obj_offsets: dict[int, int] = {}

    def _write_raw(self, data: bytes) -> None:
        self._buffer.extend(data)
        self._offset += len(data)

    def _write_text(self, text: str) -> None:
        self._write_raw(encode_text(text))

    def _write_object(self, obj: PdfObject) -> None:
        self._obj_offsets[obj.id] = self._offset
        self._write_text(f"{obj.id} 0 obj\n{serialize(obj.dict)}\n")
        if obj.stream is not None:
            self._write_raw(b"stream\n")
            self._write_raw(obj.stream)
            self._write_raw(b"\nendstream\nendobj\n")
        else:
            self._write_raw(b"endobj\n")

    def _write_xref(self, count: int) -> int:
        xref_offset = self._offset
        self._write_text(f"xref\n0 {count + 1}\n")
        self._write_raw(b"0000000000 65535 f \n")
        for obj_id in range(1, count + 1):
            off = self._obj_offsets[obj_id]
            self._write_text(f"{off:010d} 00000 n \n")
        return xref_offset

    def write(
        self,
        objects: Sequence[PdfObject],
        root: Ref,
        info: Optional[Ref] = None,
    ) -> bytes:
        """
        Serialize ``objects`` (ids 1..N in order) and return the file bytes.

        Args:
            objects: Every allocated object, in id order.
            root: Reference to the catalog.
            info: Optional reference to the document information dictionary.
        """
        if self._buffer:
            raise RuntimeError("PdfWriter instances are single-use")

        self._write_raw(HEADER)
        for expected_id, obj in enumerate(objects, start=1):
            if obj.id != expected_id:
                raise ValueError(
                    f"Object ids must be contiguous: expected {expected_id}, "
                    f"got {obj.id}"
                )
            self._write_object(obj)

        xref_offset = self._write_xref(len(objects))

        trailer = {
            "Size": len(objects) + 1,
            "Root": root,
            "Info": info,
        }
        self._write_text(f"trailer\n{serialize(trailer)}\n")
        self._write_text(f"startxref\n{xref_offset}\n%%EOF\n")

        logger.debug(
            f"Serialized {len(objects)} objects, xref at {xref_offset}, "
            f"{self._offset:,} bytes total"
        )
        return bytes(self._buffer)


def write_pdf(
    objects: Sequence[PdfObject],
    root: Ref,
    info: Optional[Ref] = None,
) -> bytes:
    """Serialize an object list with a fresh writer."""
    return PdfWriter().write(objects, root, info)
