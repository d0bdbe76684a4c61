"""
Document Builder
================
Owns the growing object graph of a PDF document and exposes the
page-drawing API.

Usage:
    doc = Document()
    doc.add_page(612, 792, lambda p: p.text("Hello", 72, 700, 24))
    data = doc.build()

Objects get ids 1, 2, 3, ... in allocation order and are never
renumbered. Pages are allocated as they are drawn; the shared font,
the page tree and the catalog are allocated by ``build()``, which then
backfills each page's parent and font slots.

Lifecycle:
    unbuilt --build()--> built
Any ``add_page()``, ``allocate()`` or ``build()`` after the transition
raises ``AlreadyBuiltError``, including drawing through a page context
kept past its callback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .color import BLACK, color_operator, parse_color
from .exceptions import AlreadyBuiltError, NoPagesError
from .jpeg import parse_jpeg_header
from .metrics import measure_text
from .models import DocumentInfo, PageSize, TextAlign
from .values import Name, Ref, format_number, pdf_string
from .writer import encode_text, write_pdf

logger = logging.getLogger(__name__)

FONT_RESOURCE = "F1"
UNDERLINE_OFFSET = 2
UNDERLINE_WIDTH = 0.75


@dataclass
class PdfObject:
    """An allocated object: its dictionary and optional stream payload."""

    id: int
    dict: dict
    stream: Optional[bytes] = None


DrawFn = Callable[["PageContext"], None]


class PageContext:
    """
    Drawing surface handed to a page callback.

    Every method appends content-stream operators for the page being
    built. Colors that do not parse skip the paint operation, except
    for text, which falls back to black.
    """

    def __init__(self, document: Document, width: float, height: float):
        self.document = document
        self.width = width
        self.height = height
        self.ops: list[str] = []
        self.images: list[tuple[str, Ref]] = []
        self.links: list[dict] = []

    def text(
        self,
        text: str,
        x: float,
        y: float,
        size: float,
        align: Union[TextAlign, str] = TextAlign.LEFT,
        width: Optional[float] = None,
        color: Optional[str] = "#000000",
    ) -> None:
        """
        Draw a single line of Helvetica text with its baseline at ``y``.

        With ``align`` center or right and a box ``width``, the run is
        positioned inside the box starting at ``x``. Without a width the
        run starts at ``x`` regardless of alignment.
        """
        align = TextAlign(align)
        tx = x
        if align != TextAlign.LEFT and width is not None:
            text_width = measure_text(text, size)
            if align == TextAlign.CENTER:
                tx = x + (width - text_width) / 2
            else:
                tx = x + width - text_width

        rgb = parse_color(color) or BLACK
        self.ops.append(color_operator(rgb))
        self.ops.append("BT")
        self.ops.append(f"/{FONT_RESOURCE} {format_number(size)} Tf")
        self.ops.append(f"{tx:.2f} {y:.2f} Td")
        self.ops.append(f"{pdf_string(text)} Tj")
        self.ops.append("ET")

    def rect(self, x: float, y: float, w: float, h: float, fill: Optional[str]) -> None:
        """Fill a rectangle whose lower-left corner is ``(x, y)``."""
        rgb = parse_color(fill)
        if rgb is None:
            return
        self.ops.append(color_operator(rgb))
        self.ops.append(f"{x:.2f} {y:.2f} {w:.2f} {h:.2f} re")
        self.ops.append("f")

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        stroke: Optional[str],
        line_width: float = 1,
    ) -> None:
        """Stroke a straight line segment."""
        rgb = parse_color(stroke)
        if rgb is None:
            return
        self.ops.append(f"{line_width:.2f} w")
        self.ops.append(color_operator(rgb, stroke=True))
        self.ops.append(f"{x1:.2f} {y1:.2f} m")
        self.ops.append(f"{x2:.2f} {y2:.2f} l")
        self.ops.append("S")

    def image(self, data: bytes, x: float, y: float, w: float, h: float) -> None:
        """
        Place a JPEG image scaled into the box ``(x, y, w, h)``.

        Raises:
            MalformedImageError: If the JPEG header cannot be read.
        """
        info = parse_jpeg_header(data)
        name = f"Im{len(self.images)}"
        ref = self.document.allocate(
            {
                "Type": Name("XObject"),
                "Subtype": Name("Image"),
                "Width": info.width,
                "Height": info.height,
                "ColorSpace": Name(info.color_space.value),
                "BitsPerComponent": 8,
                "Filter": Name("DCTDecode"),
                "Length": len(data),
            },
            bytes(data),
        )
        self.images.append((name, ref))

        self.ops.append("q")
        self.ops.append(f"{w:.2f} 0 0 {h:.2f} {x:.2f} {y:.2f} cm")
        self.ops.append(f"/{name} Do")
        self.ops.append("Q")

    def link(
        self,
        url: str,
        x: float,
        y: float,
        w: float,
        h: float,
        underline: Optional[str] = None,
    ) -> None:
        """
        Make the rectangle ``(x, y, w, h)`` a clickable URI link.

        The link itself draws nothing. With an ``underline`` color a thin
        line is stroked just below the rectangle.
        """
        self.links.append({
            "Type": Name("Annot"),
            "Subtype": Name("Link"),
            "Rect": [x, y, x + w, y + h],
            "Border": [0, 0, 0],
            "A": {
                "Type": Name("Action"),
                "S": Name("URI"),
                "URI": url,
            },
        })
        if underline is not None:
            uy = y - UNDERLINE_OFFSET
            self.line(x, uy, x + w, uy, underline, UNDERLINE_WIDTH)

    def content(self) -> bytes:
        """The accumulated content stream."""
        return encode_text("\n".join(self.ops))


class Document:
    """
    A PDF document under construction.

    Not thread-safe; callers sharing a document across threads must
    serialize access themselves.
    """

    measure_text = staticmethod(measure_text)

    def __init__(self, info: Optional[DocumentInfo] = None):
        self.info = info or DocumentInfo()
        self._objects: list[PdfObject] = []
        self._pages: list[Ref] = []
        self._next_id = 1
        self._built = False

    # ─── State ────────────────────────────────────────────────────────────

    @property
    def objects(self) -> tuple[PdfObject, ...]:
        return tuple(self._objects)

    @property
    def pages(self) -> tuple[Ref, ...]:
        return tuple(self._pages)

    @property
    def is_built(self) -> bool:
        return self._built

    def get(self, ref: Ref) -> PdfObject:
        """Look up an allocated object by reference."""
        return self._objects[ref.id - 1]

    def allocate(self, dictionary: dict, stream: Optional[bytes] = None) -> Ref:
        """
        Append a new object and return a reference to it.

        Raises:
            AlreadyBuiltError: If the document has been finalized.
        """
        if self._built:
            raise AlreadyBuiltError()
        return self._append(dictionary, stream)

    def _append(self, dictionary: dict, stream: Optional[bytes] = None) -> Ref:
        obj = PdfObject(id=self._next_id, dict=dictionary, stream=stream)
        self._next_id += 1
        self._objects.append(obj)
        return Ref(obj.id)

    # ─── Pages ────────────────────────────────────────────────────────────

    def add_page(self, width: float, height: float, draw: DrawFn) -> Ref:
        """
        Draw a page of the given size.

        ``draw`` is called once, synchronously, with a ``PageContext``.
        An exception raised inside it aborts the page and propagates.

        Returns:
            Reference to the new page object.
        """
        if self._built:
            raise AlreadyBuiltError()

        ctx = PageContext(self, width, height)
        draw(ctx)

        content = ctx.content()
        content_ref = self.allocate({"Length": len(content)}, content)

        annots = [self.allocate(link) for link in ctx.links]
        xobjects = {name: ref for name, ref in ctx.images}

        page_ref = self.allocate({
            "Type": Name("Page"),
            "Parent": None,
            "MediaBox": [0, 0, ctx.width, ctx.height],
            "Contents": content_ref,
            "Resources": {
                "Font": {FONT_RESOURCE: None},
                "XObject": xobjects or None,
            },
            "Annots": annots or None,
        })
        self._pages.append(page_ref)

        logger.debug(
            f"Added page {len(self._pages)} ({format_number(width)}x"
            f"{format_number(height)}): {len(ctx.ops)} ops, "
            f"{len(ctx.images)} images, {len(annots)} links"
        )
        return page_ref

    def page(self, draw: DrawFn, size: PageSize = PageSize.LETTER) -> Ref:
        """Draw a page using a preset size (US Letter by default)."""
        return self.add_page(size.width, size.height, draw)

    # ─── Finalization ─────────────────────────────────────────────────────

    def build(self) -> bytes:
        """
        Finalize the document and serialize it.

        Raises:
            AlreadyBuiltError: On a second call.
            NoPagesError: If no page was added.
        """
        if self._built:
            raise AlreadyBuiltError()
        if not self._pages:
            raise NoPagesError()

        self._built = True

        font_ref = self._append({
            "Type": Name("Font"),
            "Subtype": Name("Type1"),
            "BaseFont": Name("Helvetica"),
            "Encoding": Name("WinAnsiEncoding"),
        })
        pages_ref = self._append({
            "Type": Name("Pages"),
            "Kids": list(self._pages),
            "Count": len(self._pages),
        })

        for page_ref in self._pages:
            page = self.get(page_ref).dict
            page["Parent"] = pages_ref
            page["Resources"]["Font"][FONT_RESOURCE] = font_ref

        catalog_ref = self._append({
            "Type": Name("Catalog"),
            "Pages": pages_ref,
        })

        info_ref = None
        if not self.info.is_empty:
            info_ref = self._append(self.info.as_pdf_dict())

        data = write_pdf(self._objects, catalog_ref, info_ref)
        logger.info(
            f"Built document: {len(self._pages)} pages, "
            f"{len(self._objects)} objects, {len(data):,} bytes"
        )
        return data
