"""
Data Models
===========
Pydantic models and enums shared by the composer modules.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field


# ─── Enums ────────────────────────────────────────────────────────────────────


class ColorSpace(str, Enum):
    """Device color space of an embedded image."""
    GRAY = "DeviceGray"
    RGB = "DeviceRGB"
    CMYK = "DeviceCMYK"


class TextAlign(str, Enum):
    """Horizontal alignment of a text run inside a box."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class BlockType(str, Enum):
    """Classification of one line of block-structured input."""
    HEADING = "heading"
    BULLET = "bullet"
    ORDERED = "ordered"
    RULE = "rule"
    BLANK = "blank"
    PARAGRAPH = "paragraph"


class PageSize(Enum):
    """Common page sizes in points."""
    LETTER = (612, 792)
    LEGAL = (612, 1008)
    A4 = (595.28, 841.89)

    @property
    def width(self) -> float:
        return self.value[0]

    @property
    def height(self) -> float:
        return self.value[1]


# ─── Image Model ──────────────────────────────────────────────────────────────


class ImageInfo(BaseModel):
    """Dimensions read from a JPEG frame header."""
    width: int = Field(ge=0)
    height: int = Field(ge=0)
    components: int = Field(
        ge=0,
        description="Number of color components declared by the frame",
    )

    @computed_field
    @property
    def color_space(self) -> ColorSpace:
        if self.components == 1:
            return ColorSpace.GRAY
        if self.components == 4:
            return ColorSpace.CMYK
        return ColorSpace.RGB


# ─── Layout Model ─────────────────────────────────────────────────────────────


class LayoutItem(BaseModel):
    """
    One positioned line produced by the layout engine.
    ``y`` is assigned during pagination.
    """
    kind: BlockType
    text: str = ""
    size: float = Field(gt=0)
    indent: float = 0
    space_before: float = 0
    space_after: float = 0
    color: Optional[str] = None
    y: Optional[float] = None

    @property
    def height(self) -> float:
        """Vertical space consumed by this item."""
        return self.space_before + self.size + self.space_after


# ─── Document Information ─────────────────────────────────────────────────────


class DocumentInfo(BaseModel):
    """Optional document information dictionary."""
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not any(self.model_dump().values())

    def as_pdf_dict(self) -> dict:
        """Keys in PDF spelling; unset fields stay ``None`` and are omitted."""
        return {
            "Title": self.title,
            "Author": self.author,
            "Subject": self.subject,
            "Creator": self.creator,
            "Producer": self.producer,
        }


# ─── Validation Model ─────────────────────────────────────────────────────────


class ValidationReport(BaseModel):
    """Structural check of a serialized document."""
    header_ok: bool = False
    eof_ok: bool = False
    startxref_ok: bool = False
    xref_entries: int = 0
    trailer_size: int = 0
    object_count: int = 0
    page_count: int = 0
    image_count: int = 0
    annotation_count: int = 0
    bad_offsets: list[int] = Field(
        default_factory=list,
        description="Object ids whose xref offset does not point at 'N 0 obj'",
    )

    @computed_field
    @property
    def is_valid(self) -> bool:
        return (
            self.header_ok
            and self.eof_ok
            and self.startxref_ok
            and not self.bad_offsets
            and self.trailer_size == self.xref_entries
            and self.xref_entries == self.object_count + 1
        )
