"""
PDF Composer
============
Builds classic, uncompressed PDF files from drawing commands.

Architecture:
    - Text Metrics: Helvetica advance widths
    - Color Codec: hex tokens to RGB paint operators
    - Value Serializer: Python values to PDF syntax
    - Image Header Parser: JPEG frame header introspection
    - Document: object graph and page-drawing API
    - Writer: byte-exact serialization with cross-reference table
    - Layout Engine: block text to wrapped, paginated pages

Version: 1.0.0
"""

__version__ = "1.0.0"

from .document import Document, PageContext, PdfObject  # noqa: E402
from .exceptions import (  # noqa: E402
    AlreadyBuiltError,
    ComposerError,
    MalformedImageError,
    NoPagesError,
)
from .layout import LayoutEngine, markdown, wrap_text  # noqa: E402
from .metrics import measure_text  # noqa: E402
from .models import DocumentInfo, PageSize, TextAlign  # noqa: E402

__all__ = [
    "AlreadyBuiltError",
    "ComposerError",
    "Document",
    "DocumentInfo",
    "LayoutEngine",
    "MalformedImageError",
    "NoPagesError",
    "PageContext",
    "PageSize",
    "PdfObject",
    "TextAlign",
    "markdown",
    "measure_text",
    "wrap_text",
]
