"""
Image Header Parser
===================
Reads pixel dimensions and component count from a JPEG stream without
decoding it. The compressed bytes are later embedded unchanged with the
DCTDecode filter.

Walks the marker segments from the start-of-image marker until a frame
header (SOF0 baseline or SOF2 progressive) is found.
"""

from __future__ import annotations

import logging

from .exceptions import MalformedImageError
from .models import ImageInfo

logger = logging.getLogger(__name__)

# ─── Markers ──────────────────────────────────────────────────────────────────

MARKER_PREFIX = 0xFF
SOI = 0xD8
EOI = 0xD9
SOS = 0xDA
FRAME_MARKERS = {0xC0, 0xC2}

# Markers without a length field
STANDALONE_MARKERS = {0x01, *range(0xD0, 0xD9)}


def parse_jpeg_header(data: bytes) -> ImageInfo:
    """
    Extract width, height and component count from JPEG bytes.

    Raises:
        MalformedImageError: Missing SOI marker, scan data or end of image
            reached before a frame header, or truncated segment.
    """
    if len(data) < 2 or data[0] != MARKER_PREFIX or data[1] != SOI:
        raise MalformedImageError("Missing JPEG start-of-image marker")

    pos = 2
    size = len(data)

    while pos < size:
        if data[pos] != MARKER_PREFIX:
            pos += 1
            continue

        if pos + 1 >= size:
            break
        marker = data[pos + 1]

        # Fill bytes before a marker code
        if marker == MARKER_PREFIX:
            pos += 1
            continue

        if marker in STANDALONE_MARKERS:
            pos += 2
            continue

        if marker == SOS:
            raise MalformedImageError(
                "Reached start of scan before a frame header"
            )
        if marker == EOI:
            raise MalformedImageError(
                "Reached end of image before a frame header"
            )

        if pos + 3 >= size:
            break
        length = (data[pos + 2] << 8) | data[pos + 3]
        if length < 2:
            raise MalformedImageError(
                f"Invalid segment length {length} at offset {pos}"
            )

        if marker in FRAME_MARKERS:
            # length field, precision, height, width and component count
            if length < 8:
                raise MalformedImageError(
                    f"Frame header too short ({length} bytes) at offset {pos}"
                )
            if pos + 2 + length > size:
                raise MalformedImageError(
                    f"Frame header at offset {pos} runs past end of data"
                )
            height = (data[pos + 5] << 8) | data[pos + 6]
            width = (data[pos + 7] << 8) | data[pos + 8]
            components = data[pos + 9]
            info = ImageInfo(width=width, height=height, components=components)
            logger.debug(
                f"JPEG frame 0x{marker:02X}: {width}x{height}, "
                f"{components} components"
            )
            return info

        pos += 2 + length

    raise MalformedImageError("JPEG data truncated before a frame header")
