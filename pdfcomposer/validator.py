"""
Validation Engine
=================
Structural check of serialized PDF bytes.

Re-reads a produced file and verifies:
    - Header and %%EOF marker
    - startxref points at the xref keyword
    - Every in-use xref entry points at its "N 0 obj" line
    - Trailer /Size matches the xref entry count

Also counts pages, images and link annotations for reporting. Stream
bodies are skipped when counting, so text drawn inside a content stream
is not mistaken for a dictionary.
"""

from __future__ import annotations

import logging
import re

from .models import ValidationReport

logger = logging.getLogger(__name__)

# ─── Patterns ─────────────────────────────────────────────────────────────────

STARTXREF_PATTERN = re.compile(rb"startxref\s+(\d+)\s+%%EOF\s*$")
XREF_HEADER_PATTERN = re.compile(rb"xref\s+0\s+(\d+)\s*?\n")
XREF_ENTRY_PATTERN = re.compile(rb"(\d{10}) (\d{5}) ([nf]) ?\r?\n")
TRAILER_SIZE_PATTERN = re.compile(rb"trailer\s*<<.*?/Size\s+(\d+)", re.DOTALL)
PAGE_PATTERN = re.compile(rb"/Type\s*/Page\b")
IMAGE_PATTERN = re.compile(rb"/Subtype\s*/Image\b")
LINK_PATTERN = re.compile(rb"/Subtype\s*/Link\b")
STREAM_PATTERN = re.compile(rb"stream\r?\n.*?\r?\nendstream", re.DOTALL)


class DocumentValidator:
    """
    Validates serialized documents and produces a report.
    """

    def validate(self, data: bytes) -> ValidationReport:
        """
        Run all structural checks on ``data``.

        Args:
            data: Complete PDF file bytes.

        Returns:
            ValidationReport with every detected issue.
        """
        report = ValidationReport()

        report.header_ok = data.startswith(b"%PDF-")
        report.eof_ok = data.rstrip().endswith(b"%%EOF")
        dictionaries = STREAM_PATTERN.sub(b"stream\nendstream", data)
        report.page_count = len(PAGE_PATTERN.findall(dictionaries))
        report.image_count = len(IMAGE_PATTERN.findall(dictionaries))
        report.annotation_count = len(LINK_PATTERN.findall(dictionaries))

        size_match = TRAILER_SIZE_PATTERN.search(data)
        if size_match:
            report.trailer_size = int(size_match.group(1))

        startxref = STARTXREF_PATTERN.search(data)
        if not startxref:
            logger.warning("No startxref pointer found")
            self._log_summary(report)
            return report

        xref_offset = int(startxref.group(1))
        report.startxref_ok = data.startswith(b"xref", xref_offset)
        if not report.startxref_ok:
            logger.warning(f"startxref {xref_offset} does not point at xref")
            self._log_summary(report)
            return report

        header = XREF_HEADER_PATTERN.match(data, xref_offset)
        if not header:
            logger.warning("Malformed xref section header")
            self._log_summary(report)
            return report

        count = int(header.group(1))
        pos = header.end()
        for obj_id in range(count):
            entry = XREF_ENTRY_PATTERN.match(data, pos)
            if not entry:
                logger.warning(f"xref table truncated at entry {obj_id}")
                break
            pos = entry.end()
            report.xref_entries += 1

            if entry.group(3) != b"n":
                continue
            report.object_count += 1
            offset = int(entry.group(1))
            if not data.startswith(f"{obj_id} 0 obj".encode("ascii"), offset):
                report.bad_offsets.append(obj_id)

        self._log_summary(report)
        return report

    def _log_summary(self, report: ValidationReport) -> None:
        logger.info("=" * 60)
        logger.info("VALIDATION REPORT")
        logger.info("=" * 60)
        logger.info(f"Header: {'ok' if report.header_ok else 'missing'}")
        logger.info(f"startxref: {'ok' if report.startxref_ok else 'bad'}")
        logger.info(
            f"Objects: {report.object_count} "
            f"(xref entries {report.xref_entries}, trailer /Size {report.trailer_size})"
        )
        logger.info(f"Pages: {report.page_count}")
        logger.info(f"Images: {report.image_count}")
        logger.info(f"Links: {report.annotation_count}")
        if report.bad_offsets:
            logger.info(f"Bad offsets: {report.bad_offsets}")
        logger.info(f"Valid: {report.is_valid}")
        logger.info("=" * 60)
