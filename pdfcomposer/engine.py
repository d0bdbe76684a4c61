"""
Composer Engine
===============
Orchestrator that combines configuration, logging setup, layout and
document building into a single render call.

Usage:
    engine = ComposerEngine(ComposerConfig(title="Notes"))
    data = engine.render(text)
    report = engine.validate(data)

Architecture:
    text → LayoutEngine → pages of LayoutItems → Document →
    PdfWriter → bytes → DocumentValidator (optional)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import __version__
from .document import Document
from .layout import LayoutEngine
from .models import DocumentInfo, PageSize, ValidationReport
from .validator import DocumentValidator

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ComposerConfig:
    """Configuration for the composer engine."""

    # Page geometry (points)
    page_width: float = PageSize.LETTER.width
    page_height: float = PageSize.LETTER.height
    margin: float = 72

    # Typography
    body_size: float = 11
    heading_sizes: tuple[float, float, float] = (20, 16, 13)
    text_color: str = "#222222"
    heading_color: str = "#111111"
    rule_color: str = "#cccccc"

    # Document information
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def for_page_size(cls, size: PageSize, **kwargs) -> ComposerConfig:
        """Config preset for a named page size."""
        return cls(page_width=size.width, page_height=size.height, **kwargs)

    def document_info(self) -> DocumentInfo:
        return DocumentInfo(
            title=self.title,
            author=self.author,
            subject=self.subject,
            producer=f"pdfcomposer {__version__}",
        )


class ComposerEngine:
    """
    Main rendering engine.

    Orchestrates:
        1. Layout (classification, wrapping, pagination)
        2. Page drawing through the Document API
        3. Serialization
        4. Optional structural validation
    """

    def __init__(self, config: Optional[ComposerConfig] = None):
        self.config = config or ComposerConfig()
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        package_logger = logging.getLogger("pdfcomposer")
        package_logger.setLevel(log_level)

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(console)

        # File handler
        if self.config.log_file:
            log_path = Path(self.config.log_file).resolve()
            already_attached = any(
                isinstance(h, logging.FileHandler)
                and Path(h.baseFilename) == log_path
                for h in package_logger.handlers
            )
            if not already_attached:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_path, encoding="utf-8")
                file_handler.setLevel(log_level)
                file_handler.setFormatter(
                    logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
                )
                package_logger.addHandler(file_handler)

    def layout_engine(self) -> LayoutEngine:
        cfg = self.config
        return LayoutEngine(
            width=cfg.page_width,
            height=cfg.page_height,
            margin=cfg.margin,
            body_size=cfg.body_size,
            heading_sizes=cfg.heading_sizes,
            text_color=cfg.text_color,
            heading_color=cfg.heading_color,
            rule_color=cfg.rule_color,
        )

    def new_document(self) -> Document:
        """An empty document carrying the configured information dictionary."""
        return Document(self.config.document_info())

    def render(self, text: str) -> bytes:
        """
        Render block-structured text into PDF bytes.

        Args:
            text: Markdown-style input.

        Returns:
            Serialized PDF file contents.
        """
        start_time = time.time()
        logger.info(f"Rendering {len(text):,} characters of text")

        document = self.layout_engine().render(text, self.new_document())
        data = document.build()

        elapsed = time.time() - start_time
        logger.info(
            f"Render complete in {elapsed:.2f}s: "
            f"{len(document.pages)} pages, {len(data):,} bytes"
        )
        return data

    def validate(self, data: bytes) -> ValidationReport:
        return DocumentValidator().validate(data)
