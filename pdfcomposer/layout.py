"""
Layout Engine
=============
Turns block-structured text (a small Markdown subset) into positioned
lines and draws them through the public ``Document`` page API.

Pipeline:
    text → BlockClassifier → LayoutItems (wrapped) → paginate() →
    pages of positioned items → Document.add_page()

Recognised line prefixes:
    # .. ######     heading (rendered at three size levels)
    - / * / +       unordered list item
    1.              ordered list item
    --- / *** / ___ horizontal rule
    (empty)         blank line, collapsed to one spacing item
    anything else   paragraph text
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from .document import Document, PageContext
from .metrics import measure_text
from .models import BlockType, DocumentInfo, LayoutItem

logger = logging.getLogger(__name__)

# ─── Line Patterns ────────────────────────────────────────────────────────────

# "# Title", "### Section"
HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*)$")

# "---", "***", "_ _ _"
RULE_PATTERN = re.compile(r"^\s*([-*_])(?:\s*\1){2,}\s*$")

# "- item", "* item", "+ item"
BULLET_PATTERN = re.compile(r"^\s*[-*+]\s+(.*)$")

# "1. item", "42. item"
ORDERED_PATTERN = re.compile(r"^\s*(\d+\.)\s+(.*)$")

# ─── Layout Constants ─────────────────────────────────────────────────────────

HEADING_LEVELS = 3
HEADING_SPACE_BEFORE = (14, 12, 10)
HEADING_SPACE_AFTER = (6, 5, 4)
PARAGRAPH_SPACE_AFTER = 3
LIST_INDENT = 18
BULLET_MARKER = "-"
RULE_SIZE = 1
RULE_SPACE = 8
RULE_WIDTH = 0.5


@dataclass
class Block:
    """One classified input line."""
    kind: BlockType
    text: str = ""
    level: int = 0
    marker: str = ""


class BlockClassifier:
    """
    Classifies input lines one at a time.

    The only state carried between lines is the previous block type,
    used to collapse runs of blank lines.
    """

    def __init__(self):
        self.previous: Optional[BlockType] = None

    def classify(self, line: str) -> Block:
        """Classify a single line without touching state."""
        if not line.strip():
            return Block(BlockType.BLANK)

        heading = HEADING_PATTERN.match(line)
        if heading:
            level = min(len(heading.group(1)), HEADING_LEVELS)
            return Block(BlockType.HEADING, heading.group(2).strip(), level=level)

        if RULE_PATTERN.match(line):
            return Block(BlockType.RULE)

        bullet = BULLET_PATTERN.match(line)
        if bullet:
            return Block(BlockType.BULLET, bullet.group(1).strip(), marker=BULLET_MARKER)

        ordered = ORDERED_PATTERN.match(line)
        if ordered:
            return Block(BlockType.ORDERED, ordered.group(2).strip(), marker=ordered.group(1))

        return Block(BlockType.PARAGRAPH, line.strip())

    def feed(self, line: str) -> Optional[Block]:
        """
        Classify ``line`` and update state.

        Returns ``None`` for a blank line that must be dropped: one at the
        very start, or one following another blank.
        """
        block = self.classify(line)
        if block.kind == BlockType.BLANK and self.previous in (None, BlockType.BLANK):
            return None
        self.previous = block.kind
        return block


# ─── Word Wrap ────────────────────────────────────────────────────────────────


def _split_word(word: str, size: float, max_width: float) -> list[str]:
    """Break an oversized word into chunks that each fit ``max_width``."""
    chunks: list[str] = []
    chunk = ""
    for char in word:
        if chunk and measure_text(chunk + char, size) > max_width:
            chunks.append(chunk)
            chunk = char
        else:
            chunk += char
    chunks.append(chunk)
    return chunks


def wrap_text(text: str, size: float, max_width: float) -> list[str]:
    """
    Greedy word wrap against measured Helvetica widths.

    Words longer than ``max_width`` are split by character. Always
    returns at least one (possibly empty) line.
    """
    lines: list[str] = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if measure_text(candidate, size) <= max_width:
            current = candidate
            continue

        if current:
            lines.append(current)
            current = ""

        if measure_text(word, size) <= max_width:
            current = word
        else:
            chunks = _split_word(word, size, max_width)
            lines.extend(chunks[:-1])
            current = chunks[-1]

    lines.append(current)
    return lines


# ─── Pagination ───────────────────────────────────────────────────────────────


def paginate(
    items: Sequence[LayoutItem],
    page_height: float,
    margin: float,
) -> list[list[LayoutItem]]:
    """
    Assign baselines and split items into pages.

    An item that would cross the bottom margin starts a new page, unless
    it is the first item on its page. Always returns at least one page.
    """
    top = page_height - margin
    pages: list[list[LayoutItem]] = [[]]
    cursor = top

    for item in items:
        if pages[-1] and cursor - item.height < margin:
            pages.append([])
            cursor = top
        y = cursor - item.space_before - item.size
        pages[-1].append(item.model_copy(update={"y": y}))
        cursor -= item.height

    return pages


# ─── Engine ───────────────────────────────────────────────────────────────────


class LayoutEngine:
    """
    Lays out block-structured text on fixed-size pages.
    """

    def __init__(
        self,
        width: float = 612,
        height: float = 792,
        margin: float = 72,
        body_size: float = 11,
        heading_sizes: Sequence[float] = (20, 16, 13),
        text_color: str = "#222222",
        heading_color: str = "#111111",
        rule_color: str = "#cccccc",
    ):
        if len(heading_sizes) != HEADING_LEVELS:
            raise ValueError(
                f"Expected {HEADING_LEVELS} heading sizes, got {len(heading_sizes)}"
            )
        self.width = width
        self.height = height
        self.margin = margin
        self.body_size = body_size
        self.heading_sizes = tuple(heading_sizes)
        self.text_color = text_color
        self.heading_color = heading_color
        self.rule_color = rule_color

    @property
    def text_width(self) -> float:
        return self.width - 2 * self.margin

    def layout(self, text: str) -> list[LayoutItem]:
        """Classify and wrap every input line into unpositioned items."""
        classifier = BlockClassifier()
        items: list[LayoutItem] = []

        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        for line in lines:
            block = classifier.feed(line)
            if block is not None:
                items.extend(self._items_for(block, first=not items))

        # A blank only separates content; none may close the document
        while items and items[-1].kind == BlockType.BLANK:
            items.pop()

        logger.debug(f"Classified {len(lines)} lines into {len(items)} items")
        return items

    def _items_for(self, block: Block, first: bool) -> list[LayoutItem]:
        if block.kind == BlockType.HEADING:
            idx = block.level - 1
            size = self.heading_sizes[idx]
            wrapped = wrap_text(block.text, size, self.text_width)
            return [
                LayoutItem(
                    kind=BlockType.HEADING,
                    text=line,
                    size=size,
                    space_before=HEADING_SPACE_BEFORE[idx] if i == 0 and not first else 0,
                    space_after=HEADING_SPACE_AFTER[idx],
                    color=self.heading_color,
                )
                for i, line in enumerate(wrapped)
            ]

        if block.kind in (BlockType.BULLET, BlockType.ORDERED):
            prefix = f"{block.marker} "
            hang = measure_text(prefix, self.body_size)
            wrapped = wrap_text(
                block.text, self.body_size, self.text_width - LIST_INDENT - hang
            )
            return [
                LayoutItem(
                    kind=block.kind,
                    text=prefix + line if i == 0 else line,
                    size=self.body_size,
                    indent=LIST_INDENT if i == 0 else LIST_INDENT + hang,
                    space_after=PARAGRAPH_SPACE_AFTER,
                    color=self.text_color,
                )
                for i, line in enumerate(wrapped)
            ]

        if block.kind == BlockType.RULE:
            return [LayoutItem(
                kind=BlockType.RULE,
                size=RULE_SIZE,
                space_before=RULE_SPACE,
                space_after=RULE_SPACE,
                color=self.rule_color,
            )]

        if block.kind == BlockType.BLANK:
            return [LayoutItem(kind=BlockType.BLANK, size=self.body_size)]

        return [
            LayoutItem(
                kind=BlockType.PARAGRAPH,
                text=line,
                size=self.body_size,
                space_after=PARAGRAPH_SPACE_AFTER,
                color=self.text_color,
            )
            for line in wrap_text(block.text, self.body_size, self.text_width)
        ]

    def paginate(self, items: Sequence[LayoutItem]) -> list[list[LayoutItem]]:
        return paginate(items, self.height, self.margin)

    def _draw(self, ctx: PageContext, items: Sequence[LayoutItem]) -> None:
        for item in items:
            if item.kind == BlockType.RULE:
                ctx.line(
                    self.margin, item.y,
                    self.width - self.margin, item.y,
                    item.color, RULE_WIDTH,
                )
            elif item.text:
                ctx.text(
                    item.text,
                    self.margin + item.indent,
                    item.y,
                    item.size,
                    color=item.color,
                )

    def render(self, text: str, document: Optional[Document] = None) -> Document:
        """
        Lay out ``text`` and append the resulting pages to ``document``
        (a new one if not given).
        """
        if document is None:
            document = Document()
        pages = self.paginate(self.layout(text))
        for page_items in pages:
            document.add_page(
                self.width,
                self.height,
                lambda ctx, items=page_items: self._draw(ctx, items),
            )
        logger.info(f"Laid out text on {len(pages)} pages")
        return document


def markdown(
    text: str,
    width: float = 612,
    height: float = 792,
    margin: float = 72,
    info: Optional[DocumentInfo] = None,
) -> bytes:
    """Render block-structured text to a complete PDF in one call."""
    engine = LayoutEngine(width=width, height=height, margin=margin)
    return engine.render(text, Document(info)).build()
