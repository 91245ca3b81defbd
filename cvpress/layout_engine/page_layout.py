# cvpress/layout_engine/page_layout.py
"""
page_layout.py
--------------
Lays classified CV sections onto fixed-size pages.

The engine owns a cursor (page index + y offset from the top edge) and turns the
header block, every section title + rule and every content line into an ordered
list of draw instructions. It never draws or saves anything itself: text
measurement comes from an injected measurer and the instruction list is replayed
onto a drawing surface by the caller.

Pagination rules:
 - a section moves to a fresh page when its title plus estimated body would cross
   the bottom margin (orphan avoidance). A section already at the top of a page
   stays put even when it is too tall, so no blank page is emitted; the same
   holds for the per-line check
 - before every content line a fixed space requirement is checked; wrapped
   paragraphs taller than that may still run into the bottom margin unless
   `measured_line_breaks` is enabled
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from ..config import LayoutConfig
from ..models import PersonalDetails
from .instructions import DrawInstruction, Font, NewPageInstruction, RuleInstruction, TextInstruction
from .line_classifier import Bullet, ClassifiedLine, DatedEntryHeader, Plain, classify_lines
from .section_splitter import Section, split_sections

logger = logging.getLogger(__name__)

BETWEEN_SECTIONS = "between_sections"
IN_SECTION = "in_section"


class TextMeasurer(Protocol):
    def measure_wrapped_height(self, text: str, max_width: float, font_size: float) -> float:
        ...

    def wrap_text(self, text: str, max_width: float, font: Font) -> List[str]:
        ...


@dataclass
class Cursor:
    page_index: int = 0
    y: float = 0.0


class PageLayoutEngine:
    """Single-use layout pass: create one engine per document."""

    def __init__(self, measurer: TextMeasurer, config: Optional[LayoutConfig] = None):
        self.measurer = measurer
        self.config = config or LayoutConfig()
        self.cursor = Cursor(page_index=0, y=self.config.margin)
        self.instructions: List[DrawInstruction] = []
        self.state = BETWEEN_SECTIONS

    # -------------------------
    # Fonts
    # -------------------------
    def _font(self, size: float, weight: str = "normal", style: str = "normal") -> Font:
        return Font(family=self.config.font_family, weight=weight, style=style, size=size)

    @property
    def body_font(self) -> Font:
        return self._font(self.config.body_font_size)

    # -------------------------
    # Cursor / pagination
    # -------------------------
    def new_page(self) -> None:
        self.instructions.append(NewPageInstruction())
        self.cursor.page_index += 1
        self.cursor.y = self.config.margin
        logger.debug("Page break -> page %d", self.cursor.page_index)

    def _at_page_top(self) -> bool:
        return self.cursor.y <= self.config.margin

    def _ensure_space(self, needed: float) -> None:
        if self.cursor.y + needed > self.config.bottom_limit and not self._at_page_top():
            self.new_page()

    def _text(self, content: str, x: float, font: Font, align: str = "left", y: Optional[float] = None) -> None:
        y = self.cursor.y if y is None else y
        self.instructions.append(TextInstruction(content=content, x=x, y=y, font=font, align=align))

    def _wrapped(self, text: str, x: float, max_width: float, font: Font) -> int:
        lines = self.measurer.wrap_text(text, max_width, font) or [text]
        for i, ln in enumerate(lines):
            self._text(ln, x, font, y=self.cursor.y + i * self.config.line_height)
        return len(lines)

    # -------------------------
    # Header block
    # -------------------------
    def render_header(self, details: PersonalDetails) -> None:
        cfg = self.config
        center = cfg.page_width / 2

        self._text(details.full_name.upper(), center, self._font(cfg.name_font_size, weight="bold"), align="center")
        self.cursor.y += cfg.name_advance

        contact = cfg.contact_separator.join(details.contact_fields())
        if contact:
            self._text(contact, center, self._font(cfg.contact_font_size), align="center")
        self.cursor.y += cfg.contact_advance

    # -------------------------
    # Sections
    # -------------------------
    def _estimate_content_height(self, section: Section) -> float:
        content = "\n".join(section.content_lines).strip()
        if not content:
            return 0.0
        return self.measurer.measure_wrapped_height(content, self.config.content_width, self.config.body_font_size)

    def _line_requirement(self, line: ClassifiedLine) -> float:
        cfg = self.config
        if not cfg.measured_line_breaks:
            return cfg.line_space_requirement
        if isinstance(line, Bullet):
            n = len(self.measurer.wrap_text(line.text, cfg.content_width - cfg.bullet_width_reduction, self.body_font) or [""])
            return max(cfg.line_space_requirement, n * cfg.line_height)
        if isinstance(line, Plain):
            font = self._font(cfg.body_font_size, style="italic")
            n = len(self.measurer.wrap_text(line.text, cfg.content_width, font) or [""])
            return max(cfg.line_space_requirement, n * cfg.line_height + cfg.plain_trailing_gap)
        return cfg.line_space_requirement

    def render_section(self, section: Section) -> None:
        cfg = self.config
        self.state = IN_SECTION
        content_height = self._estimate_content_height(section)
        if self.cursor.y + cfg.title_block_height + content_height > cfg.bottom_limit and not self._at_page_top():
            logger.debug("Section %r does not fit (%.1f pt), moving to next page", section.title, content_height)
            self.new_page()

        self._text(section.title.upper(), cfg.margin, self._font(cfg.title_font_size, weight="bold"))
        self.cursor.y += cfg.title_rule_offset
        self.instructions.append(RuleInstruction(
            x1=cfg.margin, y1=self.cursor.y,
            x2=cfg.page_width - cfg.margin, y2=self.cursor.y,
            width=cfg.title_rule_width,
        ))
        self.cursor.y += cfg.title_advance

        for line in classify_lines(section.content_lines):
            self._ensure_space(self._line_requirement(line))
            self.render_line(line)

        self.cursor.y += cfg.section_gap
        self.state = BETWEEN_SECTIONS

    def render_line(self, line: ClassifiedLine) -> None:
        cfg = self.config
        if isinstance(line, Bullet):
            font = self.body_font
            self._text(cfg.bullet_marker, cfg.margin + cfg.bullet_marker_indent, font)
            n = self._wrapped(line.text, cfg.margin + cfg.bullet_text_indent,
                              cfg.content_width - cfg.bullet_width_reduction, font)
            self.cursor.y += n * cfg.line_height
        elif isinstance(line, DatedEntryHeader):
            self._text(line.title_part, cfg.margin, self._font(cfg.body_font_size, weight="bold"))
            self._text(line.date_part, cfg.page_width - cfg.margin, self.body_font, align="right")
            self.cursor.y += cfg.header_row_height
        else:
            font = self._font(cfg.body_font_size, style="italic")
            n = self._wrapped(line.text, cfg.margin, cfg.content_width, font)
            self.cursor.y += n * cfg.line_height + cfg.plain_trailing_gap

    # -------------------------
    # Whole document
    # -------------------------
    def layout_sections(self, details: PersonalDetails, sections: Sequence[Section]) -> List[DrawInstruction]:
        self.render_header(details)
        for section in sections:
            self.render_section(section)
        logger.debug("Laid out %d sections on %d pages", len(sections), self.cursor.page_index + 1)
        return self.instructions

    def layout(self, cv_text: str, details: PersonalDetails) -> List[DrawInstruction]:
        return self.layout_sections(details, split_sections(cv_text))


def layout_document(cv_text: str, details: PersonalDetails, measurer: TextMeasurer,
                    config: Optional[LayoutConfig] = None) -> List[DrawInstruction]:
    """Convenience wrapper: fresh engine, full layout, instruction list."""
    return PageLayoutEngine(measurer, config).layout(cv_text, details)
