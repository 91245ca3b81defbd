# cvpress/surface.py
"""
Drawing surfaces.

The layout engine only needs a measurer (`measure_wrapped_height`, `wrap_text`);
`replay()` then feeds its instructions to anything that also implements
`draw_text`, `draw_line`, `new_page` and `save`. ReportLabSurface is the PDF
backend used by the exporter.
"""

import logging
from io import BytesIO
from typing import Iterable, List, Optional, Protocol, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .layout_engine.instructions import (
    DrawInstruction,
    Font,
    NewPageInstruction,
    RuleInstruction,
    TextInstruction,
)

logger = logging.getLogger(__name__)

# default line spacing of wrapped text blocks, as a multiple of the font size
LINE_HEIGHT_FACTOR = 1.15

# standard Type1 face names per family: (regular, bold, italic, bold italic)
_FACES = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
    "Times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Times-Roman": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
}


class DrawingSurface(Protocol):
    def measure_wrapped_height(self, text: str, max_width: float, font_size: float) -> float:
        ...

    def wrap_text(self, text: str, max_width: float, font: Font) -> List[str]:
        ...

    def draw_text(self, content: str, x: float, y: float, font: Font, align: str = "left") -> None:
        ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float) -> None:
        ...

    def new_page(self) -> None:
        ...

    def save(self, filename: str) -> None:
        ...


def is_known_family(family: str) -> bool:
    """True for a standard Type1 family or a font registered with pdfmetrics."""
    return family in _FACES or family in pdfmetrics.getRegisteredFontNames()


def font_name(font: Font) -> str:
    """Resolve a Font to a ReportLab face name, e.g. Helvetica bold -> Helvetica-Bold."""
    faces = _FACES.get(font.family)
    if faces is None:
        # registered TTF families are used as-is
        return font.family
    idx = (1 if font.is_bold else 0) + (2 if font.is_italic else 0)
    return faces[idx]


class ReportLabSurface:
    """
    PDF surface on a reportlab canvas. Engine coordinates (y down from the top edge)
    are flipped to PDF coordinates here. The document is built in memory and written
    out by save().
    """

    def __init__(self, pagesize: Tuple[float, float] = letter, font_family: str = "Helvetica"):
        self.pagesize = pagesize
        self.page_height = float(pagesize[1])
        self.font_family = font_family
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=pagesize)
        self._finished = False

    # -------------------------
    # Measurement
    # -------------------------
    def wrap_text(self, text: str, max_width: float, font: Font) -> List[str]:
        return simpleSplit(text, font_name(font), font.size, max_width)

    def measure_wrapped_height(self, text: str, max_width: float, font_size: float) -> float:
        font = Font(family=self.font_family, size=font_size)
        n_lines = 0
        for paragraph in text.split("\n"):
            n_lines += max(1, len(self.wrap_text(paragraph, max_width, font)))
        return n_lines * font_size * LINE_HEIGHT_FACTOR

    # -------------------------
    # Drawing
    # -------------------------
    def _pdf_y(self, y: float) -> float:
        return self.page_height - y

    def draw_text(self, content: str, x: float, y: float, font: Font, align: str = "left") -> None:
        if not content:
            return
        c = self._canvas
        c.setFont(font_name(font), font.size)
        py = self._pdf_y(y)
        if align == "center":
            c.drawCentredString(x, py, content)
        elif align == "right":
            c.drawRightString(x, py, content)
        else:
            c.drawString(x, py, content)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float) -> None:
        self._canvas.setLineWidth(width)
        self._canvas.line(x1, self._pdf_y(y1), x2, self._pdf_y(y2))

    def new_page(self) -> None:
        self._canvas.showPage()

    # -------------------------
    # Output
    # -------------------------
    def getvalue(self) -> bytes:
        if not self._finished:
            self._canvas.save()
            self._finished = True
        return self._buffer.getvalue()

    def save(self, filename: str) -> None:
        data = self.getvalue()
        with open(filename, "wb") as f:
            f.write(data)
        logger.debug("Wrote %d bytes to %s", len(data), filename)


def replay(instructions: Iterable[DrawInstruction], surface: DrawingSurface) -> int:
    """Execute instructions in order on `surface`. Returns the number of pages drawn."""
    pages = 1
    for ins in instructions:
        if isinstance(ins, TextInstruction):
            surface.draw_text(ins.content, ins.x, ins.y, ins.font, ins.align)
        elif isinstance(ins, RuleInstruction):
            surface.draw_line(ins.x1, ins.y1, ins.x2, ins.y2, ins.width)
        elif isinstance(ins, NewPageInstruction):
            surface.new_page()
            pages += 1
        else:
            raise TypeError(f"Unknown draw instruction: {ins!r}")
    return pages


def make_surface(pagesize: Optional[Tuple[float, float]] = None, font_family: str = "Helvetica") -> ReportLabSurface:
    return ReportLabSurface(pagesize or letter, font_family=font_family)
