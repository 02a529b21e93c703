"""
Page layout model for the BriefDesk PDF export.

Export runs in two passes:

1. Layout: blocks are placed on an in-memory list of Page objects, each a
   list of drawing operations in millimetres with a top-left origin and a
   running vertical cursor. Page breaks are decided here.
2. Render: pdf_exporter walks the finished page list and draws it with
   reportlab. Because the page count is known by then, the "current / total"
   footer is stamped on every page in this pass.

Text is wrapped with reportlab's own font metrics so what the layout
measures is what the renderer draws.
"""

from dataclasses import dataclass, field

from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

# A4 portrait, in millimetres
PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN = 20.0
CONTENT_WIDTH = PAGE_WIDTH - MARGIN * 2
# Cursor position at the top of every page after the first
CONTENT_TOP = MARGIN + 10

Color = tuple[int, int, int]

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"


def line_height(font_size: float) -> float:
    """Vertical advance in mm for one line of text at font_size points."""
    return font_size * 0.4 + 1.5


def _split_long_word(word: str, font: str, size: float, max_width: float) -> list[str]:
    """Break a word wider than the line into chunks that fit."""
    chunks = []
    current = ""
    for char in word:
        candidate = current + char
        if current and stringWidth(candidate, font, size) > max_width:
            chunks.append(current)
            current = char
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def wrap_text(text: str, font: str, size: float, max_width_mm: float) -> list[str]:
    """
    Greedy word wrap using the font's real glyph widths.

    Explicit newlines start a new line; an empty paragraph yields an empty
    line. Empty text yields no lines.

    Args:
        text: Text to wrap
        font: reportlab font name
        size: Font size in points
        max_width_mm: Available line width in millimetres

    Returns:
        Wrapped lines in order.
    """
    if not text:
        return []

    max_width = max_width_mm * mm
    lines = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if stringWidth(candidate, font, size) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            if stringWidth(word, font, size) <= max_width:
                current = word
            else:
                *full, current = _split_long_word(word, font, size, max_width)
                lines.extend(full)
        if current:
            lines.append(current)
    return lines


@dataclass(frozen=True)
class TextOp:
    x: float
    y: float  # baseline
    text: str
    font: str
    size: float
    color: Color
    align: str = "left"
    link: str | None = None


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float  # top edge
    width: float
    height: float
    color: Color
    radius: float = 0.0


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color
    width: float = 0.2


@dataclass
class Page:
    """One laid-out page: background colour plus drawing operations in order."""
    background: Color
    ops: list = field(default_factory=list)

    def texts(self) -> list[TextOp]:
        return [op for op in self.ops if isinstance(op, TextOp)]


class DocumentLayout:
    """
    Paginated canvas used by the first export pass.

    Tracks the page list and offers the drawing primitives the exporter
    needs. Nothing is rendered here.
    """

    def __init__(self, background: Color):
        self.background = background
        self.pages: list[Page] = []

    @property
    def page(self) -> Page:
        return self.pages[-1]

    def add_page(self) -> float:
        """Start a new page and return the cursor position at its top."""
        self.pages.append(Page(background=self.background))
        return CONTENT_TOP

    def check_page_break(self, y: float, needed: float) -> float:
        """
        Start a new page if a block of height `needed` does not fit at y.

        Returns:
            y unchanged if the block fits, else the top of the new page.
        """
        if y + needed > PAGE_HEIGHT - MARGIN:
            return self.add_page()
        return y

    def text(self, x: float, y: float, text: str, *, font: str = FONT_REGULAR,
             size: float = 10, color: Color = (0, 0, 0), align: str = "left",
             link: str | None = None) -> None:
        self.page.ops.append(TextOp(x, y, text, font, size, color, align, link))

    def wrapped_text(self, x: float, y: float, text: str, *, max_width: float,
                     font: str = FONT_REGULAR, size: float = 10,
                     color: Color = (0, 0, 0)) -> float:
        """Draw text wrapped to max_width in one block; returns y below it."""
        lines = wrap_text(text, font, size, max_width)
        for index, line in enumerate(lines):
            self.text(x, y + index * line_height(size), line, font=font, size=size, color=color)
        return y + len(lines) * line_height(size)

    def rect(self, x: float, y: float, width: float, height: float,
             color: Color, radius: float = 0.0) -> None:
        self.page.ops.append(RectOp(x, y, width, height, color, radius))

    def line(self, x1: float, y1: float, x2: float, y2: float,
             color: Color, width: float = 0.2) -> None:
        self.page.ops.append(LineOp(x1, y1, x2, y2, color, width))
