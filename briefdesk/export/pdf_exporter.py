"""
PDF Export for BriefDesk.

Produces the downloadable brief: a cover page, the brief sections, the
user's highlights and comments, and the saved sources, with a
"brand · current / total" footer on every page.

Document structure (fixed order):
1. Cover: app badge, brief label, brand headline, generation date and
   counters for sections, highlights, comments and sources
2. Content pages: every section as "01  TITLE" plus its wrapped body,
   separated by divider rules; bodies flow across page breaks line by line
3. Annotations page (only if there are highlights or comments): highlight
   cards first, then comment cards, each in creation order
4. Sources page (only if there are saved sources): title + clickable URL
5. Footer on every page, stamped after layout when the page count is known

No card is ever split across pages: every block checks the remaining
height first and starts a new page if it does not fit.
"""

import io
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from briefdesk.annotations.models import Annotation
from briefdesk.annotations.store import AnnotationStore
from briefdesk.brief.sections import Section
from briefdesk.config import (
    APP_NAME,
    EXPORT_BRIEF_LABEL,
    EXPORT_FILENAME_PREFIX,
    EXPORT_FILENAME_SLUG_CHARS,
)
from briefdesk.export.layout import (
    CONTENT_WIDTH,
    FONT_BOLD,
    FONT_ITALIC,
    FONT_REGULAR,
    MARGIN,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    DocumentLayout,
    LineOp,
    RectOp,
    TextOp,
    line_height,
    wrap_text,
)
from briefdesk.logging_config import Timer, debug_log
from briefdesk.sanitization import PdfTextSanitizer

COLORS = {
    "bg": (8, 11, 20),
    "accent": (245, 230, 66),
    "white": (250, 250, 250),
    "gray": (160, 168, 184),
    "dark_gray": (107, 114, 128),
    "surface": (26, 29, 46),
    "divider": (38, 42, 60),
}

# Heights reserved before each block (mm)
SECTION_HEADER_ROOM = 30
HIGHLIGHT_CARD_ROOM = 24
COMMENT_CARD_ROOM = 32
SOURCE_CARD_ROOM = 20

SECTION_BODY_INSET = 8
CARD_INSET = 12
CARD_TEXT_MAX_LINES = 2
COMMENT_EXCERPT_CHARS = 100
COVER_HEADLINE_MAX_LINES = 5

BODY_FONT_SIZE = 10
CARD_FONT_SIZE = 9
FOOTER_FONT_SIZE = 7

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def export_filename(brand_label: str) -> str:
    """
    Filename for an exported brief.

    The brand label is cut to its first 30 characters, whitespace runs become
    hyphens, the result is lowercased and characters that are unsafe in file
    names are dropped.

    Example:
        export_filename("Sustainable Sneakers for Gen Z")
        -> "briefdesk-brief-sustainable-sneakers-for-gen-z.pdf"
    """
    slug = re.sub(r"\s+", "-", (brand_label or "")[:EXPORT_FILENAME_SLUG_CHARS]).lower()
    slug = _UNSAFE_FILENAME_CHARS.sub("", slug) or "untitled"
    return f"{EXPORT_FILENAME_PREFIX}{slug}.pdf"


def _clip_lines(lines: list[str], max_lines: int) -> list[str]:
    """Keep the first max_lines lines, marking the cut with an ellipsis."""
    if len(lines) <= max_lines:
        return lines
    clipped = lines[:max_lines]
    clipped[-1] = clipped[-1].rstrip() + "…"
    return clipped


def _format_date(value: datetime) -> str:
    return f"{value.day} {value:%B %Y}"


class BriefPdfExporter:
    """
    Lays out and renders the brief PDF.

    Example:
        exporter = BriefPdfExporter()
        pdf_bytes = exporter.export("Sustainable sneakers", sections, store)
        path = exporter.export_to_file("Sustainable sneakers", sections, store, EXPORTS_DIR)

    layout() exposes the first pass (the in-memory page list) on its own,
    which is what the tests inspect.
    """

    def __init__(self, sanitizer: PdfTextSanitizer | None = None):
        self.sanitizer = sanitizer or PdfTextSanitizer()

    def _clean(self, text: str | None) -> str:
        return self.sanitizer.clean(text or "")

    # =========================================================================
    # Pass 1: layout
    # =========================================================================

    def layout(
        self,
        brand_label: str,
        sections: list[Section],
        annotations: Iterable[Annotation],
        generated_at: datetime | None = None,
    ) -> DocumentLayout:
        """
        Lay the document out into pages without rendering anything.

        Args:
            brand_label: Brand description the brief was generated for
            sections: Parsed brief sections, in order
            annotations: Annotations in creation order (any iterable,
                including an AnnotationStore)
            generated_at: Date printed on the cover (defaults to now)

        Returns:
            DocumentLayout whose pages hold the drawing operations.
        """
        partition = AnnotationStore(annotations).partition_by_kind()
        doc = DocumentLayout(background=COLORS["bg"])
        brand = self._clean(brand_label)

        self._layout_cover(doc, brand, len(sections), partition, generated_at or datetime.now())

        y = doc.add_page()
        y = self._layout_part_header(doc, y, EXPORT_BRIEF_LABEL)
        for index, section in enumerate(sections):
            y = self._layout_section(doc, y, index, section)

        if partition.has_notes:
            y = doc.add_page()
            y = self._layout_part_header(doc, y, "ANNOTATIONS")
            for annotation in partition.highlights:
                y = self._layout_highlight(doc, y, annotation)
            for annotation in partition.comments:
                y = self._layout_comment(doc, y, annotation)

        if partition.sources:
            y = doc.add_page()
            y = self._layout_part_header(doc, y, "SAVED SOURCES")
            for annotation in partition.sources:
                y = self._layout_source(doc, y, annotation)

        debug_log(f"[EXPORT] Laid out {len(doc.pages)} pages: {len(sections)} sections, "
                  f"{len(partition.highlights)} highlights, {len(partition.comments)} comments, "
                  f"{len(partition.sources)} sources")
        return doc

    def _layout_cover(self, doc: DocumentLayout, brand: str, section_count: int,
                      partition, generated_at: datetime) -> None:
        doc.add_page()
        doc.rect(0, 0, 4, PAGE_HEIGHT, COLORS["accent"])

        badge = APP_NAME.upper()
        badge_width = stringWidth(badge, FONT_BOLD, 11) / mm + 12
        doc.rect(MARGIN, 40, badge_width, 12, COLORS["accent"], radius=2)
        doc.text(MARGIN + 6, 48, badge, font=FONT_BOLD, size=11, color=COLORS["bg"])
        doc.text(MARGIN + badge_width + 4, 48, "Creative brief workspace",
                 size=9, color=COLORS["dark_gray"])

        doc.text(MARGIN, 82, EXPORT_BRIEF_LABEL, size=10, color=COLORS["accent"])
        headline = _clip_lines(wrap_text(brand, FONT_BOLD, 28, CONTENT_WIDTH), COVER_HEADLINE_MAX_LINES)
        for index, line in enumerate(headline):
            doc.text(MARGIN, 95 + index * line_height(28), line,
                     font=FONT_BOLD, size=28, color=COLORS["white"])

        stats_y = PAGE_HEIGHT - 40
        stats = [
            ("SECTIONS", section_count),
            ("HIGHLIGHTS", len(partition.highlights)),
            ("COMMENTS", len(partition.comments)),
            ("SOURCES", len(partition.sources)),
        ]
        for index, (label, value) in enumerate(stats):
            x = MARGIN + index * 44
            doc.text(x, stats_y, str(value), font=FONT_BOLD, size=16, color=COLORS["accent"])
            doc.text(x, stats_y + 5, label, size=7, color=COLORS["dark_gray"])

        doc.text(MARGIN, PAGE_HEIGHT - 20, f"Generated {_format_date(generated_at)}",
                 size=9, color=COLORS["dark_gray"])

    def _layout_part_header(self, doc: DocumentLayout, y: float, label: str) -> float:
        doc.rect(MARGIN, y - 4, 2, 8, COLORS["accent"])
        doc.text(MARGIN + 6, y, label, font=FONT_BOLD, size=8, color=COLORS["accent"])
        return y + 12

    def _layout_section(self, doc: DocumentLayout, y: float, index: int, section: Section) -> float:
        y = doc.check_page_break(y, SECTION_HEADER_ROOM)

        doc.text(MARGIN, y, f"{index + 1:02d}", font=FONT_BOLD, size=8, color=COLORS["accent"])
        doc.text(MARGIN + SECTION_BODY_INSET, y, self._clean(section.title).upper(),
                 font=FONT_BOLD, size=9, color=COLORS["gray"])
        y += 6

        # Body lines may continue on the next page; each line checks on its own
        advance = line_height(BODY_FONT_SIZE)
        body = wrap_text(self._clean(section.content), FONT_REGULAR, BODY_FONT_SIZE,
                         CONTENT_WIDTH - SECTION_BODY_INSET)
        for line in body:
            y = doc.check_page_break(y, advance)
            doc.text(MARGIN + SECTION_BODY_INSET, y, line, size=BODY_FONT_SIZE, color=COLORS["gray"])
            y += advance

        y += 4
        doc.line(MARGIN, y, PAGE_WIDTH - MARGIN, y, COLORS["divider"], width=0.2)
        return y + 8

    def _card_label(self, kind: str, annotation: Annotation) -> str:
        return f"{kind} · {self._clean(annotation.section_title).upper()}"

    def _layout_highlight(self, doc: DocumentLayout, y: float, annotation: Annotation) -> float:
        y = doc.check_page_break(y, HIGHLIGHT_CARD_ROOM)

        doc.rect(MARGIN, y - 4, CONTENT_WIDTH, 20, COLORS["surface"], radius=2)
        doc.rect(MARGIN, y - 4, 2, 20, COLORS["accent"])
        doc.text(MARGIN + 6, y + 1, self._card_label("HIGHLIGHT", annotation),
                 font=FONT_BOLD, size=7, color=COLORS["accent"])

        quoted = wrap_text(f'"{self._clean(annotation.text)}"', FONT_REGULAR, CARD_FONT_SIZE,
                           CONTENT_WIDTH - CARD_INSET)
        for index, line in enumerate(_clip_lines(quoted, CARD_TEXT_MAX_LINES)):
            doc.text(MARGIN + 6, y + 7 + index * line_height(CARD_FONT_SIZE), line,
                     size=CARD_FONT_SIZE, color=COLORS["white"])
        return y + 26

    def _layout_comment(self, doc: DocumentLayout, y: float, annotation: Annotation) -> float:
        y = doc.check_page_break(y, COMMENT_CARD_ROOM)

        doc.rect(MARGIN, y - 4, CONTENT_WIDTH, 28, COLORS["surface"], radius=2)
        doc.text(MARGIN + 6, y + 1, self._card_label("COMMENT", annotation),
                 font=FONT_BOLD, size=7, color=COLORS["dark_gray"])

        source_text = self._clean(annotation.text)
        excerpt = source_text[:COMMENT_EXCERPT_CHARS]
        if len(source_text) > COMMENT_EXCERPT_CHARS:
            excerpt = excerpt.rstrip() + "…"
        excerpt_lines = wrap_text(f'"{excerpt}"', FONT_ITALIC, 8, CONTENT_WIDTH - CARD_INSET)
        if excerpt_lines:
            doc.text(MARGIN + 6, y + 7, _clip_lines(excerpt_lines, 1)[0],
                     font=FONT_ITALIC, size=8, color=COLORS["gray"])

        body = wrap_text(self._clean(annotation.comment), FONT_REGULAR, CARD_FONT_SIZE,
                         CONTENT_WIDTH - CARD_INSET)
        for index, line in enumerate(_clip_lines(body, CARD_TEXT_MAX_LINES)):
            doc.text(MARGIN + 6, y + 14 + index * line_height(CARD_FONT_SIZE), line,
                     size=CARD_FONT_SIZE, color=COLORS["white"])
        return y + 34

    def _layout_source(self, doc: DocumentLayout, y: float, annotation: Annotation) -> float:
        y = doc.check_page_break(y, SOURCE_CARD_ROOM)

        doc.rect(MARGIN, y - 4, CONTENT_WIDTH, 16, COLORS["surface"], radius=2)
        title = wrap_text(self._clean(annotation.source_title) or "Source", FONT_BOLD,
                          CARD_FONT_SIZE, CONTENT_WIDTH - CARD_INSET)
        doc.text(MARGIN + 6, y + 2, _clip_lines(title, 1)[0],
                 font=FONT_BOLD, size=CARD_FONT_SIZE, color=COLORS["accent"])

        if annotation.source_url:
            shown = wrap_text(annotation.source_url, FONT_REGULAR, 8, CONTENT_WIDTH - CARD_INSET)
            doc.text(MARGIN + 6, y + 8, _clip_lines(shown, 1)[0], size=8,
                     color=COLORS["dark_gray"], link=annotation.source_url)
        return y + 22

    # =========================================================================
    # Pass 2: render
    # =========================================================================

    def render(self, doc: DocumentLayout, brand_label: str) -> bytes:
        """
        Render a finished layout to PDF bytes, stamping footers on every page.

        Args:
            doc: Output of layout()
            brand_label: Brand shown in the footer
        """
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        brand = self._clean(brand_label)
        pdf.setTitle(f"{brand} - Creative Brief" if brand else "Creative Brief")
        pdf.setAuthor(APP_NAME)
        pdf.setSubject("Creative brief with annotations")

        footer_tag = _clip_lines(
            wrap_text(f"{APP_NAME} · {brand}", FONT_REGULAR, FOOTER_FONT_SIZE, CONTENT_WIDTH - 30), 1
        )[0]
        total = len(doc.pages)

        for number, page in enumerate(doc.pages, start=1):
            pdf.setFillColorRGB(*[c / 255 for c in page.background])
            pdf.rect(0, 0, PAGE_WIDTH * mm, PAGE_HEIGHT * mm, stroke=0, fill=1)

            for op in page.ops:
                self._draw(pdf, op)

            self._draw(pdf, TextOp(MARGIN, PAGE_HEIGHT - 8, footer_tag, FONT_REGULAR,
                                   FOOTER_FONT_SIZE, COLORS["dark_gray"]))
            self._draw(pdf, TextOp(PAGE_WIDTH - MARGIN, PAGE_HEIGHT - 8, f"{number} / {total}",
                                   FONT_REGULAR, FOOTER_FONT_SIZE, COLORS["dark_gray"], align="right"))
            pdf.showPage()

        pdf.save()
        return buffer.getvalue()

    def _draw(self, pdf: canvas.Canvas, op) -> None:
        """Draw one layout operation, flipping y to reportlab's bottom-left origin."""
        if isinstance(op, RectOp):
            pdf.setFillColorRGB(*[c / 255 for c in op.color])
            x, y = op.x * mm, (PAGE_HEIGHT - op.y - op.height) * mm
            if op.radius:
                pdf.roundRect(x, y, op.width * mm, op.height * mm, op.radius * mm, stroke=0, fill=1)
            else:
                pdf.rect(x, y, op.width * mm, op.height * mm, stroke=0, fill=1)

        elif isinstance(op, LineOp):
            pdf.setStrokeColorRGB(*[c / 255 for c in op.color])
            pdf.setLineWidth(op.width * mm)
            pdf.line(op.x1 * mm, (PAGE_HEIGHT - op.y1) * mm, op.x2 * mm, (PAGE_HEIGHT - op.y2) * mm)

        elif isinstance(op, TextOp):
            pdf.setFillColorRGB(*[c / 255 for c in op.color])
            pdf.setFont(op.font, op.size)
            x, y = op.x * mm, (PAGE_HEIGHT - op.y) * mm
            if op.align == "right":
                pdf.drawRightString(x, y, op.text)
            else:
                pdf.drawString(x, y, op.text)
            if op.link:
                width = stringWidth(op.text, op.font, op.size)
                pdf.linkURL(op.link, (x, y - 2, x + width, y + op.size), relative=0, thickness=0)

    # =========================================================================
    # Public entry points
    # =========================================================================

    def export(
        self,
        brand_label: str,
        sections: list[Section],
        annotations: Iterable[Annotation],
        generated_at: datetime | None = None,
    ) -> bytes:
        """
        Lay out and render the brief.

        Never raises for empty input: with no sections and no annotations the
        result is a valid PDF with the cover and an empty brief page.

        Returns:
            The encoded PDF.
        """
        with Timer("PdfExport"):
            doc = self.layout(brand_label, sections, annotations, generated_at)
            return self.render(doc, brand_label)

    def export_to_file(
        self,
        brand_label: str,
        sections: list[Section],
        annotations: Iterable[Annotation],
        directory: Path,
        generated_at: datetime | None = None,
    ) -> Path:
        """
        Export and write the PDF into directory under export_filename().

        Returns:
            Path of the written file.
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / export_filename(brand_label)
        path.write_bytes(self.export(brand_label, sections, annotations, generated_at))
        debug_log(f"[EXPORT] Wrote {path}")
        return path
