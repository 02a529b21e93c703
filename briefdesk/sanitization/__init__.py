"""
Character sanitization for PDF export.

Cleans up characters in generated text that the PDF standard fonts cannot
draw, before the exporter lays the text out.
"""

from .character_sanitizer import PdfTextSanitizer

__all__ = ["PdfTextSanitizer"]
