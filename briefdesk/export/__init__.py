"""
PDF export for BriefDesk.

Usage:
    from briefdesk.export import BriefPdfExporter, export_filename

    path = BriefPdfExporter().export_to_file(brand, sections, annotations, EXPORTS_DIR)
"""

from .pdf_exporter import BriefPdfExporter, export_filename

__all__ = ["BriefPdfExporter", "export_filename"]
