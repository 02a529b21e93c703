"""
Brief text handling for BriefDesk.

- parse_sections: split a "## "-delimited brief into ordered sections
- extract_sources: split a chat reply into body and SOURCES references
- SessionSummaryFormatter: text/Markdown summary of a whole session

Usage:
    from briefdesk.brief import parse_sections, extract_sources

    sections = parse_sections(brief.creative_brief)
    body, references = extract_sources(reply)
"""

from .sections import Section, parse_sections, render_sections
from .sources import ReferenceEntry, extract_sources, strip_sources
from .formatter import FormattedSummary, SessionSummaryFormatter

__all__ = [
    "Section",
    "parse_sections",
    "render_sections",
    "ReferenceEntry",
    "extract_sources",
    "strip_sources",
    "FormattedSummary",
    "SessionSummaryFormatter",
]
