"""
Brief Section Parser for BriefDesk.

The brief service returns a flat text blob in which every section starts
with a line-start "## " marker:

    ## Brand Essence
    Quiet confidence for people who hate noise.

    ## Audience
    Gen Z climate activists...

parse_sections() splits that blob into an ordered list of Section records.
The same list feeds the brief tab, the session summary and the PDF export,
so section order always follows the order of the markers in the text.

Marker-less input:
    Text with no "## " marker at all becomes a single section titled
    "Untitled" holding the whole (stripped) text. Blank text yields no
    sections. Text that appears before the first marker is discarded.
"""

import re
from dataclasses import dataclass

from briefdesk.logging_config import debug_log

SECTION_MARKER = "## "
UNTITLED_SECTION_TITLE = "Untitled"

_MARKER_PATTERN = re.compile(r"^## ", re.MULTILINE)


@dataclass(frozen=True)
class Section:
    """
    A titled chunk of the generated brief.

    Attributes:
        title: Heading text (first line after the marker). Titles need not
            be unique; duplicates are rendered separately.
        content: Body text below the heading, stripped.
    """

    title: str
    content: str


def parse_sections(text: str) -> list[Section]:
    """
    Split a delimited brief into ordered sections.

    Never raises on malformed input; the worst case is an empty list.

    Args:
        text: Raw brief text, optionally containing line-start "## " markers

    Returns:
        Sections in marker order. N markers give exactly N sections;
        zero markers give one "Untitled" section (or none for blank text).
    """
    if not text:
        return []

    text = text.replace("\r\n", "\n")
    markers = list(_MARKER_PATTERN.finditer(text))

    if not markers:
        body = text.strip()
        if not body:
            return []
        return [Section(title=UNTITLED_SECTION_TITLE, content=body)]

    sections = []
    for index, marker in enumerate(markers):
        end = markers[index + 1].start() if index + 1 < len(markers) else len(text)
        lines = text[marker.end():end].strip().split("\n")
        title = lines[0].strip()
        content = "\n".join(lines[1:]).strip()
        sections.append(Section(title=title, content=content))

    debug_log(f"[PARSER] Parsed {len(sections)} sections from {len(text)} chars")
    return sections


def render_sections(sections: list[Section]) -> str:
    """
    Render sections back into marker-delimited text.

    parse_sections(render_sections(sections)) yields the same
    (title, content) pairs, though whitespace is not preserved verbatim.
    """
    blocks = []
    for section in sections:
        block = f"{SECTION_MARKER}{section.title}"
        if section.content:
            block += f"\n{section.content}"
        blocks.append(block)
    return "\n\n".join(blocks)
