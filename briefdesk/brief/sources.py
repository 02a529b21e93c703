"""
Source Extraction for BriefDesk chat replies.

Assistant replies may end with a references block:

    ...body of the reply...

    ## SOURCES
    - [Report] "State of Gen Z 2024" — survey of 5,000 respondents
    - [Patagonia](https://patagonia.com) — activist brand benchmark

extract_sources() splits the reply into the clean body (everything before
the heading) and a list of ReferenceEntry records. Two line shapes are
accepted, tested in this order:

1. Bracket-tag form: - [tag] "name" — description   (no URL)
2. Markdown-link form: [name](https://url) — description

Lines matching neither shape are dropped silently; upstream text is not
fully trusted, so nothing here raises.
"""

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from briefdesk.config import SOURCE_DESCRIPTION_MAX_CHARS
from briefdesk.logging_config import debug_log

SOURCES_HEADING_PATTERN = re.compile(r"##\s*SOURCES", re.IGNORECASE)

# Em dash, en dash or hyphen separate the name from its description
BRACKET_TAG_PATTERN = re.compile(r'^-\s+\[([^\]]+)\]\s+"([^"]+)"\s*[—–-]+\s*(.+)')
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\((https?://[^)]+)\)")
LINK_DESCRIPTION_PATTERN = re.compile(r"[—–-]\s*(.+)")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ReferenceEntry:
    """
    A structured citation extracted from a SOURCES block.

    id and added_at are generated per extraction and excluded from equality,
    so two extractions of the same text compare equal entry by entry.
    """

    title: str
    url: str = ""
    description: str = ""
    id: str = field(default_factory=_new_id, compare=False)
    added_at: str = field(default_factory=_utc_now, compare=False)


def _truncate_description(description: str) -> str:
    return description.strip()[:SOURCE_DESCRIPTION_MAX_CHARS]


def _parse_source_line(line: str) -> ReferenceEntry | None:
    """Parse one line of a SOURCES block; None if it has neither shape."""
    tagged = BRACKET_TAG_PATTERN.match(line)
    if tagged:
        tag, name, description = tagged.groups()
        return ReferenceEntry(
            title=f"{tag} — {name}",
            url="",
            description=_truncate_description(description),
        )

    linked = LINK_PATTERN.search(line)
    if linked:
        after_link = line[linked.end():]
        described = LINK_DESCRIPTION_PATTERN.search(after_link)
        return ReferenceEntry(
            title=linked.group(1),
            url=linked.group(2),
            description=_truncate_description(described.group(1)) if described else "",
        )

    return None


def extract_sources(text: str) -> tuple[str, list[ReferenceEntry]]:
    """
    Split text into its clean body and the entries of its SOURCES block.

    Args:
        text: Assistant reply, possibly ending with a "## SOURCES" block

    Returns:
        (clean_body, entries). Without a SOURCES heading this is
        (text.strip(), []): the no-op path only trims.
    """
    text = text or ""
    heading = SOURCES_HEADING_PATTERN.search(text)
    if heading is None:
        return text.strip(), []

    clean_body = text[:heading.start()].strip()
    entries = []
    for line in text[heading.start():].split("\n"):
        entry = _parse_source_line(line.strip())
        if entry is not None:
            entries.append(entry)

    debug_log(f"[PARSER] Extracted {len(entries)} sources from reply ({len(text)} chars)")
    return clean_body, entries


def strip_sources(text: str) -> str:
    """Return text without its SOURCES block (used for summaries)."""
    heading = SOURCES_HEADING_PATTERN.search(text or "")
    if heading is None:
        return text or ""
    return text[:heading.start()].strip()
