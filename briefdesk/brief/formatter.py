"""
Session Summary Formatter for BriefDesk.

Formats a whole session (brief, annotations and the conversation) into a
readable summary for the Summary tab and for plain-text/Markdown export.

Output Sections:
1. Header with brand and counters
2. THE BRIEF - numbered sections
3. HIGHLIGHTS / COMMENTS / SOURCES - annotations by kind
4. CONVERSATION - chat turns after the seeding brief, SOURCES blocks removed
"""

from dataclasses import dataclass
from datetime import datetime

from briefdesk.brief.sources import strip_sources


@dataclass
class FormattedSummary:
    """
    Formatted session summary.

    Attributes:
        text: Plain text summary
        sections: Dict of section name -> content for UI display
        metadata: Counters for the header
    """

    text: str
    sections: dict
    metadata: dict


class SessionSummaryFormatter:
    """
    Formats session summaries for display and export.

    Example:
        formatter = SessionSummaryFormatter()
        formatted = formatter.format(session)
        print(formatted.sections["brief"])
    """

    HEADER_CHAR = "="
    SUBHEADER_CHAR = "-"
    SECTION_WIDTH = 60

    def format(self, session) -> FormattedSummary:
        """
        Format a BriefSession into displayable output.

        Args:
            session: BriefSession to summarise

        Returns:
            FormattedSummary with text and structured sections
        """
        partition = session.annotations.partition_by_kind()
        chat_messages = session.messages[1:]

        sections = {
            "brief": self._format_brief(session.sections),
            "highlights": self._format_highlights(partition.highlights),
            "comments": self._format_comments(partition.comments),
            "sources": self._format_sources(partition.sources),
            "chat": self._format_chat(chat_messages),
        }

        metadata = {
            "generated_at": datetime.now().isoformat(),
            "session_id": session.id,
            "sections": len(session.sections),
            "chat_messages": len(chat_messages),
            "highlights": len(partition.highlights),
            "comments": len(partition.comments),
            "sources": len(partition.sources),
        }

        counters = "  ".join(
            f"{label}: {metadata[key]}"
            for key, label in [
                ("sections", "Sections"),
                ("chat_messages", "Chat Messages"),
                ("highlights", "Highlights"),
                ("comments", "Comments"),
                ("sources", "Sources"),
            ]
        )

        text_parts = [
            self._make_header("SESSION SUMMARY"),
            session.brand_description,
            counters,
            "",
            self._make_subheader("THE BRIEF"),
            sections["brief"],
        ]
        for key, title in [("highlights", "HIGHLIGHTS"), ("comments", "COMMENTS"),
                           ("sources", "SOURCES"), ("chat", "CONVERSATION")]:
            if sections[key]:
                text_parts.extend(["", self._make_subheader(title), sections[key]])

        return FormattedSummary(text="\n".join(text_parts), sections=sections, metadata=metadata)

    def format_for_export(self, session, format_type: str = "txt") -> str:
        """
        Format for file export.

        Args:
            session: BriefSession to format
            format_type: "txt" or "md" (markdown)
        """
        if format_type == "md":
            return self._format_markdown(session)
        return self.format(session).text

    def _format_brief(self, sections) -> str:
        if not sections:
            return "No brief sections."
        blocks = []
        for i, section in enumerate(sections, 1):
            blocks.append(f"{i:02d}  {section.title.upper()}\n{section.content}".rstrip())
        return "\n\n".join(blocks)

    def _format_highlights(self, highlights) -> str:
        return "\n".join(f'  - "{a.text}" ({a.section_title})' for a in highlights)

    def _format_comments(self, comments) -> str:
        lines = []
        for a in comments:
            lines.append(f'  - "{a.text}" ({a.section_title})')
            lines.append(f"    {a.comment}")
        return "\n".join(lines)

    def _format_sources(self, sources) -> str:
        lines = []
        for a in sources:
            line = f"  - {a.source_title}"
            if a.source_url:
                line += f" <{a.source_url}>"
            lines.append(line)
            if a.source_description:
                lines.append(f"    {a.source_description}")
        return "\n".join(lines)

    def _format_chat(self, messages) -> str:
        blocks = []
        for message in messages:
            speaker = "YOU" if message.role == "user" else "BRIEFDESK"
            blocks.append(f"{speaker}:\n{strip_sources(message.content).strip()}")
        return "\n\n".join(blocks)

    def _format_markdown(self, session) -> str:
        """Format as Markdown for export."""
        partition = session.annotations.partition_by_kind()
        lines = [
            f"# {session.brand_description}",
            "",
            f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*",
            "",
            "---",
            "",
        ]

        for section in session.sections:
            lines.extend([f"## {section.title}", "", section.content, ""])

        if partition.highlights:
            lines.extend(["---", "", "## Highlights", ""])
            for a in partition.highlights:
                lines.append(f"- > {a.text} *({a.section_title})*")
            lines.append("")

        if partition.comments:
            lines.extend(["## Comments", ""])
            for a in partition.comments:
                lines.append(f"- **{a.section_title}:** \"{a.text}\"")
                lines.append(f"  {a.comment}")
            lines.append("")

        if partition.sources:
            lines.extend(["## Sources", ""])
            for a in partition.sources:
                title = f"[{a.source_title}]({a.source_url})" if a.source_url else a.source_title
                description = f" - {a.source_description}" if a.source_description else ""
                lines.append(f"- {title}{description}")
            lines.append("")

        return "\n".join(lines)

    def _make_header(self, text: str) -> str:
        line = self.HEADER_CHAR * self.SECTION_WIDTH
        return f"{line}\n{text.center(self.SECTION_WIDTH)}\n{line}"

    def _make_subheader(self, text: str) -> str:
        return f"{text}\n{self.SUBHEADER_CHAR * len(text)}"
