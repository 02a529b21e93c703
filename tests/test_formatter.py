"""
Tests for the session summary formatter.
"""

import pytest

from briefdesk.brief.formatter import SessionSummaryFormatter
from briefdesk.brief.sources import ReferenceEntry
from briefdesk.session import BriefSession
from briefdesk.session_store import ChatMessage

REPLY = """Lean into repair.

## SOURCES
- [iFixit](https://www.ifixit.com) — repair culture"""


@pytest.fixture
def session(sample_brief):
    session = BriefSession(
        "Sustainable sneakers",
        sample_brief,
        session_id="s1",
        messages=[
            ChatMessage("assistant", sample_brief),
            ChatMessage("user", "What about durability?"),
            ChatMessage("assistant", REPLY),
        ],
    )
    session.add_highlight("Quiet confidence", "Brand Essence")
    session.add_comment("buy less", "Audience", "Lead with this")
    session.save_source(ReferenceEntry("iFixit", "https://www.ifixit.com", "repair culture"))
    return session


@pytest.fixture
def formatter():
    return SessionSummaryFormatter()


class TestPlainSummary:
    def test_sections(self, formatter, session):
        result = formatter.format(session)

        assert result.sections["brief"].startswith("01  BRAND ESSENCE\nQuiet confidence")
        assert '"Quiet confidence" (Brand Essence)' in result.sections["highlights"]
        assert "Lead with this" in result.sections["comments"]
        assert "iFixit <https://www.ifixit.com>" in result.sections["sources"]

    def test_chat_skips_seed_and_sources_block(self, formatter, session):
        chat = formatter.format(session).sections["chat"]

        assert chat == "YOU:\nWhat about durability?\n\nBRIEFDESK:\nLean into repair."

    def test_metadata(self, formatter, session):
        metadata = formatter.format(session).metadata

        assert metadata["session_id"] == "s1"
        assert metadata["sections"] == 3
        assert metadata["chat_messages"] == 2
        assert (metadata["highlights"], metadata["comments"], metadata["sources"]) == (1, 1, 1)

    def test_text_layout(self, formatter, session):
        text = formatter.format(session).text

        assert "SESSION SUMMARY" in text
        assert text.index("THE BRIEF") < text.index("HIGHLIGHTS") < text.index("CONVERSATION")

    def test_empty_parts_are_left_out(self, formatter):
        text = formatter.format(BriefSession("Empty", "")).text

        assert "No brief sections." in text
        assert "HIGHLIGHTS" not in text
        assert "CONVERSATION" not in text


class TestMarkdownExport:
    def test_markdown(self, formatter, session):
        markdown = formatter.format_for_export(session, "md")

        assert markdown.startswith("# Sustainable sneakers")
        assert "## Audience" in markdown
        assert "## Highlights" in markdown
        assert "- [iFixit](https://www.ifixit.com) - repair culture" in markdown

    def test_txt_is_the_plain_summary(self, formatter, session):
        assert formatter.format_for_export(session, "txt").startswith("=" * 60)
