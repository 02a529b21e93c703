"""
Unit tests for SOURCES block extraction from chat replies.
"""

from briefdesk.brief.sources import ReferenceEntry, extract_sources, strip_sources

REPLY = """Here is a sharper take on the audience.

They want proof, not promises.

## SOURCES
- [Report] "State of Gen Z 2024" — survey of 5,000 respondents
- [Patagonia](https://www.patagonia.com) — activist brand benchmark
- [Allbirds](https://www.allbirds.com)
- this line is not a reference
- [Study] "Sneaker Lifecycle" - carbon footprint per pair
"""


class TestExtraction:
    """Test the two accepted line shapes."""

    def test_clean_body_stops_before_heading(self):
        body, _ = extract_sources(REPLY)

        assert body == "Here is a sharper take on the audience.\n\nThey want proof, not promises."

    def test_entries_in_order_and_unmatched_lines_dropped(self):
        _, entries = extract_sources(REPLY)

        assert [e.title for e in entries] == [
            "Report — State of Gen Z 2024",
            "Patagonia",
            "Allbirds",
            "Study — Sneaker Lifecycle",
        ]

    def test_bracket_tag_form_has_no_url(self):
        _, entries = extract_sources(REPLY)

        assert entries[0].url == ""
        assert entries[0].description == "survey of 5,000 respondents"

    def test_link_form(self):
        _, entries = extract_sources(REPLY)

        assert entries[1].url == "https://www.patagonia.com"
        assert entries[1].description == "activist brand benchmark"
        assert entries[2].url == "https://www.allbirds.com"
        assert entries[2].description == ""

    def test_hyphen_and_en_dash_separators(self):
        _, entries = extract_sources('## SOURCES\n- [Blog] "Field Notes" – quick read\n'
                                     "[Site](http://example.com) - homepage")

        assert entries[0].description == "quick read"
        assert entries[1].description == "homepage"

    def test_heading_is_case_insensitive(self):
        body, entries = extract_sources("Body\n##sources\n- [A](https://a.example)")

        assert body == "Body"
        assert len(entries) == 1

    def test_description_is_truncated(self):
        long_description = "x" * 400
        _, entries = extract_sources(f"## SOURCES\n- [A](https://a.example) — {long_description}")

        assert len(entries[0].description) == 150


class TestDocumentedLines:
    def test_bracket_tag_line(self):
        _, entries = extract_sources('## SOURCES\n- [Label] "Name" — a description here')

        assert [(e.title, e.url, e.description) for e in entries] == [
            ("Label — Name", "", "a description here"),
        ]

    def test_link_inside_a_sentence(self):
        _, entries = extract_sources("## SOURCES\nSee [OpenAI](https://openai.com) — the company")

        assert [(e.title, e.url, e.description) for e in entries] == [
            ("OpenAI", "https://openai.com", "the company"),
        ]


class TestNoSources:
    """Test replies without a SOURCES heading."""

    def test_returns_trimmed_text_and_no_entries(self):
        assert extract_sources("  plain reply \n") == ("plain reply", [])

    def test_empty_text(self):
        assert extract_sources("") == ("", [])


class TestIdempotence:
    """Test that repeated extraction yields the same content."""

    def test_same_content_new_ids(self):
        _, first = extract_sources(REPLY)
        _, second = extract_sources(REPLY)

        assert first == second
        assert {e.id for e in first}.isdisjoint({e.id for e in second})

    def test_entry_equality_ignores_id_and_timestamp(self):
        assert ReferenceEntry("A", "u", "d") == ReferenceEntry("A", "u", "d")


class TestStripSources:
    def test_strip_sources(self):
        assert strip_sources(REPLY).endswith("They want proof, not promises.")
        assert strip_sources("no block") == "no block"
