"""
Tests for the history sidebar's row helpers.
"""

from datetime import datetime, timezone

import pytest

pytest.importorskip("customtkinter")

from briefdesk.ui.history_sidebar import format_relative_date, session_label  # noqa: E402

NOW = datetime(2024, 10, 20, 12, 0, tzinfo=timezone.utc)


class TestRelativeDate:
    @pytest.mark.parametrize("iso, expected", [
        ("2024-10-20T08:00:00+00:00", "Today"),
        ("2024-10-19T08:00:00+00:00", "Yesterday"),
        ("2024-10-16T08:00:00+00:00", "4d ago"),
        ("2024-10-12T08:00:00+00:00", "12 Oct"),
        ("2024-10-20T08:00:00", "Today"),
        ("not a date", ""),
    ])
    def test_format(self, iso, expected):
        assert format_relative_date(iso, now=NOW) == expected


class TestSessionLabel:
    def test_short_label_is_unchanged(self):
        assert session_label("Sneakers") == "Sneakers"

    def test_long_label_is_truncated(self):
        label = session_label("A luxury coffee brand that only sells single origin beans")

        assert label == "A luxury coffee brand that..."
