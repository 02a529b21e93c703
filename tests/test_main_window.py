"""
Tests for MainWindow's queue handling and shutdown.

The methods run on a stand-in object, so no Tk display is needed.
"""

from types import SimpleNamespace

import pytest

pytest.importorskip("customtkinter")

from briefdesk.ui import main_window  # noqa: E402
from briefdesk.ui.main_window import MainWindow  # noqa: E402


class TestQueueMessages:
    def test_session_saved_refreshes_history(self):
        refreshed = []
        window = SimpleNamespace(session=None, _refresh_sessions=lambda: refreshed.append(True))

        MainWindow._handle_queue_message(window, "session_saved", "s1")

        assert refreshed == [True]


class TestClose:
    def test_close_finishes_saves_then_closes_log(self, monkeypatch):
        calls = []
        saver = SimpleNamespace(close=lambda timeout=None: calls.append(("saves", timeout)))
        window = SimpleNamespace(_save_worker=saver, destroy=lambda: calls.append(("destroy", None)))
        monkeypatch.setattr(main_window, "close_debug_log", lambda: calls.append(("log", None)))

        MainWindow._on_close(window)

        assert calls == [
            ("saves", main_window.SESSION_TIMEOUT_SECONDS),
            ("log", None),
            ("destroy", None),
        ]
