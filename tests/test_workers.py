"""
Tests for the background session save worker.
"""

from queue import Queue

from briefdesk.annotations.models import make_highlight
from briefdesk.session_store import SessionSnapshot
from briefdesk.ui.workers import SessionSaveWorker


def snapshot(sample_brief, *texts):
    return SessionSnapshot(
        id="s1",
        brand_description="Sneakers",
        creative_brief=sample_brief,
        annotations=[make_highlight(text, "Audience") for text in texts],
    )


class FailingStore:
    def __init__(self):
        self.saved = []

    def save(self, snap):
        if not snap.annotations:
            raise OSError("disk full")
        self.saved.append(snap)


class TestSessionSaveWorker:
    def test_saves_in_submission_order(self, session_store, sample_brief):
        ui_queue = Queue()
        worker = SessionSaveWorker(session_store, ui_queue)
        worker.start()

        worker.submit(snapshot(sample_brief, "first"))
        worker.submit(snapshot(sample_brief, "first", "second"))
        worker.close(timeout=5)

        assert not worker.is_alive()
        assert [a.text for a in session_store.load("s1").annotations] == ["first", "second"]
        assert [ui_queue.get_nowait(), ui_queue.get_nowait()] == [("session_saved", "s1")] * 2
        assert ui_queue.empty()

    def test_failed_save_does_not_stop_the_worker(self, sample_brief):
        store = FailingStore()
        ui_queue = Queue()
        worker = SessionSaveWorker(store, ui_queue)
        worker.start()

        worker.submit(snapshot(sample_brief))
        worker.submit(snapshot(sample_brief, "kept"))
        worker.close(timeout=5)

        assert [s.annotations[0].text for s in store.saved] == ["kept"]
        assert ui_queue.get_nowait() == ("session_saved", "s1")
        assert ui_queue.empty()

    def test_close_before_start(self, session_store):
        worker = SessionSaveWorker(session_store, Queue())

        worker.close(timeout=1)

        assert not worker.is_alive()
