"""
Tests for the brief session controller.

The brief service is replaced by a small in-memory client.
"""

from datetime import datetime

import pytest

from briefdesk.annotations.capture import Rect
from briefdesk.brief.sources import ReferenceEntry
from briefdesk.config import CHAT_UNAVAILABLE_MESSAGE
from briefdesk.export import BriefPdfExporter
from briefdesk.service.brief_client import BriefResponse
from briefdesk.session import BriefSession

REPLY_WITH_SOURCES = """Try a bolder headline.

## SOURCES
- [Patagonia](https://www.patagonia.com) — activist brand benchmark"""


class FakeClient:
    def __init__(self, brief, reply=REPLY_WITH_SOURCES, fail_chat=False):
        self.brief = brief
        self.reply = reply
        self.fail_chat = fail_chat
        self.chat_calls = []

    def generate_brief(self, brand_description):
        return BriefResponse(brand_description, self.brief, memories_used=2)

    def send_chat(self, brand_description, creative_brief, messages, user_message):
        self.chat_calls.append((messages, user_message))
        if self.fail_chat:
            raise RuntimeError("Cannot connect to the brief service")
        return self.reply


@pytest.fixture
def client(sample_brief):
    return FakeClient(sample_brief)


@pytest.fixture
def session(client, session_store):
    return BriefSession.generate(client, "  Sustainable sneakers  ", store=session_store)


class TestGenerate:
    def test_generate_persists_new_session(self, session, session_store):
        assert session.brand_description == "Sustainable sneakers"
        assert session.memories_used == 2
        assert [s.title for s in session.sections] == ["Brand Essence", "Audience", "Key Message"]
        assert session_store.load(session.id).creative_brief == session.creative_brief

    def test_blank_brand_is_rejected(self, client):
        with pytest.raises(ValueError):
            BriefSession.generate(client, "   ")

    def test_initial_view(self, session):
        assert session.initial_view == "brief"
        session.start_chat()
        assert session.initial_view == "chat"

    def test_memory_informed(self, session, sample_brief):
        assert session.memory_informed
        assert not BriefSession("Sneakers", sample_brief).memory_informed


class TestAnnotations:
    def test_capture_commits_into_session_and_persists(self, session, session_store):
        capture = session.capture_for("Audience")

        capture.pointer_release("buy less", Rect(10, 10, 50, 10), Rect(0, 0, 500, 100))
        annotation = capture.commit_highlight()

        assert annotation.section_title == "Audience"
        assert session_store.load(session.id).annotations == [annotation]

    def test_highlights_keep_the_title_of_their_section(self, session):
        container = Rect(0, 0, 500, 100)
        audience = session.capture_for("Audience")
        essence = session.capture_for("Brand Essence")

        audience.pointer_release("buy less", Rect(10, 10, 50, 10), container)
        first = audience.commit_highlight()
        essence.pointer_release("Quiet confidence", Rect(10, 40, 80, 10), container)
        second = essence.commit_highlight()

        assert first.section_title == "Audience"
        assert second.section_title == "Brand Essence"
        assert [(a.text, a.section_title) for a in session.annotations] == [
            ("buy less", "Audience"),
            ("Quiet confidence", "Brand Essence"),
        ]

    def test_delete_persists(self, session, session_store):
        annotation = session.add_comment("buy less", "Audience", "Love it")

        assert session.delete_annotation(annotation.id) is True
        assert session.delete_annotation(annotation.id) is False
        assert session_store.load(session.id).annotations == []

    def test_save_source(self, session):
        annotation = session.save_source(ReferenceEntry("Patagonia", "https://www.patagonia.com"))

        assert annotation.source_url == "https://www.patagonia.com"
        assert session.annotations.partition_by_kind().sources == [annotation]


class TestSaveHandler:
    def test_saves_go_to_handler(self, session, session_store):
        handed_off = []
        session.save_handler = handed_off.append

        session.add_highlight("Quiet confidence", "Brand Essence")

        assert [s.id for s in handed_off] == [session.id]
        assert handed_off[0].annotations[0].text == "Quiet confidence"
        assert session_store.load(session.id).annotations == []

    def test_no_store_means_no_save(self, sample_brief):
        handed_off = []
        session = BriefSession("Sneakers", sample_brief)
        session.save_handler = handed_off.append

        session.add_highlight("Quiet confidence", "Brand Essence")

        assert handed_off == []


class TestChat:
    def test_start_chat_seeds_brief_once(self, session, sample_brief):
        session.start_chat()
        session.start_chat()

        assert len(session.messages) == 1
        assert session.messages[0].role == "assistant"
        assert session.messages[0].content == sample_brief

    def test_send_message(self, session, client, session_store):
        reply = session.send_message(client, "  Make it bolder ")

        assert reply.content == REPLY_WITH_SOURCES
        assert [m.role for m in session.messages] == ["assistant", "user", "assistant"]
        payload, user_message = client.chat_calls[0]
        assert user_message == "Make it bolder"
        assert payload[-1] == {"role": "user", "content": "Make it bolder"}
        assert len(session_store.load(session.id).messages) == 3
        assert not session.awaiting_reply

    def test_blank_message_is_not_sent(self, session, client):
        assert session.send_message(client, "   ") is None
        assert client.chat_calls == []
        assert session.messages == []

    def test_one_pending_reply_at_a_time(self, session):
        assert session.add_user_message("first") is not None
        assert session.add_user_message("second") is None

        session.receive_reply("ok")
        assert session.add_user_message("second") is not None

    def test_service_failure_keeps_user_message(self, session, sample_brief, session_store):
        client = FakeClient(sample_brief, fail_chat=True)

        reply = session.send_message(client, "Hello?")

        assert reply.content == CHAT_UNAVAILABLE_MESSAGE
        assert [m.content for m in session.messages[1:]] == ["Hello?", CHAT_UNAVAILABLE_MESSAGE]
        assert not session.awaiting_reply

    def test_message_sources(self, session, client):
        session.send_message(client, "Sources?")

        body, entries = session.message_sources(2)
        assert body == "Try a bolder headline."
        assert [e.title for e in entries] == ["Patagonia"]

        assert session.message_sources(1) == ("Sources?", [])


class TestRestore:
    def test_from_snapshot(self, session, client, session_store):
        session.send_message(client, "Hi")
        session.add_highlight("Quiet confidence", "Brand Essence")

        restored = BriefSession.from_snapshot(session_store.load(session.id), store=session_store)

        assert restored.id == session.id
        assert restored.initial_view == "chat"
        assert restored.messages == session.messages
        assert restored.annotations.to_list() == session.annotations.to_list()


class TestExport:
    def test_export_pdf(self, session):
        session.add_highlight("Quiet confidence", "Brand Essence")

        assert session.export_pdf().startswith(b"%PDF")

    def test_deleted_highlight_is_left_out_of_the_export(self, session):
        kept = session.add_highlight("Quiet confidence", "Brand Essence")
        dropped = session.add_highlight("buy less", "Audience")

        session.delete_annotation(dropped.id)
        doc = BriefPdfExporter().layout(session.brand_description, session.sections,
                                        session.annotations, datetime(2024, 10, 12))

        notes = [op.text for op in doc.pages[2].texts()]
        assert "ANNOTATIONS" in notes
        assert f'"{kept.text}"' in notes
        assert '"buy less"' not in notes
        cover = doc.pages[0].texts()
        counter_y = min(op.y for op in cover if op.text == "HIGHLIGHTS") - 5
        assert [op.text for op in cover if op.y == counter_y][1] == "1"

    def test_export_pdf_to(self, session, tmp_path):
        path = session.export_pdf_to(tmp_path)

        assert path.name == "briefdesk-brief-sustainable-sneakers.pdf"
        assert path.exists()
