"""
Brief Session Controller for BriefDesk

BriefSession ties together one generated brief, its chat log and its
annotations, and is what both the desktop UI and the command line work
against.

Lifecycle:
    1. BriefSession.generate(client, brand)  -> brief text from the service
    2. sections                              -> parsed brief for display/export
    3. capture_for(title)                    -> SelectionCapture per section
    4. start_chat() / send_message()         -> conversation about the brief
    5. save_source(entry)                    -> keep a reference from a reply
    6. export_pdf() / export_pdf_to(dir)     -> paginated PDF

Every change to the annotations or the chat log hands a fresh snapshot to the
session store (if one is attached), so the history sidebar can restore the
session later.
"""

import uuid
from pathlib import Path
from typing import Callable

from briefdesk.annotations.capture import SelectionCapture
from briefdesk.annotations.models import Annotation, make_comment, make_highlight, make_source
from briefdesk.annotations.store import AnnotationStore
from briefdesk.brief.sections import Section, parse_sections
from briefdesk.brief.sources import ReferenceEntry, extract_sources
from briefdesk.config import CHAT_UNAVAILABLE_MESSAGE
from briefdesk.export.pdf_exporter import BriefPdfExporter
from briefdesk.logging_config import debug_log, error
from briefdesk.service.brief_client import BriefServiceClient
from briefdesk.session_store import ChatMessage, SessionSnapshot, SessionStore, utc_now


class BriefSession:
    """
    One brief with its conversation and annotations.

    Example:
        session = BriefSession.generate(client, "A luxury coffee brand", store=store)
        capture = session.capture_for(session.sections[0].title)
        session.start_chat()
        session.send_message(client, "Make the audience younger")
        session.export_pdf_to(EXPORTS_DIR)
    """

    def __init__(
        self,
        brand_description: str,
        creative_brief: str,
        session_id: str | None = None,
        messages: list[ChatMessage] | None = None,
        annotations=(),
        created_at: str | None = None,
        store: SessionStore | None = None,
        memories_used: int = 0,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.brand_description = brand_description
        self.creative_brief = creative_brief
        self.messages: list[ChatMessage] = list(messages or [])
        self.created_at = created_at or utc_now()
        self.memories_used = memories_used
        self.store = store
        # Set by the desktop UI so saves run on a worker thread
        self.save_handler: Callable[[SessionSnapshot], None] | None = None
        self.awaiting_reply = False
        self._sections: list[Section] | None = None

        self.annotations = AnnotationStore(annotations)
        self.annotations.subscribe(lambda _store: self.persist())

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def generate(
        cls,
        client: BriefServiceClient,
        brand_description: str,
        store: SessionStore | None = None,
    ) -> "BriefSession":
        """
        Generate a new brief and start a session around it.

        Raises:
            ValueError: If the brand description is blank
            RuntimeError: If the brief service fails
        """
        brand_description = (brand_description or "").strip()
        if not brand_description:
            raise ValueError("Brand description cannot be empty")

        response = client.generate_brief(brand_description)
        session = cls(
            brand_description=response.brand_description or brand_description,
            creative_brief=response.creative_brief,
            store=store,
            memories_used=response.memories_used,
        )
        debug_log(f"[SESSION] New session {session.id}: {len(session.sections)} sections")
        session.persist()
        return session

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot, store: SessionStore | None = None) -> "BriefSession":
        """Restore a session from its persisted snapshot."""
        return cls(
            brand_description=snapshot.brand_description,
            creative_brief=snapshot.creative_brief,
            session_id=snapshot.id,
            messages=snapshot.messages,
            annotations=snapshot.annotations,
            created_at=snapshot.created_at,
            store=store,
        )

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            id=self.id,
            brand_description=self.brand_description,
            creative_brief=self.creative_brief,
            messages=list(self.messages),
            annotations=self.annotations.to_list(),
            created_at=self.created_at,
            updated_at=utc_now(),
        )

    def persist(self) -> None:
        """
        Hand the current state to the session store, if one is attached.

        With a save_handler set the snapshot goes there instead of being
        saved on the calling thread.
        """
        if self.store is None:
            return
        if self.save_handler is not None:
            self.save_handler(self.snapshot())
        else:
            self.store.save(self.snapshot())

    # =========================================================================
    # Brief
    # =========================================================================

    @property
    def sections(self) -> list[Section]:
        if self._sections is None:
            self._sections = parse_sections(self.creative_brief)
        return self._sections

    @property
    def memory_informed(self) -> bool:
        """True when the service drew on stored memories for this brief."""
        return self.memories_used > 0

    @property
    def initial_view(self) -> str:
        """View to show when the session is opened: "chat" once it has messages."""
        return "chat" if self.messages else "brief"

    # =========================================================================
    # Annotations
    # =========================================================================

    def add_highlight(self, text: str, section_title: str) -> Annotation:
        return self.annotations.add(make_highlight(text, section_title))

    def add_comment(self, text: str, section_title: str, comment: str) -> Annotation:
        return self.annotations.add(make_comment(text, section_title, comment))

    def save_source(self, entry: ReferenceEntry) -> Annotation:
        return self.annotations.add(make_source(entry))

    def delete_annotation(self, annotation_id: str) -> bool:
        return self.annotations.remove(annotation_id)

    def capture_for(self, section_title: str) -> SelectionCapture:
        """New capture state machine for one section, committing into this session."""
        return SelectionCapture(section_title, self.add_highlight, self.add_comment)

    # =========================================================================
    # Chat
    # =========================================================================

    def start_chat(self) -> None:
        """Seed the conversation with the brief as the first assistant message."""
        if self.messages:
            return
        self.messages.append(ChatMessage("assistant", self.creative_brief))
        self.persist()

    def add_user_message(self, text: str) -> list[dict] | None:
        """
        Append a user message and return the payload to send to the service.

        Returns:
            The conversation as role/content dicts, or None if the text is
            blank or a reply is still pending.
        """
        text = (text or "").strip()
        if not text or self.awaiting_reply:
            return None
        self.start_chat()
        self.messages.append(ChatMessage("user", text))
        self.awaiting_reply = True
        self.persist()
        return [m.to_dict() for m in self.messages]

    def receive_reply(self, reply: str) -> ChatMessage:
        """Append the assistant reply to the pending user message."""
        message = ChatMessage("assistant", reply)
        self.messages.append(message)
        self.awaiting_reply = False
        self.persist()
        return message

    def receive_failure(self, reason: str) -> ChatMessage:
        """Keep the user message and answer it with the unavailable notice."""
        error(f"Chat request failed for session {self.id}: {reason}")
        return self.receive_reply(CHAT_UNAVAILABLE_MESSAGE)

    def send_message(self, client: BriefServiceClient, text: str) -> ChatMessage | None:
        """
        Send one chat turn synchronously.

        Service failures never raise: the user message is kept and the
        unavailable notice is appended as the reply.

        Returns:
            The assistant message, or None if nothing was sent.
        """
        payload = self.add_user_message(text)
        if payload is None:
            return None
        try:
            reply = client.send_chat(self.brand_description, self.creative_brief, payload, text.strip())
        except RuntimeError as e:
            return self.receive_failure(str(e))
        return self.receive_reply(reply)

    def message_sources(self, index: int) -> tuple[str, list[ReferenceEntry]]:
        """
        Body and references of the message at index.

        User messages are returned unchanged with no references.
        """
        message = self.messages[index]
        if message.role != "assistant":
            return message.content, []
        return extract_sources(message.content)

    # =========================================================================
    # Export
    # =========================================================================

    def export_pdf(self, exporter: BriefPdfExporter | None = None) -> bytes:
        exporter = exporter or BriefPdfExporter()
        return exporter.export(self.brand_description, self.sections, self.annotations)

    def export_pdf_to(self, directory: Path, exporter: BriefPdfExporter | None = None) -> Path:
        exporter = exporter or BriefPdfExporter()
        return exporter.export_to_file(self.brand_description, self.sections, self.annotations, directory)
