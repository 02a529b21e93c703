"""
Background Workers Module

Contains the threading workers that talk to the brief service so the
customtkinter main loop never blocks on the network:
- BriefWorker: generates a brief and builds the BriefSession
- ChatWorker: sends one chat turn
- PromptTemplatesWorker: fetches prompt chips (YAML fallback when offline)
- SessionListWorker: lists stored sessions for the history sidebar
- SessionSaveWorker: saves session snapshots in order (remote saves are HTTP)

Workers never touch widgets or the session's annotations; they post
(message_type, data) tuples to a Queue that MainWindow drains with after().
"""

import threading
import traceback
from queue import Queue

from briefdesk.config import get_prompt_templates
from briefdesk.logging_config import debug_log
from briefdesk.service.brief_client import BriefServiceClient
from briefdesk.session import BriefSession
from briefdesk.session_store import SessionSnapshot, SessionStore


class BriefWorker(threading.Thread):
    """
    Background worker for brief generation.

    Signals sent to ui_queue:
    - ('brief_complete', BriefSession) - Brief generated, session created
    - ('brief_failed', str) - Service unavailable or generation failed

    Example:
        worker = BriefWorker(client, "A fintech brand", store, ui_queue)
        worker.start()
    """

    def __init__(
        self,
        client: BriefServiceClient,
        brand_description: str,
        store: SessionStore | None,
        ui_queue: Queue,
    ):
        super().__init__(daemon=True)
        self.client = client
        self.brand_description = brand_description
        self.store = store
        self.ui_queue = ui_queue

    def run(self):
        """Execute brief generation in background thread."""
        try:
            debug_log(f"[BRIEF WORKER] Generating brief: {self.brand_description[:60]!r}")
            session = BriefSession.generate(self.client, self.brand_description, store=self.store)
            self.ui_queue.put(('brief_complete', session))
        except (RuntimeError, ValueError) as e:
            debug_log(f"[BRIEF WORKER] Failed: {e}")
            self.ui_queue.put(('brief_failed', str(e)))
        except Exception as e:
            debug_log(f"[BRIEF WORKER] Unexpected error: {e}\n{traceback.format_exc()}")
            self.ui_queue.put(('brief_failed', f"Brief generation failed: {e}"))


class ChatWorker(threading.Thread):
    """
    Background worker for one chat turn.

    The session has already recorded the user message (add_user_message);
    this worker only performs the request.

    Signals sent to ui_queue:
    - ('chat_reply', str) - Assistant reply text
    - ('chat_failed', str) - Request failed
    """

    def __init__(
        self,
        client: BriefServiceClient,
        brand_description: str,
        creative_brief: str,
        messages: list[dict],
        user_message: str,
        ui_queue: Queue,
    ):
        super().__init__(daemon=True)
        self.client = client
        self.brand_description = brand_description
        self.creative_brief = creative_brief
        self.messages = messages
        self.user_message = user_message
        self.ui_queue = ui_queue

    def run(self):
        """Send the chat request in background thread."""
        try:
            reply = self.client.send_chat(
                self.brand_description, self.creative_brief, self.messages, self.user_message
            )
            self.ui_queue.put(('chat_reply', reply))
        except RuntimeError as e:
            debug_log(f"[CHAT WORKER] Failed: {e}")
            self.ui_queue.put(('chat_failed', str(e)))
        except Exception as e:
            debug_log(f"[CHAT WORKER] Unexpected error: {e}\n{traceback.format_exc()}")
            self.ui_queue.put(('chat_failed', str(e)))


class PromptTemplatesWorker(threading.Thread):
    """
    Fetch prompt chips from the service, falling back to the bundled YAML.

    Signals sent to ui_queue:
    - ('templates_loaded', dict[str, list[str]])
    """

    def __init__(self, client: BriefServiceClient, ui_queue: Queue):
        super().__init__(daemon=True)
        self.client = client
        self.ui_queue = ui_queue

    def run(self):
        try:
            templates = self.client.get_prompt_templates()
        except RuntimeError as e:
            debug_log(f"[TEMPLATES WORKER] Service templates unavailable, using bundled: {e}")
            templates = {}
        self.ui_queue.put(('templates_loaded', templates or get_prompt_templates()))


class SessionListWorker(threading.Thread):
    """
    List stored sessions off the main thread (the remote store is a network call).

    Signals sent to ui_queue:
    - ('sessions_loaded', list[SessionSummary])
    """

    def __init__(self, store: SessionStore, ui_queue: Queue):
        super().__init__(daemon=True)
        self.store = store
        self.ui_queue = ui_queue

    def run(self):
        self.ui_queue.put(('sessions_loaded', self.store.list()))


class SessionSaveWorker(threading.Thread):
    """
    Long-lived worker that saves session snapshots in the order they were taken.

    BriefSession.save_handler is pointed at submit(), so a highlight or a chat
    reply never waits on the store. One thread handles every save, which keeps
    an older snapshot from overwriting a newer one.

    Signals sent to ui_queue:
    - ('session_saved', str) - Session id whose snapshot was handed to the store

    Example:
        saver = SessionSaveWorker(store, ui_queue)
        saver.start()
        session.save_handler = saver.submit
        ...
        saver.close(timeout=5)
    """

    def __init__(self, store: SessionStore, ui_queue: Queue):
        super().__init__(daemon=True)
        self.store = store
        self.ui_queue = ui_queue
        self._pending: Queue = Queue()

    def submit(self, snapshot: SessionSnapshot) -> None:
        self._pending.put(snapshot)

    def close(self, timeout: float | None = None) -> None:
        """Finish the queued saves, then stop."""
        self._pending.put(None)
        if self.is_alive():
            self.join(timeout)

    def run(self):
        while True:
            snapshot = self._pending.get()
            if snapshot is None:
                break
            try:
                self.store.save(snapshot)
            except Exception as e:
                debug_log(f"[SAVE WORKER] Unexpected error saving {snapshot.id}: {e}\n{traceback.format_exc()}")
                continue
            self.ui_queue.put(('session_saved', snapshot.id))
