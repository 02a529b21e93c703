"""
Remote Session Store for BriefDesk
Persists sessions through the brief service's /sessions endpoints.

Selected with BRIEFDESK_SESSION_BACKEND=remote. Saves happen after every
annotation or chat change, so a failed save is logged and dropped rather
than interrupting the user; the next change saves again.
"""

from briefdesk.config import SESSION_BACKEND
from briefdesk.logging_config import debug_log, warning
from briefdesk.service.brief_client import BriefServiceClient
from briefdesk.session_store import JsonSessionStore, SessionSnapshot, SessionStore, SessionSummary


class RemoteSessionStore(SessionStore):
    """SessionStore backed by the brief service."""

    def __init__(self, client: BriefServiceClient):
        self.client = client

    def save(self, snapshot: SessionSnapshot) -> None:
        payload = snapshot.to_dict()
        # The service stamps its own timestamps
        payload.pop("created_at", None)
        payload.pop("updated_at", None)
        try:
            self.client.save_session(payload)
            debug_log(f"[SESSION] Saved session {snapshot.id} to service")
        except RuntimeError as e:
            warning(f"Could not save session {snapshot.id}: {e}")

    def load(self, session_id: str) -> SessionSnapshot:
        try:
            return SessionSnapshot.from_dict(self.client.get_session(session_id))
        except (RuntimeError, KeyError) as e:
            raise ValueError(f"Session '{session_id}' could not be loaded: {e}") from e

    def list(self) -> list[SessionSummary]:
        try:
            rows = self.client.list_sessions()
        except RuntimeError as e:
            warning(f"Could not list sessions: {e}")
            return []
        summaries = [SessionSummary.from_dict(row) for row in rows if row.get("id")]
        summaries.sort(key=lambda s: s.updated_at, reverse=True)
        return summaries

    def delete(self, session_id: str) -> bool:
        try:
            self.client.delete_session(session_id)
        except RuntimeError as e:
            warning(f"Could not delete session {session_id}: {e}")
            return False
        debug_log(f"[SESSION] Deleted session {session_id} on service")
        return True


def create_session_store(client: BriefServiceClient, backend: str = SESSION_BACKEND) -> SessionStore:
    """Session store for the configured backend: "remote" or "local" (JSON files)."""
    if backend == "remote":
        return RemoteSessionStore(client)
    return JsonSessionStore()
