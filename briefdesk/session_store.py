"""
Session Persistence for BriefDesk

A session is everything needed to reopen a brief where the user left it:
the brand description, the generated brief text, the chat log and the
annotations. Sessions are keyed by id and handed to a SessionStore after
every change.

Two stores implement the same interface:
- JsonSessionStore: one JSON file per session under %APPDATA%/BriefDesk/sessions/
- RemoteSessionStore (briefdesk.service): the brief service's /sessions endpoints

Stored mapping (shared by both stores):
    {
        "id": "...",
        "brand_description": "...",
        "creative_brief": "## Brand Essence\\n...",
        "messages": [{"role": "assistant", "content": "..."}],
        "annotations": [{"id": "...", "type": "highlight", ...}],
        "created_at": "2026-10-18T09:12:44+00:00",
        "updated_at": "2026-10-18T09:30:02+00:00"
    }
"""

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from briefdesk.annotations.models import Annotation
from briefdesk.config import SESSIONS_DIR
from briefdesk.logging_config import debug_log

_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ChatMessage:
    """One turn of the conversation about a brief."""
    role: str  # "user" or "assistant"
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict) -> "ChatMessage":
        return cls(role=data.get("role", "assistant"), content=data.get("content", ""))


@dataclass
class SessionSummary:
    """Row of the history sidebar."""
    id: str
    brand_description: str
    created_at: str
    updated_at: str

    @classmethod
    def from_dict(cls, data: dict) -> "SessionSummary":
        return cls(
            id=data["id"],
            brand_description=data.get("brand_description", ""),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", data.get("created_at", "")),
        )


@dataclass
class SessionSnapshot:
    """Complete persisted state of one session."""
    id: str
    brand_description: str
    creative_brief: str
    messages: list[ChatMessage] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "brand_description": self.brand_description,
            "creative_brief": self.creative_brief,
            "messages": [m.to_dict() for m in self.messages],
            "annotations": [a.to_dict() for a in self.annotations],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionSnapshot":
        """
        Rebuild a snapshot from its stored mapping.

        Raises:
            KeyError: If the mapping has no id
            ValueError: If an annotation record is invalid
        """
        created_at = data.get("created_at") or utc_now()
        return cls(
            id=data["id"],
            brand_description=data.get("brand_description", ""),
            creative_brief=data.get("creative_brief", ""),
            messages=[ChatMessage.from_dict(m) for m in data.get("messages") or []],
            annotations=[Annotation.from_dict(a) for a in data.get("annotations") or []],
            created_at=created_at,
            updated_at=data.get("updated_at") or created_at,
        )

    def summary(self) -> SessionSummary:
        return SessionSummary(self.id, self.brand_description, self.created_at, self.updated_at)


class SessionStore(ABC):
    """Key-value persistence for sessions, keyed by session id."""

    @abstractmethod
    def save(self, snapshot: SessionSnapshot) -> None:
        """Persist a snapshot, replacing any previous one with the same id."""

    @abstractmethod
    def load(self, session_id: str) -> SessionSnapshot:
        """
        Load a stored session.

        Raises:
            ValueError: If no session with this id can be loaded
        """

    @abstractmethod
    def list(self) -> list[SessionSummary]:
        """Stored sessions, most recently updated first."""

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Delete a stored session; False if it did not exist."""


class JsonSessionStore(SessionStore):
    """
    Stores each session as <directory>/<session_id>.json.

    Writes go to a temporary file that then replaces the target, so a crash
    mid-save never leaves a truncated session behind.

    Example:
        store = JsonSessionStore()
        store.save(session.snapshot())
        for row in store.list():
            print(row.brand_description, row.updated_at)
    """

    def __init__(self, directory: Path = SESSIONS_DIR):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, session_id: str) -> Path:
        if not session_id or not _SESSION_ID_PATTERN.match(session_id):
            raise ValueError(f"Invalid session id: {session_id!r}")
        return self.directory / f"{session_id}.json"

    def save(self, snapshot: SessionSnapshot) -> None:
        """Write the snapshot; I/O errors are logged, never raised."""
        path = self._path_for(snapshot.id)
        temp_path = path.with_suffix(".json.tmp")
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(snapshot.to_dict(), f, indent=2, ensure_ascii=False)
            temp_path.replace(path)
            debug_log(f"[SESSION] Saved session {snapshot.id} "
                      f"({len(snapshot.messages)} messages, {len(snapshot.annotations)} annotations)")
        except OSError as e:
            debug_log(f"[SESSION] Could not save session {snapshot.id}: {e}")

    def load(self, session_id: str) -> SessionSnapshot:
        path = self._path_for(session_id)
        if not path.exists():
            raise ValueError(f"Session '{session_id}' does not exist")
        try:
            with open(path, encoding='utf-8') as f:
                return SessionSnapshot.from_dict(json.load(f))
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            raise ValueError(f"Session '{session_id}' is corrupted: {e}") from e

    def list(self) -> list[SessionSummary]:
        summaries = []
        for path in self.directory.glob("*.json"):
            try:
                with open(path, encoding='utf-8') as f:
                    summaries.append(SessionSummary.from_dict(json.load(f)))
            except (OSError, json.JSONDecodeError, KeyError) as e:
                debug_log(f"[SESSION] Skipping unreadable session file {path.name}: {e}")
        summaries.sort(key=lambda s: s.updated_at, reverse=True)
        return summaries

    def delete(self, session_id: str) -> bool:
        path = self._path_for(session_id)
        if not path.exists():
            return False
        path.unlink()
        debug_log(f"[SESSION] Deleted session {session_id}")
        return True
