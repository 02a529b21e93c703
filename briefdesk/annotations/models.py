"""
Annotation data model for BriefDesk.

An Annotation is an immutable record created by an explicit user action:

- highlight: select text in a brief section and click Highlight
- comment:   select text, write a comment and click Save Comment
- source:    click "Save" next to a reference in a chat reply

Annotations are never edited in place; an edit is a delete followed by a
new annotation. Identity is solely the generated id.

The serialised form (to_dict/from_dict) keeps the camelCase keys used by the
session store and the brief service, so stored sessions stay compatible.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from briefdesk.brief.sources import ReferenceEntry

SOURCE_SECTION_TITLE = "Source"


class AnnotationKind(str, Enum):
    """The three kinds of annotation a user can create."""
    HIGHLIGHT = "highlight"
    COMMENT = "comment"
    SOURCE = "source"


def _new_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Annotation:
    """
    A user-created highlight, comment or saved reference.

    Attributes:
        kind: AnnotationKind of this record
        text: Selected text (for sources, always equal to source_title)
        section_title: Title of the brief section the text was captured from
        comment: Comment body (comments only)
        source_title: Reference title (sources only)
        source_url: Reference URL, may be empty (sources only)
        source_description: Short reference description (sources only)
        id: Unique id, generated at creation and never reused
        created_at: ISO-8601 UTC creation timestamp

    Raises:
        ValueError: If the record violates the invariants of its kind
    """

    kind: AnnotationKind
    text: str
    section_title: str
    comment: str | None = None
    source_title: str | None = None
    source_url: str | None = None
    source_description: str | None = None
    id: str = field(default_factory=_new_id)
    created_at: str = field(default_factory=_utc_now)

    def __post_init__(self):
        kind = AnnotationKind(self.kind)
        object.__setattr__(self, "kind", kind)

        if kind is AnnotationKind.HIGHLIGHT:
            if not (self.text or "").strip():
                raise ValueError("A highlight needs non-empty text")
            if self.comment:
                raise ValueError("A highlight cannot carry a comment")

        elif kind is AnnotationKind.COMMENT:
            if not (self.text or "").strip():
                raise ValueError("A comment needs the selected text it refers to")
            if not (self.comment or "").strip():
                raise ValueError("A comment needs a non-empty comment body")

        else:
            if not (self.source_title or "").strip():
                raise ValueError("A saved source needs a title")
            # Sources display their title wherever other kinds display text
            object.__setattr__(self, "text", self.source_title)

    def to_dict(self) -> dict:
        """Serialise to the camelCase mapping used by the session store."""
        data = {
            "id": self.id,
            "type": self.kind.value,
            "text": self.text,
            "sectionTitle": self.section_title,
            "createdAt": self.created_at,
        }
        if self.comment is not None:
            data["comment"] = self.comment
        if self.kind is AnnotationKind.SOURCE:
            data["sourceTitle"] = self.source_title
            data["sourceUrl"] = self.source_url or ""
            data["sourceDescription"] = self.source_description or ""
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Annotation":
        """
        Rebuild an annotation from its stored mapping.

        Raises:
            ValueError: If the mapping has an unknown type or breaks the
                invariants of its kind
            KeyError: If a required key is missing
        """
        return cls(
            kind=AnnotationKind(data["type"]),
            text=data.get("text", ""),
            section_title=data.get("sectionTitle", ""),
            comment=data.get("comment"),
            source_title=data.get("sourceTitle"),
            source_url=data.get("sourceUrl"),
            source_description=data.get("sourceDescription"),
            id=data["id"],
            created_at=data.get("createdAt") or _utc_now(),
        )


def make_highlight(text: str, section_title: str) -> Annotation:
    """Create a highlight of text captured from the given section."""
    return Annotation(kind=AnnotationKind.HIGHLIGHT, text=text, section_title=section_title)


def make_comment(text: str, section_title: str, comment: str) -> Annotation:
    """Create a comment on text captured from the given section."""
    return Annotation(
        kind=AnnotationKind.COMMENT,
        text=text,
        section_title=section_title,
        comment=comment,
    )


def make_source(entry: ReferenceEntry) -> Annotation:
    """Create a saved-source annotation from an extracted reference."""
    return Annotation(
        kind=AnnotationKind.SOURCE,
        text=entry.title,
        section_title=SOURCE_SECTION_TITLE,
        source_title=entry.title,
        source_url=entry.url,
        source_description=entry.description,
    )
