"""
Annotation Store for BriefDesk.

Holds the annotations of the active session in creation order. The order
matters: the annotation panel and the PDF export both list annotations
partitioned by kind, and inside each kind they appear in the order the user
created them. The store is therefore backed by a plain list, never by a
set or a dict keyed by content.

Listeners registered with subscribe() are called synchronously after every
successful add/remove, so the panel counts, partitioned lists and session
persistence all see the new collection before the UI handles the next event.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator

from briefdesk.annotations.models import Annotation, AnnotationKind
from briefdesk.logging_config import debug_log

StoreListener = Callable[["AnnotationStore"], None]


@dataclass
class AnnotationPartition:
    """Annotations split by kind, each list in insertion order."""
    highlights: list[Annotation] = field(default_factory=list)
    comments: list[Annotation] = field(default_factory=list)
    sources: list[Annotation] = field(default_factory=list)

    @property
    def has_notes(self) -> bool:
        """True if there is at least one highlight or comment."""
        return bool(self.highlights or self.comments)


class AnnotationStore:
    """
    Ordered, append-only collection of annotations with removal by id.

    Example:
        store = AnnotationStore()
        store.subscribe(lambda s: panel.refresh(s.partition_by_kind()))
        store.add(make_highlight("quiet confidence", "Brand Essence"))
        store.remove(annotation_id)  # unknown ids are ignored
    """

    def __init__(self, annotations: Iterable[Annotation] = ()):
        self._annotations: list[Annotation] = list(annotations)
        self._listeners: list[StoreListener] = []

    def __len__(self) -> int:
        return len(self._annotations)

    def __iter__(self) -> Iterator[Annotation]:
        return iter(list(self._annotations))

    def __contains__(self, annotation_id: str) -> bool:
        return any(a.id == annotation_id for a in self._annotations)

    def subscribe(self, listener: StoreListener) -> None:
        """Register a callback invoked after every change to the store."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        """Remove a previously registered callback (no-op if absent)."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def add(self, annotation: Annotation) -> Annotation:
        """
        Append an annotation to the end of the collection.

        Returns:
            The annotation that was added.
        """
        self._annotations.append(annotation)
        debug_log(f"[STORE] Added {annotation.kind.value} {annotation.id} "
                  f"(section: {annotation.section_title!r}, total: {len(self._annotations)})")
        self._notify()
        return annotation

    def remove(self, annotation_id: str) -> bool:
        """
        Remove the annotation with the given id.

        Removing an unknown id is not an error: a double delete (a click on
        an entry that is already gone) is tolerated silently.

        Returns:
            True if an annotation was removed, False otherwise.
        """
        for index, annotation in enumerate(self._annotations):
            if annotation.id == annotation_id:
                del self._annotations[index]
                debug_log(f"[STORE] Removed {annotation.kind.value} {annotation_id} "
                          f"(total: {len(self._annotations)})")
                self._notify()
                return True
        debug_log(f"[STORE] Remove ignored, no annotation with id {annotation_id}")
        return False

    def get(self, annotation_id: str) -> Annotation | None:
        """Look up an annotation by id."""
        return next((a for a in self._annotations if a.id == annotation_id), None)

    def replace_all(self, annotations: Iterable[Annotation]) -> None:
        """Replace the whole collection (used when a session is restored)."""
        self._annotations = list(annotations)
        self._notify()

    def clear(self) -> None:
        """Remove every annotation."""
        if self._annotations:
            self._annotations = []
            self._notify()

    def to_list(self) -> list[Annotation]:
        """Snapshot of the collection in insertion order."""
        return list(self._annotations)

    def partition_by_kind(self) -> AnnotationPartition:
        """Split into highlights, comments and sources without reordering."""
        partition = AnnotationPartition()
        buckets = {
            AnnotationKind.HIGHLIGHT: partition.highlights,
            AnnotationKind.COMMENT: partition.comments,
            AnnotationKind.SOURCE: partition.sources,
        }
        for annotation in self._annotations:
            buckets[annotation.kind].append(annotation)
        return partition
