"""
Unit tests for the annotation model and the ordered annotation store.
"""

import pytest

from briefdesk.annotations.models import (
    SOURCE_SECTION_TITLE,
    Annotation,
    AnnotationKind,
    make_comment,
    make_highlight,
    make_source,
)
from briefdesk.annotations.store import AnnotationStore
from briefdesk.brief.sources import ReferenceEntry


class TestAnnotationInvariants:
    """Test the per-kind invariants enforced at construction."""

    def test_highlight(self):
        annotation = make_highlight("quiet confidence", "Brand Essence")

        assert annotation.kind is AnnotationKind.HIGHLIGHT
        assert annotation.comment is None
        assert annotation.section_title == "Brand Essence"

    def test_highlight_needs_text(self):
        with pytest.raises(ValueError):
            make_highlight("   ", "Audience")

    def test_highlight_cannot_carry_comment(self):
        with pytest.raises(ValueError):
            Annotation(kind=AnnotationKind.HIGHLIGHT, text="x y", section_title="A", comment="no")

    def test_comment_needs_body(self):
        with pytest.raises(ValueError):
            make_comment("buy less", "Audience", "  ")

    def test_source_text_equals_title(self):
        annotation = make_source(ReferenceEntry("Patagonia", "https://www.patagonia.com", "benchmark"))

        assert annotation.text == "Patagonia"
        assert annotation.source_title == "Patagonia"
        assert annotation.section_title == SOURCE_SECTION_TITLE

    def test_source_needs_title(self):
        with pytest.raises(ValueError):
            Annotation(kind=AnnotationKind.SOURCE, text="", section_title="Source")

    def test_kind_accepts_plain_string(self):
        annotation = Annotation(kind="highlight", text="ab", section_title="A")

        assert annotation.kind is AnnotationKind.HIGHLIGHT

    def test_ids_are_unique(self):
        first = make_highlight("same text", "A")
        second = make_highlight("same text", "A")

        assert first.id != second.id
        assert first != second

    def test_annotations_are_immutable(self):
        annotation = make_highlight("same text", "A")

        with pytest.raises(AttributeError):
            annotation.text = "changed"


class TestSerialisation:
    """Test the camelCase mapping used at the persistence boundary."""

    def test_comment_to_dict(self):
        annotation = make_comment("buy less", "Audience", "Love this")
        data = annotation.to_dict()

        assert data["type"] == "comment"
        assert data["sectionTitle"] == "Audience"
        assert data["comment"] == "Love this"
        assert data["createdAt"] == annotation.created_at
        assert "sourceTitle" not in data

    def test_source_round_trip(self):
        annotation = make_source(ReferenceEntry("Report — Gen Z", "", "survey"))

        assert Annotation.from_dict(annotation.to_dict()) == annotation

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            Annotation.from_dict({"id": "1", "type": "sticker", "text": "x", "sectionTitle": "A"})


class TestAnnotationStore:
    """Test ordering, removal and change notification."""

    def test_add_keeps_insertion_order(self):
        store = AnnotationStore()
        first = store.add(make_highlight("one", "A"))
        second = store.add(make_comment("two", "B", "note"))

        assert store.to_list() == [first, second]
        assert len(store) == 2
        assert first.id in store

    def test_duplicates_by_content_are_allowed(self):
        store = AnnotationStore()
        store.add(make_highlight("same", "A"))
        store.add(make_highlight("same", "A"))

        assert len(store) == 2

    def test_remove(self):
        store = AnnotationStore()
        keep = store.add(make_highlight("keep", "A"))
        drop = store.add(make_highlight("drop", "A"))

        assert store.remove(drop.id) is True
        assert store.to_list() == [keep]

    def test_remove_unknown_id_is_a_noop(self):
        store = AnnotationStore()
        store.add(make_highlight("keep", "A"))
        calls = []
        store.subscribe(calls.append)

        assert store.remove("missing") is False
        assert store.remove("missing") is False
        assert len(store) == 1
        assert calls == []

    def test_partition_preserves_order_within_kind(self):
        store = AnnotationStore()
        h1 = store.add(make_highlight("h1", "A"))
        c1 = store.add(make_comment("c1", "A", "n1"))
        s1 = store.add(make_source(ReferenceEntry("S1")))
        h2 = store.add(make_highlight("h2", "B"))
        c2 = store.add(make_comment("c2", "B", "n2"))

        partition = store.partition_by_kind()

        assert partition.highlights == [h1, h2]
        assert partition.comments == [c1, c2]
        assert partition.sources == [s1]
        assert partition.has_notes

    def test_sources_only_has_no_notes(self):
        store = AnnotationStore([make_source(ReferenceEntry("S1"))])

        assert not store.partition_by_kind().has_notes

    def test_listeners_see_new_state_synchronously(self):
        store = AnnotationStore()
        seen = []
        store.subscribe(lambda s: seen.append(len(s)))

        annotation = store.add(make_highlight("one", "A"))
        store.add(make_highlight("two", "A"))
        store.remove(annotation.id)

        assert seen == [1, 2, 1]

    def test_unsubscribe(self):
        store = AnnotationStore()
        seen = []
        listener = seen.append
        store.subscribe(listener)
        store.unsubscribe(listener)
        store.unsubscribe(listener)

        store.add(make_highlight("one", "A"))

        assert seen == []

    def test_replace_all_and_clear(self):
        store = AnnotationStore()
        seen = []
        store.subscribe(lambda s: seen.append(len(s)))

        store.replace_all([make_highlight("a1", "A"), make_highlight("a2", "A")])
        store.clear()
        store.clear()

        assert seen == [2, 0]
        assert store.get("anything") is None
