"""
Annotations for BriefDesk: the data model, the ordered store and the
selection capture state machine that creates highlights and comments.
"""

from .models import Annotation, AnnotationKind, make_comment, make_highlight, make_source
from .store import AnnotationPartition, AnnotationStore
from .capture import CaptureMode, Rect, SelectionCapture, SelectionCaptureState, compute_anchor

__all__ = [
    "Annotation",
    "AnnotationKind",
    "make_comment",
    "make_highlight",
    "make_source",
    "AnnotationPartition",
    "AnnotationStore",
    "CaptureMode",
    "Rect",
    "SelectionCapture",
    "SelectionCaptureState",
    "compute_anchor",
]
