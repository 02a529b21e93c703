"""
Selection Capture for BriefDesk annotatable sections.

Turns a text selection inside one brief section (a "capture region") into a
highlight or comment. The widget layer feeds discrete events into a small
state machine; the geometry is a separate pure function so both can be
tested without a display.

States:
    hidden          nothing captured, toolbar not shown
    TOOLBAR         toolbar visible above the selection (Highlight/Comment/x)
    COMMENT_EDITOR  comment editor open (Save/Cancel)

Events:
    pointer_release(text, selection_rect, region_rect)  -> TOOLBAR
    open_comment_editor()                               TOOLBAR -> COMMENT_EDITOR
    commit_highlight()                                  TOOLBAR -> hidden
    commit_comment()                                    COMMENT_EDITOR -> hidden
    outside_click(has_live_selection=False)             any -> hidden
    dismiss() / cancel()                                any -> hidden

Every region owns its own SelectionCapture; instances never share state.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from briefdesk.config import MIN_SELECTION_CHARS, TOOLBAR_OFFSET_PX
from briefdesk.logging_config import debug_log


class CaptureMode(str, Enum):
    TOOLBAR = "toolbar"
    COMMENT_EDITOR = "comment-editor"


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box in screen pixels (origin top-left)."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains(self, other: "Rect") -> bool:
        """True if other lies entirely inside this box."""
        return (
            other.left >= self.left
            and other.top >= self.top
            and other.right <= self.right
            and other.bottom <= self.bottom
        )


@dataclass(frozen=True)
class SelectionCaptureState:
    anchor_x: float = 0.0
    anchor_y: float = 0.0
    selected_text: str = ""
    visible: bool = False
    mode: CaptureMode = CaptureMode.TOOLBAR


def compute_anchor(selection_rect: Rect, region_rect: Rect) -> tuple[float, float]:
    """
    Toolbar anchor relative to the capture region.

    The anchor is horizontally centred on the selection and sits
    TOOLBAR_OFFSET_PX above its top edge; the toolbar is drawn with its
    bottom-centre on this point.
    """
    x = selection_rect.left - region_rect.left + selection_rect.width / 2
    y = selection_rect.top - region_rect.top - TOOLBAR_OFFSET_PX
    return x, y


class SelectionCapture:
    """
    Capture state machine for one annotatable region.

    Args:
        section_title: Title of the section this region renders; every
            committed annotation carries it.
        on_highlight: Callback(text, section_title) fired on highlight commit
        on_comment: Callback(text, section_title, comment) fired on comment save

    Example:
        capture = SelectionCapture("Audience", session.add_highlight, session.add_comment)
        if capture.pointer_release(selected, selection_box, region_box):
            toolbar.place(x=capture.state.anchor_x, y=capture.state.anchor_y)
        capture.commit_highlight()
    """

    def __init__(
        self,
        section_title: str,
        on_highlight: Callable[[str, str], object],
        on_comment: Callable[[str, str, str], object],
    ):
        self.section_title = section_title
        self.on_highlight = on_highlight
        self.on_comment = on_comment
        self._state = SelectionCaptureState()
        # Side channel: survives clearing the live selection when the editor opens
        self._captured_text = ""
        self._comment_text = ""

    @property
    def state(self) -> SelectionCaptureState:
        return self._state

    @property
    def captured_text(self) -> str:
        return self._captured_text

    @property
    def comment_text(self) -> str:
        return self._comment_text

    @property
    def can_save_comment(self) -> bool:
        """Drives the enabled state of the Save Comment button."""
        return (
            self._state.visible
            and self._state.mode is CaptureMode.COMMENT_EDITOR
            and bool(self._comment_text.strip())
        )

    def _reset(self) -> None:
        self._state = replace(self._state, visible=False, mode=CaptureMode.TOOLBAR)
        self._comment_text = ""

    def pointer_release(
        self,
        selected_text: str | None,
        selection_rect: Rect | None,
        region_rect: Rect,
    ) -> bool:
        """
        Handle a mouse release inside the region.

        Args:
            selected_text: Live selection text (may be None or blank)
            selection_rect: Bounding box of the selection, None if there is
                no selection range
            region_rect: Bounding box of the capture region

        Returns:
            True if the selection was captured and the toolbar should show.
        """
        text = (selected_text or "").strip()
        if len(text) < MIN_SELECTION_CHARS:
            return False
        if selection_rect is None:
            return False
        if not region_rect.contains(selection_rect):
            debug_log(f"[CAPTURE] Ignored selection outside region {self.section_title!r}")
            return False

        anchor_x, anchor_y = compute_anchor(selection_rect, region_rect)
        self._captured_text = text
        self._comment_text = ""
        self._state = SelectionCaptureState(
            anchor_x=anchor_x,
            anchor_y=anchor_y,
            selected_text=text,
            visible=True,
            mode=CaptureMode.TOOLBAR,
        )
        debug_log(f"[CAPTURE] Captured {len(text)} chars in {self.section_title!r} "
                  f"at ({anchor_x:.0f}, {anchor_y:.0f})")
        return True

    def outside_click(self, has_live_selection: bool) -> None:
        """Hide the toolbar on a click elsewhere, unless text is still selected."""
        if not has_live_selection:
            self._reset()

    def dismiss(self) -> None:
        """The x button on the toolbar."""
        self._reset()

    def cancel(self) -> None:
        """Escape or Cancel while editing a comment."""
        self._reset()

    def open_comment_editor(self) -> bool:
        """
        Switch from the toolbar to the comment editor.

        Returns:
            True if the editor opened; the view should then clear the live
            selection (the captured text is kept in captured_text).
        """
        if not self._state.visible or self._state.mode is not CaptureMode.TOOLBAR:
            return False
        self._captured_text = self._state.selected_text
        self._comment_text = ""
        self._state = replace(self._state, mode=CaptureMode.COMMENT_EDITOR)
        return True

    def set_comment_text(self, text: str) -> None:
        self._comment_text = text or ""

    def commit_highlight(self):
        """
        Create a highlight from the captured text.

        Returns:
            Whatever on_highlight returned (the new annotation), or None if
            nothing was captured.
        """
        if not self._state.visible:
            return None
        result = self.on_highlight(self._captured_text, self.section_title)
        self._reset()
        return result

    def commit_comment(self):
        """
        Save the comment if its trimmed body is non-empty; otherwise no-op.

        Returns:
            Whatever on_comment returned, or None if nothing was saved.
        """
        if not self.can_save_comment:
            return None
        result = self.on_comment(self._captured_text, self.section_title, self._comment_text.strip())
        self._reset()
        return result
