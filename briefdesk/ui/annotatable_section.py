"""
Annotatable Section Widget

Renders one brief section ("01  TITLE" + body) and lets the user turn a text
selection in the body into a highlight or a comment.

The widget only translates Tk events into SelectionCapture events and shows
whatever the capture state says:
- <ButtonRelease-1> on the body -> pointer_release with the selection box
- toolbar buttons              -> commit_highlight / open_comment_editor / dismiss
- comment editor               -> set_comment_text / commit_comment / cancel
- clicks elsewhere (routed by MainWindow) -> outside_click
"""

import tkinter as tk

import customtkinter as ctk

from briefdesk.annotations.capture import CaptureMode, Rect, SelectionCapture
from briefdesk.config import COMMENT_PREVIEW_CHARS


def widget_rect(widget) -> Rect:
    """Screen-space box of a widget."""
    return Rect(widget.winfo_rootx(), widget.winfo_rooty(), widget.winfo_width(), widget.winfo_height())


def _union(first: tuple, last: tuple) -> tuple[float, float, float, float]:
    left = min(first[0], last[0])
    top = min(first[1], last[1])
    right = max(first[0] + first[2], last[0] + last[2])
    bottom = max(first[1] + first[3], last[1] + last[3])
    return left, top, right - left, bottom - top


class AnnotatableSection(ctk.CTkFrame):
    """
    One brief section with its own selection capture.

    Args:
        master: Parent widget
        index: Zero-based position of the section (shown as "01", "02", ...)
        title: Section title
        content: Section body
        capture: SelectionCapture owned by this widget alone
    """

    def __init__(self, master, index: int, title: str, content: str, capture: SelectionCapture, **kwargs):
        super().__init__(master, corner_radius=8, **kwargs)
        self.capture = capture
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            self, text=f"{index + 1:02d}", width=36,
            font=ctk.CTkFont(size=12, weight="bold"), text_color="#F5E642",
        ).grid(row=0, column=0, padx=(12, 4), pady=(10, 0), sticky="nw")
        ctk.CTkLabel(
            self, text=title.upper(), anchor="w",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).grid(row=0, column=1, padx=(0, 12), pady=(10, 0), sticky="ew")

        line_count = max(2, content.count("\n") + len(content) // 90 + 1)
        self.body = ctk.CTkTextbox(self, wrap="word", height=min(400, line_count * 20 + 10),
                                   font=ctk.CTkFont(size=13), activate_scrollbars=False)
        self.body.insert("1.0", content)
        # Disabled text stays selectable with the mouse
        self.body.configure(state="disabled")
        self.body.bind("<ButtonRelease-1>", self._on_pointer_release)
        self.body.grid(row=1, column=0, columnspan=2, padx=12, pady=(4, 12), sticky="ew")

        self._toolbar: ctk.CTkFrame | None = None
        self._editor: ctk.CTkFrame | None = None
        self._comment_box: ctk.CTkTextbox | None = None
        self._save_btn: ctk.CTkButton | None = None

    # =========================================================================
    # Selection geometry
    # =========================================================================

    def _selected_text(self) -> str:
        try:
            return self.body.get("sel.first", "sel.last")
        except tk.TclError:
            return ""

    def has_live_selection(self) -> bool:
        return bool(self._selected_text().strip())

    def _selection_rect(self) -> Rect | None:
        """Screen-space box around the selection, None if it is not on screen."""
        text_widget = self.body._textbox
        try:
            first = text_widget.bbox("sel.first")
            last = text_widget.bbox("sel.last - 1c")
        except tk.TclError:
            return None
        if first is None or last is None:
            return None

        left, top, width, height = _union(first, last)
        if first[1] != last[1]:
            # Multi-line selection spans the full text width
            left, width = 0, text_widget.winfo_width()
        return Rect(text_widget.winfo_rootx() + left, text_widget.winfo_rooty() + top, width, height)

    def _clear_live_selection(self) -> None:
        self.body.tag_remove("sel", "1.0", "end")

    # =========================================================================
    # Events
    # =========================================================================

    def _on_pointer_release(self, _event=None):
        # Let Tk finish updating the selection first
        self.after_idle(self._capture_selection)

    def _capture_selection(self):
        if self.capture.pointer_release(self._selected_text(), self._selection_rect(), widget_rect(self)):
            self._render()

    def handle_outside_click(self, widget) -> None:
        """Called by MainWindow for every click; ignores clicks on the toolbar or editor."""
        if not self.capture.state.visible or self._contains(widget):
            return
        self.capture.outside_click(self.has_live_selection())
        self._render()

    def _contains(self, widget) -> bool:
        """True if widget is the toolbar, the comment editor, or inside one of them."""
        overlays = [o for o in (self._toolbar, self._editor) if o is not None]
        while widget is not None:
            if any(widget is overlay for overlay in overlays):
                return True
            widget = getattr(widget, "master", None)
        return False

    def _on_highlight(self):
        self.capture.commit_highlight()
        self._clear_live_selection()
        self._render()

    def _on_comment(self):
        if self.capture.open_comment_editor():
            self._clear_live_selection()
        self._render()

    def _on_dismiss(self):
        self.capture.dismiss()
        self._clear_live_selection()
        self._render()

    def _on_comment_changed(self, _event=None):
        if self._comment_box is not None:
            self.capture.set_comment_text(self._comment_box.get("1.0", "end"))
        if self._save_btn is not None:
            self._save_btn.configure(state="normal" if self.capture.can_save_comment else "disabled")

    def _on_save_comment(self, _event=None):
        self._on_comment_changed()
        self.capture.commit_comment()
        self._render()
        return "break"

    def _on_cancel(self, _event=None):
        self.capture.cancel()
        self._render()

    # =========================================================================
    # Rendering
    # =========================================================================

    def _hide_overlays(self):
        for overlay in (self._toolbar, self._editor):
            if overlay is not None:
                overlay.destroy()
        self._toolbar = self._editor = self._comment_box = self._save_btn = None

    def _render(self):
        """Show the toolbar or editor the capture state asks for."""
        self._hide_overlays()
        state = self.capture.state
        if not state.visible:
            return

        if state.mode is CaptureMode.TOOLBAR:
            self._toolbar = ctk.CTkFrame(self, corner_radius=10, border_width=1)
            ctk.CTkButton(self._toolbar, text="✦ Highlight", width=100,
                          command=self._on_highlight).pack(side="left", padx=4, pady=4)
            ctk.CTkButton(self._toolbar, text="◎ Comment", width=100, fg_color="gray30",
                          command=self._on_comment).pack(side="left", padx=4, pady=4)
            ctk.CTkButton(self._toolbar, text="×", width=28, fg_color="transparent",
                          command=self._on_dismiss).pack(side="left", padx=(0, 4), pady=4)
            # Bottom-centre of the toolbar sits on the anchor
            self._toolbar.place(x=state.anchor_x, y=max(state.anchor_y, 30), anchor="s")
            self._toolbar.lift()
            return

        self._editor = ctk.CTkFrame(self, corner_radius=10, border_width=1, width=320)
        excerpt = self.capture.captured_text
        if len(excerpt) > COMMENT_PREVIEW_CHARS:
            excerpt = excerpt[:COMMENT_PREVIEW_CHARS] + "..."
        ctk.CTkLabel(self._editor, text=f'"{excerpt}"', wraplength=300, justify="left",
                     font=ctk.CTkFont(size=11, slant="italic")).pack(padx=10, pady=(8, 4), anchor="w")
        self._comment_box = ctk.CTkTextbox(self._editor, height=70, width=300)
        self._comment_box.pack(padx=10, pady=4)
        self._comment_box.bind("<KeyRelease>", self._on_comment_changed)
        self._comment_box.bind("<Escape>", self._on_cancel)
        self._comment_box.bind("<Control-Return>", self._on_save_comment)

        buttons = ctk.CTkFrame(self._editor, fg_color="transparent")
        buttons.pack(fill="x", padx=10, pady=(4, 8))
        self._save_btn = ctk.CTkButton(buttons, text="Save Comment", width=120, state="disabled",
                                       command=self._on_save_comment)
        self._save_btn.pack(side="left")
        ctk.CTkButton(buttons, text="Cancel", width=80, fg_color="gray30",
                      command=self._on_cancel).pack(side="left", padx=8)

        self._editor.place(x=state.anchor_x, y=max(state.anchor_y, 170), anchor="s")
        self._editor.lift()
        self._comment_box.focus_set()
