"""
History Sidebar Widget

Left sidebar with the "New Brief" button and the list of stored sessions
(most recently updated first). Each row restores its session on click and
has a delete button.
"""

from datetime import datetime, timezone
from typing import Callable

import customtkinter as ctk

from briefdesk.session_store import SessionSummary

LABEL_CHARS = 26


def format_relative_date(iso: str, now: datetime | None = None) -> str:
    """
    Short relative date for a session row.

    Returns "Today", "Yesterday", "3d ago" within a week, else "12 Oct".
    """
    try:
        date = datetime.fromisoformat(iso)
    except (TypeError, ValueError):
        return ""
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    days = (now - date).days
    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days}d ago"
    return f"{date.day} {date:%b}"


def session_label(brand_description: str) -> str:
    if len(brand_description) > LABEL_CHARS:
        return brand_description[:LABEL_CHARS] + "..."
    return brand_description


class HistorySidebar(ctk.CTkFrame):
    """
    Args:
        master: Parent widget
        on_new: Callback for "New Brief"
        on_restore: Callback(session_id) when a row is clicked
        on_delete: Callback(session_id) for a row's delete button
    """

    def __init__(self, master, on_new: Callable[[], object], on_restore: Callable[[str], object],
                 on_delete: Callable[[str], object], **kwargs):
        super().__init__(master, width=240, corner_radius=0, **kwargs)
        self.on_restore = on_restore
        self.on_delete = on_delete
        self.current_session_id: str | None = None

        ctk.CTkButton(self, text="+  New Brief", height=40,
                      command=on_new).pack(fill="x", padx=12, pady=12)
        ctk.CTkLabel(self, text="HISTORY", anchor="w", text_color="gray60",
                     font=ctk.CTkFont(size=11, weight="bold")).pack(fill="x", padx=16)
        self.list_frame = ctk.CTkScrollableFrame(self, fg_color="transparent")
        self.list_frame.pack(fill="both", expand=True, padx=4, pady=4)

    def set_sessions(self, sessions: list[SessionSummary]) -> None:
        for child in self.list_frame.winfo_children():
            child.destroy()

        if not sessions:
            ctk.CTkLabel(self.list_frame, text="No past sessions yet",
                         text_color="gray60").pack(pady=8)
            return

        for summary in sessions:
            is_current = summary.id == self.current_session_id
            row = ctk.CTkFrame(self.list_frame, fg_color=("gray80", "gray25") if is_current else "transparent")
            row.pack(fill="x", pady=1)
            ctk.CTkButton(
                row, anchor="w", fg_color="transparent", text_color=("gray10", "gray90"),
                text=f"{session_label(summary.brand_description)}\n{format_relative_date(summary.updated_at)}",
                command=lambda sid=summary.id: self.on_restore(sid),
            ).pack(side="left", fill="x", expand=True)
            ctk.CTkButton(
                row, text="×", width=28, fg_color="transparent", hover_color="#7F1D1D",
                command=lambda sid=summary.id: self.on_delete(sid),
            ).pack(side="right")
