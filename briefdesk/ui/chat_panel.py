"""
Chat Panel Widget

Conversation about the brief: the message log, prompt chips for the first
turn, an input box and, under every assistant reply that ends with a
"## SOURCES" block, one "Save" button per reference.
"""

from typing import Callable

import customtkinter as ctk

from briefdesk.brief.sources import ReferenceEntry


class ChatPanel(ctk.CTkFrame):
    """
    Args:
        master: Parent widget
        on_send: Callback(text) when the user sends a message
        on_save_source: Callback(ReferenceEntry) for a reference's Save button
    """

    def __init__(self, master, on_send: Callable[[str], object],
                 on_save_source: Callable[[ReferenceEntry], object], **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.on_send = on_send
        self.on_save_source = on_save_source
        self.templates: dict[str, list[str]] = {}

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self.log_frame = ctk.CTkScrollableFrame(self)
        self.log_frame.grid(row=0, column=0, columnspan=2, sticky="nsew", padx=8, pady=8)

        self.chips_frame = ctk.CTkFrame(self, fg_color="transparent")
        self.chips_frame.grid(row=1, column=0, columnspan=2, sticky="ew", padx=8)

        self.input_box = ctk.CTkTextbox(self, height=60)
        self.input_box.grid(row=2, column=0, sticky="ew", padx=(8, 4), pady=8)
        self.input_box.bind("<Return>", self._on_return)

        self.send_btn = ctk.CTkButton(self, text="Send", width=80, command=self._send)
        self.send_btn.grid(row=2, column=1, padx=(4, 8), pady=8)

    def _on_return(self, event):
        if event.state & 0x1:  # Shift+Enter inserts a newline
            return None
        self._send()
        return "break"

    def _send(self):
        text = self.input_box.get("1.0", "end").strip()
        if not text:
            return
        self.input_box.delete("1.0", "end")
        self.on_send(text)

    def set_busy(self, busy: bool) -> None:
        self.send_btn.configure(state="disabled" if busy else "normal",
                                text="..." if busy else "Send")

    def set_templates(self, templates: dict[str, list[str]]) -> None:
        self.templates = templates

    def _render_chips(self, show: bool) -> None:
        for child in self.chips_frame.winfo_children():
            child.destroy()
        if not show:
            return
        # First prompt of each category keeps the row short
        for category, prompts in self.templates.items():
            if not prompts:
                continue
            ctk.CTkButton(
                self.chips_frame, text=prompts[0], height=26, fg_color="gray25",
                command=lambda p=prompts[0]: self._fill_input(p),
            ).pack(side="left", padx=3, pady=3)

    def _fill_input(self, prompt: str) -> None:
        self.input_box.delete("1.0", "end")
        self.input_box.insert("1.0", prompt)
        self.input_box.focus_set()

    def render(self, session) -> None:
        """Rebuild the log from the session's messages."""
        for child in self.log_frame.winfo_children():
            child.destroy()

        for index, message in enumerate(session.messages):
            body, references = session.message_sources(index)
            is_user = message.role == "user"
            bubble = ctk.CTkFrame(self.log_frame, corner_radius=12,
                                  fg_color="#1C44F1" if is_user else ("gray85", "gray20"))
            bubble.pack(anchor="e" if is_user else "w", padx=8, pady=4, fill=None if is_user else "x")
            ctk.CTkLabel(bubble, text="YOU" if is_user else "BRIEFDESK",
                         font=ctk.CTkFont(size=10, weight="bold")).pack(anchor="w", padx=10, pady=(6, 0))
            ctk.CTkLabel(bubble, text=body, wraplength=620, justify="left",
                         anchor="w").pack(anchor="w", padx=10, pady=(2, 8))

            for reference in references:
                self._reference_row(bubble, reference)

        if session.awaiting_reply:
            ctk.CTkLabel(self.log_frame, text="BriefDesk is thinking...",
                         text_color="gray60").pack(anchor="w", padx=12, pady=6)

        self._render_chips(len(session.messages) <= 1)
        self.log_frame.after_idle(lambda: self.log_frame._parent_canvas.yview_moveto(1.0))

    def _reference_row(self, parent, reference: ReferenceEntry) -> None:
        row = ctk.CTkFrame(parent, fg_color="transparent")
        row.pack(fill="x", padx=10, pady=(0, 4))
        label = reference.title if not reference.description else f"{reference.title} - {reference.description}"
        ctk.CTkLabel(row, text=label, wraplength=520, justify="left",
                     text_color="gray70").pack(side="left")

        def save(button, entry=reference):
            self.on_save_source(entry)
            button.configure(text="Saved", state="disabled")

        button = ctk.CTkButton(row, text="Save", width=56, height=24)
        button.configure(command=lambda b=button: save(b))
        button.pack(side="right")
