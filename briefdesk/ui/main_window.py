"""
BriefDesk - Main Window (CustomTkinter)

Main application window with:
- History sidebar: New Brief + stored sessions (restore/delete)
- Header: brand of the open brief, Export PDF, annotation panel toggle
- Start view: brand description input and example prompts
- Tabs for an open brief: Brief (annotatable sections), Chat, Summary
- Annotation panel (right, toggled) and status bar

Network calls run on worker threads (briefdesk.ui.workers) that post to a
single Queue; _poll_queue drains it on the Tk thread, so the session and its
annotations are only ever touched here.
"""

from queue import Empty, Queue
from tkinter import filedialog, messagebox

import customtkinter as ctk

from briefdesk.config import (
    APP_NAME,
    DEBUG_MODE,
    EXPORTS_DIR,
    QUEUE_POLL_INTERVAL_MS,
    SESSION_BACKEND,
    SESSION_TIMEOUT_SECONDS,
)
from briefdesk.annotations.store import AnnotationPartition
from briefdesk.brief.formatter import SessionSummaryFormatter
from briefdesk.logging_config import close_debug_log, debug_log, error
from briefdesk.service import BriefServiceClient, create_session_store
from briefdesk.session import BriefSession
from briefdesk.ui.annotatable_section import AnnotatableSection
from briefdesk.ui.annotation_panel import AnnotationPanel
from briefdesk.ui.chat_panel import ChatPanel
from briefdesk.ui.history_sidebar import HistorySidebar
from briefdesk.ui.workers import (
    BriefWorker,
    ChatWorker,
    PromptTemplatesWorker,
    SessionListWorker,
    SessionSaveWorker,
)
from briefdesk.user_preferences import get_user_preferences

EXAMPLE_PROMPTS = [
    ("FASHION", "A sustainable sneaker brand for Gen Z climate activists"),
    ("TECH", "A mental health app for burned out millennials"),
    ("FOOD", "A luxury coffee brand that only sells one perfect product"),
    ("LIFESTYLE", "A minimalist skincare brand for men who hate skincare routines"),
    ("MEDIA", "An independent music label championing local underground artists"),
    ("FINANCE", "A fintech brand making investing feel human and approachable"),
]


class MainWindow(ctk.CTk):
    """Main application window for BriefDesk."""

    def __init__(self):
        super().__init__()

        self.title(APP_NAME)
        self.geometry("1280x800")
        self.minsize(960, 600)

        # State
        self.session: BriefSession | None = None
        self.section_widgets: list[AnnotatableSection] = []
        self.templates: dict[str, list[str]] = {}

        # Managers
        self.prefs = get_user_preferences()
        self.client = BriefServiceClient()
        self.store = create_session_store(self.client)
        self.formatter = SessionSummaryFormatter()

        # Worker queue
        self._ui_queue: Queue = Queue()
        self._brief_worker: BriefWorker | None = None
        self._chat_worker: ChatWorker | None = None
        self._save_worker = SessionSaveWorker(self.store, self._ui_queue)
        self._save_worker.start()

        # Build UI
        self._create_sidebar()
        self._create_main_area()
        self._create_status_bar()
        self._show_start_view()
        self._set_annotation_panel(self.prefs.get("annotation_panel_open", False))

        # Route every click to the sections so an outside click hides their toolbar
        self.bind_all("<Button-1>", self._route_click, add="+")
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        PromptTemplatesWorker(self.client, self._ui_queue).start()
        self._refresh_sessions()
        self._restore_last_session()
        self._poll_queue()

        if DEBUG_MODE:
            debug_log(f"[MainWindow] Initialized (session backend: {SESSION_BACKEND})")

    # =========================================================================
    # Layout
    # =========================================================================

    def _create_sidebar(self):
        self.sidebar = HistorySidebar(self, on_new=self._new_brief, on_restore=self._restore_session,
                                      on_delete=self._delete_session)
        self.sidebar.pack(side="left", fill="y")

    def _create_main_area(self):
        self.main_frame = ctk.CTkFrame(self, fg_color="transparent")
        self.main_frame.pack(side="left", fill="both", expand=True)

        self.header_frame = ctk.CTkFrame(self.main_frame, height=52, corner_radius=0)
        self.header_frame.pack(fill="x")
        self.header_frame.pack_propagate(False)

        self.brand_label = ctk.CTkLabel(self.header_frame, text=APP_NAME,
                                        font=ctk.CTkFont(size=16, weight="bold"))
        self.brand_label.pack(side="left", padx=15)

        self.panel_btn = ctk.CTkButton(self.header_frame, text="Annotations", width=110,
                                       command=self._toggle_annotation_panel)
        self.panel_btn.pack(side="right", padx=(5, 15), pady=10)
        self.export_btn = ctk.CTkButton(self.header_frame, text="↓ Export PDF", width=110,
                                        command=self._export_pdf)
        self.export_btn.pack(side="right", padx=5, pady=10)
        self.folder_btn = ctk.CTkButton(self.header_frame, text="Export folder...", width=110,
                                        fg_color="gray30", command=self._choose_export_folder)
        self.folder_btn.pack(side="right", padx=5, pady=10)

        self.body_frame = ctk.CTkFrame(self.main_frame, fg_color="transparent")
        self.body_frame.pack(fill="both", expand=True)

        # Start view
        self.start_frame = ctk.CTkFrame(self.body_frame, fg_color="transparent")
        ctk.CTkLabel(self.start_frame, text="What brand are we briefing today?",
                     font=ctk.CTkFont(size=24, weight="bold")).pack(pady=(80, 16))
        self.brand_input = ctk.CTkTextbox(self.start_frame, width=640, height=90)
        self.brand_input.pack(pady=8)
        self.brand_input.bind("<Return>", lambda e: (self._generate_brief(), "break")[1])
        self.generate_btn = ctk.CTkButton(self.start_frame, text="Generate Brief", width=200,
                                          command=self._generate_brief)
        self.generate_btn.pack(pady=8)
        examples = ctk.CTkFrame(self.start_frame, fg_color="transparent")
        examples.pack(pady=16)
        for i, (category, prompt) in enumerate(EXAMPLE_PROMPTS):
            ctk.CTkButton(examples, text=f"{category}\n{prompt}", width=300, height=54,
                          fg_color="gray25", command=lambda p=prompt: self._generate_brief(p)
                          ).grid(row=i // 2, column=i % 2, padx=6, pady=6)

        # Brief view
        self.tabview = ctk.CTkTabview(self.body_frame)
        self.brief_tab = self.tabview.add("Brief")
        self.chat_tab = self.tabview.add("Chat")
        self.summary_tab = self.tabview.add("Summary")
        self.tabview.configure(command=self._on_tab_changed)

        self.sections_frame = ctk.CTkScrollableFrame(self.brief_tab)
        self.sections_frame.pack(fill="both", expand=True)

        self.chat_panel = ChatPanel(self.chat_tab, on_send=self._send_message,
                                    on_save_source=self._save_source)
        self.chat_panel.pack(fill="both", expand=True)

        self.summary_box = ctk.CTkTextbox(self.summary_tab, wrap="word")
        self.summary_box.pack(fill="both", expand=True)

        self.annotation_panel = AnnotationPanel(self.body_frame, on_delete=self._delete_annotation)

    def _create_status_bar(self):
        self.status_label = ctk.CTkLabel(self.main_frame, text="Ready", anchor="w", height=24)
        self.status_label.pack(fill="x", padx=12)

    def set_status(self, text: str):
        self.status_label.configure(text=text)

    def _show_start_view(self):
        self.tabview.pack_forget()
        self.start_frame.pack(fill="both", expand=True)
        self.brand_label.configure(text=APP_NAME)
        self.export_btn.configure(state="disabled")
        self.generate_btn.configure(state="normal", text="Generate Brief")

    def _show_brief_view(self, tab: str):
        self.start_frame.pack_forget()
        self.tabview.pack(side="left", fill="both", expand=True, padx=8, pady=8)
        self.export_btn.configure(state="normal")
        self.tabview.set(tab)

    # =========================================================================
    # Queue
    # =========================================================================

    def _poll_queue(self):
        """Drain worker messages, then poll again."""
        try:
            while True:
                msg_type, data = self._ui_queue.get_nowait()
                self._handle_queue_message(msg_type, data)
        except Empty:
            pass
        self.after(QUEUE_POLL_INTERVAL_MS, self._poll_queue)

    def _handle_queue_message(self, msg_type: str, data):
        if msg_type == "brief_complete":
            self._open_session(data)
            self.set_status(f"Brief ready: {len(data.sections)} sections")

        elif msg_type == "brief_failed":
            self._show_start_view()
            self.set_status("Brief service unavailable")
            messagebox.showerror("Brief Generation", f"{APP_NAME} is unavailable. "
                                 f"Check the backend is running.\n\n{data}")

        elif msg_type == "chat_reply" and self.session is not None:
            self.session.receive_reply(data)
            self._after_chat_turn()

        elif msg_type == "chat_failed" and self.session is not None:
            self.session.receive_failure(data)
            self._after_chat_turn()

        elif msg_type == "templates_loaded":
            self.templates = data
            self.chat_panel.set_templates(data)

        elif msg_type == "sessions_loaded":
            self.sidebar.current_session_id = self.session.id if self.session else None
            self.sidebar.set_sessions(data)

        elif msg_type == "session_saved":
            self._refresh_sessions()

    # =========================================================================
    # Sessions
    # =========================================================================

    def _refresh_sessions(self):
        SessionListWorker(self.store, self._ui_queue).start()

    def _new_brief(self):
        self._close_session()
        self.brand_input.delete("1.0", "end")
        self._show_start_view()
        self.brand_input.focus_set()

    def _generate_brief(self, description: str | None = None):
        text = (description or self.brand_input.get("1.0", "end")).strip()
        if not text or (self._brief_worker and self._brief_worker.is_alive()):
            return
        if description:
            self.brand_input.delete("1.0", "end")
            self.brand_input.insert("1.0", description)
        self.generate_btn.configure(state="disabled", text="Generating...")
        self.set_status("Generating brief...")
        self._brief_worker = BriefWorker(self.client, text, self.store, self._ui_queue)
        self._brief_worker.start()

    def _open_session(self, session: BriefSession):
        self._close_session()
        self.session = session
        session.annotations.subscribe(self._on_annotations_changed)
        self.prefs.set_last_session_id(session.id)
        session.save_handler = self._save_worker.submit
        header = session.brand_description[:80]
        if session.memory_informed:
            header += "   ✦ Memory Informed"
        self.brand_label.configure(text=header)

        for index, section in enumerate(session.sections):
            widget = AnnotatableSection(self.sections_frame, index, section.title, section.content,
                                        session.capture_for(section.title))
            widget.pack(fill="x", padx=6, pady=6)
            self.section_widgets.append(widget)

        self.annotation_panel.refresh(session.annotations.partition_by_kind())
        self.chat_panel.render(session)
        self._show_brief_view("Chat" if session.initial_view == "chat" else "Brief")
        self._refresh_sessions()

    def _close_session(self):
        if self.session is not None:
            self.session.annotations.unsubscribe(self._on_annotations_changed)
        self.session = None
        for widget in self.section_widgets:
            widget.destroy()
        self.section_widgets = []
        self.annotation_panel.refresh(AnnotationPartition())

    def _restore_session(self, session_id: str):
        try:
            snapshot = self.store.load(session_id)
        except ValueError as e:
            error(f"Failed to restore session: {e}")
            messagebox.showerror("Restore Session", str(e))
            return
        self._open_session(BriefSession.from_snapshot(snapshot, store=self.store))
        self.set_status("Session restored")

    def _restore_last_session(self):
        """Reopen the session that was open when the app last closed."""
        session_id = self.prefs.get_last_session_id()
        if not session_id:
            return
        try:
            snapshot = self.store.load(session_id)
        except ValueError as e:
            debug_log(f"[MainWindow] Last session not restored: {e}")
            self.prefs.set_last_session_id(None)
            return
        self._open_session(BriefSession.from_snapshot(snapshot, store=self.store))

    def _delete_session(self, session_id: str):
        self.store.delete(session_id)
        if self.prefs.get_last_session_id() == session_id:
            self.prefs.set_last_session_id(None)
        if self.session is not None and self.session.id == session_id:
            self._new_brief()
        self._refresh_sessions()

    # =========================================================================
    # Annotations
    # =========================================================================

    def _route_click(self, event):
        for widget in self.section_widgets:
            widget.handle_outside_click(event.widget)

    def _on_annotations_changed(self, store):
        self.annotation_panel.refresh(store.partition_by_kind())
        if len(store) and not self.prefs.get("annotation_panel_open", False):
            self._set_annotation_panel(True)

    def _delete_annotation(self, annotation_id: str):
        if self.session is not None:
            self.session.delete_annotation(annotation_id)

    def _save_source(self, entry):
        if self.session is not None:
            self.session.save_source(entry)
            self.set_status(f"Saved source: {entry.title}")

    def _toggle_annotation_panel(self):
        self._set_annotation_panel(not self.prefs.get("annotation_panel_open", False))

    def _set_annotation_panel(self, open_: bool):
        if open_:
            self.annotation_panel.pack(side="right", fill="y", padx=(0, 8), pady=8)
        else:
            self.annotation_panel.pack_forget()
        if self.prefs.get("annotation_panel_open", False) != open_:
            self.prefs.set("annotation_panel_open", open_)

    # =========================================================================
    # Chat
    # =========================================================================

    def _on_tab_changed(self):
        tab = self.tabview.get()
        if self.session is None:
            return
        if tab == "Chat":
            self.session.start_chat()
            self.chat_panel.render(self.session)
        elif tab == "Summary":
            self.summary_box.configure(state="normal")
            self.summary_box.delete("1.0", "end")
            self.summary_box.insert("1.0", self.formatter.format(self.session).text)
            self.summary_box.configure(state="disabled")

    def _send_message(self, text: str):
        if self.session is None:
            return
        payload = self.session.add_user_message(text)
        if payload is None:
            return
        self.chat_panel.set_busy(True)
        self.chat_panel.render(self.session)
        self._chat_worker = ChatWorker(self.client, self.session.brand_description,
                                       self.session.creative_brief, payload, text.strip(), self._ui_queue)
        self._chat_worker.start()

    def _after_chat_turn(self):
        self.chat_panel.set_busy(False)
        self.chat_panel.render(self.session)

    # =========================================================================
    # Export
    # =========================================================================

    def _choose_export_folder(self):
        current = self.prefs.get_export_directory(EXPORTS_DIR)
        folder = filedialog.askdirectory(title="Choose Export Folder", initialdir=str(current))
        if folder:
            self.prefs.set_export_directory(folder)
            self.set_status(f"Exports go to {folder}")

    def _export_pdf(self):
        if self.session is None:
            return
        try:
            path = self.session.export_pdf_to(self.prefs.get_export_directory(EXPORTS_DIR))
        except OSError as e:
            error(f"PDF export failed: {e}")
            messagebox.showerror("Export PDF", f"Could not write the PDF:\n{e}")
            return
        self.set_status(f"Exported {path}")

    def _on_close(self):
        self._save_worker.close(timeout=SESSION_TIMEOUT_SECONDS)
        close_debug_log()
        self.destroy()
