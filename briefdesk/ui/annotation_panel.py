"""
Annotation Panel Widget

Side panel listing the session's annotations grouped by kind
(highlights, comments, sources), each group in creation order, with a
delete button per entry. It re-renders from AnnotationStore.partition_by_kind()
whenever the store notifies.
"""

from typing import Callable

import customtkinter as ctk

from briefdesk.annotations.models import Annotation
from briefdesk.annotations.store import AnnotationPartition

ACCENT = "#F5E642"


class AnnotationPanel(ctk.CTkScrollableFrame):
    """
    Partitioned annotation list.

    Args:
        master: Parent widget
        on_delete: Callback(annotation_id) for the per-entry delete button
    """

    def __init__(self, master, on_delete: Callable[[str], object], **kwargs):
        super().__init__(master, width=280, label_text="Annotations", **kwargs)
        self.on_delete = on_delete
        self.refresh(AnnotationPartition())

    def refresh(self, partition: AnnotationPartition) -> None:
        for child in self.winfo_children():
            child.destroy()

        total = len(partition.highlights) + len(partition.comments) + len(partition.sources)
        self.configure(label_text=f"Annotations ({total})")
        if total == 0:
            ctk.CTkLabel(self, text="Select text in the brief to highlight or comment.",
                         wraplength=240, text_color="gray60").pack(padx=8, pady=16)
            return

        self._group("HIGHLIGHTS", partition.highlights, self._highlight_text)
        self._group("COMMENTS", partition.comments, self._comment_text)
        self._group("SOURCES", partition.sources, self._source_text)

    def _group(self, label: str, annotations: list[Annotation], describe: Callable[[Annotation], str]):
        if not annotations:
            return
        ctk.CTkLabel(self, text=f"{label} ({len(annotations)})", anchor="w", text_color=ACCENT,
                     font=ctk.CTkFont(size=11, weight="bold")).pack(fill="x", padx=8, pady=(12, 4))
        for annotation in annotations:
            card = ctk.CTkFrame(self, corner_radius=6)
            card.pack(fill="x", padx=6, pady=3)
            card.grid_columnconfigure(0, weight=1)
            ctk.CTkLabel(card, text=describe(annotation), anchor="w", justify="left",
                         wraplength=210).grid(row=0, column=0, padx=8, pady=6, sticky="w")
            ctk.CTkButton(card, text="×", width=26, fg_color="transparent", hover_color="#7F1D1D",
                          command=lambda aid=annotation.id: self.on_delete(aid)
                          ).grid(row=0, column=1, padx=4, pady=4, sticky="ne")

    @staticmethod
    def _highlight_text(annotation: Annotation) -> str:
        return f'"{annotation.text}"\n{annotation.section_title}'

    @staticmethod
    def _comment_text(annotation: Annotation) -> str:
        return f'"{annotation.text}"\n{annotation.comment}\n{annotation.section_title}'

    @staticmethod
    def _source_text(annotation: Annotation) -> str:
        lines = [annotation.source_title or annotation.text]
        if annotation.source_url:
            lines.append(annotation.source_url)
        if annotation.source_description:
            lines.append(annotation.source_description)
        return "\n".join(lines)
