"""
BriefDesk - Main Application Entry Point

    briefdesk                           launch the desktop app
    briefdesk sessions                  list stored sessions
    briefdesk export SESSION_ID [-o DIR] render a stored session to PDF
    briefdesk summary SESSION_ID [--format md]
                                        print the session summary
"""

import argparse
import sys
from pathlib import Path

from briefdesk.config import EXPORTS_DIR
from briefdesk.logging_config import close_debug_log, error, info


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="briefdesk",
        description="Generate, annotate and export creative briefs.",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("sessions", help="List stored sessions, most recent first")

    export_parser = subparsers.add_parser("export", help="Export a stored session to PDF")
    export_parser.add_argument("session_id", help="Id of the session to export")
    export_parser.add_argument("-o", "--output", type=Path, default=None,
                               help=f"Output folder (default: {EXPORTS_DIR})")

    summary_parser = subparsers.add_parser("summary", help="Print the summary of a stored session")
    summary_parser.add_argument("session_id", help="Id of the session to summarise")
    summary_parser.add_argument("--format", choices=["txt", "md"], default="txt",
                                help="Output format (default: txt)")

    return parser.parse_args(argv)


def _create_store():
    from briefdesk.service import BriefServiceClient, create_session_store
    return create_session_store(BriefServiceClient())


def _load_session(store, session_id: str):
    from briefdesk.session import BriefSession
    return BriefSession.from_snapshot(store.load(session_id))


def run_sessions(store) -> int:
    sessions = store.list()
    if not sessions:
        print("No stored sessions.")
        return 0
    for summary in sessions:
        print(f"{summary.id}  {summary.updated_at[:16]}  {summary.brand_description}")
    return 0


def run_export(store, session_id: str, output: Path | None) -> int:
    from briefdesk.user_preferences import get_user_preferences

    try:
        session = _load_session(store, session_id)
    except ValueError as e:
        error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    directory = output or get_user_preferences().get_export_directory(EXPORTS_DIR)
    path = session.export_pdf_to(directory)
    info(f"Exported session {session_id} to {path}")
    print(path)
    return 0


def run_summary(store, session_id: str, format_type: str) -> int:
    from briefdesk.brief.formatter import SessionSummaryFormatter

    try:
        session = _load_session(store, session_id)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(SessionSummaryFormatter().format_for_export(session, format_type))
    return 0


def run_gui() -> int:
    import customtkinter as ctk

    from briefdesk.ui.main_window import MainWindow
    from briefdesk.user_preferences import get_user_preferences

    ctk.set_appearance_mode(get_user_preferences().get_appearance_mode())
    ctk.set_default_color_theme("blue")

    app = MainWindow()
    app.mainloop()
    return 0


def main(argv=None) -> int:
    """
    Main entry point for BriefDesk.
    """
    args = parse_args(argv)
    try:
        if args.command is None:
            return run_gui()

        store = _create_store()
        if args.command == "sessions":
            return run_sessions(store)
        if args.command == "export":
            return run_export(store, args.session_id, args.output)
        return run_summary(store, args.session_id, args.format)
    finally:
        close_debug_log()


if __name__ == "__main__":
    sys.exit(main())
