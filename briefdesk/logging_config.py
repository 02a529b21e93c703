"""
Logging for BriefDesk

Two sinks, one set of functions:
- logs/debug_flow.txt: every message, rewritten on each launch, so a user can
  attach one file to a bug report
- logs/briefdesk.log: info and above via the standard logging framework
  (console too when DEBUG=true)

All modules import from here:
    from briefdesk.logging_config import debug_log, info, warning, error, Timer

Component prefixes used across the code base:
    [CAPTURE] selection capture      [STORE]   annotation store
    [PARSER]  section/source parsing [EXPORT]  PDF export
    [SESSION] sessions and stores    [SERVICE] brief service client
"""

import logging
import sys
import time
from datetime import datetime

from briefdesk.config import DEBUG_MODE, LOG_DATE_FORMAT, LOG_FILE, LOG_FORMAT, LOGS_DIR

DEBUG_FLOW_FILE = LOGS_DIR / "debug_flow.txt"


class _DebugFlowFile:
    """Singleton owner of debug_flow.txt; writes are no-ops once closed."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._handle = cls._instance._open()
        return cls._instance

    @staticmethod
    def _open():
        try:
            handle = open(DEBUG_FLOW_FILE, 'w', encoding='utf-8')
        except OSError:
            return None
        handle.write(f"BriefDesk debug flow, started {datetime.now().isoformat()} "
                     f"(DEBUG_MODE={DEBUG_MODE})\n\n")
        handle.flush()
        return handle

    def write(self, message: str):
        if self._handle is None:
            return
        stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        self._handle.write(f"[{stamp}] {message}\n")
        self._handle.flush()

    def close(self):
        if self._handle is None:
            return
        self._handle.write(f"\nClosed {datetime.now().isoformat()}\n")
        self._handle.close()
        self._handle = None


_flow = _DebugFlowFile()


def _build_logger() -> logging.Logger:
    logger = logging.getLogger('BriefDesk')
    logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    try:
        file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
    except OSError:
        file_handler = None  # Read-only profile: debug_flow.txt and console still work
    if file_handler is not None:
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if DEBUG_MODE:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        logger.addHandler(console)
    return logger


_logger = _build_logger()


def debug_log(message: str):
    """
    Write a developer message to debug_flow.txt (and stdout in DEBUG_MODE).

    Example:
        debug_log("[EXPORT] Laid out 4 pages")
    """
    _flow.write(message)
    if not DEBUG_MODE:
        return
    line = f"[{datetime.now().strftime('%H:%M:%S.%f')[:-3]}] {message}"
    try:
        print(line, flush=True)
    except UnicodeEncodeError:
        sys.stdout.buffer.write((line + "\n").encode('utf-8', errors='replace'))
        sys.stdout.buffer.flush()


def info(message: str):
    _flow.write(f"[INFO] {message}")
    _logger.info(message)


def warning(message: str):
    """Something failed but the user can carry on (e.g. a dropped session save)."""
    _flow.write(f"[WARNING] {message}")
    _logger.warning(message)


def error(message: str, exc_info: bool = False):
    """
    Log a failure the user will notice.

    Args:
        message: What failed
        exc_info: Attach the current traceback (DEBUG_MODE only)
    """
    _flow.write(f"[ERROR] {message}")
    _logger.error(message, exc_info=exc_info and DEBUG_MODE)


def debug_timing(operation: str, elapsed_seconds: float):
    """Log how long an operation took, in ms below one second."""
    if elapsed_seconds < 1:
        elapsed = f"{elapsed_seconds * 1000:.0f} ms"
    elif elapsed_seconds < 60:
        elapsed = f"{elapsed_seconds:.2f}s"
    else:
        elapsed = f"{elapsed_seconds / 60:.1f}m"
    debug_log(f"{operation} took {elapsed}")


def close_debug_log():
    """Flush and close debug_flow.txt at shutdown."""
    _flow.close()


class Timer:
    """
    Time a block and log its duration.

    Usage:
        with Timer("PdfExport"):
            exporter.export(...)

    Attributes:
        duration_ms: Milliseconds spent in the block (set on exit)
    """

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.duration_ms: float | None = None
        self._start = 0.0

    def __enter__(self):
        debug_log(f"Starting {self.operation_name}...")
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.perf_counter() - self._start
        self.duration_ms = elapsed * 1000
        debug_timing(self.operation_name, elapsed)
        return False


__all__ = [
    'debug_log',
    'debug_timing',
    'info',
    'warning',
    'error',
    'close_debug_log',
    'Timer',
    'DEBUG_MODE',
]
