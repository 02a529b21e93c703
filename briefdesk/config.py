"""
BriefDesk Configuration Module
Centralized configuration for the application.
"""

import os
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "BriefDesk"
APPDATA_DIR = Path(os.environ.get('APPDATA', os.path.expanduser('~/.config'))) / APP_NAME
LOGS_DIR = APPDATA_DIR / "logs"
CONFIG_DIR = APPDATA_DIR / "config"

# Local session persistence (one JSON file per session id)
SESSIONS_DIR = APPDATA_DIR / "sessions"

# Default target for exported PDFs (user can pick another folder in the UI)
EXPORTS_DIR = APPDATA_DIR / "exports"

# Ensure directories exist
for directory in [APPDATA_DIR, LOGS_DIR, CONFIG_DIR, SESSIONS_DIR, EXPORTS_DIR]:
    directory.mkdir(parents=True, exist_ok=True)

# User preferences (appearance, export folder, panel visibility)
USER_PREFERENCES_FILE = CONFIG_DIR / "user_preferences.json"

# Brief Generation Service
BRIEF_API_BASE = os.environ.get('BRIEFDESK_API_URL', "http://localhost:8000")
BRIEF_TIMEOUT_SECONDS = 180   # Brief generation can take a couple of minutes
CHAT_TIMEOUT_SECONDS = 120
SESSION_TIMEOUT_SECONDS = 10  # Session save/list/load against the remote store
QUEUE_POLL_INTERVAL_MS = 100  # How often the UI drains the worker queue

# Session persistence backend: "local" (JSON files in SESSIONS_DIR) or
# "remote" (the generation service's /sessions endpoints)
SESSION_BACKEND = os.environ.get('BRIEFDESK_SESSION_BACKEND', 'local').lower()

# Shown in the chat log when the service fails mid-conversation
CHAT_UNAVAILABLE_MESSAGE = (
    "The brief service is temporarily unavailable. "
    "Please wait a moment and try again."
)

# Selection capture
MIN_SELECTION_CHARS = 2       # Shorter selections never open the toolbar
TOOLBAR_OFFSET_PX = 8         # Gap between selection top edge and toolbar
COMMENT_PREVIEW_CHARS = 80    # Quoted excerpt length inside the comment editor

# Source extraction
SOURCE_DESCRIPTION_MAX_CHARS = 150

# PDF Export
EXPORT_FILENAME_PREFIX = "briefdesk-brief-"
EXPORT_FILENAME_SLUG_CHARS = 30
EXPORT_BRIEF_LABEL = "CREATIVE BRIEF"

# --- Prompt Template Configuration ---
# Fallback prompt chips when the service's /prompt-templates endpoint is down
PROMPT_TEMPLATES_FILE = Path(__file__).parent.parent / "config" / "prompt_templates.yaml"
PROMPT_TEMPLATES = {}


def load_prompt_templates() -> dict:
    """Loads fallback prompt templates from config/prompt_templates.yaml."""
    global PROMPT_TEMPLATES
    try:
        with open(PROMPT_TEMPLATES_FILE, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
            PROMPT_TEMPLATES = {
                category: [str(prompt) for prompt in prompts or []]
                for category, prompts in (data.get('templates') or {}).items()
            }
        if DEBUG_MODE and PROMPT_TEMPLATES:
            from briefdesk.logging_config import debug_log
            debug_log(f"[Config] Loaded {len(PROMPT_TEMPLATES)} prompt categories from {PROMPT_TEMPLATES_FILE}")
    except FileNotFoundError:
        if DEBUG_MODE:
            from briefdesk.logging_config import debug_log
            debug_log(f"[Config] WARNING: Prompt template file not found at {PROMPT_TEMPLATES_FILE}.")
        PROMPT_TEMPLATES = {}
    except yaml.YAMLError as e:
        from briefdesk.logging_config import debug_log
        debug_log(f"[Config] ERROR: Failed to parse prompt template file: {e}")
        PROMPT_TEMPLATES = {}
    return PROMPT_TEMPLATES


def get_prompt_templates() -> dict:
    """
    Returns the fallback prompt templates, loading them on first use.

    Returns:
        Dict of category name -> list of prompt strings.
    """
    if not PROMPT_TEMPLATES:
        load_prompt_templates()
    return PROMPT_TEMPLATES

# --- End Prompt Template Configuration ---


# Logging Configuration
LOG_FILE = LOGS_DIR / "briefdesk.log"
LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
