"""
User Preferences for BriefDesk
Remembers the appearance mode, the PDF export folder, whether the annotation
panel is open and which session was open last.
"""

import json
from pathlib import Path
from typing import Any

APPEARANCE_MODES = ("dark", "light", "system")

DEFAULT_PREFERENCES = {
    "appearance_mode": "dark",
    "export_directory": None,
    "annotation_panel_open": False,
    "last_session_id": None,
}


class UserPreferencesManager:
    """
    JSON-backed preferences with defaults for every key.

    A missing, unreadable or malformed file never stops the app: the
    defaults are used and the next change rewrites the file.
    """

    def __init__(self, preferences_file: Path):
        self.preferences_file = Path(preferences_file)
        self._values = self._read()

    def _read(self) -> dict[str, Any]:
        values = dict(DEFAULT_PREFERENCES)
        try:
            with open(self.preferences_file, encoding='utf-8') as f:
                stored = json.load(f)
        except FileNotFoundError:
            return values
        except (OSError, json.JSONDecodeError):
            from briefdesk.logging_config import debug_log
            debug_log(f"[PREFS] Ignoring unreadable {self.preferences_file.name}, using defaults")
            return values
        if isinstance(stored, dict):
            values.update(stored)
        return values

    def _write(self) -> None:
        try:
            self.preferences_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.preferences_file, 'w', encoding='utf-8') as f:
                json.dump(self._values, f, indent=2)
        except OSError as e:
            from briefdesk.logging_config import debug_log
            debug_log(f"[PREFS] Could not write {self.preferences_file}: {e}")

    def get_appearance_mode(self) -> str:
        return self._values.get("appearance_mode") or "dark"

    def set_appearance_mode(self, mode: str) -> None:
        """
        Raises:
            ValueError: If mode is not one of APPEARANCE_MODES
        """
        self.set("appearance_mode", mode)

    def get_export_directory(self, default: Path) -> Path:
        """Folder exported PDFs are written to (default until the user picks one)."""
        stored = self._values.get("export_directory")
        return Path(stored) if stored else Path(default)

    def set_export_directory(self, directory: Path) -> None:
        self.set("export_directory", str(directory))

    def get_last_session_id(self) -> str | None:
        return self._values.get("last_session_id")

    def set_last_session_id(self, session_id: str | None) -> None:
        self.set("last_session_id", session_id)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Store one preference and write the file.

        Raises:
            ValueError: If appearance_mode or annotation_panel_open gets an
                invalid value
        """
        if key == "appearance_mode" and value not in APPEARANCE_MODES:
            raise ValueError(f"Appearance mode must be one of {APPEARANCE_MODES}, got {value!r}")
        if key == "annotation_panel_open" and not isinstance(value, bool):
            raise ValueError(f"annotation_panel_open must be a bool, got {value!r}")
        self._values[key] = value
        self._write()


_user_prefs: UserPreferencesManager | None = None


def get_user_preferences(preferences_file: Path | None = None) -> UserPreferencesManager:
    """
    Shared preferences instance; preferences_file only matters on the first call.
    """
    global _user_prefs
    if _user_prefs is None:
        if preferences_file is None:
            from briefdesk.config import USER_PREFERENCES_FILE
            preferences_file = USER_PREFERENCES_FILE
        _user_prefs = UserPreferencesManager(preferences_file)
    return _user_prefs
