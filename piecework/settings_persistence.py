"""Per-document settings that survive between editing sessions.

Settings are kept in one JSON file in the user's config directory, keyed by
the absolute path of the document they belong to. Recognised keys:

- ``encoding``: codec used to load and save the document
- ``coalesce``: whether consecutive typing extends one piece
"""

from __future__ import annotations

import codecs
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .fileio import write_atomically

logger = logging.getLogger(__name__)


class SettingsPersistence:
    """JSON-backed store of per-document settings with an in-memory cache."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir or platformdirs.user_config_dir("piecework", "piecework"))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Dict[str, Any]]] = None

    def _load_all_settings(self) -> Dict[str, Dict[str, Any]]:
        if self._settings_cache is not None:
            return self._settings_cache
        self._settings_cache = {}
        if not self._settings_file.exists():
            return self._settings_cache
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return self._settings_cache
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return self._settings_cache
        self._settings_cache = data
        return self._settings_cache

    def _save_all_settings(self, settings: Dict[str, Dict[str, Any]]) -> bool:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            write_atomically(str(self._settings_file), json.dumps(settings, indent=2))
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            return False
        self._settings_cache = settings
        return True

    def load_settings(self, document_path: Optional[str]) -> Dict[str, Any]:
        """Load the valid settings stored for a document.

        Invalid values are dropped with a warning. Returns an empty dict when
        document_path is None or nothing is stored.
        """
        if document_path is None:
            return {}
        abs_path = os.path.abspath(document_path)
        doc_settings = self._load_all_settings().get(abs_path, {})
        if not isinstance(doc_settings, dict):
            logger.warning(f"Settings for {abs_path} are not a dict, ignoring")
            return {}
        valid = {}
        for key, value in doc_settings.items():
            if self.validate_setting(key, value):
                valid[key] = value
            else:
                logger.warning(f"Ignoring invalid setting {key}={value!r} for {abs_path}")
        return valid

    def save_settings(self, document_path: Optional[str], settings: Dict[str, Any]) -> bool:
        """Replace the settings stored for a document. Returns success."""
        if document_path is None:
            return False
        abs_path = os.path.abspath(document_path)
        all_settings = dict(self._load_all_settings())
        all_settings[abs_path] = settings
        return self._save_all_settings(all_settings)

    def validate_setting(self, key: str, value: Any) -> bool:
        if value is None:
            return True  # None means "not set"
        if key == 'encoding':
            if not isinstance(value, str):
                return False
            try:
                codecs.lookup(value)
            except LookupError:
                return False
            return True
        if key == 'coalesce':
            return isinstance(value, bool)
        # Unknown settings are considered valid (forward compatibility)
        return True

    def clear_cache(self) -> None:
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
