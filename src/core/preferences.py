"""
Local preference store - string key/value pairs kept in a JSON file.

Holds the few things the client remembers between runs: the selected
ambient sound and background, the auth token and the user id.
"""
import json
from pathlib import Path
from typing import Dict, Optional
from loguru import logger

# Preference keys
SELECTED_SOUND = "selectedSound"
SELECTED_SOUND_URL = "selectedSoundUrl"
SELECTED_BACKGROUND = "selectedBackground"
SELECTED_BACKGROUND_URL = "selectedBackgroundUrl"
TOKEN = "token"
USER_ID = "userId"


class PreferenceStore:
    """Persistent key-value store backed by a JSON file"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"[PREFS] Failed to read {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"[PREFS] Ignoring malformed preferences file {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self._values, f, indent=4, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error(f"[PREFS] Error saving preferences: {e}")
            return False

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)
        self._save()

    def remove(self, key: str) -> None:
        if key not in self:
            return
        del self._values[key]
        self._save()

    def __contains__(self, key: str) -> bool:
        return key in self._values
