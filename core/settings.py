import json
import logging
from pathlib import Path

from core.config import SETTINGS_PATH

logger = logging.getLogger(__name__)


def load_settings(path=None):
    path = Path(path or SETTINGS_PATH)
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    else:
        return {}


def save_settings(data, path=None):
    path = Path(path or SETTINGS_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


class JsonPreferences:
    """String key/value preference store persisted to a settings JSON file.

    Values are kept as strings; booleans are stored as ``"true"``/``"false"``.
    Other top-level settings in the file are preserved on write.
    """

    SECTION = "preferences"

    def __init__(self, path=None):
        self.path = Path(path or SETTINGS_PATH)
        self._data = load_settings(self.path)

    def get(self, key: str) -> str | None:
        value = self._data.get(self.SECTION, {}).get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self._data.setdefault(self.SECTION, {})[key] = str(value)
        save_settings(self._data, self.path)
        logger.debug("Preference %s=%s saved to %s", key, value, self.path)
