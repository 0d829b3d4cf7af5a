"""Language identification by file extension."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Mapping

from core.models import LANGUAGES, UNKNOWN_LANGUAGE, Language


class LanguageManager:
    """Maps file paths to :class:`Language` records.

    The built-in table can be extended or overridden per language id; an
    override replaces the extension list of that id.
    """

    def __init__(self, overrides: Mapping[str, Iterable[str]] | None = None) -> None:
        table: Dict[str, list[str]] = {k: list(v) for k, v in LANGUAGES.items()}
        for lang_id, exts in (overrides or {}).items():
            table[str(lang_id).strip().lower()] = list(exts)
        self._languages: Dict[str, Language] = {}
        self._by_extension: Dict[str, Language] = {}
        for lang_id, exts in table.items():
            self.define(lang_id, exts)
        self._unknown = Language(UNKNOWN_LANGUAGE, "Unknown")

    def define(self, lang_id: str, extensions: Iterable[str], name: str = "") -> Language:
        normalized = tuple(str(e).strip().lower().lstrip(".") for e in extensions if str(e).strip())
        lang = Language(lang_id, name or lang_id.capitalize(), normalized)
        old = self._languages.get(lang_id)
        if old is not None:
            for ext in old.extensions:
                if self._by_extension.get(ext) is old:
                    del self._by_extension[ext]
        self._languages[lang_id] = lang
        for ext in normalized:
            self._by_extension[ext] = lang
        return lang

    def get_language(self, lang_id: str) -> Language | None:
        return self._languages.get(lang_id)

    def get_language_for_path(self, path: str) -> Language:
        ext = Path(str(path or "")).suffix.lower().lstrip(".")
        return self._by_extension.get(ext, self._unknown)
