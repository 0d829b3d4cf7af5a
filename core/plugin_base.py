# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol

from core.models import BeautifyResult

ALL_LANGUAGES = "all"


class BeautifyDeclined(Exception):
    """Raised by a provider that has nothing to beautify for this editor."""


class BeautificationProvider(Protocol):
    async def beautify(self, editor: Any) -> Optional[BeautifyResult]: ...


@dataclass
class ProviderEntry:
    provider: BeautificationProvider
    priority: int = 0


def _language_keys(language_ids: Iterable[str] | str) -> List[str]:
    if isinstance(language_ids, str):
        language_ids = [language_ids]
    keys = []
    for raw in language_ids or []:
        key = str(raw or "").strip().lower()
        if key:
            keys.append(key)
    return keys


class ProviderRegistry:
    """Language-keyed buckets of providers, highest priority first.

    ``"all"`` is its own bucket and is merged into every lookup. On equal
    priority the language-specific entries are returned before the ``"all"``
    ones. Registering the same provider twice keeps both entries.
    """

    def __init__(self) -> None:
        self._buckets: Dict[str, List[ProviderEntry]] = {ALL_LANGUAGES: []}

    def register(self, provider: BeautificationProvider, language_ids: Iterable[str] | str,
                 priority: int = 0) -> None:
        for key in _language_keys(language_ids):
            bucket = self._buckets.setdefault(key, [])
            bucket.append(ProviderEntry(provider, int(priority or 0)))
            # list.sort 是稳定排序，同优先级保持注册顺序
            bucket.sort(key=lambda e: e.priority, reverse=True)

    def remove(self, provider: BeautificationProvider, language_ids: Iterable[str] | str) -> None:
        for key in _language_keys(language_ids):
            bucket = self._buckets.get(key)
            if not bucket:
                continue
            self._buckets[key] = [e for e in bucket if e.provider is not provider]

    def get_entries(self, language_id: str) -> List[ProviderEntry]:
        key = str(language_id or "").strip().lower()
        specific = self._buckets.get(key, []) if key != ALL_LANGUAGES else []
        everyone = self._buckets.get(ALL_LANGUAGES, [])
        merged: List[ProviderEntry] = []
        i = j = 0
        while i < len(specific) and j < len(everyone):
            if specific[i].priority >= everyone[j].priority:
                merged.append(specific[i])
                i += 1
            else:
                merged.append(everyone[j])
                j += 1
        merged.extend(specific[i:])
        merged.extend(everyone[j:])
        return merged

    def get_candidates(self, language_id: str) -> List[BeautificationProvider]:
        return [e.provider for e in self.get_entries(language_id)]

    def clear(self) -> None:
        self._buckets = {ALL_LANGUAGES: []}


__all__ = [
    "ALL_LANGUAGES",
    "BeautifyDeclined",
    "BeautificationProvider",
    "ProviderEntry",
    "ProviderRegistry",
]
