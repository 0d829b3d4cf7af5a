# -*- coding: utf-8 -*-
from __future__ import annotations
"""
Beautification manager.

Asks the registered beautification providers, highest priority first, to
beautify the active editor and applies the first usable answer.

Provider contract::

    class MyProvider:
        async def beautify(self, editor):
            # raise BeautifyDeclined (or anything else) -> next provider is asked
            # return None -> the provider applied the change itself, stop here
            return BeautifyResult(changed_text="...",           # whole document
                                  ranges=ReplaceRange(start, end))  # optional

Register with ``register_beautification_provider(provider, ["json"], 10)``;
``["all"]`` makes the provider a candidate for every language.
"""

import logging
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

from core import strings
from core.commands import EDIT_BEAUTIFY_CODE, EDIT_BEAUTIFY_CODE_ON_SAVE, Command, CommandManager
from core.editor import Document, Editor
from core.language import LanguageManager
from core.models import BeautifyResult, Position, ReplaceRange
from core.plugin_base import BeautificationProvider, ProviderRegistry
from core.workspace import ACTIVE_EDITOR_CHANGE, DOCUMENT_SAVED, Workspace

logger = logging.getLogger(__name__)

BEAUTIFY_ON_SAVE_KEY = "BeautifyOnSave"


class NoProviderError(RuntimeError):
    """No beautification provider produced a result."""


class BeautifyOutcome(str, Enum):
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    HANDLED = "handled"
    NO_PROVIDER = "no_provider"
    NO_EDITOR = "no_editor"


def _coerce_result(value: Any) -> Optional[BeautifyResult]:
    if isinstance(value, BeautifyResult):
        return value
    if isinstance(value, Mapping):
        return BeautifyResult.from_dict(value)
    if hasattr(value, "changed_text"):
        ranges = getattr(value, "ranges", None)
        if ranges is not None and not isinstance(ranges, ReplaceRange):
            ranges = ReplaceRange.from_dict(ranges)
        return BeautifyResult(value.changed_text, ranges)
    return None


def replace_text(editor: Editor, result: BeautifyResult) -> bool:
    """Apply ``result`` to ``editor`` as one undo step.

    Returns ``False`` without touching the editor when the text already
    matches. After a whole-document replacement the cursor goes back to its
    old line/column, which is only approximately the same spot.
    """
    with editor.operation():
        if result.ranges is not None:
            start, end = result.ranges.replace_start, result.ranges.replace_end
            if editor.document.get_range(start, end) == result.changed_text:
                return False
            editor.set_selection(start, end)
            editor.replace_selection(result.changed_text, "around")
            return True
        start, end = Position(0, 0), editor.get_ending_cursor_pos()
        if editor.document.get_range(start, end) == result.changed_text:
            return False
        cursor = editor.get_cursor_pos()
        editor.replace_range(result.changed_text, start, end)
        editor.set_cursor_pos(cursor.line, cursor.ch)
        return True


class BeautificationManager:
    def __init__(
        self,
        workspace: Workspace,
        preferences,
        commands: CommandManager | None = None,
        languages: LanguageManager | None = None,
        registry: ProviderRegistry | None = None,
        on_save_default: bool = False,
    ) -> None:
        self.workspace = workspace
        self.preferences = preferences
        self.commands = commands or CommandManager()
        self.languages = languages or LanguageManager()
        self.registry = registry or ProviderRegistry()
        self.on_save_default = on_save_default
        self.beautify_command: Command | None = None
        self.beautify_on_save_command: Command | None = None

    # ---------------- provider registration ----------------
    def register_beautification_provider(self, provider: BeautificationProvider,
                                         language_ids: Iterable[str] | str, priority: int = 0) -> None:
        self.registry.register(provider, language_ids, priority)
        self._refresh_command_state()

    def remove_beautification_provider(self, provider: BeautificationProvider,
                                       language_ids: Iterable[str] | str) -> None:
        self.registry.remove(provider, language_ids)
        self._refresh_command_state()

    def get_enabled_providers(self, editor: Editor) -> List[BeautificationProvider]:
        language = self.languages.get_language_for_path(editor.document.file_path)
        return self.registry.get_candidates(language.id)

    # ---------------- orchestration ----------------
    async def get_beautified_code_details(self, editor: Editor) -> Optional[BeautifyResult]:
        """Return the first provider answer, or ``None`` if one handled it itself.

        Raises :class:`NoProviderError` when no provider answered at all.
        """
        for provider in self.get_enabled_providers(editor):
            beautify = getattr(provider, "beautify", None)
            if not callable(beautify):
                logger.error("Beautify providers must implement beautify function: %r", provider)
                continue
            try:
                value = await beautify(editor)
            except Exception as e:
                # declining is the expected way for a provider to pass
                logger.debug("Provider %r declined: %s", provider, e)
                continue
            if not value:
                logger.debug("Provider %r handled %s itself", provider, editor.document.name)
                return None
            result = _coerce_result(value)
            if result is None:
                logger.error("Provider %r returned an unusable result: %r", provider, value)
                continue
            return result
        raise NoProviderError("No Providers beautified text")

    async def prettify(self, editor: Editor | None = None) -> BeautifyOutcome:
        editor = editor or self.workspace.get_active_editor()
        if editor is None:
            return BeautifyOutcome.NO_EDITOR
        busy_message = strings.format_string(strings.BEAUTIFY_PROJECT_BUSY_MESSAGE, editor.get_file().name)
        self.workspace.status.set_busy(True, busy_message)
        try:
            result = await self.get_beautified_code_details(editor)
            if result is None or not result.changed_text:
                return BeautifyOutcome.HANDLED
            if not replace_text(editor, result):
                return BeautifyOutcome.UNCHANGED
            logger.info("Beautified %s", editor.document.file_path)
            return BeautifyOutcome.APPLIED
        except NoProviderError as e:
            message = strings.BEAUTIFY_ERROR_SELECTION if editor.has_selection() else strings.BEAUTIFY_ERROR
            editor.display_error_message_at_cursor(message)
            logger.info("No beautify providers responded for %s: %s", editor.document.file_path, e)
            return BeautifyOutcome.NO_PROVIDER
        finally:
            self.workspace.status.set_busy(False, busy_message)

    # ---------------- beautify on save ----------------
    def is_beautify_on_save_enabled(self) -> bool:
        value = self.preferences.get(BEAUTIFY_ON_SAVE_KEY)
        if value is None:
            return self.on_save_default
        return value == "true"

    def toggle_beautify_on_save(self) -> bool:
        enabled = not self.is_beautify_on_save_enabled()
        self.preferences.set(BEAUTIFY_ON_SAVE_KEY, "true" if enabled else "false")
        if self.beautify_on_save_command is not None:
            self.beautify_on_save_command.set_checked(enabled)
        return enabled

    async def on_document_saved(self, document: Document) -> Optional[BeautifyOutcome]:
        editor = self.workspace.get_active_editor()
        if (not self.is_beautify_on_save_enabled() or editor is None
                or editor.document.file_path != document.file_path):
            return None
        if self.beautify_command is not None and not self.beautify_command.enabled:
            # 命令被禁用：没有可用的美化程序，或另一次美化仍在进行
            logger.debug("Skipping beautify on save for %s", document.file_path)
            return None
        editor.clear_selection()
        return await self._run_beautify_command(editor)

    # ---------------- command wiring ----------------
    def on_active_editor_change(self, current: Editor | None, previous: Editor | None = None) -> None:
        if self.beautify_command is None:
            return
        self.beautify_command.set_enabled(bool(current and self.get_enabled_providers(current)))

    def _refresh_command_state(self) -> None:
        self.on_active_editor_change(self.workspace.get_active_editor())

    async def _run_beautify_command(self, editor: Editor | None = None) -> BeautifyOutcome:
        # 执行期间禁用命令，避免重复触发
        if self.beautify_command is not None:
            self.beautify_command.set_enabled(False)
        try:
            return await self.prettify(editor)
        finally:
            self._refresh_command_state()

    def install(self) -> None:
        """Register the commands and subscribe to workspace events."""
        self.beautify_command = self.commands.register(
            strings.CMD_BEAUTIFY_CODE, EDIT_BEAUTIFY_CODE, self._run_beautify_command)
        self.beautify_on_save_command = self.commands.register(
            strings.CMD_BEAUTIFY_CODE_ON_SAVE, EDIT_BEAUTIFY_CODE_ON_SAVE, self.toggle_beautify_on_save)
        self.beautify_on_save_command.set_checked(self.is_beautify_on_save_enabled())
        self.workspace.on(ACTIVE_EDITOR_CHANGE, self.on_active_editor_change)
        self.workspace.on(DOCUMENT_SAVED, self.on_document_saved)
        self._refresh_command_state()
