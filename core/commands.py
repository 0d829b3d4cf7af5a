from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

EDIT_BEAUTIFY_CODE = "edit.beautifyCode"
EDIT_BEAUTIFY_CODE_ON_SAVE = "edit.beautifyCodeOnSave"


class Command:
    def __init__(self, name: str, command_id: str, handler: Callable[..., Any]) -> None:
        self.name = name
        self.id = command_id
        self._handler = handler
        self.enabled = True
        self.checked = False

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = bool(enabled)

    def set_checked(self, checked: bool) -> None:
        self.checked = bool(checked)

    def execute(self, *args: Any) -> Any:
        if not self.enabled:
            logger.debug("Command %s is disabled", self.id)
            return None
        return self._handler(*args)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "enabled": self.enabled, "checked": self.checked}


class CommandManager:
    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}

    def register(self, name: str, command_id: str, handler: Callable[..., Any]) -> Command:
        if command_id in self._commands:
            raise ValueError(f"Command '{command_id}' already registered")
        cmd = Command(name, command_id, handler)
        self._commands[command_id] = cmd
        return cmd

    def get(self, command_id: str) -> Optional[Command]:
        return self._commands.get(command_id)

    def execute(self, command_id: str, *args: Any) -> Any:
        cmd = self._commands.get(command_id)
        if cmd is None:
            raise KeyError(command_id)
        return cmd.execute(*args)

    def all(self) -> list[Command]:
        return list(self._commands.values())
