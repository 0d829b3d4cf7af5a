from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

# 内置语言表：language id -> 扩展名
LANGUAGES = {
    "javascript": ["js", "mjs", "cjs", "jsx"],
    "typescript": ["ts", "tsx"],
    "json": ["json"],
    "html": ["html", "htm"],
    "css": ["css"],
    "scss": ["scss"],
    "less": ["less"],
    "xml": ["xml", "xsd", "xsl"],
    "svg": ["svg"],
    "markdown": ["md", "markdown"],
    "yaml": ["yml", "yaml"],
    "python": ["py", "pyw"],
    "php": ["php"],
    "text": ["txt", "log"],
}

UNKNOWN_LANGUAGE = "unknown"


@dataclass(frozen=True)
class Position:
    line: int = 0
    ch: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Position":
        return cls(int(data.get("line", 0)), int(data.get("ch", 0)))

    def to_dict(self) -> dict:
        return {"line": self.line, "ch": self.ch}


@dataclass(frozen=True)
class ReplaceRange:
    replace_start: Position
    replace_end: Position

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReplaceRange":
        start = data.get("replaceStart", data.get("replace_start")) or {}
        end = data.get("replaceEnd", data.get("replace_end")) or {}
        return cls(_as_position(start), _as_position(end))


@dataclass
class BeautifyResult:
    """What a provider hands back from ``beautify``.

    ``changed_text`` is the whole new document when ``ranges`` is ``None``,
    otherwise only the text for ``[replace_start, replace_end)``. An empty
    ``changed_text`` means there is nothing to apply.
    """

    changed_text: Optional[str] = None
    ranges: Optional[ReplaceRange] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BeautifyResult":
        text = data.get("changedText", data.get("changed_text"))
        ranges = data.get("ranges")
        if ranges is not None and not isinstance(ranges, ReplaceRange):
            ranges = ReplaceRange.from_dict(ranges)
        return cls(changed_text=text, ranges=ranges)


@dataclass(frozen=True)
class Language:
    id: str
    name: str = ""
    extensions: Tuple[str, ...] = field(default_factory=tuple)


def _as_position(value: Any) -> Position:
    if isinstance(value, Position):
        return value
    return Position.from_dict(value)
