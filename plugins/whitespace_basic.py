# -*- coding: utf-8 -*-
from __future__ import annotations
from pathlib import Path

from core.models import LANGUAGES, BeautifyResult, ReplaceRange
from core.plugin_base import ALL_LANGUAGES

MARKDOWN_EXTENSIONS = {"." + ext for ext in LANGUAGES["markdown"]}


def _strip_line(line: str, keep_hard_breaks: bool) -> str:
    # Markdown 行尾两个以上空格是硬换行
    if keep_hard_breaks and line.endswith("  ") and line.strip():
        return line
    return line.rstrip()


def strip_trailing_whitespace(text: str, keep_hard_breaks: bool = False) -> str:
    return "\n".join(_strip_line(line, keep_hard_breaks) for line in text.split("\n"))


class WhitespaceBasic:
    """Fallback for every language: trailing whitespace and final newline only."""

    name = "whitespace-basic"
    version = "0.1.0"
    priority = -10
    languages = [ALL_LANGUAGES]

    async def beautify(self, editor) -> BeautifyResult:
        keep = Path(editor.file_path).suffix.lower() in MARKDOWN_EXTENSIONS
        sel = editor.get_selection()
        if sel:
            return BeautifyResult(strip_trailing_whitespace(editor.get_selected_text(), keep), ReplaceRange(*sel))
        text = editor.get_text()
        out = strip_trailing_whitespace(text, keep).rstrip("\n")
        return BeautifyResult(out + "\n" if out else "")


def register_providers(register):
    p = WhitespaceBasic()
    register(p, p.languages, p.priority)
