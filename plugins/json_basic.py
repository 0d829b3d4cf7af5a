# -*- coding: utf-8 -*-
from __future__ import annotations
import json

from core.models import BeautifyResult, ReplaceRange
from core.plugin_base import BeautifyDeclined


def _unique_object(pairs):
    obj = {}
    for key, value in pairs:
        if key in obj:
            raise BeautifyDeclined(f"duplicate key {key!r}")
        obj[key] = value
    return obj


def _exact(convert):
    # 数字必须能原样写回，否则 1e2 / 1.10 之类会被改写
    def parse(token):
        value = convert(token)
        if json.dumps(value) != token:
            raise BeautifyDeclined(f"number {token} would be rewritten")
        return value
    return parse


class JsonBasic:
    name = "json-basic"
    version = "0.1.0"
    priority = 10
    languages = ["json"]

    def __init__(self, indent: int = 2):
        self.indent = indent

    def _pretty(self, text: str) -> str:
        try:
            data = json.loads(text, object_pairs_hook=_unique_object,
                              parse_float=_exact(float), parse_int=_exact(int))
        except ValueError as e:
            raise BeautifyDeclined(f"invalid JSON: {e}") from e
        return json.dumps(data, indent=self.indent, ensure_ascii=False)

    async def beautify(self, editor) -> BeautifyResult:
        sel = editor.get_selection()
        if sel:
            return BeautifyResult(self._pretty(editor.get_selected_text()), ReplaceRange(*sel))
        text = editor.get_text()
        if not text.strip():
            raise BeautifyDeclined("empty document")
        out = self._pretty(text)
        if text.endswith("\n"):
            out += "\n"
        return BeautifyResult(out)


def register_providers(register):
    p = JsonBasic()
    register(p, p.languages, p.priority)
