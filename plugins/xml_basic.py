# -*- coding: utf-8 -*-
from __future__ import annotations
from xml.dom import Node, minidom
from xml.parsers.expat import ExpatError

from core.models import BeautifyResult
from core.plugin_base import BeautifyDeclined

_STRUCTURAL = (Node.ELEMENT_NODE, Node.COMMENT_NODE, Node.PROCESSING_INSTRUCTION_NODE)


def _is_blank(node) -> bool:
    return node.nodeType == Node.TEXT_NODE and not node.data.strip()


def _strip_indentation(element) -> None:
    """Drop whitespace-only text between child elements, recursively.

    Raises BeautifyDeclined when re-indenting could change the content:
    text mixed with child elements, or ``xml:space="preserve"``.
    """
    if element.getAttribute("xml:space") == "preserve":
        raise BeautifyDeclined(f"<{element.tagName}> preserves whitespace")
    children = list(element.childNodes)
    if any(c.nodeType in _STRUCTURAL for c in children):
        for child in children:
            if _is_blank(child):
                element.removeChild(child)
            elif child.nodeType in (Node.TEXT_NODE, Node.CDATA_SECTION_NODE):
                raise BeautifyDeclined(f"<{element.tagName}> has mixed content")
    for child in element.childNodes:
        if child.nodeType == Node.ELEMENT_NODE:
            _strip_indentation(child)


class XmlBasic:
    name = "xml-basic"
    version = "0.1.0"
    priority = 10
    languages = ["xml", "svg"]

    async def beautify(self, editor) -> BeautifyResult:
        # 只处理整篇文档，片段通常不是合法 XML
        if editor.has_selection():
            raise BeautifyDeclined("selection not supported")
        text = editor.get_text()
        try:
            dom = minidom.parseString(text.encode("utf-8"))
        except ExpatError as e:
            raise BeautifyDeclined(f"invalid XML: {e}") from e
        _strip_indentation(dom.documentElement)
        # 只含文本的元素由 minidom 原样输出，空行不会被改动
        lines = dom.toprettyxml(indent="  ").split("\n")
        source = text.lstrip()
        if source.startswith("<?xml") and "?>" in source:
            lines[0] = source[:source.index("?>") + 2]
        else:
            lines = lines[1:]
        return BeautifyResult("\n".join(lines).rstrip("\n") + "\n")


def register_providers(register):
    p = XmlBasic()
    register(p, p.languages, p.priority)
