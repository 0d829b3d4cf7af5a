import asyncio
import json
import logging

import pytest

from app_unified import create_app
from core.beautify import BeautifyOutcome
from core.config import PLUGINS_DIR
from core.models import Position
from core.plugin_base import BeautifyDeclined, ProviderRegistry
from core.plugin_loader import discover_plugins
from plugins.json_basic import JsonBasic
from plugins.xml_basic import XmlBasic


def _load(manager):
    return discover_plugins(manager, str(PLUGINS_DIR))


def test_bundled_plugins_are_discovered(manager):
    loaded = _load(manager)
    assert {"plugins.json_basic", "plugins.xml_basic", "plugins.whitespace_basic"} <= set(loaded)
    names = [getattr(p, "name", "") for p in manager.registry.get_candidates("json")]
    assert names == ["json-basic", "whitespace-basic"]


def test_discover_into_bare_registry():
    reg = ProviderRegistry()
    discover_plugins(reg, str(PLUGINS_DIR))
    assert [p.name for p in reg.get_candidates("svg")] == ["xml-basic", "whitespace-basic"]


def test_missing_plugins_dir(manager, tmp_path):
    assert discover_plugins(manager, str(tmp_path / "nope")) == []


def test_broken_plugin_is_skipped(manager, tmp_path, caplog):
    base = tmp_path / "extra_beautifiers"
    base.mkdir()
    (base / "broken.py").write_text("raise ImportError('missing dependency')\n", encoding="utf-8")
    (base / "no_hook.py").write_text("X = 1\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="core.plugin_loader"):
        loaded = discover_plugins(manager, str(base))
    assert loaded == []
    messages = " ".join(r.getMessage() for r in caplog.records)
    assert "extra_beautifiers.broken" in messages
    assert "extra_beautifiers.no_hook" in messages


def test_plugin_whose_hook_raises_is_skipped(manager, tmp_path, caplog):
    base = tmp_path / "hook_beautifiers"
    base.mkdir()
    (base / "angry.py").write_text(
        "def register_providers(register):\n    raise RuntimeError('bad config')\n", encoding="utf-8")
    (base / "fine.py").write_text(
        "class P:\n"
        "    name = 'fine'\n"
        "    async def beautify(self, editor):\n"
        "        return None\n"
        "def register_providers(register):\n"
        "    register(P(), ['json'], 0)\n",
        encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="core.plugin_loader"):
        loaded = discover_plugins(manager, str(base))
    assert loaded == ["hook_beautifiers.fine"]
    assert "hook_beautifiers.angry" in " ".join(r.getMessage() for r in caplog.records)
    assert [p.name for p in manager.registry.get_candidates("json")] == ["fine"]


def test_create_app_survives_raising_hook(settings_path, tmp_path):
    base = tmp_path / "app_beautifiers"
    base.mkdir()
    (base / "angry.py").write_text(
        "def register_providers(register):\n    raise RuntimeError('bad config')\n", encoding="utf-8")
    app = create_app(settings_path=settings_path, plugins_dir=str(base))
    assert app.extensions["beautify"].registry.get_candidates("json") == []


def test_json_whole_document(manager):
    _load(manager)
    editor = manager.workspace.open("conf.json", '{"a":1,"b":[1,2]}\n')
    assert asyncio.run(manager.prettify(editor)) == BeautifyOutcome.APPLIED
    assert editor.get_text() == json.dumps({"a": 1, "b": [1, 2]}, indent=2) + "\n"


def test_json_selection_only(manager):
    _load(manager)
    text = 'x = {"a":1}; // not json'
    editor = manager.workspace.open("conf.json", text)
    editor.set_selection(Position(0, 4), Position(0, 11))
    asyncio.run(manager.prettify(editor))
    assert editor.get_text() == 'x = {\n  "a": 1\n}; // not json'


def test_invalid_json_falls_back_to_whitespace(manager):
    _load(manager)
    editor = manager.workspace.open("conf.json", "{broken   \n")
    assert asyncio.run(manager.prettify(editor)) == BeautifyOutcome.APPLIED
    assert editor.get_text() == "{broken\n"


def test_xml_pretty_print(manager):
    _load(manager)
    editor = manager.workspace.open("a.xml", "<root><item>1</item><item/></root>")
    asyncio.run(manager.prettify(editor))
    assert editor.get_text() == "<root>\n  <item>1</item>\n  <item/>\n</root>\n"


def test_xml_keeps_declaration(manager):
    _load(manager)
    editor = manager.workspace.open("a.xml", '<?xml version="1.0"?><root/>')
    asyncio.run(manager.prettify(editor))
    assert editor.get_text().startswith("<?xml")


def test_whitespace_clean_buffer_is_unchanged(manager):
    _load(manager)
    editor = manager.workspace.open("notes.txt", "clean\n")
    assert asyncio.run(manager.prettify(editor)) == BeautifyOutcome.UNCHANGED
    assert editor.history_size == 0


def test_whitespace_selection(manager):
    _load(manager)
    editor = manager.workspace.open("notes.txt", "a  \nb  \nc  ")
    editor.set_selection(Position(0, 0), Position(1, 3))
    asyncio.run(manager.prettify(editor))
    assert editor.get_text() == "a\nb\nc  "


def test_json_duplicate_keys_decline(manager):
    editor = manager.workspace.open("dup.json", '{"a": 1, "a": 2}')
    with pytest.raises(BeautifyDeclined):
        asyncio.run(JsonBasic().beautify(editor))


def test_json_number_literals_that_would_change_decline(manager):
    for i, literal in enumerate(("1e2", "1.10", "-0")):
        editor = manager.workspace.open(f"n{i}.json", '{"n": %s}' % literal)
        with pytest.raises(BeautifyDeclined):
            asyncio.run(JsonBasic().beautify(editor))


def test_json_plain_numbers_survive(manager):
    editor = manager.workspace.open("n.json", '{"i":-3,"f":0.25,"big":12345678901234567890}')
    result = asyncio.run(JsonBasic().beautify(editor))
    assert result.changed_text == '{\n  "i": -3,\n  "f": 0.25,\n  "big": 12345678901234567890\n}'


def test_json_duplicate_keys_left_alone_end_to_end(manager):
    _load(manager)
    editor = manager.workspace.open("dup.json", '{"a": 1, "a": 2}\n')
    assert asyncio.run(manager.prettify(editor)) == BeautifyOutcome.UNCHANGED
    assert editor.get_text() == '{"a": 1, "a": 2}\n'


def test_xml_text_only_element_kept_verbatim(manager):
    _load(manager)
    source = "<doc><pre>line one\n\n  line three</pre><p/></doc>"
    editor = manager.workspace.open("a.xml", source)
    asyncio.run(manager.prettify(editor))
    assert editor.get_text() == "<doc>\n  <pre>line one\n\n  line three</pre>\n  <p/>\n</doc>\n"


def test_xml_mixed_content_declines(manager):
    editor = manager.workspace.open("a.xml", "<p>Hello <b>world</b>!</p>")
    with pytest.raises(BeautifyDeclined):
        asyncio.run(XmlBasic().beautify(editor))


def test_xml_space_preserve_declines(manager):
    editor = manager.workspace.open("a.xml", '<r><code xml:space="preserve"> x </code></r>')
    with pytest.raises(BeautifyDeclined):
        asyncio.run(XmlBasic().beautify(editor))


def test_xml_already_indented_is_unchanged(manager):
    _load(manager)
    editor = manager.workspace.open("a.xml", "<root>\n  <a>1</a>\n</root>\n")
    assert asyncio.run(manager.prettify(editor)) == BeautifyOutcome.UNCHANGED


def test_xml_keeps_original_declaration(manager):
    _load(manager)
    editor = manager.workspace.open("a.xml", '<?xml version="1.0" encoding="UTF-8"?>\n<root><a/></root>')
    asyncio.run(manager.prettify(editor))
    assert editor.get_text() == '<?xml version="1.0" encoding="UTF-8"?>\n<root>\n  <a/>\n</root>\n'


def test_markdown_hard_breaks_are_kept(manager):
    _load(manager)
    editor = manager.workspace.open("README.md", "first line  \nsecond \nthird\t\n\n")
    asyncio.run(manager.prettify(editor))
    assert editor.get_text() == "first line  \nsecond\nthird\n"


def test_hard_break_spaces_stripped_outside_markdown(manager):
    _load(manager)
    editor = manager.workspace.open("notes.txt", "first line  \nsecond\n")
    asyncio.run(manager.prettify(editor))
    assert editor.get_text() == "first line\nsecond\n"
