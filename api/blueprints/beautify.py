from flask import Blueprint, request, jsonify

from core.beautify import BeautifyOutcome
from core.commands import EDIT_BEAUTIFY_CODE, EDIT_BEAUTIFY_CODE_ON_SAVE
from . import document_json, error, get_manager, run_async, serialized

bp = Blueprint("beautify", __name__)


@bp.post("/beautify")
@serialized
def beautify():
    data = request.get_json(silent=True) or {}
    manager = get_manager()
    path = data.get("path")
    if path:
        if manager.workspace.get_editor(path) is None:
            return error("文档未打开", 404)
        manager.workspace.set_active(path)
    editor = manager.workspace.get_active_editor()
    if editor is None:
        return error("没有活动的编辑器", 404)
    outcome = run_async(manager.commands.execute(EDIT_BEAUTIFY_CODE))
    if outcome is None:
        return error("该文件类型没有可用的美化程序", 409)
    body = {
        "ok": outcome != BeautifyOutcome.NO_PROVIDER,
        "outcome": outcome.value,
        "document": document_json(editor),
    }
    if outcome == BeautifyOutcome.NO_PROVIDER and editor.messages:
        body["error"] = editor.messages[-1].message
    return jsonify(body)


@bp.get("/beautify/providers")
def providers():
    manager = get_manager()
    language = request.args.get("language")
    path = request.args.get("path")
    if not language:
        if not path:
            return error("language or path required")
        language = manager.languages.get_language_for_path(path).id
    entries = manager.registry.get_entries(language)
    return jsonify({
        "ok": True,
        "language": language,
        "providers": [
            {"name": getattr(e.provider, "name", type(e.provider).__name__), "priority": e.priority}
            for e in entries
        ],
    })


@bp.get("/beautify/on_save")
def on_save_state():
    return jsonify({"ok": True, "enabled": get_manager().is_beautify_on_save_enabled()})


@bp.post("/beautify/on_save/toggle")
def toggle_on_save():
    manager = get_manager()
    enabled = manager.commands.execute(EDIT_BEAUTIFY_CODE_ON_SAVE)
    return jsonify({"ok": True, "enabled": enabled})


@bp.get("/commands")
def commands():
    return jsonify({"ok": True, "commands": [c.to_dict() for c in get_manager().commands.all()]})
