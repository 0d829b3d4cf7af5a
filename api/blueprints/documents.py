from flask import Blueprint, request, jsonify

from core.models import Position
from . import document_json, error, get_manager, run_async, serialized

bp = Blueprint("documents", __name__)


def _editor_or_404(path):
    editor = get_manager().workspace.get_editor(path) if path else None
    if editor is None:
        return None, error("文档未打开", 404)
    return editor, None


@bp.post("/documents")
def open_document():
    data = request.get_json(silent=True) or {}
    path = (data.get("path") or "").strip()
    if not path:
        return error("path required")
    workspace = get_manager().workspace
    editor = workspace.open(path, data.get("text") or "", activate=bool(data.get("activate", True)))
    return jsonify({"ok": True, "document": document_json(editor)})


@bp.get("/documents")
def list_or_get_document():
    path = request.args.get("path")
    workspace = get_manager().workspace
    if not path:
        active = workspace.get_active_editor()
        return jsonify({
            "ok": True,
            "documents": [e.document.file_path for e in workspace.editors()],
            "active": active.document.file_path if active else None,
        })
    editor, resp = _editor_or_404(path)
    if resp:
        return resp
    return jsonify({"ok": True, "document": document_json(editor)})


@bp.post("/documents/active")
def set_active():
    data = request.get_json(silent=True) or {}
    editor, resp = _editor_or_404(data.get("path"))
    if resp:
        return resp
    get_manager().workspace.set_active(editor.document.file_path)
    return jsonify({"ok": True, "document": document_json(editor)})


@bp.post("/documents/close")
def close_document():
    data = request.get_json(silent=True) or {}
    editor, resp = _editor_or_404(data.get("path"))
    if resp:
        return resp
    get_manager().workspace.close(editor.document.file_path)
    return jsonify({"ok": True})


@bp.post("/documents/cursor")
def set_cursor():
    data = request.get_json(silent=True) or {}
    editor, resp = _editor_or_404(data.get("path"))
    if resp:
        return resp
    try:
        editor.set_cursor_pos(int(data.get("line", 0)), int(data.get("ch", 0)))
    except (TypeError, ValueError):
        return error("line/ch must be integers")
    return jsonify({"ok": True, "document": document_json(editor)})


@bp.post("/documents/selection")
def set_selection():
    data = request.get_json(silent=True) or {}
    editor, resp = _editor_or_404(data.get("path"))
    if resp:
        return resp
    start, end = data.get("start"), data.get("end")
    if not start or not end:
        editor.clear_selection()
    else:
        try:
            editor.set_selection(Position.from_dict(start), Position.from_dict(end))
        except (AttributeError, TypeError, ValueError):
            return error("start/end must be {line, ch}")
    return jsonify({"ok": True, "document": document_json(editor)})


@bp.post("/documents/save")
@serialized
def save_document():
    data = request.get_json(silent=True) or {}
    editor, resp = _editor_or_404(data.get("path"))
    if resp:
        return resp
    results = get_manager().workspace.save(editor.document.file_path, data.get("text"))
    outcomes = [run_async(r) for r in results]
    beautified = next((o.value for o in outcomes if o is not None), None)
    return jsonify({"ok": True, "beautify": beautified, "document": document_json(editor)})


@bp.post("/documents/undo")
def undo():
    data = request.get_json(silent=True) or {}
    editor, resp = _editor_or_404(data.get("path"))
    if resp:
        return resp
    undone = editor.undo()
    return jsonify({"ok": True, "undone": undone, "document": document_json(editor)})
