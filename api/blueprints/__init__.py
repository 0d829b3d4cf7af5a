import asyncio
import threading
from functools import wraps

from flask import current_app, jsonify

# 同一时间只允许一次美化（含保存时触发的美化）
_beautify_lock = threading.Lock()


def register_blueprints(app):
    from .documents import bp as documents_bp
    from .beautify import bp as beautify_bp

    app.register_blueprint(documents_bp, url_prefix="/api")
    app.register_blueprint(beautify_bp, url_prefix="/api")


def get_manager():
    """The BeautificationManager built by ``create_app``."""
    return current_app.extensions["beautify"]


def run_async(value):
    # 每次调用都新建事件循环；互斥由 serialized 负责
    if asyncio.iscoroutine(value):
        return asyncio.run(value)
    return value


def serialized(view):
    """Answer 409 instead of running ``view`` while another one holds the lock."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not _beautify_lock.acquire(blocking=False):
            return error("正在美化，请稍后再试", 409)
        try:
            return view(*args, **kwargs)
        finally:
            _beautify_lock.release()
    return wrapper


def error(message, status=400):
    return jsonify({"ok": False, "error": message}), status


def document_json(editor):
    sel = editor.get_selection()
    return {
        "path": editor.document.file_path,
        "text": editor.document.text,
        "dirty": editor.document.is_dirty,
        "cursor": editor.get_cursor_pos().to_dict(),
        "selection": [sel[0].to_dict(), sel[1].to_dict()] if sel else None,
        "history": editor.history_size,
    }
