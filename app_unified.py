# -*- coding: utf-8 -*-
import logging

from flask import Flask, abort, jsonify, request

from api.blueprints import register_blueprints
from core.beautify import BeautificationManager
from core.commands import CommandManager
from core.config import (
    ALLOW_REMOTE, BEAUTIFY_ON_SAVE_DEFAULT, LANGUAGE_OVERRIDES, PLUGINS_DIR, PORT, SETTINGS_PATH,
)
from core.language import LanguageManager
from core.plugin_loader import discover_plugins
from core.settings import JsonPreferences
from core.workspace import Workspace

logger = logging.getLogger(__name__)


def build_manager(settings_path=None, plugins_dir=None, load_plugins=True) -> BeautificationManager:
    """Wire the workspace, preferences and commands around one manager."""
    manager = BeautificationManager(
        Workspace(),
        JsonPreferences(settings_path or SETTINGS_PATH),
        CommandManager(),
        LanguageManager(LANGUAGE_OVERRIDES),
        on_save_default=BEAUTIFY_ON_SAVE_DEFAULT,
    )
    manager.install()
    if load_plugins:
        loaded = discover_plugins(manager, plugins_dir or PLUGINS_DIR)
        logger.info("Loaded %d beautify plugin(s): %s", len(loaded), ", ".join(loaded))
    return manager


def create_app(settings_path=None, plugins_dir=None, load_plugins=True) -> Flask:
    app = Flask(__name__)
    app.extensions["beautify"] = build_manager(settings_path, plugins_dir, load_plugins)

    # --------------------------- Blueprint Registration ---------------------------
    # /api/documents/*, /api/beautify/*, /api/commands
    register_blueprints(app)

    # --------------------------- Access Control ---------------------------
    @app.before_request
    def _only_local_for_api():
        """编辑器内容只允许本机访问，可在 config.toml 中设置 allow_remote = true 放开。"""
        if ALLOW_REMOTE or not request.path.startswith("/api"):
            return None
        if (request.remote_addr or "") not in ("127.0.0.1", "::1"):
            abort(403)
        return None

    # --------------------------- 简单健康检查 ---------------------------
    @app.get("/healthz")
    def health():
        return jsonify({"ok": True})

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="127.0.0.1", port=PORT, debug=False)
