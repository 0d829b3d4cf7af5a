# -*- coding: utf-8 -*-
from pathlib import Path
try:
    import tomllib  # py3.11+
except Exception:
    import tomli as tomllib

ROOT_DIR = Path(__file__).resolve().parents[1]


def load_config(cfg_path=None):
    cfg_path = Path(cfg_path) if cfg_path else ROOT_DIR / "config.toml"
    if not cfg_path.exists():
        cfg_path = ROOT_DIR / "config_example.toml"
    if not cfg_path.exists():
        return {}
    with open(cfg_path, "rb") as f:
        return tomllib.load(f)


def _resolve(path_str, default):
    p = Path(path_str or default)
    return p if p.is_absolute() else ROOT_DIR / p


CFG = load_config()
PORT = int(CFG.get("port", 5005))
ALLOW_REMOTE = bool(CFG.get("allow_remote", False))
SETTINGS_PATH = _resolve(CFG.get("settings_path"), "config/settings.json")
PLUGINS_DIR = _resolve(CFG.get("plugins_dir"), "plugins")
LANGUAGE_OVERRIDES = {k: list(v) for k, v in CFG.get("languages", {}).items()}
BEAUTIFY = CFG.get("beautify", {"on_save_default": False})
BEAUTIFY_ON_SAVE_DEFAULT = bool(BEAUTIFY.get("on_save_default", False))
