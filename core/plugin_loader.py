# -*- coding: utf-8 -*-
from __future__ import annotations
import importlib, logging, pkgutil, sys
from pathlib import Path
from typing import List

from .plugin_base import ProviderRegistry

logger = logging.getLogger(__name__)


def discover_plugins(registry, plugins_dir: str | None = None) -> List[str]:
    """Import every module under ``plugins_dir`` and let it register providers.

    ``registry`` is anything with ``register_beautification_provider`` or a
    bare :class:`ProviderRegistry`. Each plugin module exposes
    ``register_providers(register)``.
    """
    mod_names = []
    base = Path(plugins_dir or Path(__file__).resolve().parents[1] / "plugins")
    if not base.exists():
        return mod_names
    parent = str(base.parent)
    if parent not in sys.path:
        sys.path.insert(0, parent)
    if isinstance(registry, ProviderRegistry):
        register = registry.register
    else:
        register = registry.register_beautification_provider
    pkg_name = base.name
    for _, name, _ in pkgutil.iter_modules([str(base)]):
        full = f"{pkg_name}.{name}"
        try:
            module = importlib.import_module(full)
        except Exception as e:
            logger.warning("[plugin_loader] Failed to load %s: %s", full, e)
            continue
        hook = getattr(module, "register_providers", None)
        if hook is None:
            logger.warning("[plugin_loader] %s has no register_providers hook", full)
            continue
        try:
            hook(register)
        except Exception as e:
            logger.warning("[plugin_loader] %s failed to register providers: %s", full, e)
            continue
        mod_names.append(full)
    return mod_names
