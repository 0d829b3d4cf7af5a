from __future__ import annotations
"""Beautify a file from the command line with the installed plugins.

The file is opened in an in-memory editor, the registered providers are
asked in priority order and the result is printed (or written back with
``--write``). Exits with status 1 when no provider could beautify it.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# allow running as a stand-alone script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.beautify import BeautificationManager, BeautifyOutcome
from core.config import LANGUAGE_OVERRIDES, PLUGINS_DIR
from core.language import LanguageManager
from core.plugin_loader import discover_plugins
from core.workspace import Workspace


class _NoPreferences:
    def get(self, key):
        return None

    def set(self, key, value):
        pass


def beautify_path(path: Path, plugins_dir: Path) -> tuple[BeautifyOutcome, str]:
    manager = BeautificationManager(Workspace(), _NoPreferences(), languages=LanguageManager(LANGUAGE_OVERRIDES))
    discover_plugins(manager, str(plugins_dir))
    editor = manager.workspace.open(str(path), path.read_text(encoding="utf-8"))
    outcome = asyncio.run(manager.prettify(editor))
    return outcome, editor.get_text()


def main() -> None:
    parser = argparse.ArgumentParser(description="Beautify a source file")
    parser.add_argument("path", type=Path, help="File to beautify")
    parser.add_argument("--write", action="store_true", help="Write the result back to the file")
    parser.add_argument("--plugins-dir", type=Path, default=PLUGINS_DIR, help="Directory of beautify plugins")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    outcome, text = beautify_path(args.path, args.plugins_dir)
    if outcome == BeautifyOutcome.NO_PROVIDER:
        print(f"No beautifier could handle {args.path}", file=sys.stderr)
        sys.exit(1)
    if args.write:
        if outcome == BeautifyOutcome.APPLIED:
            args.path.write_text(text, encoding="utf-8")
        print(f"{args.path}: {outcome.value}")
    else:
        sys.stdout.write(text)


if __name__ == "__main__":
    main()
