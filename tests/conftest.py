import pytest
import sys
from pathlib import Path

# Add project root to sys.path
ROOT_DIR = Path(__file__).parents[1]
sys.path.insert(0, str(ROOT_DIR))

from app_unified import create_app
from core.beautify import BeautificationManager
from core.plugin_base import BeautifyDeclined
from core.settings import JsonPreferences
from core.workspace import Workspace


class FakeProvider:
    """Provider that records its calls and returns a canned answer."""

    def __init__(self, name, result=None, declines=False, calls=None):
        self.name = name
        self.result = result
        self.declines = declines
        self.calls = calls if calls is not None else []

    async def beautify(self, editor):
        self.calls.append(self.name)
        if self.declines:
            raise BeautifyDeclined(self.name)
        return self.result

    def __repr__(self):
        return f"FakeProvider({self.name!r})"


@pytest.fixture
def calls():
    return []


@pytest.fixture
def make_provider(calls):
    def _make(name, result=None, declines=False):
        return FakeProvider(name, result=result, declines=declines, calls=calls)
    return _make


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.json"


@pytest.fixture
def manager(settings_path):
    m = BeautificationManager(Workspace(), JsonPreferences(settings_path))
    m.install()
    return m


@pytest.fixture
def app(settings_path):
    app = create_app(settings_path=settings_path)
    app.config['TESTING'] = True
    return app

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def runner(app):
    return app.test_cli_runner()
