"""
Pytest fixtures for the Pomodoro client tests
"""
import sys
import json
from pathlib import Path
from concurrent.futures import Executor, Future
from unittest.mock import Mock

import pytest
import requests

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from PyQt6.QtCore import QCoreApplication

from src.core.preferences import PreferenceStore
from src.Modules.Pomodoro_module.pomodoro_notifications import SoundPlayer


# ==================== EXECUTORS ====================

class InlineExecutor(Executor):
    """Runs submitted calls immediately on the calling thread"""

    def __init__(self):
        self.submitted = 0
        self.was_shutdown = False

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=True, **kwargs):
        self.was_shutdown = True


class DeferredExecutor(Executor):
    """Queues submitted calls until run_all()"""

    def __init__(self):
        self.pending = []
        self.was_shutdown = False

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_all(self):
        # Calls submitted while running are run as well
        while self.pending:
            future, fn, args, kwargs = self.pending.pop(0)
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as e:
                future.set_exception(e)

    def shutdown(self, wait=True, **kwargs):
        self.was_shutdown = True


# ==================== SOUND ====================

class FakeSoundPlayer(SoundPlayer):
    """Records playback calls; URLs in fail_urls fail inside play()"""

    def __init__(self, fail_urls=()):
        super().__init__()
        self.fail_urls = set(fail_urls)
        self.played = []
        self.stopped = 0
        self.disposed = False

    def play(self, url, volume):
        self.played.append((url, volume))
        if url in self.fail_urls:
            raise FileNotFoundError(url)

    def stop(self):
        self.stopped += 1

    def dispose(self):
        self.disposed = True


class FakePlayerFactory:
    """Player factory handing out FakeSoundPlayer instances"""

    def __init__(self, fail_urls=()):
        self.fail_urls = set(fail_urls)
        self.players = []

    def __call__(self):
        player = FakeSoundPlayer(self.fail_urls)
        self.players.append(player)
        return player

    @property
    def played_urls(self):
        return [url for player in self.players for url, _ in player.played]


# ==================== HTTP ====================

def make_response(status_code=200, data=None, reason="OK"):
    """Builds a requests.Response with a JSON body (empty body for None)"""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = "http://test.local/api"
    response.encoding = "utf-8"
    response._content = b"" if data is None else json.dumps(data).encode("utf-8")
    return response


# ==================== FIXTURES ====================

@pytest.fixture(scope="session")
def qapp():
    """Qt application shared by the tests"""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def preferences(tmp_path):
    """Preference store in a temporary directory"""
    return PreferenceStore(tmp_path / "preferences.json")


@pytest.fixture
def http_session():
    """Real requests.Session with request() replaced by a Mock"""
    session = requests.Session()
    session.request = Mock(return_value=make_response(200, {}))
    return session


@pytest.fixture
def inline_executor():
    return InlineExecutor()


@pytest.fixture
def deferred_executor():
    return DeferredExecutor()


@pytest.fixture
def player_factory():
    return FakePlayerFactory()
