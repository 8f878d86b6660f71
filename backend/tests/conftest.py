import os
import sys
import pytest

# Ensure the backend root (containing the `mokepon` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from mokepon import create_app, socketio
from mokepon.services.party import REGISTRY_EXTENSION
from mokepon.services.party.registry import Registry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    PLAYER_EVICTION_TIMEOUT_SEC = 15
    DEFAULT_ATTACK_SET_SIZE = 5
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'


class ManualScheduler:
    """Eviction scheduler driven by an explicit clock instead of wall time."""

    def __init__(self):
        self.now = 0.0
        self._pending = {}

    def arm(self, key, delay, callback):
        self._pending[key] = (self.now + delay, callback)

    def cancel(self, key):
        self._pending.pop(key, None)

    def is_armed(self, key):
        return key in self._pending

    def advance(self, seconds):
        self.now += seconds
        due = sorted(
            (deadline, key) for key, (deadline, _) in self._pending.items()
            if deadline <= self.now
        )
        for _, key in due:
            entry = self._pending.pop(key, None)
            if entry:
                entry[1]()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def registry(scheduler):
    return Registry(scheduler=scheduler, eviction_timeout=15)


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
        yield application


@pytest.fixture()
def app_registry(flask_app):
    return flask_app.extensions[REGISTRY_EXTENSION]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
