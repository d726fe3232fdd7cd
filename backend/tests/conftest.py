import os
import sys
import pytest

# Ensure the backend root (containing the `planning_poker` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from planning_poker import create_app, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    ROOM_MAX_AGE_SEC = 3600
    ROOM_SWEEP_INTERVAL_SEC = 3600
    ROOM_ID_LENGTH = 6
    ROOM_ID_MAX_ATTEMPTS = 16
    COUNTDOWN_TICKS = 3
    # Countdown runs inline in tests; no real waiting between ticks
    COUNTDOWN_TICK_SEC = 0


class FakeDispatcher:
    """Records broadcasts instead of emitting them."""

    def __init__(self):
        self.published = []
        self.attached = []
        self.detached = []
        self.notified = []

    def publish(self, room_id, view):
        self.published.append((room_id, view))

    def attach(self, sid, room_id):
        self.attached.append((sid, room_id))

    def detach(self, sid, room_id):
        self.detached.append((sid, room_id))

    def notify(self, sid, event, payload):
        self.notified.append((sid, event, payload))


class FakeSocketIO:
    def __init__(self):
        self.sleeps = []
        self.background = []

    def sleep(self, seconds):
        self.sleeps.append(seconds)

    def start_background_task(self, target, *args, **kwargs):
        self.background.append((target, args, kwargs))


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def store(flask_app):
    from planning_poker import rooms
    return rooms


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        test_client.get_received('/ws')  # flush 'connected'
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def sio_client(sio_factory):
    return sio_factory()


@pytest.fixture()
def fake_dispatcher():
    return FakeDispatcher()


@pytest.fixture()
def fake_socketio():
    return FakeSocketIO()
