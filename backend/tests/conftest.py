import os
import sys

import pytest

# Ensure the backend root (containing the `rosco` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from rosco.config import Config
from rosco.game import service
from rosco.realtime import tasks
from rosco.server import create_app


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    TRUST_PROXY_HEADERS = False
    LOG_LEVEL = 'WARNING'


@pytest.fixture(autouse=True)
def no_background_tasks(monkeypatch):
    # Reveal and clock are driven by calling the service directly.
    monkeypatch.setattr(Config, 'ENABLE_BACKGROUND_TASKS', False)
    service.clear_rooms()
    yield
    tasks.stop_heartbeat()
    service.clear_rooms()


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app, socketio):
    clients = []

    def _make():
        c = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(c)
        return c

    yield _make
    for c in clients:
        try:
            if c.is_connected():
                c.disconnect()
        except Exception:
            pass


@pytest.fixture()
def started_room():
    room = service.create_room('sid-ana', 'Ana')
    service.join_room(room.code, 'sid-beto', 'Beto')
    return room


def current_answer(room):
    g = room.game
    return g.questions[g.letters[g.letter_index]].answer


def fill_results(room, keep_pending):
    """Mark every index except ``keep_pending`` as answered."""
    g = room.game
    for i in range(len(g.letters)):
        if i not in keep_pending:
            g.results[i] = 'correct'
