import os
import sys
import pytest

# Ensure the backend root (containing the `ludo_server` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from ludo_server import create_app, socketio
from ludo_server.board import BoardGeometry
from ludo_server.broadcaster import RecordingBroadcaster
from ludo_server.registry import RoomRegistry
from ludo_server.services.dice import LoadedDice
from ludo_server.services.scheduler import TaskScheduler
from ludo_server.services.session import GameSession
from ludo_server.services.strategies import make_strategy


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    ROOM_CODE_LENGTH = 6
    MAX_PLAYERS = 4
    MIN_PLAYERS = 2
    BOT_STRATEGY = 'greedy'
    BOT_SEED = 7
    DICE_SEED = 11
    SAFE_CELL_RULE = 'overlap'
    BOT_EAGER = True


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        c = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(c)
        return c

    yield _make
    for c in clients:
        if c.is_connected():
            c.disconnect()


@pytest.fixture()
def board():
    return BoardGeometry.classic()


@pytest.fixture()
def entry_board():
    # Only path start cells are safe, so captures can happen on the track
    return BoardGeometry.classic(safe_rule='entry')


@pytest.fixture()
def registry(board):
    return RoomRegistry(board)


@pytest.fixture()
def recorder():
    return RecordingBroadcaster()


@pytest.fixture()
def dice():
    return LoadedDice([], seed=5)


@pytest.fixture()
def game(flask_app, registry, recorder, dice):
    """Session wired to an in-memory broadcaster, loaded dice and inline bots."""
    return GameSession(
        registry,
        recorder,
        TaskScheduler(socketio, flask_app, eager=True),
        make_strategy('greedy'),
        dice=dice,
        think_delay=0,
        move_delay=0,
        logger=flask_app.logger,
    )
