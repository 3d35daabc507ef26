from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click

from ludo_server.config import Config

socketio = SocketIO(async_mode=None)


def build_session(flask_app, broadcaster, eager=None):
    """Wire a GameSession (registry, dice, bots, scheduler) from app config."""
    from ludo_server.board import BoardGeometry
    from ludo_server.registry import RoomRegistry
    from ludo_server.services.dice import Dice
    from ludo_server.services.scheduler import TaskScheduler
    from ludo_server.services.session import GameSession
    from ludo_server.services.strategies import make_strategy

    cfg = flask_app.config
    if eager is None:
        eager = bool(cfg.get('BOT_EAGER') or cfg.get('TESTING'))
    board = BoardGeometry.classic(safe_rule=cfg.get('SAFE_CELL_RULE', 'overlap'))
    registry = RoomRegistry(
        board,
        max_players=int(cfg.get('MAX_PLAYERS', 4)),
        code_length=int(cfg.get('ROOM_CODE_LENGTH', 6)),
    )
    return GameSession(
        registry,
        broadcaster,
        TaskScheduler(socketio, flask_app, eager=eager),
        make_strategy(cfg.get('BOT_STRATEGY', 'random'), seed=cfg.get('BOT_SEED')),
        dice=Dice(cfg.get('DICE_SEED')),
        min_players=int(cfg.get('MIN_PLAYERS', 2)),
        think_delay=0.0 if eager else float(cfg.get('BOT_THINK_DELAY_SEC', 1.5)),
        move_delay=0.0 if eager else float(cfg.get('BOT_MOVE_DELAY_SEC', 1.0)),
        logger=flask_app.logger,
    )


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS') or '*'
    CORS(flask_app, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # One registry per application, built here and handed to everything that needs it
    from ludo_server.broadcaster import SocketIOBroadcaster
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    flask_app.extensions['ludo'] = build_session(flask_app, SocketIOBroadcaster(socketio, namespace))

    from ludo_server.main import main
    flask_app.register_blueprint(main)

    from ludo_server.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    from ludo_server.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace)

    @click.command('bot-match')
    @click.option('--bots', default=4, show_default=True, type=click.IntRange(2, 4), help='Number of bot players.')
    @click.option('--seed', default=None, type=int, help='Seed for dice and bot choices.')
    @click.option('--strategy', default=None, help='Bot strategy (random or greedy).')
    def bot_match_command(bots, seed, strategy):
        """Plays a bot-only game in-process and prints the result."""
        from ludo_server.broadcaster import RecordingBroadcaster
        from ludo_server.services.dice import Dice
        from ludo_server.services.strategies import make_strategy

        recorder = RecordingBroadcaster()
        session = build_session(flask_app, recorder, eager=True)
        if seed is not None:
            session.dice = Dice(seed)
        if strategy or seed is not None:
            session.bots.strategy = make_strategy(strategy or flask_app.config.get('BOT_STRATEGY', 'random'), seed=seed)

        room, _ = session.registry.create_room('Bot Alice', is_bot=True)
        for _ in range(bots - 1):
            session.add_bot(room.id)
        session.start_game(room.id)

        rolls = recorder.names(room.id).count('diceRolled')
        if room.winner is None:
            click.echo(f'Room {room.id} ended without a winner after {rolls} rolls')
            return
        click.echo(f'Room {room.id}: {room.winner.name} ({room.winner.color.value}) won after {rolls} rolls')

    flask_app.cli.add_command(bot_match_command)

    return flask_app


def get_session():
    from flask import current_app
    return current_app.extensions['ludo']
