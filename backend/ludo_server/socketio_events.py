from flask import current_app, request
from flask_socketio import emit

from ludo_server import get_session, socketio
from ludo_server.errors import GameError, InvalidMove, RoomNotFound


def _get_sid() -> str:
    return request.sid  # type: ignore[attr-defined]


def _report(exc: GameError) -> None:
    # Errors go back to the issuing connection only
    current_app.logger.debug(f"[client-error] sid={_get_sid()} code={exc.code} message={exc.message}")
    emit('error', exc.to_dict())


def _room_id(data) -> str:
    room_id = (data or {}).get('roomId')
    if not room_id:
        raise RoomNotFound('roomId is required')
    return room_id


def _acting_player(data, room_id) -> str:
    """Player the command is for: the payload's playerId, else this connection's seat in the room."""
    player_id = (data or {}).get('playerId')
    if player_id:
        return player_id
    return get_session().connections.player_for(_get_sid(), room_id) or ''


def _token_index(data) -> int:
    raw = (data or {}).get('tokenId')
    if isinstance(raw, bool):
        raise InvalidMove('tokenId must be an integer')
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidMove('tokenId must be an integer')


def handle_connect():
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(*args):
    current_app.logger.info(f"[disconnect] sid={_get_sid()}")
    get_session().disconnect(_get_sid())


def handle_create_room(data):
    name = ((data or {}).get('playerName') or '').strip()
    get_session().create_room(_get_sid(), name)


def handle_join_room(data):
    try:
        name = ((data or {}).get('playerName') or '').strip()
        get_session().join_room(_get_sid(), _room_id(data), name)
    except GameError as exc:
        _report(exc)


def handle_add_bot(data):
    try:
        get_session().add_bot(_room_id(data))
    except GameError as exc:
        _report(exc)


def handle_start_game(data):
    try:
        room_id = _room_id(data)
        requested_by = get_session().connections.player_for(_get_sid(), room_id) or ''
        get_session().start_game(room_id, requested_by=requested_by)
    except GameError as exc:
        _report(exc)


def handle_roll_dice(data):
    try:
        room_id = _room_id(data)
        get_session().roll_dice(room_id, _acting_player(data, room_id), sid=_get_sid())
    except GameError as exc:
        _report(exc)


def handle_move_token(data):
    try:
        room_id = _room_id(data)
        get_session().move_token(room_id, _acting_player(data, room_id), _token_index(data), sid=_get_sid())
    except GameError as exc:
        _report(exc)


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the game's Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('addBot', handle_add_bot, namespace=namespace)
    socketio.on_event('startGame', handle_start_game, namespace=namespace)
    socketio.on_event('rollDice', handle_roll_dice, namespace=namespace)
    socketio.on_event('moveToken', handle_move_token, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
