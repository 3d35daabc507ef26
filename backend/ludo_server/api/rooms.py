from flask import Blueprint, jsonify

from ludo_server import get_session
from ludo_server.errors import RoomNotFound

rooms = Blueprint('rooms', __name__)


@rooms.errorhandler(RoomNotFound)
def room_not_found(exc):
    return jsonify({'error': exc.message, 'code': exc.code}), 404


@rooms.route('', methods=['GET'])
def list_rooms():
    """Summaries of the rooms currently held in memory."""
    summaries = []
    for room in get_session().registry.rooms():
        with room.lock:
            summaries.append({
                'id': room.id,
                'gameState': room.state.value,
                'players': len(room.players),
                'bots': sum(1 for p in room.players if p.is_bot),
            })
    return jsonify(summaries)


@rooms.route('/<string:room_id>', methods=['GET'])
def get_room(room_id):
    """Full snapshot of one room, the same shape Socket.IO clients receive."""
    with get_session().registry.locked(room_id) as room:
        return jsonify(room.to_dict())
