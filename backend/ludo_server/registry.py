"""Room registry and the transport-to-player connection map.

The registry is created once per application in ``create_app`` and handed
to whatever needs room lookup; nothing reaches it through module globals.
"""
import random
import string
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from ludo_server.board import COLOR_ORDER, BoardGeometry, Color
from ludo_server.errors import GameAlreadyStarted, RoomFull, RoomNotFound
from ludo_server.models import GameState, Player, Room, new_player_id
from ludo_server.services import turns

BOT_NAMES = ('Bot Alice', 'Bot Bob', 'Bot Charlie', 'Bot Dave')
ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_room_id(room_id) -> str:
    if not isinstance(room_id, str):
        return ''
    return room_id.strip().upper()


def next_color(room: Room) -> Color:
    used = room.used_colors()
    for color in COLOR_ORDER:
        if color not in used:
            return color
    raise RoomFull()


def default_name(player_id: str) -> str:
    return f'Player {player_id[:4]}'


class RoomRegistry:
    def __init__(self, board: BoardGeometry, max_players: int = 4, code_length: int = 6, rng=None):
        self.board = board
        self.max_players = min(max_players, len(COLOR_ORDER))
        self.code_length = code_length
        self._rng = rng or random.Random()
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._rooms)

    def __contains__(self, room_id):
        return normalize_room_id(room_id) in self._rooms

    def get(self, room_id) -> Optional[Room]:
        return self._rooms.get(normalize_room_id(room_id))

    def rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    @contextmanager
    def locked(self, room_id) -> Iterator[Room]:
        """Hold the room's lock, failing if the room is gone by the time we get it."""
        room = self.get(room_id)
        if room is None:
            raise RoomNotFound()
        with room.lock:
            if self.get(room_id) is not room:
                raise RoomNotFound()
            yield room

    def generate_room_id(self) -> str:
        """Short, typeable, unused room code. Caller holds ``_lock``."""
        while True:
            code = ''.join(self._rng.choices(ROOM_CODE_ALPHABET, k=self.code_length))
            if code not in self._rooms:
                return code

    def create_room(self, creator_name: str = '', player_id: str = None, is_bot: bool = False) -> Tuple[Room, Player]:
        player_id = player_id or new_player_id()
        creator = Player(
            id=player_id,
            name=creator_name or default_name(player_id),
            color=COLOR_ORDER[0],
            is_bot=is_bot,
        )
        with self._lock:
            room = Room(id=self.generate_room_id(), board=self.board, players=[creator])
            self._rooms[room.id] = room
        return room, creator

    def _check_joinable(self, room: Room) -> None:
        if room.state != GameState.WAITING:
            raise GameAlreadyStarted()
        if len(room.players) >= self.max_players:
            raise RoomFull()

    def join_room(self, room_id, player_name: str = '', player_id: str = None) -> Tuple[Room, Player]:
        with self.locked(room_id) as room:
            self._check_joinable(room)
            player_id = player_id or new_player_id()
            player = Player(id=player_id, name=player_name or default_name(player_id), color=next_color(room))
            room.players.append(player)
            return room, player

    def add_bot(self, room_id) -> Tuple[Room, Player]:
        with self.locked(room_id) as room:
            self._check_joinable(room)
            bot = Player(
                id=f'bot-{new_player_id()}',
                name=self._bot_name(room),
                color=next_color(room),
                is_bot=True,
            )
            room.players.append(bot)
            return room, bot

    def _bot_name(self, room: Room) -> str:
        taken = {p.name for p in room.players}
        for name in BOT_NAMES:
            if name not in taken:
                return name
        while True:
            name = f'Bot {self._rng.randint(0, 999)}'
            if name not in taken:
                return name

    def remove_player(self, room_id, player_id: str) -> Optional[Room]:
        """Drop a player. Returns the room, or None once it has been deleted.

        A game that falls below two players is over and the survivor wins.
        With two or more left it carries on; if the leaver held the turn it
        passes to whoever now sits at that seat.
        """
        try:
            with self.locked(room_id) as room:
                index = next((i for i, p in enumerate(room.players) if p.id == player_id), None)
                if index is None:
                    return room
                room.players.pop(index)
                if not room.players:
                    with self._lock:
                        self._rooms.pop(room.id, None)
                    return None
                held_turn = index == room.current_turn
                if index < room.current_turn:
                    room.current_turn -= 1
                turns.clamp(room)
                if room.state == GameState.PLAYING:
                    if len(room.players) < 2:
                        room.state = GameState.FINISHED
                        room.winner = room.players[0]
                        room.turn_serial += 1
                    elif held_turn:
                        room.last_roll = 0
                        room.extra_turn = False
                        room.turn_serial += 1
                return room
        except RoomNotFound:
            return None

    def delete_room(self, room_id) -> None:
        with self._lock:
            self._rooms.pop(normalize_room_id(room_id), None)


class ConnectionMap:
    """Joins transport connection ids to every (room, player) seat they hold."""

    def __init__(self):
        self._by_sid: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def bind(self, sid: str, room_id: str, player_id: str) -> None:
        with self._lock:
            self._by_sid.setdefault(sid, {})[normalize_room_id(room_id)] = player_id

    def player_for(self, sid: str, room_id) -> Optional[str]:
        return self._by_sid.get(sid, {}).get(normalize_room_id(room_id))

    def release(self, sid: str) -> List[Tuple[str, str]]:
        with self._lock:
            return list(self._by_sid.pop(sid, {}).items())

    def owns(self, sid: str, room_id: str, player_id: str) -> bool:
        return player_id is not None and self.player_for(sid, room_id) == player_id
