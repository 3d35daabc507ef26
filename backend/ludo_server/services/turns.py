"""Turn order for a room.

A roll of 6 keeps the turn with the same player for another roll-and-move
cycle; ``advance`` refuses to hand the turn on while that is pending.
"""
from typing import Optional

from ludo_server.models import Player, Room
from ludo_server.services.movement import DIE_FACES


def current_player(room: Room) -> Optional[Player]:
    if not room.players:
        return None
    return room.players[room.current_turn]


def record_roll(room: Room, value: int) -> None:
    room.last_roll = value
    room.extra_turn = value == DIE_FACES


def advance(room: Room) -> bool:
    """Pass the turn to the next player. No-op while an extra turn is owed."""
    if room.extra_turn or not room.players:
        return False
    room.current_turn = (room.current_turn + 1) % len(room.players)
    room.last_roll = 0
    room.turn_serial += 1
    return True


def finish_move(room: Room) -> bool:
    """Settle the turn after a move; True when the turn moved on."""
    if room.extra_turn:
        room.last_roll = 0
        return False
    return advance(room)


def forfeit(room: Room) -> bool:
    """Give up the current roll when no token can use it."""
    room.extra_turn = False
    return advance(room)


def reset(room: Room) -> None:
    room.current_turn = 0
    room.last_roll = 0
    room.extra_turn = False
    room.turn_serial += 1


def clamp(room: Room) -> None:
    if room.players:
        room.current_turn %= len(room.players)
    else:
        room.current_turn = 0
