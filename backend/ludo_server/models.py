import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ludo_server.board import POOL, BoardGeometry, Color

TOKENS_PER_PLAYER = 4


class GameState(str, Enum):
    WAITING = 'waiting'
    PLAYING = 'playing'
    FINISHED = 'finished'


def new_player_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Token:
    index: int
    position: int = POOL
    finished: bool = False

    @property
    def in_pool(self) -> bool:
        return self.position == POOL

    def to_dict(self, board: BoardGeometry, color: Color):
        return {
            'id': self.index,
            'position': self.position,
            'isHome': self.finished,
            'isSafe': (not self.in_pool) and board.is_safe(board.cell_of(color, self.position)),
        }


def initial_tokens() -> List[Token]:
    return [Token(index=i) for i in range(TOKENS_PER_PLAYER)]


@dataclass
class Player:
    id: str
    name: str
    color: Color
    is_bot: bool = False
    tokens: List[Token] = field(default_factory=initial_tokens)

    def token(self, index) -> Optional[Token]:
        for token in self.tokens:
            if token.index == index:
                return token
        return None

    def to_dict(self, board: BoardGeometry):
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color.value,
            'isBot': self.is_bot,
            'tokens': [t.to_dict(board, self.color) for t in self.tokens],
        }


@dataclass(eq=False)
class Room:
    """One game session. Player list order is join order and turn order."""

    id: str
    board: BoardGeometry
    players: List[Player] = field(default_factory=list)
    current_turn: int = 0
    state: GameState = GameState.WAITING
    winner: Optional[Player] = None
    last_roll: int = 0
    extra_turn: bool = False
    # Bumped on start and on every turn hand-off; stale bot tasks compare against it
    turn_serial: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def player(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def used_colors(self):
        return {p.color for p in self.players}

    def to_dict(self):
        return {
            'id': self.id,
            'players': [p.to_dict(self.board) for p in self.players],
            'currentTurn': self.current_turn,
            'gameState': self.state.value,
            'winner': self.winner.to_dict(self.board) if self.winner else None,
            'lastDiceRoll': self.last_roll,
            'canRollAgain': self.extra_turn,
            'turnSerial': self.turn_serial,
        }
