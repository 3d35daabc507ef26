"""Token movement, capture resolution and the win predicate."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ludo_server.board import POOL
from ludo_server.models import Player, Room, Token

DIE_FACES = 6
ENTRY_ROLL = 6


@dataclass
class MoveResult:
    token_index: int
    from_position: int
    to_position: int
    finished: bool = False
    # (player id, token index) pairs sent back to their pool
    captures: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def left_pool(self) -> bool:
        return self.from_position == POOL


def can_move(token: Token, roll: int) -> bool:
    if token.finished or not 1 <= roll <= DIE_FACES:
        return False
    if token.in_pool:
        return roll == ENTRY_ROLL
    return True


def movable_tokens(player: Player, roll: int) -> List[Token]:
    return [t for t in player.tokens if can_move(t, roll)]


def resolve_move(room: Room, player: Player, token_index, roll: int) -> Optional[MoveResult]:
    """Work out what moving a token would do, without touching the room.

    Returns None when the move is not legal. Overshooting the last cell is
    allowed and lands the token on it.
    """
    token = player.token(token_index)
    if token is None or not can_move(token, roll):
        return None

    if token.in_pool:
        # Entering from the pool never captures
        return MoveResult(token.index, POOL, 0)
    if token.position + roll >= room.board.finish:
        return MoveResult(token.index, token.position, room.board.finish, finished=True)
    else:
        result = MoveResult(token.index, token.position, token.position + roll)

    landing = room.board.cell_of(player.color, result.to_position)
    if room.board.is_safe(landing):
        return result
    for other in room.players:
        if other.color == player.color:
            continue
        for victim in other.tokens:
            if victim.in_pool or victim.finished:
                continue
            if room.board.cell_of(other.color, victim.position) == landing:
                result.captures.append((other.id, victim.index))
    return result


def apply_move(room: Room, player: Player, result: MoveResult) -> None:
    token = player.token(result.token_index)
    token.position = result.to_position
    if result.finished:
        token.finished = True
    for victim_owner_id, victim_index in result.captures:
        owner = room.player(victim_owner_id)
        if owner is not None:
            owner.token(victim_index).position = POOL


def move_token(room: Room, player: Player, token_index, roll: int) -> bool:
    """Move one token; True iff the room changed.

    Turn ownership and game state are the caller's business. Unknown or
    finished tokens and illegal rolls are a silent no-op.
    """
    return perform_move(room, player, token_index, roll) is not None


def perform_move(room: Room, player: Player, token_index, roll: int) -> Optional[MoveResult]:
    result = resolve_move(room, player, token_index, roll)
    if result is not None:
        apply_move(room, player, result)
    return result


def has_won(player: Player) -> bool:
    return all(t.finished for t in player.tokens)
