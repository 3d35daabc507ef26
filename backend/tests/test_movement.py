from ludo_server.board import POOL, BoardGeometry
from ludo_server.models import GameState
from ludo_server.registry import RoomRegistry
from ludo_server.services.movement import has_won, movable_tokens, move_token, resolve_move


def _two_player_room(board):
    registry = RoomRegistry(board)
    room, red = registry.create_room('Alice')
    _, green = registry.join_room(room.id, 'Bob')
    room.state = GameState.PLAYING
    return room, red, green


def test_pooled_token_needs_a_six(board):
    room, red, _ = _two_player_room(board)
    assert move_token(room, red, 0, 5) is False
    assert red.tokens[0].position == POOL
    assert move_token(room, red, 0, 6) is True
    assert red.tokens[0].position == 0


def test_token_on_board_moves_by_roll(board):
    room, red, _ = _two_player_room(board)
    red.tokens[1].position = 10
    assert move_token(room, red, 1, 4)
    assert red.tokens[1].position == 14


def test_overshoot_lands_on_the_last_cell(board):
    room, red, _ = _two_player_room(board)
    red.tokens[0].position = 53
    assert move_token(room, red, 0, 6)
    assert red.tokens[0].position == 57
    assert red.tokens[0].finished


def test_finished_token_never_moves_again(board):
    room, red, _ = _two_player_room(board)
    red.tokens[0].position = 57
    red.tokens[0].finished = True
    assert move_token(room, red, 0, 3) is False
    assert red.tokens[0].position == 57


def test_unknown_token_or_bad_roll_is_a_silent_no_op(board):
    room, red, _ = _two_player_room(board)
    red.tokens[0].position = 5
    assert move_token(room, red, 7, 3) is False
    assert move_token(room, red, '0', 3) is False
    assert move_token(room, red, 0, 0) is False
    assert red.tokens[0].position == 5


def test_capture_sends_opponent_back_to_pool(entry_board):
    room, red, green = _two_player_room(entry_board)
    red.tokens[0].position = 10
    green.tokens[2].position = 1  # same cell as red offset 14
    assert move_token(room, red, 0, 4)
    assert red.tokens[0].position == 14
    assert green.tokens[2].position == POOL


def test_resolve_move_reports_capture_without_mutating(entry_board):
    room, red, green = _two_player_room(entry_board)
    red.tokens[0].position = 10
    green.tokens[2].position = 1
    result = resolve_move(room, red, 0, 4)
    assert result.captures == [(green.id, 2)]
    assert red.tokens[0].position == 10
    assert green.tokens[2].position == 1


def test_no_capture_on_a_safe_cell(entry_board):
    room, red, green = _two_player_room(entry_board)
    red.tokens[0].position = 10
    green.tokens[0].position = 0  # green's start cell, red offset 13
    assert move_token(room, red, 0, 3)
    assert green.tokens[0].position == 0


def test_shared_track_is_safe_under_the_overlap_rule(board):
    room, red, green = _two_player_room(board)
    red.tokens[0].position = 10
    green.tokens[2].position = 1
    assert move_token(room, red, 0, 4)
    assert green.tokens[2].position == 1


def test_own_tokens_are_never_captured(entry_board):
    room, red, _ = _two_player_room(entry_board)
    red.tokens[0].position = 10
    red.tokens[1].position = 14
    assert move_token(room, red, 0, 4)
    assert red.tokens[1].position == 14


def test_movable_tokens(board):
    room, red, _ = _two_player_room(board)
    red.tokens[0].position = 57
    red.tokens[0].finished = True
    red.tokens[1].position = 20
    assert [t.index for t in movable_tokens(red, 3)] == [1]
    assert [t.index for t in movable_tokens(red, 6)] == [1, 2, 3]


def test_has_won_needs_all_four_tokens_finished(board):
    room, red, _ = _two_player_room(board)
    for token in red.tokens[:3]:
        token.position, token.finished = 57, True
    assert not has_won(red)
    red.tokens[3].position, red.tokens[3].finished = 57, True
    assert has_won(red)


class NoSafeCells(BoardGeometry):
    def is_safe(self, cell):
        return False


def test_entering_from_the_pool_never_captures():
    room, red, green = _two_player_room(NoSafeCells.classic())
    green.tokens[0].position = 39  # red's entry cell
    result = resolve_move(room, red, 0, 6)
    assert result.to_position == 0
    assert result.captures == []
    assert move_token(room, red, 0, 6)
    assert green.tokens[0].position == 39
