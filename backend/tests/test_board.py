import pytest

from ludo_server.board import (
    CENTER,
    COLOR_ORDER,
    HOME_STRETCH,
    POOL,
    TRACK,
    BoardGeometry,
    Color,
    classic_path,
)


def test_every_path_has_58_cells_ending_in_the_centre(board):
    assert board.finish == 57
    for color in COLOR_ORDER:
        path = board.paths[color]
        assert len(path) == 58
        assert path[-1] == CENTER
        assert len(set(path)) == 58


def test_paths_match_the_classic_layout():
    red = classic_path(Color.RED)
    assert red[:3] == [(6, 1), (6, 2), (6, 3)]
    assert red[50] == (7, 0)
    assert red[51:] == list(HOME_STRETCH[Color.RED])
    assert classic_path(Color.GREEN)[0] == (1, 8)
    assert classic_path(Color.BLUE)[0] == (8, 13)
    assert classic_path(Color.YELLOW)[0] == (13, 6)


def test_cell_of_makes_offsets_comparable_across_colors(board):
    # Green enters the track thirteen cells after red does
    assert board.cell_of(Color.RED, 13) == board.cell_of(Color.GREEN, 0)
    assert board.cell_of(Color.RED, 14) == board.cell_of(Color.GREEN, 1)
    assert board.cell_of(Color.RED, 0) != board.cell_of(Color.GREEN, 0)
    assert board.cell_of(Color.RED, POOL) is None


def test_cell_of_rejects_offsets_past_the_end(board):
    with pytest.raises(ValueError):
        board.cell_of(Color.RED, 58)


def test_overlap_rule_marks_shared_cells_safe(board):
    assert all(board.is_safe(cell) for cell in TRACK)
    # Home stretches belong to one color only
    for color in COLOR_ORDER:
        for cell in HOME_STRETCH[color][:-1]:
            assert not board.is_safe(cell)
    assert not board.is_safe(None)


def test_entry_rule_marks_only_start_cells_safe(entry_board):
    assert entry_board.safe_cells == {(6, 1), (1, 8), (8, 13), (13, 6)}
    assert not entry_board.is_safe(entry_board.cell_of(Color.RED, 14))


def test_unknown_safe_rule_is_rejected():
    with pytest.raises(ValueError):
        BoardGeometry.classic(safe_rule='everywhere')


def test_paths_of_unequal_length_are_rejected():
    with pytest.raises(ValueError):
        BoardGeometry({Color.RED: [(0, 0), (0, 1)], Color.GREEN: [(0, 0)]}, {})


def test_pooled_tokens_are_drawn_on_their_home_slot(board):
    assert board.token_cell(Color.BLUE, 2, POOL) == (12, 10)
    assert board.token_cell(Color.BLUE, 2, 0) == (8, 13)
