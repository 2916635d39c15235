import numpy as np

from snake_ods.board import encode_board, format_board, free_cells, occupancy


def test_occupancy_marks_cells_row_major():
    mask = occupancy([(1, 0), (2, 3)], 4)
    assert mask.shape == (4, 4)
    assert mask[0, 1] and mask[3, 2]
    assert mask.sum() == 2


def test_occupancy_ignores_cells_outside_grid():
    assert occupancy([(-1, 0), (0, 4)], 4).sum() == 0


def test_free_cells_is_complement():
    cells = free_cells([(0, 0), (1, 0)], 2)
    assert sorted(map(tuple, cells.tolist())) == [(0, 1), (1, 1)]


def test_encode_board_channels():
    state = encode_board([(2, 2), (1, 2)], (0, 3), 4)
    assert state.shape == (3, 4, 4)
    assert state.dtype == np.float32
    assert state[0].sum() == 2
    assert state[1, 2, 2] == 1.0 and state[1].sum() == 1
    assert state[2, 3, 0] == 1.0


def test_encode_board_without_food():
    assert encode_board([(0, 0)], None, 2)[2].sum() == 0


def test_format_board():
    text = format_board([(1, 1), (0, 1)], (2, 0), 3)
    assert text.splitlines() == [". . *", "o H .", ". . ."]
