from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

Vec2 = Tuple[int, int]


def occupancy(cells: Iterable[Vec2], size: int) -> np.ndarray:
    """Boolean (size, size) mask indexed as ``mask[y, x]``; out-of-grid cells are ignored."""
    mask = np.zeros((size, size), dtype=bool)
    for x, y in cells:
        if 0 <= x < size and 0 <= y < size:
            mask[y, x] = True
    return mask


def free_cells(cells: Iterable[Vec2], size: int) -> np.ndarray:
    """(k, 2) array of the (x, y) cells not covered by ``cells``, row-major order."""
    ys, xs = np.nonzero(~occupancy(cells, size))
    return np.stack([xs, ys], axis=1)


def encode_board(snake: Sequence[Vec2], food: Optional[Vec2], size: int) -> np.ndarray:
    """Array view of a snapshot: 3 channels (body, head, food)."""
    state = np.zeros((3, size, size), dtype=np.float32)

    # Channel 0: body (all snake segments)
    state[0] = occupancy(snake, size)

    # Channel 1: head
    if snake:
        state[1] = occupancy(snake[:1], size)

    # Channel 2: food
    if food is not None:
        state[2] = occupancy([food], size)

    return state


def format_board(snake: Sequence[Vec2], food: Optional[Vec2], size: int) -> str:
    """
    Text grid with (0, 0) in the top-left corner:
    . = empty
    H = snake head
    o = snake body
    * = food
    """
    board = [["." for _ in range(size)] for _ in range(size)]

    if food is not None:
        fx, fy = food
        board[fy][fx] = "*"

    for idx, (x, y) in enumerate(snake):
        if 0 <= x < size and 0 <= y < size:
            board[y][x] = "H" if idx == 0 else "o"

    return "\n".join(" ".join(row) for row in board)
