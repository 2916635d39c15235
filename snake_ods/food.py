from __future__ import annotations

import random
from typing import Iterable, Optional, Tuple, Union

from snake_ods.board import free_cells

Vec2 = Tuple[int, int]


class FoodPlacer:
    """Picks food cells uniformly from the cells the snake does not cover.

    Sampling happens over the complement set, so placement finishes in one
    draw however crowded the board is. A full board yields ``None``.
    """

    def __init__(self, grid_size: int, seed: Union[int, random.Random, None] = None) -> None:
        self.grid_size = grid_size
        self.random = seed if isinstance(seed, random.Random) else random.Random(seed)

    def place(self, snake: Iterable[Vec2]) -> Optional[Vec2]:
        available = free_cells(snake, self.grid_size)
        if len(available) == 0:
            return None
        x, y = available[self.random.randrange(len(available))]
        return int(x), int(y)
