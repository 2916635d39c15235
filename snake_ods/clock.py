from __future__ import annotations

import logging
from typing import Optional

from snake_ods.game import SnakeGame

logger = logging.getLogger(__name__)


class TickClock:
    """Fixed-period driver for a :class:`SnakeGame`.

    The host loop reports elapsed milliseconds through :meth:`update`; the
    clock fires ``game.tick()`` once per whole period. Time only accumulates
    while the game is running and restarts from zero after every reset or
    start, so a new or resumed game waits a full period before its first move.
    """

    def __init__(self, game: SnakeGame, period_ms: Optional[int] = None, max_catch_up: int = 5) -> None:
        self.game = game
        self.period_ms = period_ms if period_ms is not None else game.config.speed_ms
        if self.period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {self.period_ms}")
        if max_catch_up < 1:
            raise ValueError(f"max_catch_up must be >= 1, got {max_catch_up}")
        self.max_catch_up = max_catch_up
        self.elapsed_ms = 0.0
        self._generation = game.generation

    def update(self, elapsed_ms: float) -> int:
        if self.game.generation != self._generation:
            self._generation = self.game.generation
            self.elapsed_ms = 0.0

        if not self.game.state.running:
            self.elapsed_ms = 0.0
            return 0

        self.elapsed_ms += max(elapsed_ms, 0.0)
        fired = 0
        while self.elapsed_ms >= self.period_ms and fired < self.max_catch_up:
            self.elapsed_ms -= self.period_ms
            self.game.tick()
            fired += 1
            if not self.game.state.running:
                self.elapsed_ms = 0.0
                break

        if self.elapsed_ms >= self.period_ms:
            logger.debug("Dropping %.0f ms of backlog", self.elapsed_ms)
            self.elapsed_ms %= self.period_ms
        return fired
