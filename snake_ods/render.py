from __future__ import annotations

from typing import Optional

import pygame

from snake_ods.game import StepResult

BACKGROUND = (20, 20, 20)
GRID_LINE = (30, 30, 30)
HEAD = (0, 200, 0)
BODY = (0, 150, 0)
FOOD = (200, 50, 50)
TEXT = (220, 220, 220)
FLASH = (120, 20, 20)
HUD_HEIGHT = 32


class PygameRenderer:
    """Draws snapshots published by a SnakeGame; never touches game state."""

    def __init__(self, grid_size: int, cell_size: int = 20, flash_frames: int = 4) -> None:
        self.grid_size = grid_size
        self.cell_size = cell_size
        self.flash_frames = flash_frames
        self._flash = 0
        self._last: Optional[StepResult] = None

        pygame.init()
        width_px = grid_size * cell_size
        self._window = pygame.display.set_mode((width_px, width_px + HUD_HEIGHT))
        pygame.display.set_caption("Snake ODS")
        self._font = pygame.font.Font(None, 24)

    def update(self, result: StepResult) -> None:
        self._last = result

    def on_food_eaten(self, result: StepResult) -> None:
        self._flash = self.flash_frames

    def draw(self) -> None:
        if self._last is None:
            return
        result = self._last

        self._window.fill(BACKGROUND)
        board_color = FLASH if self._flash else BACKGROUND
        self._flash = max(self._flash - 1, 0)
        pygame.draw.rect(
            self._window,
            board_color,
            pygame.Rect(0, HUD_HEIGHT, self.grid_size * self.cell_size, self.grid_size * self.cell_size),
        )
        for x in range(self.grid_size):
            for y in range(self.grid_size):
                pygame.draw.rect(self._window, GRID_LINE, self._cell_rect(x, y), 1)

        for i, (x, y) in enumerate(result.snake):
            pygame.draw.rect(self._window, HEAD if i == 0 else BODY, self._cell_rect(x, y))

        if result.food is not None:
            pygame.draw.rect(self._window, FOOD, self._cell_rect(*result.food))

        self._blit_text(f"Score: {result.score}", (8, 8))
        if result.over:
            self._blit_text("Game over! Space to play again", (160, 8))
        elif not result.running:
            self._blit_text("Space to start", (160, 8))

        pygame.display.flip()

    def close(self) -> None:
        pygame.quit()

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            x * self.cell_size,
            HUD_HEIGHT + y * self.cell_size,
            self.cell_size,
            self.cell_size,
        )

    def _blit_text(self, text: str, pos) -> None:
        self._window.blit(self._font.render(text, True, TEXT), pos)
