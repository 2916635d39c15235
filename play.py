from __future__ import annotations

import argparse
import logging

import pygame

from snake_ods.board import format_board
from snake_ods.clock import TickClock
from snake_ods.game import GameEvent, SnakeGame
from snake_ods.render import PygameRenderer

logger = logging.getLogger("play")

FPS = 60


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Snake ODS")
    parser.add_argument("--cell-size", type=int, default=20)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--headless-ticks",
        type=int,
        default=0,
        help="Run N ticks without a window, always heading for the food (0 opens the window)",
    )
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args()


def run_headless(game: SnakeGame, ticks: int) -> None:
    game.on(GameEvent.FOOD_EATEN, lambda r: logger.info("Ate food, score %d", r.score))
    game.reset()
    for _ in range(ticks):
        head, food = game.state.head, game.state.food
        if food is not None:
            if food[0] != head[0]:
                game.request_direction("RIGHT" if food[0] > head[0] else "LEFT")
            else:
                game.request_direction("DOWN" if food[1] > head[1] else "UP")
        result = game.tick()
        if result.over:
            break
    snapshot = game.snapshot()
    logger.info("\n%s", format_board(snapshot.snake, snapshot.food, game.config.grid_size))


def run_window(game: SnakeGame, cell_size: int) -> None:
    renderer = PygameRenderer(game.config.grid_size, cell_size=cell_size)
    game.subscribe(renderer.update)
    game.on(GameEvent.FOOD_EATEN, renderer.on_food_eaten)
    renderer.update(game.snapshot())

    keys = {
        pygame.K_UP: "UP",
        pygame.K_w: "UP",
        pygame.K_DOWN: "DOWN",
        pygame.K_s: "DOWN",
        pygame.K_LEFT: "LEFT",
        pygame.K_a: "LEFT",
        pygame.K_RIGHT: "RIGHT",
        pygame.K_d: "RIGHT",
    }
    clock = pygame.time.Clock()
    ticker = TickClock(game)

    playing = True
    while playing:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                playing = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    playing = False
                elif event.key in keys:
                    game.request_direction(keys[event.key])
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    if game.done:
                        game.reset()
                    else:
                        game.start()
                elif event.key == pygame.K_p:
                    game.pause()

        ticker.update(clock.tick(FPS))
        renderer.draw()

    renderer.close()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    game = SnakeGame(seed=args.seed)

    if args.headless_ticks > 0:
        run_headless(game, args.headless_ticks)
    else:
        run_window(game, args.cell_size)

    print(f"Game over! Final score: {game.score}" if game.done else f"Final score: {game.score}")


if __name__ == "__main__":
    main()
