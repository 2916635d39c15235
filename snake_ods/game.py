from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Tuple

from snake_ods.food import FoodPlacer

logger = logging.getLogger(__name__)

Vec2 = Tuple[int, int]

GRID_SIZE = 20
GAME_SPEED = 200  # ms per tick
INITIAL_SNAKE_POSITION: Tuple[Vec2, ...] = ((10, 10),)
INITIAL_FOOD_POSITION: Vec2 = (15, 15)
INITIAL_DIRECTION = "RIGHT"
FOOD_REWARD = 10


def add_pos(a: Vec2, b: Vec2) -> Vec2:
    return a[0] + b[0], a[1] + b[1]


def opposite(a: Vec2, b: Vec2) -> bool:
    return a[0] == -b[0] and a[1] == -b[1]


DIRECTIONS = {
    "UP": (0, -1),
    "RIGHT": (1, 0),
    "DOWN": (0, 1),
    "LEFT": (-1, 0),
}


def is_direction(value: object) -> bool:
    return isinstance(value, str) and value in DIRECTIONS


def in_bounds(pos: Vec2, size: int) -> bool:
    x, y = pos
    return 0 <= x < size and 0 <= y < size


class GameEvent(str, Enum):
    FOOD_EATEN = "food_eaten"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameConfig:
    grid_size: int = GRID_SIZE
    speed_ms: int = GAME_SPEED
    initial_snake: Tuple[Vec2, ...] = INITIAL_SNAKE_POSITION
    initial_food: Vec2 = INITIAL_FOOD_POSITION
    initial_direction: str = INITIAL_DIRECTION
    food_reward: int = FOOD_REWARD

    def __post_init__(self) -> None:
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.speed_ms <= 0:
            raise ValueError(f"speed_ms must be positive, got {self.speed_ms}")
        if self.food_reward < 0:
            raise ValueError(f"food_reward must be >= 0, got {self.food_reward}")
        if not is_direction(self.initial_direction):
            raise ValueError(f"Unknown initial direction: {self.initial_direction!r}")
        snake = tuple(tuple(cell) for cell in self.initial_snake)
        if not snake:
            raise ValueError("initial_snake must contain at least one cell")
        if len(set(snake)) != len(snake):
            raise ValueError("initial_snake contains duplicate cells")
        for cell in snake:
            if not in_bounds(cell, self.grid_size):
                raise ValueError(f"initial_snake cell {cell} is outside the grid")
        if not in_bounds(self.initial_food, self.grid_size):
            raise ValueError(f"initial_food {self.initial_food} is outside the grid")
        if tuple(self.initial_food) in snake:
            raise ValueError("initial_food overlaps the initial snake")
        object.__setattr__(self, "initial_snake", snake)
        object.__setattr__(self, "initial_food", tuple(self.initial_food))


@dataclass(frozen=True)
class GameState:
    """Everything the core knows about one game.

    ``direction`` is the committed direction (applied on the latest tick),
    ``pending_direction`` the one the next tick will apply.
    """

    snake: Tuple[Vec2, ...]
    food: Optional[Vec2]
    direction: str
    pending_direction: str
    running: bool = False
    over: bool = False
    score: int = 0

    @property
    def head(self) -> Vec2:
        return self.snake[0]

    @property
    def phase(self) -> str:
        if self.over:
            return "over"
        return "running" if self.running else "idle"


@dataclass(frozen=True)
class StepResult:
    snake: List[Vec2]
    food: Optional[Vec2]
    direction: str
    pending_direction: str
    score: int
    running: bool
    over: bool
    ate_food: bool = False
    collision: bool = False

    @property
    def events(self) -> Tuple[GameEvent, ...]:
        events = []
        if self.ate_food:
            events.append(GameEvent.FOOD_EATEN)
        if self.collision:
            events.append(GameEvent.GAME_OVER)
        return tuple(events)


def initial_state(config: GameConfig) -> GameState:
    return GameState(
        snake=config.initial_snake,
        food=config.initial_food,
        direction=config.initial_direction,
        pending_direction=config.initial_direction,
    )


def reset_state(config: GameConfig) -> GameState:
    return replace(initial_state(config), running=True)


def start_state(state: GameState) -> GameState:
    if state.phase != "idle":
        return state
    return replace(state, running=True)


def pause_state(state: GameState) -> GameState:
    if state.phase != "running":
        return state
    return replace(state, running=False)


def request_direction(state: GameState, new_direction: object) -> GameState:
    """Return ``state`` with ``new_direction`` pending, or unchanged if rejected.

    The reversal rule compares against the committed direction, so two quick
    turns inside one tick (e.g. UP then LEFT while moving RIGHT) cannot fold the
    snake back onto its neck.
    """
    if not is_direction(new_direction):
        return state
    if opposite(DIRECTIONS[new_direction], DIRECTIONS[state.direction]):
        return state
    if new_direction == state.pending_direction:
        return state
    return replace(state, pending_direction=new_direction)


def _is_collision(state: GameState, pos: Vec2, size: int) -> bool:
    if not in_bounds(pos, size):
        return True
    # Checked against the pre-move body: the tail still counts as occupied.
    return pos in state.snake


def advance(
    state: GameState, placer: FoodPlacer, config: GameConfig
) -> Tuple[GameState, Tuple[GameEvent, ...]]:
    """Run one tick of the step algorithm.

    Returns the next state and the events the tick produced. A state that is
    not running (idle or over) comes back unchanged with no events.
    """
    if not state.running or state.over:
        return state, ()

    direction = state.pending_direction
    new_head = add_pos(state.head, DIRECTIONS[direction])

    if _is_collision(state, new_head, config.grid_size):
        over = replace(state, direction=direction, running=False, over=True)
        return over, (GameEvent.GAME_OVER,)

    snake = (new_head,) + state.snake
    if new_head == state.food:
        food = placer.place(snake)
        moved = replace(
            state,
            snake=snake,
            food=food,
            direction=direction,
            score=state.score + config.food_reward,
        )
        return moved, (GameEvent.FOOD_EATEN,)

    return replace(state, snake=snake[:-1], direction=direction), ()


Listener = Callable[[StepResult], None]


class SnakeGame:
    """Owns a game's state and publishes every change to its listeners."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        placer: Optional[FoodPlacer] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.placer = placer or FoodPlacer(self.config.grid_size, seed=seed)
        self.state = initial_state(self.config)
        # Bumped by reset and start; a clock drops any time it counted before.
        self.generation = 0

        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._event_listeners: Dict[GameEvent, List[Listener]] = {
            event: [] for event in GameEvent
        }
        self._pending: Deque[Tuple[Tuple[GameEvent, ...], StepResult]] = deque()
        self._notifying = False

    @property
    def done(self) -> bool:
        return self.state.over

    @property
    def score(self) -> int:
        return self.state.score

    def snapshot(self) -> StepResult:
        return self._result(self.state, ())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._remove(self._listeners, listener)

    def on(self, event: GameEvent, listener: Listener) -> Callable[[], None]:
        listeners = self._event_listeners[GameEvent(event)]
        listeners.append(listener)
        return lambda: self._remove(listeners, listener)

    def reset(self) -> StepResult:
        with self._lock:
            self.state = reset_state(self.config)
            self.generation += 1
            logger.info("Game reset")
            return self._publish(())

    def start(self) -> StepResult:
        with self._lock:
            started = start_state(self.state)
            if started is self.state:
                logger.debug("Start ignored in phase %s", self.state.phase)
                return self.snapshot()
            self.state = started
            self.generation += 1
            logger.info("Game started")
            return self._publish(())

    def pause(self) -> StepResult:
        with self._lock:
            paused = pause_state(self.state)
            if paused is self.state:
                return self.snapshot()
            self.state = paused
            logger.info("Game paused at score %d", self.state.score)
            return self._publish(())

    def request_direction(self, new_direction: object) -> bool:
        with self._lock:
            if not is_direction(new_direction) or opposite(
                DIRECTIONS[new_direction], DIRECTIONS[self.state.direction]
            ):
                logger.debug(
                    "Direction %r rejected (committed %s)", new_direction, self.state.direction
                )
                return False
            self.state = request_direction(self.state, new_direction)
            return True

    def tick(self) -> StepResult:
        with self._lock:
            if not self.state.running or self.state.over:
                return self.snapshot()
            self.state, events = advance(self.state, self.placer, self.config)
            if GameEvent.GAME_OVER in events:
                logger.info("Game over at %s with score %d", self.state.head, self.state.score)
            elif GameEvent.FOOD_EATEN in events:
                logger.debug("Food eaten, score %d, next food %s", self.state.score, self.state.food)
                if self.state.food is None:
                    logger.warning("Board is full; no free cell left for food")
            return self._publish(events)

    def _publish(self, events: Tuple[GameEvent, ...]) -> StepResult:
        """Queue a snapshot for listeners and deliver the queue in order.

        A listener that calls back into the game only queues its snapshot;
        the outermost call delivers it once the current one has reached
        every listener.
        """
        result = self._result(self.state, events)
        self._pending.append((events, result))
        if self._notifying:
            return result
        self._notifying = True
        try:
            while self._pending:
                queued_events, queued = self._pending.popleft()
                for event in queued_events:
                    self._notify(self._event_listeners[event], queued)
                self._notify(self._listeners, queued)
        finally:
            self._notifying = False
        return result

    @staticmethod
    def _notify(listeners: List[Listener], result: StepResult) -> None:
        for listener in list(listeners):
            try:
                listener(result)
            except Exception:
                logger.exception("Listener %r failed", listener)

    @staticmethod
    def _remove(listeners: List[Listener], listener: Listener) -> None:
        if listener in listeners:
            listeners.remove(listener)

    @staticmethod
    def _result(state: GameState, events: Tuple[GameEvent, ...]) -> StepResult:
        return StepResult(
            snake=list(state.snake),
            food=state.food,
            direction=state.direction,
            pending_direction=state.pending_direction,
            score=state.score,
            running=state.running,
            over=state.over,
            ate_food=GameEvent.FOOD_EATEN in events,
            collision=GameEvent.GAME_OVER in events,
        )
