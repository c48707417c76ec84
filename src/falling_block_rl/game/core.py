from __future__ import annotations

import logging
import math
import random
import threading
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from fractions import Fraction
from typing import Optional, Tuple

import numpy as np

from .grid import Coordinate, GameGrid
from .pieces import Piece, TetrominoType
from .randomizer import BagRandomizer
from .rotation import try_rotate
from .rules import ScoringRules
from .timer import ManualTickTimer, TickTimer


logger = logging.getLogger(__name__)


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    HARD_DROP = 3
    ROTATE_CW = 4
    ROTATE_CCW = 5
    HOLD = 6
    TOGGLE_PAUSE = 7
    START_OR_RESTART = 8


class PlayState(str, Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "gameover"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 23
    hidden_rows: int = 3
    spawn_y: int = 3
    preview_size: int = 3
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width < 4:
            raise ValueError(f"width must be at least 4, got {self.width}")
        if self.height <= self.spawn_y or self.height <= self.hidden_rows:
            raise ValueError(
                f"height {self.height} leaves no room below spawn row {self.spawn_y} "
                f"and {self.hidden_rows} hidden rows"
            )

    @property
    def spawn_x(self) -> int:
        return self.width // 2 - 1


@dataclass(frozen=True)
class LockResult:
    lines_cleared: int
    score_delta: int
    game_over: bool


@dataclass
class GameState:
    grid: GameGrid
    randomizer: BagRandomizer
    active: Optional[Piece] = None
    held: Optional[TetrominoType] = None
    held_this_turn: bool = False
    score: int = 0
    level: Fraction = field(default_factory=Fraction)
    tick_interval_ms: int = 1000
    play_state: PlayState = PlayState.WAITING
    lines_cleared_total: int = 0
    pieces_locked: int = 0
    last_lock: Optional[LockResult] = None


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a game for renderers and observers."""

    cells: Tuple[Tuple[Optional[int], ...], ...]
    active_blocks: Tuple[Coordinate, ...]
    active_color: Optional[int]
    ghost_blocks: Tuple[Coordinate, ...]
    next_kinds: Tuple[TetrominoType, ...]
    held_kind: Optional[TetrominoType]
    hold_available: bool
    score: int
    level: int
    lines_cleared: int
    tick_interval_ms: int
    play_state: PlayState
    hidden_rows: int


class FallingBlockGame:
    """Falling-block puzzle engine.

    Commands and `tick` mutate one `GameState` in place and return whether
    anything changed. Illegal moves are rejected, never raised. Every public
    mutation holds `self.lock`, so timer threads and input handlers may call in
    from different threads.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        timer: Optional[TickTimer] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.timer = timer or ManualTickTimer()
        self.lock = threading.RLock()
        self.rng = random.Random(self.config.random_seed)
        self._timer_token = 0
        self.state = self._waiting_state()

    # ---------- State lifecycle ----------
    def _waiting_state(self) -> GameState:
        # Own generator so the queue shown before start leaves self.rng untouched
        return GameState(
            grid=GameGrid(self.config.width, self.config.height),
            randomizer=BagRandomizer(random.Random(self.config.random_seed)),
            tick_interval_ms=self.rules.tick_interval_ms(Fraction(0)),
        )

    def _new_state(self) -> GameState:
        state = GameState(
            grid=GameGrid(self.config.width, self.config.height),
            randomizer=BagRandomizer(self.rng),
            tick_interval_ms=self.rules.tick_interval_ms(Fraction(0)),
        )
        state.active = self._spawn_piece(state.randomizer.pop_next())
        return state

    def start_game(self) -> None:
        with self.lock:
            self.stop_timer()
            self.state = self._new_state()
            self.state.play_state = PlayState.PLAYING
            logger.info("Game started (seed=%s)", self.config.random_seed)
            self._check_spawn()
            if self.state.play_state == PlayState.PLAYING:
                self.start_timer(self.state.tick_interval_ms)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reseed and start a fresh game."""
        with self.lock:
            if seed is not None:
                self.config.random_seed = seed
                self.rng.seed(seed)
            self.start_game()

    def toggle_pause(self) -> bool:
        with self.lock:
            if self.state.play_state == PlayState.PLAYING:
                self.state.play_state = PlayState.PAUSED
                self.stop_timer()
                return True
            if self.state.play_state == PlayState.PAUSED:
                self.state.play_state = PlayState.PLAYING
                self.start_timer(self.state.tick_interval_ms)
                return True
            return False

    # ---------- Timer ----------
    def start_timer(self, interval_ms: int) -> None:
        with self.lock:
            self.timer.stop()
            self._timer_token += 1
            token = self._timer_token
            self.timer.start(interval_ms, lambda: self._timer_tick(token))

    def stop_timer(self) -> None:
        with self.lock:
            self._timer_token += 1
            self.timer.stop()

    def _timer_tick(self, token: int) -> bool:
        """Tick on behalf of the timer armed with `token`.

        A timer thread can fire and then wait on the lock while a command
        re-arms or stops the timer; such a stale tick is dropped.
        """
        with self.lock:
            if token != self._timer_token:
                return False
            return self.tick()

    def restart_timer(self, interval_ms: int) -> None:
        self.start_timer(interval_ms)

    # ---------- Helpers ----------
    @property
    def playing(self) -> bool:
        return self.state.play_state == PlayState.PLAYING

    @property
    def last_lock(self) -> Optional[LockResult]:
        return self.state.last_lock

    def _spawn_piece(self, kind: TetrominoType) -> Piece:
        return Piece.spawn(kind, self.config.spawn_x, self.config.spawn_y)

    def _check_spawn(self) -> None:
        state = self.state
        state.held_this_turn = False
        assert state.active is not None
        if not state.grid.can_place(state.active.blocks):
            state.play_state = PlayState.GAME_OVER
            self.stop_timer()
            logger.info("Game over: score=%d lines=%d", state.score, state.lines_cleared_total)

    def _spawn_next(self) -> None:
        kind = self.state.randomizer.pop_next()
        self.state.active = self._spawn_piece(kind)
        logger.debug("Spawned %s", kind.name)
        self._check_spawn()

    def _lock_piece(self) -> LockResult:
        state = self.state
        assert state.active is not None
        state.grid.commit(state.active.blocks, state.active.color)
        lines = state.grid.clear_full_rows()
        gained = self.rules.score_for_lines(lines, state.level)
        state.score += gained
        state.level += self.rules.level_gain(lines)
        state.lines_cleared_total += lines
        state.pieces_locked += 1
        if lines > 0:
            state.tick_interval_ms = self.rules.tick_interval_ms(state.level)
            self.restart_timer(state.tick_interval_ms)
        logger.debug("Locked %s, cleared %d line(s), +%d", state.active.kind.name, lines, gained)
        self._spawn_next()
        result = LockResult(lines, gained, state.play_state == PlayState.GAME_OVER)
        state.last_lock = result
        return result

    def _try_move(self, dx: int, dy: int) -> bool:
        active = self.state.active
        assert active is not None
        moved = active.translated(dx, dy)
        if self.state.grid.can_place(moved.blocks):
            self.state.active = moved
            return True
        return False

    # ---------- Commands ----------
    def move(self, dx: int, dy: int) -> bool:
        with self.lock:
            if not self.playing:
                return False
            return self._try_move(dx, dy)

    def move_left(self) -> bool:
        return self.move(-1, 0)

    def move_right(self) -> bool:
        return self.move(1, 0)

    def rotate(self, clockwise: bool = True) -> bool:
        with self.lock:
            if not self.playing:
                return False
            rotated = try_rotate(self.state.grid, self.state.active, clockwise)
            if rotated is None:
                return False
            self.state.active = rotated
            return True

    def rotate_cw(self) -> bool:
        return self.rotate(True)

    def rotate_ccw(self) -> bool:
        return self.rotate(False)

    def soft_drop(self) -> bool:
        with self.lock:
            if not self.playing:
                return False
            self.state.score += self.rules.soft_drop_points
            self.restart_timer(self.state.tick_interval_ms)
            if not self._try_move(0, 1):
                self._lock_piece()
            return True

    def hard_drop(self) -> bool:
        with self.lock:
            if not self.playing:
                return False
            while self._try_move(0, 1):
                self.state.score += self.rules.hard_drop_points
            self._lock_piece()
            return True

    def hold(self) -> bool:
        with self.lock:
            state = self.state
            if not self.playing or state.held_this_turn:
                return False
            assert state.active is not None
            current = state.active.kind
            if state.held is None:
                state.held = current
                self._spawn_next()
            else:
                swapped_in = state.held
                state.held = current
                state.active = self._spawn_piece(swapped_in)
                self._check_spawn()
            state.held_this_turn = True
            return True

    def tick(self) -> bool:
        with self.lock:
            if not self.playing:
                return False
            if not self._try_move(0, 1):
                self._lock_piece()
            return True

    def handle(self, command: Command) -> bool:
        if not isinstance(command, Command):
            raise ValueError(f"Unknown command: {command!r}")
        with self.lock:
            if command == Command.START_OR_RESTART:
                if self.state.play_state not in (PlayState.WAITING, PlayState.GAME_OVER):
                    return False
                self.start_game()
                return True
            if command == Command.TOGGLE_PAUSE:
                return self.toggle_pause()
            handlers = {
                Command.MOVE_LEFT: self.move_left,
                Command.MOVE_RIGHT: self.move_right,
                Command.SOFT_DROP: self.soft_drop,
                Command.HARD_DROP: self.hard_drop,
                Command.ROTATE_CW: self.rotate_cw,
                Command.ROTATE_CCW: self.rotate_ccw,
                Command.HOLD: self.hold,
            }
            return handlers[command]()

    # ---------- Observation ----------
    def ghost_blocks(self) -> Tuple[Coordinate, ...]:
        with self.lock:
            active = self.state.active
            if active is None:
                return ()
            ghost = active
            while True:
                lower = ghost.translated(0, 1)
                if not self.state.grid.can_place(lower.blocks):
                    return ghost.blocks
                ghost = lower

    def snapshot(self) -> GameSnapshot:
        with self.lock:
            state = self.state
            active = state.active
            return GameSnapshot(
                cells=tuple(tuple(row) for row in state.grid.rows()),
                active_blocks=active.blocks if active is not None else (),
                active_color=active.color if active is not None else None,
                ghost_blocks=self.ghost_blocks(),
                next_kinds=tuple(state.randomizer.preview(self.config.preview_size)),
                held_kind=state.held,
                hold_available=not state.held_this_turn,
                score=state.score,
                level=math.floor(state.level),
                lines_cleared=state.lines_cleared_total,
                tick_interval_ms=state.tick_interval_ms,
                play_state=state.play_state,
                hidden_rows=self.config.hidden_rows,
            )

    def get_state(self) -> np.ndarray:
        """Board with the falling piece overlaid as negative color ids."""
        with self.lock:
            state = self.state.grid.clone_state()
            active = self.state.active
            if active is not None and self.state.play_state != PlayState.GAME_OVER:
                for x, y in active.blocks:
                    if self.state.grid.is_inside(x, y):
                        state[y, x] = -active.color
            return state
