from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_block_rl.game import (
    Command,
    FallingBlockGame,
    GameConfig,
    PlayState,
    ScoringRules,
    TetrominoType,
)
from falling_block_rl.game.pieces import color_for_value


class FallingBlocksEnv(gym.Env):
    """
    Single-player falling-block environment over `FallingBlockGame`.

    Actions (8 total):
      0: No-op
      1: Move Left
      2: Move Right
      3: Rotate CW
      4: Rotate CCW
      5: Soft Drop
      6: Hard Drop
      7: Hold

    Every step applies the action and then one gravity tick, so the agent sees
    the piece fall at a constant rate regardless of level.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    ACTION_COMMANDS: Tuple[Optional[Command], ...] = (
        None,
        Command.MOVE_LEFT,
        Command.MOVE_RIGHT,
        Command.ROTATE_CW,
        Command.ROTATE_CCW,
        Command.SOFT_DROP,
        Command.HARD_DROP,
        Command.HOLD,
    )

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        render_mode: Optional[str] = None,
        reward_weights: Optional[Dict[str, float]] = None,
        max_episode_steps: int = 10000,
        terminal_penalty: float = 0.0,
    ) -> None:
        super().__init__()
        self.game = FallingBlockGame(config, rules)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)

        # Reward shaping on top of the engine score delta
        self.reward_weights: Dict[str, float] = {
            "score": 1.0,      # engine score gained this step
            "lines": 0.0,      # reward per line cleared
            "holes": 0.0,      # penalize holes created
            "height": 0.0,     # penalize stack height increase
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        cfg = self.game.config
        visible = cfg.height - cfg.hidden_rows
        kinds = len(TetrominoType)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=1, shape=(visible, cfg.width), dtype=np.int8),
                "active": spaces.Box(low=0, high=1, shape=(visible, cfg.width), dtype=np.int8),
                "queue": spaces.Box(low=1, high=kinds, shape=(cfg.preview_size,), dtype=np.int8),
                # 0 when nothing is held
                "held": spaces.Discrete(kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(self.ACTION_COMMANDS))

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        cfg = self.game.config
        state = self.game.state
        hidden = cfg.hidden_rows
        board = (state.grid.grid[hidden:] != 0).astype(np.int8)
        active = np.zeros_like(board)
        if state.active is not None:
            for x, y in state.active.blocks:
                if hidden <= y < cfg.height and 0 <= x < cfg.width:
                    active[y - hidden, x] = 1
        queue = np.array([int(k) for k in state.randomizer.preview(cfg.preview_size)], dtype=np.int8)
        return {
            "board": board,
            "active": active,
            "queue": queue,
            "held": int(state.held) if state.held is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        state = self.game.state
        return {
            "score": state.score,
            "level": int(state.level),
            "lines_cleared_total": state.lines_cleared_total,
            "pieces_locked": state.pieces_locked,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        obs = self._get_obs()
        info = self._get_info()
        self._last_obs = obs
        return obs, info

    def step(self, action: int):
        action = int(action)
        if not 0 <= action < len(self.ACTION_COMMANDS):
            raise ValueError(f"Invalid action {action}")

        state = self.game.state
        score_before = state.score
        lines_before = state.lines_cleared_total
        holes_before = state.grid.count_holes()
        height_before = state.grid.get_max_height()

        command = self.ACTION_COMMANDS[action]
        applied = False
        if command is not None:
            applied = self.game.handle(command)
        # Gravity
        self.game.tick()

        state = self.game.state
        reward_components: Dict[str, float] = {
            "score": self.reward_weights["score"] * float(state.score - score_before),
            "lines": self.reward_weights["lines"] * float(state.lines_cleared_total - lines_before),
            "holes": -self.reward_weights["holes"] * float(max(0, state.grid.count_holes() - holes_before)),
            "height": -self.reward_weights["height"] * float(max(0, state.grid.get_max_height() - height_before)),
        }

        terminated = state.play_state == PlayState.GAME_OVER
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps and not terminated
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["action_applied"] = applied
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            # Create a simple RGB image from the visible rows
            hidden = self.game.config.hidden_rows
            grid = self.game.get_state()[hidden:]
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    v = int(grid[y, x])
                    color = color_for_value(abs(v)) if v else (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        self.game.stop_timer()
