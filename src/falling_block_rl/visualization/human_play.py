from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional, Set

import pygame

from falling_block_rl.game import (
    Command,
    FallingBlockGame,
    GameConfig,
    ManualTickTimer,
    PlayState,
)
from .renderer import Renderer


KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_UP: Command.ROTATE_CW,
    pygame.K_x: Command.ROTATE_CW,
    pygame.K_z: Command.ROTATE_CCW,
    pygame.K_LCTRL: Command.ROTATE_CCW,
    pygame.K_c: Command.HOLD,
    pygame.K_LSHIFT: Command.HOLD,
    pygame.K_p: Command.TOGGLE_PAUSE,
    pygame.K_ESCAPE: Command.TOGGLE_PAUSE,
}

# Commands that keep firing while their key is held down
REPEATABLE = {Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.SOFT_DROP}


def command_for_key(key: int, play_state: PlayState) -> Optional[Command]:
    """Map a key press to a command; any key starts a game that is not running."""
    if play_state in (PlayState.WAITING, PlayState.GAME_OVER):
        return Command.START_OR_RESTART
    return KEY_TO_COMMAND.get(key)


def run(seed: Optional[int] = None, cell_size: int = 28) -> None:
    pygame.init()
    timer = ManualTickTimer()
    game = FallingBlockGame(GameConfig(random_seed=seed), timer=timer)
    try:
        clock = pygame.time.Clock()
        renderer = Renderer(cell_size=cell_size)

        cfg = game.config
        screen = pygame.display.set_mode(renderer.window_size(cfg.width, cfg.height - cfg.hidden_rows))
        pygame.display.set_caption("Falling Blocks - Human Play")
        pygame.key.set_repeat(170, 50)

        pressed: Set[int] = set()
        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYUP:
                    pressed.discard(event.key)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_q:
                        running = False
                        continue
                    repeat = event.key in pressed
                    pressed.add(event.key)
                    if repeat and game.state.play_state != PlayState.PLAYING:
                        continue
                    command = command_for_key(event.key, game.state.play_state)
                    if command is None or (repeat and command not in REPEATABLE):
                        continue
                    game.handle(command)

            # Gravity
            timer.advance(clock.get_time())

            # Render
            renderer.draw(screen, game.snapshot())
            clock.tick(60)
    finally:
        game.stop_timer()
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell_size", type=int, default=28)
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    run(seed=args.seed, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
