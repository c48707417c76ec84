import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame  # noqa: E402

from falling_block_rl.game import Command, FallingBlockGame, GameConfig, PlayState  # noqa: E402
from falling_block_rl.visualization.human_play import command_for_key  # noqa: E402
from falling_block_rl.visualization.renderer import Renderer  # noqa: E402


def test_any_key_starts_when_not_running():
    assert command_for_key(pygame.K_a, PlayState.WAITING) == Command.START_OR_RESTART
    assert command_for_key(pygame.K_LEFT, PlayState.GAME_OVER) == Command.START_OR_RESTART


def test_key_mapping_while_playing():
    assert command_for_key(pygame.K_LEFT, PlayState.PLAYING) == Command.MOVE_LEFT
    assert command_for_key(pygame.K_SPACE, PlayState.PLAYING) == Command.HARD_DROP
    assert command_for_key(pygame.K_c, PlayState.PLAYING) == Command.HOLD
    assert command_for_key(pygame.K_ESCAPE, PlayState.PAUSED) == Command.TOGGLE_PAUSE
    assert command_for_key(pygame.K_a, PlayState.PLAYING) is None


def test_renderer_draws_every_play_state():
    pygame.init()
    try:
        game = FallingBlockGame(GameConfig(random_seed=0))
        renderer = Renderer(cell_size=10)
        screen = pygame.display.set_mode(renderer.window_size(10, 20))
        renderer.draw(screen, game.snapshot())
        game.start_game()
        game.hold()
        renderer.draw(screen, game.snapshot())
        game.toggle_pause()
        renderer.draw(screen, game.snapshot())
        assert screen.get_size() == renderer.window_size(10, 20)
    finally:
        pygame.quit()
