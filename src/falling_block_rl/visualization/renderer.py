from __future__ import annotations

from typing import Optional, Sequence, Tuple

import pygame

from falling_block_rl.game import CATALOG, GameSnapshot, PlayState, TetrominoType
from falling_block_rl.game.pieces import color_for_value


EMPTY = (20, 20, 26)
GHOST_ALPHA = 90
DIMMED = (110, 110, 110)


class Renderer:
    def __init__(self, cell_size: int = 28, margin: int = 20, panel_cells: int = 6) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, visible_rows: int) -> Tuple[int, int]:
        board_w = width * self.cell_size
        board_h = visible_rows * self.cell_size
        return (
            self.margin * 3 + board_w + self.panel_cells * self.cell_size,
            self.margin * 2 + board_h,
        )

    def _font_or_default(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        return self._font

    def _cell_rect(self, x: int, y: int, origin: Tuple[int, int]) -> pygame.Rect:
        ox, oy = origin
        return pygame.Rect(ox + x * self.cell_size, oy + y * self.cell_size, self.cell_size - 1, self.cell_size - 1)

    def _grid_surface(self, snapshot: GameSnapshot) -> pygame.Surface:
        hidden = snapshot.hidden_rows
        rows = snapshot.cells[hidden:]
        h = len(rows)
        w = len(rows[0]) if rows else 0
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y, row in enumerate(rows):
            for x, v in enumerate(row):
                color = color_for_value(v) if v is not None else EMPTY
                pygame.draw.rect(surf, color, self._cell_rect(x, y, (0, 0)))

        if snapshot.active_color is not None:
            color = color_for_value(snapshot.active_color)
            ghost = pygame.Surface((self.cell_size - 1, self.cell_size - 1), pygame.SRCALPHA)
            ghost.fill((*color, GHOST_ALPHA))
            for x, y in snapshot.ghost_blocks:
                if y >= hidden:
                    surf.blit(ghost, self._cell_rect(x, y - hidden, (0, 0)))
            for x, y in snapshot.active_blocks:
                if y >= hidden:
                    pygame.draw.rect(surf, color, self._cell_rect(x, y - hidden, (0, 0)))
        return surf

    def _draw_kind(self, screen: pygame.Surface, kind: TetrominoType, origin: Tuple[int, int], dimmed: bool = False) -> None:
        definition = CATALOG[kind]
        color = DIMMED if dimmed else definition.color
        for dx, dy in definition.offsets:
            # offsets span x in [-1, 2] and y in [-1, 0]
            pygame.draw.rect(screen, color, self._cell_rect(dx + 1, dy + 1, origin))

    def _draw_panel(self, screen: pygame.Surface, snapshot: GameSnapshot, x0: int) -> None:
        font = self._font_or_default()
        y = self.margin
        screen.blit(font.render("Next", True, (230, 230, 230)), (x0, y))
        y += 20
        for kind in snapshot.next_kinds:
            self._draw_kind(screen, kind, (x0, y))
            y += self.cell_size * 3
        screen.blit(font.render("Hold", True, (230, 230, 230)), (x0, y))
        y += 20
        if snapshot.held_kind is not None:
            self._draw_kind(screen, snapshot.held_kind, (x0, y), dimmed=not snapshot.hold_available)
        y += self.cell_size * 3
        for line in (
            f"Score: {snapshot.score}",
            f"Level: {snapshot.level}",
            f"Lines: {snapshot.lines_cleared}",
        ):
            screen.blit(font.render(line, True, (230, 230, 230)), (x0, y))
            y += 22

    def _draw_banner(self, screen: pygame.Surface, text: str) -> None:
        font = self._font_or_default()
        img = font.render(text, True, (255, 255, 255))
        rect = img.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
        screen.blit(img, rect)

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        screen.fill((10, 10, 14))
        if snapshot.play_state == PlayState.WAITING:
            self._draw_banner(screen, "Press any key to start")
            pygame.display.flip()
            return
        grid_surf = self._grid_surface(snapshot)
        screen.blit(grid_surf, (self.margin, self.margin))
        self._draw_panel(screen, snapshot, self.margin * 2 + grid_surf.get_width())
        banners: Sequence[Tuple[PlayState, str]] = (
            (PlayState.PAUSED, "Paused"),
            (PlayState.GAME_OVER, "Game Over - press any key"),
        )
        for state, text in banners:
            if snapshot.play_state == state:
                self._draw_banner(screen, text)
        pygame.display.flip()
