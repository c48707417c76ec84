from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np


Coordinate = Tuple[int, int]


class GameGrid:
    """Fixed-size occupancy grid for locked blocks.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values are color ids (the tetromino kind that left the block).
    Row 0 is the top; rows with negative y lie above the grid and are always
    free, which is where pieces spawn.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, x: int, y: int) -> Optional[int]:
        if not self.is_inside(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        value = int(self.grid[y, x])
        return value if value != 0 else None

    def can_place(self, cells: Iterable[Coordinate]) -> bool:
        for x, y in cells:
            if x < 0 or x >= self.width or y >= self.height:
                return False
            if y >= 0 and self.grid[y, x] != 0:
                return False
        return True

    def commit(self, cells: Iterable[Coordinate], color: int) -> None:
        """Write `color` into every cell. Callers validate with `can_place` first."""
        for x, y in cells:
            if y >= 0:
                self.grid[y, x] = color

    def clear_full_rows(self) -> int:
        full_rows = np.where(np.all(self.grid != 0, axis=1))[0]
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Remove full rows and add empty rows at the top
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        return num

    def rows(self) -> List[List[Optional[int]]]:
        return [[int(v) if v != 0 else None for v in row] for row in self.grid]

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        top_index = int(non_empty_rows[0])
        return self.height - top_index

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            column = self.grid[:, x]
            seen_block = False
            for cell in column:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
