from __future__ import annotations

from typing import Optional, Tuple

from .grid import GameGrid
from .pieces import Piece, TetrominoType


Kick = Tuple[int, int]

# Clockwise kicks indexed by the rotation state before turning.
# y grows downward, so a negative dy lifts the piece.
STANDARD_KICKS: Tuple[Tuple[Kick, ...], ...] = (
    ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)),
    ((0, 0), (1, 0), (1, 1), (0, -2), (1, -2)),
    ((0, 0), (1, 0), (1, -1), (0, 2), (1, 2)),
    ((0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)),
)

I_KICKS: Tuple[Tuple[Kick, ...], ...] = (
    ((0, 0), (-2, 0), (1, 0), (-2, 1), (1, -2)),
    ((0, 0), (-1, 0), (2, 0), (-1, -2), (2, 1)),
    ((0, 0), (2, 0), (-1, 0), (2, -1), (-1, 2)),
    ((0, 0), (1, 0), (-2, 0), (1, 2), (-2, -1)),
)


def kicks_for(kind: TetrominoType, rotation: int, clockwise: bool = True) -> Tuple[Kick, ...]:
    """Ordered kick candidates for turning a piece out of `rotation`.

    Counter-clockwise turns replay the clockwise row that leads back into
    `rotation`, negated.
    """
    table = I_KICKS if kind == TetrominoType.I else STANDARD_KICKS
    if clockwise:
        return table[rotation % 4]
    return tuple((-dx, -dy) for dx, dy in table[(rotation + 3) % 4])


def try_rotate(grid: GameGrid, piece: Piece, clockwise: bool = True) -> Optional[Piece]:
    """Return the rotated piece using the first kick that fits, or None."""
    rotated = piece.rotated_blocks(clockwise)
    new_rotation = (piece.rotation + (1 if clockwise else 3)) % 4
    px, py = piece.pivot
    for dx, dy in kicks_for(piece.kind, piece.rotation, clockwise):
        cells = tuple((x + dx, y + dy) for x, y in rotated)
        if grid.can_place(cells):
            return Piece(piece.kind, cells, new_rotation, (px + dx, py + dy))
    return None
