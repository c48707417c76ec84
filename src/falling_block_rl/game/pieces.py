from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Tuple


Coordinate = Tuple[int, int]
Pivot = Tuple[float, float]


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


@dataclass(frozen=True)
class PieceDefinition:
    """Spawn orientation of one kind, as offsets around a rotation pivot.

    I and O turn about a cell corner, so their pivots sit on half cells.
    """

    offsets: Tuple[Coordinate, ...]
    pivot: Pivot
    color: Tuple[int, int, int]


CATALOG: Mapping[TetrominoType, PieceDefinition] = MappingProxyType(
    {
        TetrominoType.I: PieceDefinition(((-1, 0), (0, 0), (1, 0), (2, 0)), (0.5, 0.5), (0, 240, 240)),
        TetrominoType.J: PieceDefinition(((-1, -1), (-1, 0), (0, 0), (1, 0)), (0.0, 0.0), (0, 0, 240)),
        TetrominoType.L: PieceDefinition(((1, -1), (-1, 0), (0, 0), (1, 0)), (0.0, 0.0), (240, 160, 0)),
        TetrominoType.O: PieceDefinition(((0, -1), (1, -1), (0, 0), (1, 0)), (0.5, -0.5), (240, 240, 0)),
        TetrominoType.S: PieceDefinition(((0, -1), (1, -1), (-1, 0), (0, 0)), (0.0, 0.0), (0, 240, 0)),
        TetrominoType.T: PieceDefinition(((0, -1), (-1, 0), (0, 0), (1, 0)), (0.0, 0.0), (160, 0, 240)),
        TetrominoType.Z: PieceDefinition(((-1, -1), (0, -1), (0, 0), (1, 0)), (0.0, 0.0), (240, 0, 0)),
    }
)


def color_for_value(value: int) -> Tuple[int, int, int]:
    return CATALOG[TetrominoType(value)].color


@dataclass(frozen=True)
class Piece:
    """Active tetromino: absolute blocks, rotation index and absolute pivot."""

    kind: TetrominoType
    blocks: Tuple[Coordinate, ...]
    rotation: int = 0  # 0..3, 0 is the spawn orientation
    pivot: Pivot = (0.0, 0.0)

    @classmethod
    def spawn(cls, kind: TetrominoType, x: int, y: int) -> "Piece":
        definition = CATALOG[kind]
        blocks = tuple((x + dx, y + dy) for dx, dy in definition.offsets)
        px, py = definition.pivot
        return cls(kind=kind, blocks=blocks, rotation=0, pivot=(x + px, y + py))

    @property
    def color(self) -> int:
        return int(self.kind)

    def translated(self, dx: int, dy: int) -> "Piece":
        blocks = tuple((x + dx, y + dy) for x, y in self.blocks)
        px, py = self.pivot
        return Piece(self.kind, blocks, self.rotation, (px + dx, py + dy))

    def rotated_blocks(self, clockwise: bool = True) -> Tuple[Coordinate, ...]:
        px, py = self.pivot
        rotated = []
        for bx, by in self.blocks:
            rx, ry = bx - px, by - py
            if clockwise:
                nx, ny = px - ry, py + rx
            else:
                nx, ny = px + ry, py - rx
            rotated.append((int(round(nx)), int(round(ny))))
        return tuple(rotated)
