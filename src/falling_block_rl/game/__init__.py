"""Game module for Falling Block RL.

Exports the core game engine and supporting classes:
- GameGrid: Board occupancy, placement checks and line clearing
- Piece: Active tetromino with pivot rotation
- TetrominoType: Enum of available piece kinds
- BagRandomizer: 7-bag piece queue
- ScoringRules: Line-clear scoring, leveling and gravity speed
- ManualTickTimer / ThreadingTickTimer: Gravity clocks
- FallingBlockGame: State machine, commands and snapshots
"""

from .grid import GameGrid
from .pieces import CATALOG, Piece, TetrominoType
from .randomizer import BagRandomizer
from .rotation import kicks_for, try_rotate
from .rules import ScoringRules
from .timer import ManualTickTimer, ThreadingTickTimer, TickTimer
from .core import (
    Command,
    FallingBlockGame,
    GameConfig,
    GameSnapshot,
    GameState,
    LockResult,
    PlayState,
)

__all__ = [
    "GameGrid",
    "CATALOG",
    "Piece",
    "TetrominoType",
    "BagRandomizer",
    "kicks_for",
    "try_rotate",
    "ScoringRules",
    "TickTimer",
    "ManualTickTimer",
    "ThreadingTickTimer",
    "Command",
    "FallingBlockGame",
    "GameConfig",
    "GameSnapshot",
    "GameState",
    "LockResult",
    "PlayState",
]
