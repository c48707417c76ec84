from __future__ import annotations

import random
from collections import deque
from typing import Deque, List, Optional

from .pieces import TetrominoType


class BagRandomizer:
    """7-bag piece queue.

    Each refill appends one shuffled permutation of every kind, so any seven
    draws taken from the same bag contain each kind exactly once.
    """

    min_queue = 3

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.queue: Deque[TetrominoType] = deque()
        self.refill()

    def refill(self) -> None:
        bag = list(TetrominoType)
        self.rng.shuffle(bag)
        self.queue.extend(bag)

    def pop_next(self) -> TetrominoType:
        kind = self.queue.popleft()
        if len(self.queue) < self.min_queue:
            self.refill()
        return kind

    def preview(self, count: int = 3) -> List[TetrominoType]:
        return list(self.queue)[:count]

    def __len__(self) -> int:
        return len(self.queue)
