from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction


@dataclass
class ScoringRules:
    line_clear_base: int = 100
    lines_per_level: int = 10
    soft_drop_points: int = 1
    hard_drop_points: int = 2
    base_interval_ms: int = 1000
    interval_step_ms: int = 100
    min_interval_ms: int = 100

    def score_for_lines(self, lines: int, level: Fraction) -> int:
        if lines <= 0:
            return 0
        return 2 ** (lines - 1) * self.line_clear_base * (math.floor(level) + 1)

    def level_gain(self, lines: int) -> Fraction:
        # Level is continuous; only its floor matters for speed and scoring
        return Fraction(max(0, lines), self.lines_per_level)

    def tick_interval_ms(self, level: Fraction) -> int:
        return max(self.min_interval_ms, self.base_interval_ms - math.floor(level) * self.interval_step_ms)
