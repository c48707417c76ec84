from fractions import Fraction

import pytest

from falling_block_rl.game import ScoringRules


@pytest.mark.parametrize(
    "lines, level, expected",
    [
        (0, Fraction(0), 0),
        (1, Fraction(0), 100),
        (2, Fraction(0), 200),
        (3, Fraction(0), 400),
        (4, Fraction(0), 800),
        (2, Fraction(13, 10), 400),
        (1, Fraction(99, 10), 1000),
    ],
)
def test_score_for_lines(lines, level, expected):
    assert ScoringRules().score_for_lines(lines, level) == expected


def test_level_gain_is_fractional():
    rules = ScoringRules()
    assert rules.level_gain(3) == Fraction(3, 10)
    assert rules.level_gain(0) == 0


@pytest.mark.parametrize(
    "level, expected",
    [(Fraction(0), 1000), (Fraction(19, 10), 900), (Fraction(99, 10), 100), (Fraction(12), 100)],
)
def test_tick_interval(level, expected):
    assert ScoringRules().tick_interval_ms(level) == expected
