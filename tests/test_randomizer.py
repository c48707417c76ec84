import random
from collections import Counter

from falling_block_rl.game import BagRandomizer, TetrominoType


def test_each_bag_holds_every_kind_once():
    bag = BagRandomizer(random.Random(42))
    draws = [bag.pop_next() for _ in range(7 * 20)]
    for i in range(0, len(draws), 7):
        assert sorted(draws[i : i + 7]) == sorted(TetrominoType)


def test_long_run_frequency_is_uniform():
    bag = BagRandomizer(random.Random(1))
    counts = Counter(bag.pop_next() for _ in range(7 * 50))
    assert set(counts.values()) == {50}


def test_queue_never_drops_below_three():
    bag = BagRandomizer(random.Random(3))
    for _ in range(100):
        bag.pop_next()
        assert len(bag) >= 3


def test_refill_appends_a_permutation():
    bag = BagRandomizer(random.Random(5))
    before = list(bag.queue)
    bag.refill()
    after = list(bag.queue)
    assert after[: len(before)] == before
    assert sorted(after[len(before) :]) == sorted(TetrominoType)


def test_preview_does_not_consume():
    bag = BagRandomizer(random.Random(7))
    upcoming = bag.preview(3)
    assert len(upcoming) == 3
    assert [bag.pop_next() for _ in range(3)] == upcoming


def test_seeded_randomizers_agree():
    a = BagRandomizer(random.Random(9))
    b = BagRandomizer(random.Random(9))
    assert [a.pop_next() for _ in range(30)] == [b.pop_next() for _ in range(30)]
