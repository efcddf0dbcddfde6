from __future__ import annotations

import random
import unittest
from collections import Counter

from whattodo.domain.priority import Priority
from whattodo.domain.selection import choose_weighted
from whattodo.domain.task import Task


class FixedDraw:
    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


class PriorityTests(unittest.TestCase):
    def test_weights(self) -> None:
        self.assertEqual(
            [priority.weight for priority in Priority],
            [1, 2, 4, 64],
        )

    def test_from_value_accepts_names_and_weights(self) -> None:
        self.assertIs(Priority.from_value("High"), Priority.HIGH)
        self.assertIs(Priority.from_value(" urgent "), Priority.URGENT)
        self.assertIs(Priority.from_value(2), Priority.MEDIUM)
        self.assertIs(Priority.from_value("64"), Priority.URGENT)
        with self.assertRaises(ValueError):
            Priority.from_value("someday")


class ChooseWeightedTests(unittest.TestCase):
    def setUp(self) -> None:
        self.first = Task(description="first", priority=Priority.LOW)
        self.second = Task(description="second", priority=Priority.LOW)
        self.third = Task(description="third", priority=Priority.MEDIUM)
        self.tasks = [self.first, self.second, self.third]

    def test_empty_candidates(self) -> None:
        self.assertIsNone(choose_weighted([], random.Random(1)))

    def test_single_candidate_is_always_chosen(self) -> None:
        rng = random.Random(7)
        for _ in range(20):
            self.assertIs(choose_weighted([self.third], rng), self.third)

    def test_zero_draw_picks_first_candidate(self) -> None:
        self.assertIs(choose_weighted(self.tasks, FixedDraw(0.0)), self.first)

    def test_cumulative_walk(self) -> None:
        # Total weight 4: [0, 1] first, (1, 2] second, (2, 4) third.
        self.assertIs(choose_weighted(self.tasks, FixedDraw(0.25)), self.first)
        self.assertIs(choose_weighted(self.tasks, FixedDraw(0.3)), self.second)
        self.assertIs(choose_weighted(self.tasks, FixedDraw(0.75)), self.third)
        self.assertIs(choose_weighted(self.tasks, FixedDraw(0.999999)), self.third)

    def test_frequencies_follow_weights(self) -> None:
        rng = random.Random(1234)
        draws = 20_000
        counts = Counter(choose_weighted(self.tasks, rng).description for _ in range(draws))

        self.assertAlmostEqual(counts["first"] / draws, 0.25, delta=0.02)
        self.assertAlmostEqual(counts["second"] / draws, 0.25, delta=0.02)
        self.assertAlmostEqual(counts["third"] / draws, 0.5, delta=0.02)


if __name__ == "__main__":
    unittest.main()
