"""Priority-weighted random choice among ready tasks."""

from __future__ import annotations

import random
from collections.abc import Sequence

from .task import Task


def choose_weighted(tasks: Sequence[Task], rng: random.Random | None = None) -> Task | None:
    """Pick one task with probability proportional to its priority weight.

    The draw is uniform over ``[0, total)`` and tasks are walked in the order
    given; the first whose cumulative weight reaches the draw wins.
    """
    total = sum(task.weight for task in tasks if task.weight > 0)
    if total <= 0:
        return None

    draw = (rng or random).random() * total
    cumulative = 0
    chosen: Task | None = None
    for task in tasks:
        if task.weight <= 0:
            continue
        cumulative += task.weight
        chosen = task
        if cumulative >= draw:
            return task
    # Float rounding can leave the draw just above the final sum.
    return chosen
