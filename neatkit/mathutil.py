"""Random helpers used by the evolutionary algorithm."""

from __future__ import annotations

import random
from collections.abc import Sequence


def rand_sign() -> int:
    """Return -1 or 1 at random, to randomize the sign of a value."""
    return -1 if random.getrandbits(1) == 0 else 1


def single_roulette_throw(probabilities: Sequence[float]) -> int:
    """Throw a ball onto a roulette wheel divided unevenly by ``probabilities``.

    The chance of a segment being selected is proportional to its value.
    Returns the index of the selected segment, or -1 if none was hit.
    """
    total = sum(probabilities)
    throw_value = random.random() * total

    accumulator = 0.0
    for index, probability in enumerate(probabilities):
        accumulator += probability
        if throw_value <= accumulator:
            return index
    return -1