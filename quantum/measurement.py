# quantum/measurement.py
"""
Weighted random decisions used by measurement / collapse.

All randomness comes from an explicitly passed random.Random so games can be
replayed with a seed.
"""
from __future__ import annotations

import logging
import random
from typing import Iterable, Tuple, TypeVar

from classic.errors import InvariantViolation

logger = logging.getLogger(__name__)

T = TypeVar("T")


def decide(rng: random.Random, weight: int, total: int) -> bool:
    """True with probability weight/total."""
    InvariantViolation.check(total > 0, f"Measurement over a vanishing total weight: {total}")
    probability = weight / total
    res = rng.random() < probability
    logger.debug("Measurement with probability %.6f rendered %s", probability, res)
    return res


def choose(rng: random.Random, candidates: Iterable[Tuple[T, int]]) -> T:
    """
    Pick one item from (item, weight) pairs in proportion to weight.

    Candidates are tried in order, each against the mass not yet rejected;
    the last one has ratio 1 and is always taken.
    """
    candidates = list(candidates)
    remaining = sum(w for _item, w in candidates)
    for item, weight in candidates:
        if decide(rng, weight, remaining):
            return item
        remaining -= weight
    raise InvariantViolation("One of the candidates has to be chosen")
