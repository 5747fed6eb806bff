import math

import numpy as np

INITIAL_SEED = 1


def is_prime(n: int) -> bool:
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    for divisor in range(3, math.isqrt(n) + 1, 2):
        if n % divisor == 0:
            return False
    return True


def next_prime(n: int) -> int:
    """Smallest prime greater than or equal to n"""
    candidate = max(n, 2)
    while not is_prime(candidate):
        candidate += 1
    return candidate


class SeededRandomSource:
    """
    Restartable sequence of prime seeds driving the dataset shuffles.

    After reset() the seed is 1; every call to next() moves it to the smallest
    prime strictly greater than seed + 1 (3, 5, 7, 11, 13, ...) and returns a
    fresh numpy Generator seeded with it. The same number of next() calls after
    a reset always yields the same generators.
    """

    def __init__(self):
        self._seed = INITIAL_SEED

    def reset(self) -> None:
        self._seed = INITIAL_SEED

    def next(self) -> np.random.Generator:
        self._seed = next_prime(self._seed + 2)
        return np.random.default_rng(self._seed)

    @property
    def seed(self) -> int:
        return self._seed
