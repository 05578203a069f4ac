from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")

CONSONANTS: tuple[str, ...] = ("k", "n", "t", "s", "m", "r", "h", "p", "l", "w", "v", "z")
CONSONANT_WEIGHTS: tuple[float, ...] = (12, 15, 10, 8, 12, 8, 6, 5, 7, 4, 3, 2)
VOWELS: tuple[str, ...] = ("a", "i", "u", "e", "o")
VOWEL_WEIGHTS: tuple[float, ...] = (20, 15, 10, 12, 8)

CODAS: tuple[str, ...] = ("n", "m", "")
SYLLABLE_COUNTS: tuple[int, ...] = (1, 2, 3)
SYLLABLE_COUNT_WEIGHTS: tuple[float, ...] = (15, 50, 35)

ONSET_PROBABILITY = 0.8
CODA_PROBABILITY = 0.3


def weighted_choice(
    items: Sequence[T], weights: Sequence[float], rng: random.Random
) -> T:
    """Return the first item whose cumulative weight reaches a uniform draw.

    The draw lies in ``[0, sum(weights))``. The last item is the fallback when
    float rounding lets the draw overshoot the running total.
    """
    if len(items) != len(weights) or not items:
        raise ValueError("items and weights must be non-empty and of equal length")

    r = rng.random() * sum(weights)
    cumulative = 0.0
    for item, weight in zip(items, weights):
        cumulative += weight
        if r <= cumulative:
            return item
    return items[-1]


class PhonologyGenerator:
    """Samples syllables and words from weighted CV(C) inventories."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def generate_syllable(self) -> str:
        onset = (
            weighted_choice(CONSONANTS, CONSONANT_WEIGHTS, self.rng)
            if self.rng.random() < ONSET_PROBABILITY
            else ""
        )
        nucleus = weighted_choice(VOWELS, VOWEL_WEIGHTS, self.rng)
        coda = self.rng.choice(CODAS) if self.rng.random() < CODA_PROBABILITY else ""
        return onset + nucleus + coda

    def generate_word(self) -> str:
        n = weighted_choice(SYLLABLE_COUNTS, SYLLABLE_COUNT_WEIGHTS, self.rng)
        return "".join(self.generate_syllable() for _ in range(n))
