from __future__ import annotations

import random
from types import MappingProxyType
from typing import Mapping

# Segment -> possible reflexes. An empty reflex deletes the segment.
SOUND_SHIFTS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "k": ("g", "h"),
        "t": ("d", "s"),
        "p": ("b", "f"),
        "s": ("z", "sh"),
        "h": ("", "w"),
        "n": ("m", "ng"),
        "r": ("l", ""),
    }
)


def apply_sound_shift(
    form: str,
    rng: random.Random,
    probability: float,
    table: Mapping[str, tuple[str, ...]] = SOUND_SHIFTS,
) -> tuple[str, bool]:
    """Apply the shift table to each eligible character of ``form``.

    Only characters present in ``table`` consume a random draw. Returns the
    shifted form and whether any substitution fired.
    """
    segments = list(form)
    shifted = False
    for i, ch in enumerate(segments):
        reflexes = table.get(ch)
        if reflexes and rng.random() < probability:
            segments[i] = rng.choice(reflexes)
            shifted = True
    return "".join(segments), shifted
