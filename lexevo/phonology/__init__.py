from lexevo.phonology.generator import (
    CONSONANT_WEIGHTS,
    CONSONANTS,
    VOWEL_WEIGHTS,
    VOWELS,
    PhonologyGenerator,
    weighted_choice,
)
from lexevo.phonology.sound_changes import SOUND_SHIFTS, apply_sound_shift

__all__ = [
    "CONSONANTS",
    "CONSONANT_WEIGHTS",
    "VOWELS",
    "VOWEL_WEIGHTS",
    "PhonologyGenerator",
    "weighted_choice",
    "SOUND_SHIFTS",
    "apply_sound_shift",
]
