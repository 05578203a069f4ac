from lexevo.sentence.generator import (
    CATEGORY_ORDER,
    EMPTY_GLOSS,
    EMPTY_TEXT,
    Sentence,
    SentenceGenerator,
    SentenceWord,
)

__all__ = [
    "CATEGORY_ORDER",
    "EMPTY_GLOSS",
    "EMPTY_TEXT",
    "Sentence",
    "SentenceGenerator",
    "SentenceWord",
]
