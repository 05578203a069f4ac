from __future__ import annotations

from collections import deque
import random

from pydantic import BaseModel, Field

from lexevo.lexicon.models import Category
from lexevo.lexicon.state import LexiconState

EMPTY_TEXT = "(silence)"
EMPTY_GLOSS = "(empty lexicon)"

CATEGORY_ORDER: tuple[Category, ...] = (
    Category.BEING,
    Category.QUALITY,
    Category.ACTION,
    Category.NATURAL,
    Category.RELATION,
    Category.ABSTRACT,
)


class SentenceWord(BaseModel):
    word: str
    meaning: str
    category: Category


class Sentence(BaseModel):
    text: str
    gloss: str
    words: list[SentenceWord] = Field(default_factory=list)


class SentenceGenerator:
    """Samples the living lexicon into a pseudo-sentence.

    Positions prefer categories in :data:`CATEGORY_ORDER`; each preferred
    category is tried at most once per sentence. Never mutates the state.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        min_length: int = 3,
        max_length: int = 7,
        preference_probability: float = 0.7,
    ):
        if not 0 < min_length <= max_length:
            raise ValueError(
                f"invalid sentence length range [{min_length}, {max_length}]"
            )
        self.rng = rng or random.Random()
        self.min_length = min_length
        self.max_length = max_length
        self.preference_probability = preference_probability

    def generate(self, state: LexiconState) -> Sentence:
        words = state.words
        if not words:
            return Sentence(text=EMPTY_TEXT, gloss=EMPTY_GLOSS, words=[])

        forms = list(words)
        length = self.rng.randint(self.min_length, self.max_length)
        preferences = deque(CATEGORY_ORDER)
        chosen: list[str] = []

        for _ in range(length):
            if preferences and self.rng.random() < self.preference_probability:
                category = preferences.popleft()
                candidates = [f for f, w in words.items() if w.category == category]
                if candidates:
                    chosen.append(self.rng.choice(candidates))
                    continue
            chosen.append(self.rng.choice(forms))

        return Sentence(
            text=" ".join(chosen),
            gloss=" ".join(words[f].meaning for f in chosen),
            words=[
                SentenceWord(word=f, meaning=words[f].meaning, category=words[f].category)
                for f in chosen
            ],
        )
