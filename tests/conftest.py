from __future__ import annotations

from datetime import datetime, timezone

import pytest

from lexevo.database.snapshot_storage import MemorySnapshotStorage
from lexevo.evolution.engine import EngineConfig, EvolutionEngine
from lexevo.lexicon.models import Category, Word
from lexevo.lexicon.state import LexiconState
from lexevo.service import LexiconService

FIXED_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

# Every rule switched off; tests enable the one they exercise.
QUIET = dict(
    birth_probability=0.0,
    shift_probability=0.0,
    compound_probability=0.0,
)


def fixed_clock() -> datetime:
    return FIXED_TIME


def make_word(
    form: str,
    meaning: str = "water",
    category: Category = Category.NATURAL,
    *,
    born: int = 0,
    uses: int = 1,
    fitness: float = 1.0,
) -> Word:
    return Word(
        meaning=meaning,
        category=category,
        born=born,
        uses=uses,
        fitness=fitness,
        history=[form],
    )


def make_engine(
    state: LexiconState | None = None, *, seed: int = 7, **overrides
) -> EvolutionEngine:
    return EvolutionEngine(
        state=state,
        config=EngineConfig(seed=seed, **overrides),
        clock=fixed_clock,
    )


@pytest.fixture
def seeded_engine() -> EvolutionEngine:
    engine = make_engine(seed=1234)
    engine.seed_lexicon()
    return engine


@pytest.fixture
def service(seeded_engine: EvolutionEngine) -> LexiconService:
    return LexiconService(seeded_engine, MemorySnapshotStorage())
