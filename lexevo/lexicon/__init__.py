from lexevo.lexicon.concepts import CONCEPTS, DEFAULT_CATALOG, ConceptCatalog
from lexevo.lexicon.models import (
    BirthEvent,
    Category,
    Compound,
    CompoundEvent,
    Event,
    ExtinctEvent,
    ExtinctRecord,
    LexiconStats,
    ShiftEvent,
    SoundShiftRecord,
    Word,
)
from lexevo.lexicon.state import (
    EVENT_LIMIT,
    EXTINCT_LIMIT,
    SHIFT_LIMIT,
    LexiconState,
)

__all__ = [
    "CONCEPTS",
    "DEFAULT_CATALOG",
    "ConceptCatalog",
    "BirthEvent",
    "Category",
    "Compound",
    "CompoundEvent",
    "Event",
    "ExtinctEvent",
    "ExtinctRecord",
    "LexiconStats",
    "ShiftEvent",
    "SoundShiftRecord",
    "Word",
    "EVENT_LIMIT",
    "EXTINCT_LIMIT",
    "SHIFT_LIMIT",
    "LexiconState",
]
