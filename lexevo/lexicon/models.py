from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Category(str, Enum):
    NATURAL = "natural"
    ABSTRACT = "abstract"
    QUALITY = "quality"
    ACTION = "action"
    RELATION = "relation"
    BEING = "being"


class LexiconRecord(BaseModel):
    """Base for snapshot records: unknown keys are ignored, explicit nulls fall back to defaults."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Word(LexiconRecord):
    """A living word, keyed by its current surface form in the lexicon."""

    meaning: str = Field(..., description="Concept the word denotes")
    category: Category = Field(..., description="Semantic category of the concept")
    born: int = Field(default=0, ge=0, description="Generation of creation")
    uses: int = Field(default=0, ge=0, description="Usage counter")
    fitness: float = Field(default=0.5, description="Viability score; dies at <= 0")
    history: list[str] = Field(
        default_factory=list, description="Surface forms taken over time (append-only)"
    )


class Compound(LexiconRecord):
    parts: tuple[str, str]
    meanings: tuple[str, str]
    compound_meaning: str
    born: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class ExtinctRecord(LexiconRecord):
    word: str
    meaning: str
    born: int = 0
    died: int = 0
    uses: int = 0


class SoundShiftRecord(LexiconRecord):
    gen: int
    from_: str = Field(..., alias="from")
    to: str
    meaning: str


class LexiconStats(LexiconRecord):
    total_generated: int = Field(default=0, ge=0)
    total_extinct: int = Field(default=0, ge=0)
    total_compounds: int = Field(default=0, ge=0)
    total_shifts: int = Field(default=0, ge=0)


# --------------------------- Events ---------------------------


class _EventBase(LexiconRecord):
    gen: int
    time: datetime | None = Field(
        default=None, description="Capture timestamp, set when archived"
    )


class BirthEvent(_EventBase):
    type: Literal["birth"] = "birth"
    word: str
    meaning: str
    category: Category


class ExtinctEvent(_EventBase):
    type: Literal["extinct"] = "extinct"
    word: str
    meaning: str


class ShiftEvent(_EventBase):
    type: Literal["shift"] = "shift"
    from_: str = Field(..., alias="from")
    to: str
    meaning: str


class CompoundEvent(_EventBase):
    type: Literal["compound"] = "compound"
    word: str
    meaning: str
    parts: tuple[str, str]


Event = Annotated[
    Union[BirthEvent, ExtinctEvent, ShiftEvent, CompoundEvent],
    Field(discriminator="type"),
]
