from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from lexevo.lexicon.state import EVENT_LIMIT, EXTINCT_LIMIT, SHIFT_LIMIT


class EngineConfig(BaseModel):
    """Rates and limits controlling EvolutionEngine behaviour."""

    seed: int | None = Field(
        default=None, description="Seed for the engine's random source (None = OS entropy)"
    )

    # Birth
    birth_probability: float = Field(default=0.7, ge=0, le=1)
    birth_fitness: float = Field(default=0.5)
    max_birth_attempts: int = Field(
        default=1000,
        gt=0,
        description="Form generation retries before a birth is skipped",
    )

    # Usage
    usage_fraction_divisor: int = Field(
        default=3, gt=0, description="One in N living words is used per generation"
    )
    usage_fitness_gain: float = Field(default=0.1, ge=0)
    fitness_cap: float = Field(default=2.0)

    # Decay
    age_decay: float = Field(default=0.05, ge=0)
    disuse_decay: float = Field(default=0.2, ge=0)
    disuse_grace_age: int = Field(
        default=3, ge=0, description="Never-used words older than this decay faster"
    )

    # Sound shift
    shift_probability: float = Field(default=0.1, ge=0, le=1)
    shift_char_probability: float = Field(default=0.15, ge=0, le=1)

    # Compounding
    compound_probability: float = Field(default=0.15, ge=0, le=1)
    compound_min_words: int = Field(default=4, ge=2)

    # Seeding
    seed_size: int = Field(default=10, ge=0)

    # Ring bounds
    extinct_limit: int = Field(default=EXTINCT_LIMIT, gt=0)
    shift_limit: int = Field(default=SHIFT_LIMIT, gt=0)
    event_limit: int = Field(default=EVENT_LIMIT, gt=0)

    model_config = ConfigDict(extra="forbid")
