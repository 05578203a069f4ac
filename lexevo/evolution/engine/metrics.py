from __future__ import annotations

from collections import deque
from datetime import datetime

from pydantic import BaseModel, Field, computed_field


class EngineMetrics(BaseModel):
    """Process-local counters for the engine (not part of the lexicon snapshot)."""

    total_generations: int = Field(
        default=0, description="Generations advanced by this process"
    )
    births: int = Field(default=0, description="Birth events emitted")
    extinctions: int = Field(default=0, description="Extinct events emitted")
    shifts: int = Field(default=0, description="Shift events emitted")
    compounds: int = Field(default=0, description="Compound events emitted")
    skipped_births: int = Field(
        default=0, description="Births abandoned after exhausting form retries"
    )
    last_generation_time: datetime | None = Field(
        default=None, description="Timestamp of last generation"
    )
    events_per_generation: deque = Field(
        default_factory=lambda: deque(maxlen=10),
        description="Rolling window of events emitted per generation",
    )

    @computed_field
    @property
    def avg_events(self) -> float:
        """Average number of events over the rolling window."""
        return sum(self.events_per_generation) / max(
            1, len(self.events_per_generation)
        )

    def to_dict(self) -> dict[str, int | float | str | None]:
        return {
            "total_generations": self.total_generations,
            "births": self.births,
            "extinctions": self.extinctions,
            "shifts": self.shifts,
            "compounds": self.compounds,
            "skipped_births": self.skipped_births,
            "last_generation_time": (
                self.last_generation_time.isoformat()
                if self.last_generation_time
                else None
            ),
            "avg_events": self.avg_events,
        }

    model_config = {"arbitrary_types_allowed": True, "extra": "allow"}
