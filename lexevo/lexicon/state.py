from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Sequence

from loguru import logger
from pydantic import (
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from lexevo.lexicon.models import (
    Compound,
    Event,
    ExtinctRecord,
    LexiconRecord,
    LexiconStats,
    SoundShiftRecord,
    Word,
)

EXTINCT_LIMIT = 50
SHIFT_LIMIT = 30
EVENT_LIMIT = 200

HISTORY_EVENTS = 100
HISTORY_EXTINCT = 20
HISTORY_SHIFTS = 20


def _trim(ring: list, limit: int) -> None:
    """Keep only the most recent ``limit`` entries (oldest first)."""
    if len(ring) > limit:
        del ring[: len(ring) - limit]


class LexiconState(LexiconRecord):
    """The whole lexicon population plus its bounded histories.

    Every field is mandatory once constructed; partial snapshots are repaired
    by :meth:`from_snapshot`. Only :class:`~lexevo.evolution.engine.EvolutionEngine`
    mutates an instance; everybody else reads snapshots.
    """

    words: dict[str, Word] = Field(default_factory=dict)
    compounds: dict[str, Compound] = Field(default_factory=dict)
    generation: int = Field(default=0, ge=0)
    extinct: list[ExtinctRecord] = Field(default_factory=list)
    sound_shifts: list[SoundShiftRecord] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)
    stats: LexiconStats = Field(default_factory=LexiconStats)

    @field_validator("words", "compounds", "extinct", "sound_shifts", "events", mode="wrap")
    @classmethod
    def _drop_malformed(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        """Validate collection entries one at a time; a malformed entry is dropped alone."""
        keyed = info.field_name in ("words", "compounds")
        if keyed and isinstance(value, Mapping):
            kept: dict = {}
            for key, item in value.items():
                try:
                    kept.update(handler({key: item}))
                except ValidationError as exc:
                    logger.warning(
                        "[LexiconState] Dropped malformed {} entry {!r}: {}",
                        info.field_name,
                        key,
                        exc.errors(include_url=False)[0]["msg"],
                    )
            return kept
        if not keyed and isinstance(value, list):
            kept_items: list = []
            for index, item in enumerate(value):
                try:
                    kept_items.extend(handler([item]))
                except ValidationError as exc:
                    logger.warning(
                        "[LexiconState] Dropped malformed {} entry #{}: {}",
                        info.field_name,
                        index,
                        exc.errors(include_url=False)[0]["msg"],
                    )
            return kept_items
        return handler(value)

    @classmethod
    def from_snapshot(cls, data: Mapping[str, Any] | None) -> LexiconState:
        """Build a state from a (possibly partial) snapshot dict."""
        return cls.model_validate(dict(data or {}))

    # ------------------------------------------------------------------ reads

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def compound_count(self) -> int:
        return len(self.compounds)

    def covered_concepts(self) -> set[str]:
        return {w.meaning for w in self.words.values()}

    def is_form_taken(self, form: str) -> bool:
        return form in self.words or form in self.compounds

    def history(
        self,
        events: int = HISTORY_EVENTS,
        extinct: int = HISTORY_EXTINCT,
        shifts: int = HISTORY_SHIFTS,
    ) -> dict[str, Any]:
        return {
            "events": [e.model_dump(mode="json", by_alias=True) for e in self.events[-events:]],
            "extinct": [r.model_dump(mode="json") for r in self.extinct[-extinct:]],
            "sound_shifts": [
                r.model_dump(mode="json", by_alias=True) for r in self.sound_shifts[-shifts:]
            ],
            "compounds": {
                form: c.model_dump(mode="json") for form, c in self.compounds.items()
            },
        }

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    # -------------------------------------------------------------- bookkeeping

    def rename_word(self, old: str, new: str) -> Word:
        """Re-key a living word under ``new`` and append it to the word's history."""
        word = self.words.pop(old)
        word.history.append(new)
        self.words[new] = word
        return word

    def trim_rings(
        self,
        extinct: int = EXTINCT_LIMIT,
        shifts: int = SHIFT_LIMIT,
        events: int = EVENT_LIMIT,
    ) -> None:
        """Cut every history ring down to its limit, keeping the newest entries."""
        _trim(self.extinct, extinct)
        _trim(self.sound_shifts, shifts)
        _trim(self.events, events)

    def record_extinct(self, record: ExtinctRecord, limit: int = EXTINCT_LIMIT) -> None:
        self.extinct.append(record)
        _trim(self.extinct, limit)

    def record_shift(self, record: SoundShiftRecord, limit: int = SHIFT_LIMIT) -> None:
        self.sound_shifts.append(record)
        _trim(self.sound_shifts, limit)

    def archive_events(
        self, events: Sequence[Event], at: datetime, limit: int = EVENT_LIMIT
    ) -> list[Event]:
        """Stamp ``events`` with ``at`` and append them to the event log."""
        stamped = [e.model_copy(update={"time": at}) for e in events]
        self.events.extend(stamped)
        _trim(self.events, limit)
        return stamped
