from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
import random
from typing import Any, Callable

from loguru import logger
from pydantic import BaseModel, Field

from lexevo.evolution.engine.config import EngineConfig
from lexevo.evolution.engine.metrics import EngineMetrics
from lexevo.lexicon.concepts import DEFAULT_CATALOG, ConceptCatalog
from lexevo.lexicon.models import (
    BirthEvent,
    Compound,
    CompoundEvent,
    Event,
    ExtinctEvent,
    ExtinctRecord,
    ShiftEvent,
    SoundShiftRecord,
    Word,
)
from lexevo.lexicon.state import LexiconState
from lexevo.phonology.generator import PhonologyGenerator
from lexevo.phonology.sound_changes import apply_sound_shift

__all__ = ["EvolutionEngine", "GenerationResult", "compound_form"]


def compound_form(first: str, second: str) -> str:
    """Initial half of ``first`` (at least two characters) + trailing half of ``second``."""
    return first[: max(2, len(first) // 2)] + second[len(second) // 2 :]


class GenerationResult(BaseModel):
    generation: int
    events: list[Event] = Field(default_factory=list)
    word_count: int = 0

    def to_payload(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "events": [
                e.model_dump(mode="json", by_alias=True, exclude_none=True)
                for e in self.events
            ],
            "wordCount": self.word_count,
        }


class EvolutionEngine:
    """
    Owns the lexicon state and advances it one generation at a time:
    - Rules run in a fixed order: birth, usage, decay, extinction, sound shift, compounding.
    - Every probability is an independent draw from ``self.rng``; a seeded
      engine replays the same history.
    - Consumers read :meth:`snapshot`; only this class mutates the state.
    """

    def __init__(
        self,
        state: LexiconState | None = None,
        config: EngineConfig | None = None,
        *,
        catalog: ConceptCatalog = DEFAULT_CATALOG,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config or EngineConfig()
        self.catalog = catalog
        self.rng = rng or random.Random(self.config.seed)
        self.phonology = PhonologyGenerator(self.rng)
        self.metrics = EngineMetrics()

        self._state = state if state is not None else LexiconState()
        self._enforce_limits(self._state)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        logger.info(
            "[EvolutionEngine] Init | generation={}, words={}, compounds={}",
            self._state.generation,
            self._state.word_count,
            self._state.compound_count,
        )

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> LexiconState:
        """Live state. Treat as read-only outside the engine."""
        return self._state

    def snapshot(self) -> LexiconState:
        """Deep copy of the current state for read-only consumers."""
        return self._state.model_copy(deep=True)

    def replace_state(self, state: LexiconState) -> None:
        """Swap in a fully built state in a single assignment."""
        self._enforce_limits(state)
        self._state = state
        logger.debug(
            "[EvolutionEngine] State replaced | generation={}, words={}",
            state.generation,
            state.word_count,
        )

    def seed_lexicon(self) -> int:
        """Give up to ``seed_size`` distinct concepts one word each, if the lexicon is empty."""
        state = self._state
        if state.words:
            return 0

        picks = [self.rng.choice(self.catalog.concepts) for _ in range(self.config.seed_size)]
        seeded = 0
        for concept in dict.fromkeys(picks):
            form = self._new_form()
            if form is None:
                break
            state.words[form] = Word(
                meaning=concept,
                category=self.catalog.category_of(concept),
                born=state.generation,
                uses=1,
                fitness=1.0,
                history=[form],
            )
            seeded += 1

        state.stats.total_generated += seeded
        logger.info("[EvolutionEngine] Seeded {} word(s)", seeded)
        return seeded

    # ------------------------------------------------------------------ step

    def advance_generation(self) -> GenerationResult:
        state = self._state
        gen = state.generation + 1
        state.generation = gen
        events: list[Event] = []

        self._birth(gen, events)
        self._usage()
        self._decay(gen)
        self._extinction(gen, events)
        self._sound_shift(gen, events)
        self._compound(gen, events)

        now = self._clock()
        state.archive_events(events, now, limit=self.config.event_limit)
        self._update_metrics(events, now)

        logger.debug(
            "[EvolutionEngine] Gen {} | words={}, compounds={}, events={}",
            gen,
            state.word_count,
            state.compound_count,
            len(events),
        )
        if events:
            logger.info(
                "[EvolutionEngine] Gen {}: {}", gen, ", ".join(e.type for e in events)
            )
        return GenerationResult(generation=gen, events=events, word_count=state.word_count)

    # ------------------------------------------------------------------ rules

    def _birth(self, gen: int, events: list[Event]) -> None:
        if self.rng.random() >= self.config.birth_probability:
            return

        state = self._state
        covered = state.covered_concepts()
        uncovered = [c for c in self.catalog.concepts if c not in covered]
        concept = self.rng.choice(uncovered or self.catalog.concepts)

        form = self._new_form()
        if form is None:
            self.metrics.skipped_births += 1
            logger.warning(
                "[EvolutionEngine] Birth skipped at gen {}: no free form after {} attempts",
                gen,
                self.config.max_birth_attempts,
            )
            return

        category = self.catalog.category_of(concept)
        state.words[form] = Word(
            meaning=concept,
            category=category,
            born=gen,
            uses=0,
            fitness=self.config.birth_fitness,
            history=[form],
        )
        state.stats.total_generated += 1
        events.append(BirthEvent(gen=gen, word=form, meaning=concept, category=category))

    def _usage(self) -> None:
        forms = list(self._state.words)
        if not forms:
            return
        count = max(1, len(forms) // self.config.usage_fraction_divisor)
        self.rng.shuffle(forms)
        for form in forms[:count]:
            word = self._state.words[form]
            word.uses += 1
            word.fitness = min(
                self.config.fitness_cap, word.fitness + self.config.usage_fitness_gain
            )

    def _decay(self, gen: int) -> None:
        cfg = self.config
        for word in self._state.words.values():
            age = gen - word.born
            if age <= 0:
                continue
            word.fitness -= cfg.age_decay
            if word.uses == 0 and age > cfg.disuse_grace_age:
                word.fitness -= cfg.disuse_decay

    def _extinction(self, gen: int, events: list[Event]) -> None:
        state = self._state
        dead = [form for form, word in state.words.items() if word.fitness <= 0]
        for form in dead:
            word = state.words.pop(form)
            state.record_extinct(
                ExtinctRecord(
                    word=form, meaning=word.meaning, born=word.born, died=gen, uses=word.uses
                ),
                limit=self.config.extinct_limit,
            )
            state.stats.total_extinct += 1
            events.append(ExtinctEvent(gen=gen, word=form, meaning=word.meaning))

    def _sound_shift(self, gen: int, events: list[Event]) -> None:
        state = self._state
        if self.rng.random() >= self.config.shift_probability or not state.words:
            return

        target = self.rng.choice(list(state.words))
        new_form, fired = apply_sound_shift(
            target, self.rng, self.config.shift_char_probability
        )
        if not fired or new_form == target or state.is_form_taken(new_form):
            return

        word = state.rename_word(target, new_form)
        state.record_shift(
            SoundShiftRecord(gen=gen, from_=target, to=new_form, meaning=word.meaning),
            limit=self.config.shift_limit,
        )
        state.stats.total_shifts += 1
        events.append(ShiftEvent(gen=gen, from_=target, to=new_form, meaning=word.meaning))

    def _compound(self, gen: int, events: list[Event]) -> None:
        state = self._state
        if (
            self.rng.random() >= self.config.compound_probability
            or state.word_count < self.config.compound_min_words
        ):
            return

        forms = list(state.words)
        first, second = self.rng.choice(forms), self.rng.choice(forms)
        if first == second:
            return

        form = compound_form(first, second)
        if state.is_form_taken(form):
            return

        meanings = (state.words[first].meaning, state.words[second].meaning)
        meaning = f"{meanings[0]}-{meanings[1]}"
        state.compounds[form] = Compound(
            parts=(first, second), meanings=meanings, compound_meaning=meaning, born=gen
        )
        state.stats.total_compounds += 1
        events.append(
            CompoundEvent(gen=gen, word=form, meaning=meaning, parts=(first, second))
        )

    # ------------------------------------------------------------------ helpers

    def _new_form(self) -> str | None:
        """Generate a surface form unused by any word or compound, or None when retries run out."""
        for _ in range(self.config.max_birth_attempts):
            form = self.phonology.generate_word()
            if not self._state.is_form_taken(form):
                return form
        return None

    def _enforce_limits(self, state: LexiconState) -> None:
        state.trim_rings(
            extinct=self.config.extinct_limit,
            shifts=self.config.shift_limit,
            events=self.config.event_limit,
        )

    def _update_metrics(self, events: list[Event], now: datetime) -> None:
        counts = Counter(e.type for e in events)
        m = self.metrics
        m.total_generations += 1
        m.births += counts["birth"]
        m.extinctions += counts["extinct"]
        m.shifts += counts["shift"]
        m.compounds += counts["compound"]
        m.last_generation_time = now
        m.events_per_generation.append(len(events))

    def get_status(self) -> dict[str, object]:
        """Light, non-blocking status for UIs/health checks."""
        return {
            "generation": self._state.generation,
            "words": self._state.word_count,
            "compounds": self._state.compound_count,
            **self.metrics.to_dict(),
        }
