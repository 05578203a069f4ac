import re

import pytest

from lexevo.evolution.engine import compound_form
from lexevo.lexicon import (
    DEFAULT_CATALOG,
    BirthEvent,
    Category,
    Compound,
    CompoundEvent,
    ExtinctEvent,
    LexiconState,
    ShiftEvent,
)

from tests.conftest import FIXED_TIME, QUIET, make_engine, make_word


def _counters(state: LexiconState) -> tuple[int, int, int, int]:
    s = state.stats
    return s.total_generated, s.total_extinct, s.total_compounds, s.total_shifts


def _run_long(engine, generations: int):
    """Advance ``generations`` times, asserting the per-step invariants."""
    seen_words = []  # keeps Word objects alive so id() stays unique
    histories: dict[int, list[str]] = {}
    counters = _counters(engine.state)

    for _ in range(generations):
        result = engine.advance_generation()
        state = engine.state

        assert not set(state.words) & set(state.compounds)
        assert all(w.fitness > 0 for w in state.words.values())
        assert all(w.fitness <= engine.config.fitness_cap for w in state.words.values())
        assert len(state.extinct) <= 50
        assert len(state.sound_shifts) <= 30
        assert len(state.events) <= 200

        now = _counters(state)
        assert all(b >= a for a, b in zip(counters, now))
        counters = now

        extinct_events = [e for e in result.events if isinstance(e, ExtinctEvent)]
        if extinct_events:
            recent = state.extinct[-len(extinct_events):]
            assert [(r.word, r.died) for r in recent] == [
                (e.word, result.generation) for e in extinct_events
            ]

        for form, word in state.words.items():
            assert word.history[-1] == form
            prev = histories.get(id(word))
            if prev is not None:
                assert word.history[: len(prev)] == prev
            else:
                seen_words.append(word)
            histories[id(word)] = list(word.history)


def test_seed_lexicon_assigns_distinct_concepts():
    engine = make_engine(seed=99)
    seeded = engine.seed_lexicon()

    words = engine.state.words
    assert 1 <= seeded == len(words) <= 10
    assert len({w.meaning for w in words.values()}) == seeded
    assert engine.state.stats.total_generated == seeded
    for form, word in words.items():
        assert (word.born, word.uses, word.fitness, word.history) == (0, 1, 1.0, [form])
        assert word.category is DEFAULT_CATALOG.category_of(word.meaning)

    assert engine.seed_lexicon() == 0


def test_same_seed_replays_the_same_history():
    runs = []
    for _ in range(2):
        engine = make_engine(seed=2024)
        engine.seed_lexicon()
        results = [engine.advance_generation().to_payload() for _ in range(150)]
        runs.append((results, engine.state.to_payload()))

    assert runs[0] == runs[1]


def test_long_run_keeps_invariants():
    engine = make_engine(seed=5)
    engine.seed_lexicon()
    _run_long(engine, 600)
    assert engine.state.generation == 600
    assert engine.state.stats.total_extinct > 0


def test_long_run_with_aggressive_rules_keeps_invariants():
    engine = make_engine(
        seed=17,
        birth_probability=1.0,
        shift_probability=1.0,
        shift_char_probability=0.5,
        compound_probability=1.0,
    )
    engine.seed_lexicon()
    _run_long(engine, 400)
    stats = engine.state.stats
    assert stats.total_shifts > 0
    assert stats.total_compounds > 0


def test_word_at_fitness_floor_goes_extinct_in_the_same_generation():
    state = LexiconState(
        words={"kama": make_word("kama", uses=0, fitness=0.05)},
        stats={"total_generated": 1},
    )
    engine = make_engine(state, usage_fitness_gain=0.0, **QUIET)

    result = engine.advance_generation()

    assert "kama" not in engine.state.words
    assert result.events == [ExtinctEvent(gen=1, word="kama", meaning="water")]
    record = engine.state.extinct[-1]
    assert (record.word, record.born, record.died) == ("kama", 0, 1)
    assert engine.state.stats.total_extinct == 1


def test_words_survive_while_fitness_stays_positive():
    state = LexiconState(words={"kama": make_word("kama", uses=0, fitness=0.06)})
    engine = make_engine(state, usage_fitness_gain=0.0, **QUIET)
    engine.advance_generation()
    assert engine.state.words["kama"].fitness == pytest.approx(0.01)


def test_unused_words_decay_faster_after_grace_period():
    state = LexiconState(
        generation=4,
        words={
            "kama": make_word("kama", uses=0, fitness=1.0, born=0),
        },
    )
    engine = make_engine(state, usage_fitness_gain=0.0, usage_fraction_divisor=1, **QUIET)
    engine.advance_generation()
    # used this generation (uses becomes 1) before decay -> plain age decay only
    assert engine.state.words["kama"].fitness == pytest.approx(0.95)

    cold = LexiconState(
        generation=4,
        words={f"w{i}": make_word(f"w{i}", uses=0, born=0) for i in range(3)},
    )
    engine = make_engine(cold, usage_fitness_gain=0.0, **QUIET)
    engine.advance_generation()
    # 3 words -> one used; the two unused ones take the extra disuse decay
    fitness = sorted(w.fitness for w in engine.state.words.values())
    assert fitness == pytest.approx([0.75, 0.75, 0.95])


def test_newborns_do_not_decay_in_their_birth_generation():
    engine = make_engine(birth_probability=1.0, shift_probability=0.0, compound_probability=0.0)
    result = engine.advance_generation()

    (birth,) = result.events
    assert isinstance(birth, BirthEvent)
    word = engine.state.words[birth.word]
    # born this generation and used (only word) -> 0.5 + 0.1, no decay
    assert word.fitness == pytest.approx(0.6)
    assert word.born == 1
    assert word.history == [birth.word]
    assert engine.state.stats.total_generated == 1


def test_birth_prefers_uncovered_concepts():
    missing = "whole"
    words = {
        f"w{i}": make_word(f"w{i}", meaning=c, category=DEFAULT_CATALOG.category_of(c))
        for i, c in enumerate(DEFAULT_CATALOG.concepts)
        if c != missing
    }
    engine = make_engine(LexiconState(words=words), birth_probability=1.0,
                         shift_probability=0.0, compound_probability=0.0)

    (birth,) = engine.advance_generation().events

    assert birth.meaning == missing
    assert birth.category is Category.BEING


@pytest.mark.parametrize("seed", range(5))
def test_birth_still_happens_when_every_concept_is_covered(seed):
    words = {
        f"w{i}": make_word(f"w{i}", meaning=c, category=DEFAULT_CATALOG.category_of(c))
        for i, c in enumerate(DEFAULT_CATALOG.concepts)
    }
    engine = make_engine(LexiconState(words=words), seed=seed, birth_probability=1.0,
                         shift_probability=0.0, compound_probability=0.0)

    result = engine.advance_generation()

    births = [e for e in result.events if isinstance(e, BirthEvent)]
    assert len(births) == 1
    assert births[0].meaning in DEFAULT_CATALOG
    assert result.word_count == len(DEFAULT_CATALOG) + 1


def test_birth_is_skipped_when_no_free_form_is_found():
    class StuckPhonology:
        def generate_word(self):
            return "ka"

    engine = make_engine(
        LexiconState(words={"ka": make_word("ka")}),
        birth_probability=1.0,
        max_birth_attempts=5,
        shift_probability=0.0,
        compound_probability=0.0,
    )
    engine.phonology = StuckPhonology()

    result = engine.advance_generation()

    assert result.events == []
    assert engine.metrics.skipped_births == 1
    assert engine.state.stats.total_generated == 0


def test_empty_lexicon_advances_without_events():
    engine = make_engine(**QUIET)
    result = engine.advance_generation()
    assert result.generation == 1
    assert result.events == []
    assert result.word_count == 0


def test_sound_shift_renames_the_word_and_records_it():
    state = LexiconState(words={"kata": make_word("kata", meaning="fire")})
    engine = make_engine(state, shift_probability=1.0, shift_char_probability=1.0,
                         birth_probability=0.0, compound_probability=0.0)

    (shift,) = engine.advance_generation().events

    assert isinstance(shift, ShiftEvent)
    assert shift.from_ == "kata"
    assert re.fullmatch(r"[gh]a[ds]a", shift.to)
    word = engine.state.words[shift.to]
    assert word.history == ["kata", shift.to]
    assert word.meaning == "fire"
    assert "kata" not in engine.state.words
    record = engine.state.sound_shifts[-1]
    assert (record.gen, record.from_, record.to) == (1, "kata", shift.to)
    assert engine.state.stats.total_shifts == 1


def test_sound_shift_into_an_occupied_form_is_a_no_op():
    taken = {
        form: Compound(parts=("a", "b"), meanings=("sun", "moon"), compound_meaning="sun-moon")
        for form in ("gada", "gasa", "hada", "hasa")
    }
    state = LexiconState(words={"kata": make_word("kata")}, compounds=taken)
    engine = make_engine(state, shift_probability=1.0, shift_char_probability=1.0,
                         birth_probability=0.0, compound_probability=0.0)

    result = engine.advance_generation()

    assert result.events == []
    assert list(engine.state.words) == ["kata"]
    assert engine.state.stats.total_shifts == 0


def test_compound_form_takes_halves():
    assert compound_form("kamana", "tiru") == "kamru"
    assert compound_form("ka", "ti") == "kai"
    assert compound_form("a", "tiru") == "aru"


@pytest.mark.parametrize("word_count", [0, 1, 2, 3])
def test_no_compounds_below_four_words(word_count):
    for seed in range(40):
        words = {f"w{i}x": make_word(f"w{i}x", meaning=f"m{i}") for i in range(word_count)}
        engine = make_engine(LexiconState(words=words), seed=seed,
                             compound_probability=1.0, birth_probability=0.0,
                             shift_probability=0.0)
        result = engine.advance_generation()
        assert not [e for e in result.events if isinstance(e, CompoundEvent)]
        assert engine.state.compounds == {}


def test_compounds_form_from_two_distinct_words():
    produced = []
    for seed in range(60):
        words = {
            "kamana": make_word("kamana", meaning="sun"),
            "tiru": make_word("tiru", meaning="moon"),
            "lowe": make_word("lowe", meaning="rain"),
            "supe": make_word("supe", meaning="sky"),
        }
        engine = make_engine(LexiconState(words=words), seed=seed,
                             compound_probability=1.0, birth_probability=0.0,
                             shift_probability=0.0)
        for event in engine.advance_generation().events:
            assert isinstance(event, CompoundEvent)
            first, second = event.parts
            assert first != second
            assert event.word == compound_form(first, second)
            assert event.meaning == f"{words[first].meaning}-{words[second].meaning}"
            compound = engine.state.compounds[event.word]
            assert compound.compound_meaning == event.meaning
            assert compound.born == 1
            assert event.word not in engine.state.words
            assert engine.state.stats.total_compounds == 1
            produced.append(event)
    assert produced


def test_compound_colliding_with_existing_compound_is_dropped():
    words = {"kaka": make_word("kaka", meaning="sun"), "kaki": make_word("kaki", meaning="moon"),
             "kako": make_word("kako", meaning="sky"), "kaku": make_word("kaku", meaning="rain")}
    # every blend of these forms is "ka" + "k?" -> pre-occupy all of them
    taken = {
        "ka" + tail: Compound(parts=("a", "b"), meanings=("x", "y"), compound_meaning="x-y")
        for tail in ("ka", "ki", "ko", "ku")
    }
    for seed in range(30):
        engine = make_engine(
            LexiconState(words=dict(words), compounds=dict(taken)), seed=seed,
            compound_probability=1.0, birth_probability=0.0, shift_probability=0.0,
        )
        result = engine.advance_generation()
        assert result.events == []
        assert len(engine.state.compounds) == 4


def test_events_are_archived_with_timestamps_and_returned_unstamped():
    engine = make_engine(birth_probability=1.0, shift_probability=0.0, compound_probability=0.0)
    result = engine.advance_generation()

    assert all(e.time is None for e in result.events)
    assert engine.state.events[-1].time == FIXED_TIME
    assert engine.state.events[-1].model_copy(update={"time": None}) == result.events[-1]

    payload = result.to_payload()
    assert set(payload) == {"generation", "events", "wordCount"}
    assert "time" not in payload["events"][0]


def test_usage_caps_fitness():
    state = LexiconState(words={"kama": make_word("kama", fitness=1.98)})
    engine = make_engine(state, age_decay=0.0, **QUIET)
    engine.advance_generation()
    word = engine.state.words["kama"]
    assert word.fitness == pytest.approx(2.0)
    assert word.uses == 2


def test_replace_state_and_snapshot_isolation():
    engine = make_engine(**QUIET)
    engine.replace_state(LexiconState(words={"kama": make_word("kama")}, generation=8))

    snap = engine.snapshot()
    snap.words["kama"].fitness = -5

    assert engine.state.words["kama"].fitness == 1.0
    assert engine.advance_generation().generation == 9
    assert engine.get_status()["generation"] == 9


def _oversized_state() -> LexiconState:
    return LexiconState.from_snapshot(
        {
            "words": {"kama": make_word("kama").model_dump()},
            "extinct": [{"word": f"w{i}", "meaning": "sun", "died": i} for i in range(80)],
            "sound_shifts": [
                {"gen": i, "from": "a", "to": "b", "meaning": "sun"} for i in range(45)
            ],
        }
    )


def test_loaded_oversized_rings_are_trimmed_to_the_engine_limits():
    engine = make_engine(_oversized_state(), **QUIET)
    for _ in range(5):
        engine.advance_generation()
    assert len(engine.state.extinct) == 50
    assert len(engine.state.sound_shifts) == 30

    engine = make_engine(extinct_limit=60, shift_limit=40, **QUIET)
    engine.replace_state(_oversized_state())
    assert len(engine.state.extinct) == 60
    assert engine.state.extinct[-1].word == "w79"
    assert len(engine.state.sound_shifts) == 40
