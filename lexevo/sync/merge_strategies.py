from functools import partial
from typing import Callable

from loguru import logger

from lexevo.lexicon.state import EXTINCT_LIMIT, SHIFT_LIMIT, LexiconState
from lexevo.sync.models import RemoteSnapshot

MergeStrategy = Callable[[LexiconState, RemoteSnapshot], LexiconState]


def _longer(local: list, remote: list) -> list:
    """Longer list wins (treated as the more complete history); ties keep local."""
    return remote if len(remote) > len(local) else local


def merge_snapshots(
    local: LexiconState,
    remote: RemoteSnapshot,
    *,
    extinct_limit: int = EXTINCT_LIMIT,
    shift_limit: int = SHIFT_LIMIT,
) -> LexiconState:
    """
    Build a new state from the local one and a peer snapshot:
      - words / compounds / generation -> taken from REMOTE wholesale
      - extinct / sound_shifts         -> the longer of the two (ring-trimmed)
      - stats                          -> remote when present, else local
      - events                         -> always LOCAL
    Neither input is mutated; the result shares no objects with them.
    """
    if remote.generation < local.generation:
        logger.debug(
            "[merge] peer generation {} is behind local {}; mirroring peer anyway",
            remote.generation,
            local.generation,
        )

    remote = remote.model_copy(deep=True)
    local = local.model_copy(deep=True)

    return LexiconState(
        words=remote.words,
        compounds=remote.compounds,
        generation=remote.generation,
        extinct=_longer(local.extinct, remote.extinct)[-extinct_limit:],
        sound_shifts=_longer(local.sound_shifts, remote.sound_shifts)[-shift_limit:],
        events=local.events,
        stats=remote.stats if remote.stats is not None else local.stats,
    )


def resolve_merge_strategy(
    strategy: str | MergeStrategy,
    *,
    extinct_limit: int = EXTINCT_LIMIT,
    shift_limit: int = SHIFT_LIMIT,
) -> MergeStrategy:
    if callable(strategy):
        return strategy
    if strategy == "prefer_remote":
        return partial(
            merge_snapshots, extinct_limit=extinct_limit, shift_limit=shift_limit
        )
    raise ValueError("Unknown merge_strategy. Only 'prefer_remote' is supported.")
