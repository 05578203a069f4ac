from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from lexevo.lexicon.models import (
    Compound,
    ExtinctRecord,
    LexiconRecord,
    LexiconStats,
    SoundShiftRecord,
    Word,
)


class RemoteSnapshot(LexiconRecord):
    """Peer state as served by its ``/api/state`` route.

    The peer's event log is not read: the local log is never replaced.
    ``stats`` stays ``None`` when the peer omits it so the merge can tell.
    """

    words: dict[str, Word] = Field(default_factory=dict)
    compounds: dict[str, Compound] = Field(default_factory=dict)
    generation: int = Field(default=0, ge=0)
    extinct: list[ExtinctRecord] = Field(default_factory=list)
    sound_shifts: list[SoundShiftRecord] = Field(default_factory=list)
    stats: LexiconStats | None = None


class SyncConfig(BaseModel):
    """Peer location and fetch timeout."""

    enabled: bool = Field(default=False, description="Poll the peer at all")
    peer_url: str | None = Field(
        default=None, description="Base URL of the peer lexicon server"
    )
    state_path: str = Field(default="/api/state")
    timeout: float = Field(default=3.0, gt=0, description="Seconds before a fetch counts as failed")
    merge_strategy: str = Field(default="prefer_remote")

    model_config = ConfigDict(extra="forbid")

    @property
    def state_url(self) -> str | None:
        if not self.peer_url:
            return None
        return self.peer_url.rstrip("/") + self.state_path
