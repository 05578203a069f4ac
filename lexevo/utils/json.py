"""Unified JSON helper backed by **orjson**.

Snapshots are stored as ``str`` documents (Redis values, files), so
:func:`dumps` always returns ``str`` rather than orjson's ``bytes``.
"""
from __future__ import annotations

from typing import Any

import orjson as _backend

__all__ = ["dumps", "loads"]


def dumps(obj: Any) -> str:
    """Serialize *obj* to a ``str`` using orjson (bytes → str)."""
    return _backend.dumps(obj).decode()


loads = _backend.loads