from __future__ import annotations

from lexevo.evolution.engine.config import EngineConfig
from lexevo.evolution.engine.core import EvolutionEngine, GenerationResult, compound_form
from lexevo.evolution.engine.metrics import EngineMetrics

__all__ = [
    "EngineConfig",
    "EngineMetrics",
    "EvolutionEngine",
    "GenerationResult",
    "compound_form",
]
