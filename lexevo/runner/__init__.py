from .runner import LexiconRunner, RunnerConfig

__all__ = [
    "LexiconRunner",
    "RunnerConfig",
]
