"""loguru sinks for the lexicon server: console plus a rotating log file."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
import sys

from loguru import logger
from pydantic import BaseModel, Field

_PLAIN_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"
)
_COLOR_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<blue>{function}</blue>:<yellow>{line}</yellow> | "
    "<level>{message}</level>"
)


class LoggingConfig(BaseModel):
    log_dir: str = Field(default="logs")
    level: str = Field(default="INFO")
    rotation: str = Field(default="50 MB", description='loguru rotation, e.g. "1 day"')
    retention: str = Field(default="30 days")
    colors: bool = Field(default=True, description="Colorize console output on a TTY")

    model_config = {"extra": "forbid"}


def setup_logger(config: LoggingConfig | None = None) -> Path:
    """Replace loguru's default sink with console and file sinks.

    Each process start writes to its own ``lexicon_<UTC timestamp>.log`` in
    ``config.log_dir``; rotated files are zipped. Returns the log file path.
    """
    config = config or LoggingConfig()
    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"lexicon_{stamp}.log"

    logger.remove()

    colorize = config.colors and sys.stdout.isatty()
    logger.add(
        sys.stdout,
        level=config.level,
        format=_COLOR_FORMAT if colorize else _PLAIN_FORMAT,
        colorize=colorize,
        backtrace=True,
        diagnose=False,
    )
    logger.add(
        log_file,
        level=config.level,
        format=_PLAIN_FORMAT,
        rotation=config.rotation,
        retention=config.retention,
        compression="zip",
        encoding="utf-8",
        backtrace=True,
        diagnose=False,
    )

    logger.debug("[logging] level={}, colors={}", config.level, colorize)
    return log_file
