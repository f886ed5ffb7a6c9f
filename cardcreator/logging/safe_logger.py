"""Logger configuration with automatic PII masking."""

import sys
from typing import Optional

from loguru import logger

from ..config import CardCreatorConfig, DEFAULT_CONFIG
from .pii_filters import redact_record

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

_configured = False


def configure_logging(cfg: Optional[CardCreatorConfig] = None, *, force: bool = False) -> None:
    """Install the console (and optional file) sinks once per process."""
    global _configured
    if _configured and not force:
        return

    cfg = cfg or DEFAULT_CONFIG
    logger.remove()
    logger.configure(patcher=redact_record)
    logger.add(sys.stderr, level=cfg.log_level, format=CONSOLE_FORMAT, colorize=None)

    if cfg.log_file:
        try:
            cfg.log_file.parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                str(cfg.log_file),
                level="DEBUG",
                format=FILE_FORMAT,
                encoding="utf-8",
                rotation="5 MB",
                retention=3,
            )
        except OSError as exc:
            logger.warning(f"File logging disabled, cannot open {cfg.log_file}: {exc}")

    _configured = True
    logger.debug(f"Logging configured (level={cfg.log_level})")
