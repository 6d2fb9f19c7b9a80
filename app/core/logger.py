import logging
import os
from typing import Optional

_configured = False


def _configure_root_logger() -> None:
    global _configured
    if _configured:
        return
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # httpx logs every request at INFO; keep it out of the request log
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module logger with consistent formatting.

    The root logger is configured once, on first use, with the level taken
    from LOG_LEVEL.
    """
    _configure_root_logger()
    return logging.getLogger(name or "video_analysis")
