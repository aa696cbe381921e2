"""hilite - reversible highlighting of rendered-text ranges in HTML trees.

Marks ``[start, end)`` ranges of the text a reader sees inside a
BeautifulSoup container with styled marker elements, and removes them again
without changing the container's text.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from hilite.highlighter import (
    Highlight,
    Highlighter,
    HighlightNotFoundError,
    HighlightState,
    HighlightStateError,
)

__version__ = "0.1.0"

__all__ = [
    "Highlight",
    "HighlightNotFoundError",
    "HighlightState",
    "HighlightStateError",
    "Highlighter",
    "__version__",
    "setup_logging",
]

_logging_configured = False


def setup_logging(level: str = "INFO", log_dir: Path | None = None) -> Path | None:
    """Configure logging to the console and, optionally, a rotating file.

    Returns:
        The log file path, or None when *log_dir* is not given.
    """
    global _logging_configured
    if _logging_configured:
        return None
    _logging_configured = True

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return None

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "hilite.log"

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(file_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())
    return log_file
