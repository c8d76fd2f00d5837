import logging
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from signal_grid.domain import config


def setup_logging(level: Union[int, str] = config.LOG_LEVEL,
                  log_file: Optional[str] = config.LOG_FILE) -> None:
    """Console logging plus an optional rotating file (1 MB, 2 backups)."""
    root = logging.getLogger()
    root.setLevel(level)

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)

    root.handlers.clear()
    root.addHandler(ch)

    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=2)
        fh.setFormatter(fmt)
        root.addHandler(fh)
