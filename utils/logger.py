"""Logger factory with an optional file handler."""

import logging
from pathlib import Path
from typing import Optional, Union

FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def get_logger(
    name: str,
    file_path: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
) -> logging.Logger:
    """Return a configured logger, attaching a ``file_path`` handler if given.

    Handlers are attached once per logger name, so calling this at import
    time from many modules never duplicates output.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        formatter = logging.Formatter(FORMAT)
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        if file_path:
            Path(file_path).parent.mkdir(parents=True, exist_ok=True)
            f_handler = logging.FileHandler(file_path, encoding="utf-8")
            f_handler.setFormatter(formatter)
            logger.addHandler(f_handler)
    logger.setLevel(level)
    return logger
