"""Logging for the crawl: console always, rotating file when a log dir is set.

Document workers run on pool threads named ``doc_N``; the thread name is part
of every line so interleaved per-document messages can be told apart.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOGGER_NAME = "etd_crawler"
LOG_FILE = "crawler.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"

# httpx/httpcore log each request at INFO, which repeats "Fetching from ..."
NOISY_LIBRARIES = ("httpx", "httpcore")


def _file_handler(log_dir: str) -> RotatingFileHandler:
    os.makedirs(log_dir, exist_ok=True)
    # 10MB per file, keep 5
    return RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE),
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )


def setup_logger(log_dir: Optional[str] = "logs", level: int = logging.INFO) -> logging.Logger:
    """Configure the crawler logger once; later calls only adjust the level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers = [logging.StreamHandler()]
    if log_dir:
        handlers.append(_file_handler(log_dir))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    return logger
