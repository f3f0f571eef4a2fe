# dailyreport/logger.py
import logging
import os
import sys

def setup_logger(name: str):
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # already configured (module re-imported under tests)
    level = getattr(logging, os.getenv("LOG_LEVEL", "DEBUG").upper(), logging.DEBUG)
    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger

logger = setup_logger("DailyReport")
