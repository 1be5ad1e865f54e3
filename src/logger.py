# src/logger.py
import logging
from logging.handlers import RotatingFileHandler
import os

LOG_FILE = os.getenv("RELAY_LOG", "relay.log")
LOG_LEVEL = os.getenv("RELAY_LOG_LEVEL", "INFO").upper()

logger = logging.getLogger("relay")
logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

if not logger.handlers:
    handler = RotatingFileHandler(LOG_FILE, maxBytes=5_000_000, backupCount=3)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    # also console
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)
