import logging  # standard logging module
from logging.handlers import TimedRotatingFileHandler  # time based log rotation
import os

from app.core.config import LOG_DIR, LOG_LEVEL

LOG_FILE = "app.log"
LOG_PATH = os.path.join(LOG_DIR, LOG_FILE)

# Create the log directory on first import
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Root logger, shared by every module
logger = logging.getLogger()
logger.setLevel(LOG_LEVEL)

# Avoid registering handlers twice (reloads, test sessions)
if not logger.handlers:
    # File handler: new file every midnight, keep 7 days
    file_handler = TimedRotatingFileHandler(
        filename=LOG_PATH, when="midnight", interval=1, backupCount=7, encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)
