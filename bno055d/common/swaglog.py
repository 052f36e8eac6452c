import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_cloudlog(name: str = "bno055d") -> logging.Logger:
  logger = logging.getLogger(name)
  if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(os.environ.get("LOGLEVEL", "INFO").upper())
    logger.propagate = False
  return logger


cloudlog = get_cloudlog()
