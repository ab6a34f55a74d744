import logging
import os

def get_logger(name="magia_interna", level=None):
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level or os.environ.get("MAGIA_LOG_LEVEL", "INFO").upper())
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(ch)
    return logger
