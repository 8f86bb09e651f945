import logging
import sys


def setup_logging(level: str = "INFO", fmt: str = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"):
    """Configure the root logger with a single stdout handler."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S'))
    logger.addHandler(console_handler)

    # urllib3 is chatty at DEBUG
    logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))
    logging.getLogger("matplotlib").setLevel(max(log_level, logging.WARNING))
