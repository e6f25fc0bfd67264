import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_DIR = os.environ.get("SHOPPING_LOG_DIR")


def setup_logger(log_dir=LOG_DIR, level=logging.INFO):
    """
    Configure the "shopping" logger shared by the cart, product and service modules.

    - Console output, plus daily rotating log files when `log_dir` is set
    - Unified log format with timestamp and level
    - Creates the log directory automatically
    """
    logger = logging.getLogger("shopping")
    logger.setLevel(level)

    # Avoid duplicate handlers if setup_logger() is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=path / "shopping.log",
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logger initialized")
    return logger
