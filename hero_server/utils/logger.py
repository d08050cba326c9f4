import logging
import sys
from datetime import datetime
from pathlib import Path

from hero_server.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def log_file_path(log_dir: str = None, prefix: str = None, day: datetime = None) -> Path:
    """Daily log file, e.g. logs/hero_server_20240131.log"""
    day = day or datetime.now()
    directory = Path(log_dir or Config.LOG_DIR)
    return directory / f"{prefix or Config.LOG_FILE_PREFIX}_{day.strftime('%Y%m%d')}.log"


def setup_logger(name: str) -> logging.Logger:
    """Attach console and daily file handlers to a named logger once."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = logging.DEBUG if Config.DEBUG else logging.INFO
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    path = log_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, encoding='utf-8')
    # The file keeps debug detail even when the console is at INFO
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger
