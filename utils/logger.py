"""
Logging configuration with daily file rotation and retention cleanup.
"""
import os
import logging
from logging.handlers import TimedRotatingFileHandler
from datetime import datetime, timedelta
from pathlib import Path

from config import Config


LOGS_DIR = os.path.abspath(Config.LOG_DIR)
LOG_FILE = os.path.join(LOGS_DIR, "renderri.log")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_RETENTION_DAYS = 10


def cleanup_old_logs(directory: str, retention_days: int = LOG_RETENTION_DAYS) -> int:
    """Remove rotated log files older than retention_days. Returns the number removed."""
    log_dir = Path(directory)
    if not log_dir.exists():
        return 0

    cutoff = datetime.now() - timedelta(days=retention_days)
    deleted_count = 0
    for log_file in log_dir.glob("renderri.log.*"):
        if not log_file.is_file():
            continue
        # Rotated files are suffixed with YYYY-MM-DD
        suffix = log_file.name.replace("renderri.log.", "")
        try:
            file_date = datetime.strptime(suffix, "%Y-%m-%d")
        except ValueError:
            file_date = datetime.fromtimestamp(log_file.stat().st_mtime)
        if file_date >= cutoff:
            continue
        try:
            log_file.unlink()
            deleted_count += 1
        except OSError as e:
            logging.getLogger("renderri").warning(f"Failed to delete log file {log_file.name}: {e}")
    return deleted_count


def setup_logger(name: str = "renderri", level: int = logging.INFO) -> logging.Logger:
    """
    Set up the root application logger with a rotating file and console output.

    Args:
        name: Logger name
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", "%H:%M:%S")
    )
    logger.addHandler(console_handler)

    try:
        os.makedirs(LOGS_DIR, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            LOG_FILE,
            when="midnight",
            interval=1,
            backupCount=LOG_RETENTION_DAYS,
            encoding="utf-8",
            utc=True
        )
    except OSError as e:
        logger.warning(f"File logging disabled, could not open {LOG_FILE}: {e}")
        return logger

    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(file_handler)

    removed = cleanup_old_logs(LOGS_DIR, LOG_RETENTION_DAYS)
    if removed:
        logger.info(f"Cleaned up {removed} old log file(s)")

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Area name (if None, returns the root application logger)

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger("renderri")
    return logging.getLogger(f"renderri.{name}")


app_logger = setup_logger("renderri", logging.INFO)
app_logger.info(f"Application logger initialized (dir: {LOGS_DIR}, retention: {LOG_RETENTION_DAYS} days)")
