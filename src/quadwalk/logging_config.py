import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"


def setup_logging(level="INFO", log_file=None, max_bytes=1048576, backup_count=3):
    """Configure the root logger: console always, rotating file when asked."""

    numeric_level = getattr(logging, str(level).upper().strip(), None)
    invalid = not isinstance(numeric_level, int)
    if invalid:
        numeric_level = logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        )

    logging.basicConfig(level=numeric_level, format=FORMAT, handlers=handlers, force=True)

    if invalid:
        logging.warning(f"[LOGGING] Invalid level '{level}', using INFO")
    if log_file:
        logging.info(f"[LOGGING] Writing log to {log_file}")
