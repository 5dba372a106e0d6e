import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class EventFilter(logging.Filter):
    def filter(self, record):
        return hasattr(record, "event") and record.event is not None


def setup_logging(
    log_file: Optional[str] = None,
    json_log_file: Optional[str] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure the root logger.

    - text log file (optional)
    - console output
    - JSON log file for records carrying an ``event`` field (optional)
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if json_log_file:
        json_handler = logging.FileHandler(json_log_file)
        json_handler.setFormatter(
            jsonlogger.JsonFormatter(
                "%(asctime)s %(levelname)s %(message)s %(event)s",
                rename_fields={"levelname": "level", "asctime": "timestamp"},
            )
        )
        json_handler.addFilter(EventFilter())
        logger.addHandler(json_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
