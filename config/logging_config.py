import logging
import sys
import os
import json
from datetime import datetime

# Fields the realtime relay attaches to its records via `extra=`
RELAY_CONTEXT_FIELDS = ("connection_id", "user_id", "society_id", "event_type")

NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "apscheduler")


def relay_context(connection, event_type=None) -> dict:
    """`extra=` payload describing a WebSocket connection and the event being handled"""
    return {
        "connection_id": connection.connection_id[:8],
        "user_id": connection.user_id,
        "society_id": connection.society_id,
        "event_type": event_type,
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shipping"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for attr in RELAY_CONTEXT_FIELDS:
            value = getattr(record, attr, None)
            if value is not None:
                log_data[attr] = value

        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Human-readable lines; level coloured on a terminal, relay context appended"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if sys.stdout.isatty():
            color = self.COLORS.get(record.levelname, "")
            line = line.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)

        context = [
            f"{attr}={getattr(record, attr)}"
            for attr in RELAY_CONTEXT_FIELDS
            if getattr(record, attr, None) is not None
        ]
        if context:
            line = f"{line} [{' '.join(context)}]"
        return line


def setup_logging(
    level: str = None,
    json_format: bool = None,
    log_file: str = None
):
    """
    Configure root logging for the API and the realtime relay.

    Args:
        level: Log level name; defaults to LOG_LEVEL or INFO
        json_format: JSON lines on stdout; defaults to LOG_JSON=true
        log_file: Extra JSON log file; defaults to LOG_FILE
    """
    level = level or os.getenv("LOG_LEVEL", "INFO")
    if json_format is None:
        json_format = os.getenv("LOG_JSON", "false").lower() == "true"
    log_file = log_file or os.getenv("LOG_FILE")

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        JSONFormatter() if json_format else StandardFormatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
