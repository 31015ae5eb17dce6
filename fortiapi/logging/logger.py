"""
fortiapi Structured Logging

JSON log entries for the client and CLI tools. Each entry names the
appliance it concerns, so logs from several tools can be merged.
"""

import logging
import logging.config
import json
import os
from datetime import datetime, timezone
from typing import IO, Optional

import yaml

PACKAGE_LOGGER = "fortiapi"


class StructuredFormatter(logging.Formatter):
    """Formats each record as one JSON object tagged with the appliance hostname"""

    def __init__(self, hostname: str = "-"):
        super().__init__()
        self.hostname = hostname

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "hostname": self.hostname,
            "logger": record.name,
            "message": record.getMessage()
        }

        # Callers attach transaction ids and the like via extra={'extra_fields': {...}}
        entry.update(getattr(record, 'extra_fields', {}))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def get_logger(
    name: str = PACKAGE_LOGGER,
    hostname: Optional[str] = None,
    level: int = logging.INFO,
    stream: Optional[IO[str]] = None
) -> logging.Logger:
    """
    Route a logger to a stream as structured entries.

    Any structured handler left by an earlier call is replaced, so the
    hostname tag and the stream always follow the latest call. Other
    handlers are kept.

    Args:
        name: Logger name; the package logger covers every fortiapi module
        hostname: Appliance to tag entries with ('-' if unknown)
        level: Logging level
        stream: Output stream (sys.stderr if omitted)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    for handler in list(logger.handlers):
        if isinstance(handler.formatter, StructuredFormatter):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter(hostname or "-"))

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    return logger


def configure_logging(config_path: Optional[str] = None, default_level: int = logging.WARNING) -> bool:
    """
    Configure logging from a YAML file. Falls back to basicConfig on failure.

    Args:
        config_path: Path to YAML logging config
        default_level: Default log level for fallback config

    Returns:
        True if YAML config loaded, False otherwise
    """
    if config_path and os.path.isfile(config_path):
        try:
            with open(config_path, "r", encoding="utf-8") as handle:
                config = yaml.safe_load(handle)

            if not config:
                raise ValueError("Logging config is empty")

            for handler in config.get("handlers", {}).values():
                filename = handler.get("filename")
                if filename:
                    os.makedirs(os.path.dirname(filename) or ".", exist_ok=True)

            logging.config.dictConfig(config)
            return True
        except (OSError, ValueError, yaml.YAMLError) as e:
            logging.basicConfig(level=default_level)
            logging.getLogger(__name__).warning(f"Ignoring logging config {config_path}: {e}")
            return False

    logging.basicConfig(level=default_level)
    return False
