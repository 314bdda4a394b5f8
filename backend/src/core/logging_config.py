"""
Logging configuration for the aquarium backend.

Console output is human-readable outside production and one JSON object per
line in production, where the `extra={...}` fields the services attach
(address, tx_hash, tank_id, stage) become top-level keys the sweeper and
on-call tooling can filter on.
"""

import logging
import logging.config
import os
import sys
from typing import Dict, Any

SERVICE_NAME = "aquarium-backend"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
)
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(service)s %(environment)s %(message)s"


class ServiceContextFilter(logging.Filter):
    """Stamps every record with the service name and deployment environment."""

    def __init__(self, environment: str = "development"):
        super().__init__()
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = SERVICE_NAME
        record.environment = self.environment
        return True


def get_log_level() -> str:
    """Get the log level from environment variables."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_environment() -> str:
    return os.getenv("ENVIRONMENT", "development").lower()


def _formatter(json_output: bool, detailed: bool = False) -> Dict[str, Any]:
    if json_output:
        return {
            "class": "pythonjsonlogger.json.JsonFormatter",
            "format": JSON_FORMAT,
            "datefmt": "%Y-%m-%dT%H:%M:%S",
        }
    return {
        "class": "logging.Formatter",
        "format": TEXT_DETAILED_FORMAT if detailed else TEXT_FORMAT,
        "datefmt": "%Y-%m-%d %H:%M:%S",
    }


def get_logging_config() -> Dict[str, Any]:
    """
    Get the logging configuration dictionary for `logging.config.dictConfig()`.

    The `aquarium.*` loggers carry the service output; sqlalchemy and httpx
    are held at WARNING so per-query and per-request lines stay out of the
    reconciliation logs.
    """
    log_level = get_log_level()
    environment = get_environment()
    json_output = environment == "production"

    app_logger = {
        "level": log_level,
        "handlers": ["console", "error_console"],
        "propagate": False,
    }
    quiet_logger = {
        "level": "WARNING",
        "handlers": ["console"],
        "propagate": False,
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "service_context": {
                "()": ServiceContextFilter,
                "environment": environment,
            },
        },
        "formatters": {
            "default": _formatter(json_output),
            "detailed": _formatter(json_output, detailed=True),
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "default",
                "filters": ["service_context"],
                "stream": sys.stdout,
            },
            "error_console": {
                "class": "logging.StreamHandler",
                "level": "ERROR",
                "formatter": "detailed",
                "filters": ["service_context"],
                "stream": sys.stderr,
            },
        },
        "loggers": {
            "aquarium": dict(app_logger),
            "aquarium.services": dict(app_logger),
            "aquarium.core": dict(app_logger),
            "aquarium.api": dict(app_logger),
            "sqlalchemy.engine": dict(quiet_logger),
            "httpx": dict(quiet_logger),
            "uvicorn": {**quiet_logger, "level": "INFO"},
            "uvicorn.access": {**quiet_logger, "level": "INFO"},
        },
        "root": {
            "level": log_level,
            "handlers": ["console", "error_console"],
        },
    }


def setup_logging() -> None:
    """
    Configure logging for the application.

    Call once at startup, before any other logging occurs.
    """
    logging.config.dictConfig(get_logging_config())

    logging.getLogger("aquarium.logging").info(
        "Logging configured",
        extra={"log_level": get_log_level(), "environment": get_environment()},
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger in the `aquarium.*` hierarchy.

    `backend.src.services.sync_service` becomes
    `aquarium.services.sync_service`; any other name is prefixed with
    `aquarium.`.
    """
    if name.startswith("aquarium.") or name == "aquarium":
        return logging.getLogger(name)

    prefix = "backend.src."
    if name.startswith(prefix):
        suffix = name[len(prefix):]
        return logging.getLogger(f"aquarium.{suffix}" if suffix else "aquarium")

    return logging.getLogger(f"aquarium.{name}")
