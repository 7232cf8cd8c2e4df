"""Logging configuration for the Slack connector, read from the environment."""

import os
import logging
import sys
from typing import Optional, TextIO
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "slack-connector"

# Loggers of the Slack client stack, quieted to SLACK_SDK_LOG_LEVEL
SLACK_CLIENT_LOGGERS = ("slack_sdk", "urllib3")


class LoggingConfig:
    """Logging settings shared by the connector and its endpoints."""

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json").lower()
    LOG_MASK_SENSITIVE = os.environ.get("LOG_MASK_SENSITIVE", "true").lower() == "true"
    LOG_SLOW_OPERATION_THRESHOLD_MS = int(os.environ.get("LOG_SLOW_OPERATION_THRESHOLD_MS", "1000"))
    SLACK_SDK_LOG_LEVEL = os.environ.get("SLACK_SDK_LOG_LEVEL", "WARNING").upper()

    @classmethod
    def setup_logging(cls, stream: Optional[TextIO] = None) -> logging.Handler:
        """
        Route all records to a single stdout handler and return it.

        JSON records carry a static ``service`` field so that lines from
        several connector deployments can be told apart.
        """
        root_logger = logging.getLogger()
        level = getattr(logging, cls.LOG_LEVEL, logging.INFO)
        root_logger.setLevel(level)

        root_logger.handlers.clear()

        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setLevel(level)

        if cls.LOG_FORMAT == "json":
            formatter = jsonlogger.JsonFormatter(
                "%(timestamp)s %(levelname)s %(name)s %(message)s",
                timestamp=True,
                static_fields={"service": SERVICE_NAME},
            )
        else:
            formatter = logging.Formatter(
                f"%(asctime)s - {SERVICE_NAME} - %(name)s - %(levelname)s - %(message)s"
            )

        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

        client_level = getattr(logging, cls.SLACK_SDK_LOG_LEVEL, logging.WARNING)
        for name in SLACK_CLIENT_LOGGERS:
            logging.getLogger(name).setLevel(client_level)

        return handler


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
