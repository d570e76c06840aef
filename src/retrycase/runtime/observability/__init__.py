"""Observability: logging configuration for retry activity."""

from .logging import ROOT_LOGGER, JsonFormatter, configure_logging

__all__ = ["ROOT_LOGGER", "JsonFormatter", "configure_logging"]
