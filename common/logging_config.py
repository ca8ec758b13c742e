"""Logging setup shared by the transfer library and the CLI."""

import logging
import os
import re
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FORMAT_WITH_CORRELATION = '%(asctime)s - %(name)s - %(levelname)s - [{correlation_id}] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

MASK = '***MASKED***'


class SensitiveDataFilter(logging.Filter):
    """Filter to mask session ids, share tokens and credentials in log records."""

    PATTERNS = [
        (re.compile(r'(bearer\s+)([^\s,}\'\"\]]+)', re.IGNORECASE), rf'\1{MASK}'),
        (re.compile(r'(session[_-]?id["\']?\s*[:=]\s*["\']?)([^"\'}\s,\]]+)', re.IGNORECASE), rf'\1{MASK}'),
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)([^"\'}\s,\]]+)', re.IGNORECASE), rf'\1{MASK}'),
        (re.compile(r'(authorization["\']?\s*[:=]\s*["\']?)([^"\'}\s,\]]+)', re.IGNORECASE), rf'\1{MASK}'),
        (re.compile(r'(password["\']?\s*[:=]\s*["\']?)([^"\'}\s,\]]+)', re.IGNORECASE), rf'\1{MASK}'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask sensitive data in the log message and its arguments."""
        if isinstance(record.msg, str):
            record.msg = mask_sensitive(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._mask_value(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(self._mask_value(arg) for arg in record.args)

        return True

    @staticmethod
    def _mask_value(value):
        if isinstance(value, str):
            return mask_sensitive(value)
        return value


def mask_sensitive(text: str) -> str:
    """
    Replace secrets in free text with a mask.

    Args:
        text: Text that may contain session ids or tokens

    Returns:
        Text with every secret value replaced
    """
    for pattern, replacement in SensitiveDataFilter.PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def _build_formatter(correlation_id: Optional[str] = None) -> logging.Formatter:
    if correlation_id:
        return logging.Formatter(
            LOG_FORMAT_WITH_CORRELATION.format(correlation_id=correlation_id),
            datefmt=DATE_FORMAT
        )
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    correlation_id: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    Handlers are attached to the root logger of every top-level package so
    that ``get_logger(__name__)`` loggers across the project share them.

    Args:
        component_name: Name of the component (e.g., 'cli')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO
        correlation_id: Optional correlation ID to include in log format

    Returns:
        Configured logger for the component
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')

    level = getattr(logging, log_level.upper(), logging.INFO)

    for name in (component_name, 'common', 'transfer'):
        logger = logging.getLogger(name)
        logger.setLevel(level)

        if logger.handlers:
            continue

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(_build_formatter(correlation_id))
        handler.addFilter(SensitiveDataFilter())

        logger.addHandler(handler)
        logger.propagate = False

    return logging.getLogger(component_name)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
