"""Logging configuration"""

import logging
import sys
from pathlib import Path
from pythonjsonlogger import jsonlogger

ROOT_LOGGER = 'queue_monitor'

TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
JSON_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'

# HTTP client chatter on every poll and webhook call
NOISY_LOGGERS = ['urllib3', 'requests']


def build_formatter(log_format):
    """Build a text or JSON formatter"""
    if log_format == 'json':
        return jsonlogger.JsonFormatter(
            JSON_FORMAT,
            rename_fields={'levelname': 'level', 'name': 'logger', 'asctime': 'timestamp'}
        )
    return logging.Formatter(TEXT_FORMAT, datefmt='%Y-%m-%dT%H:%M:%S')


def build_handlers(log_file=None):
    """Stdout handler, plus a file handler when log_file is set"""
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    return handlers


def setup_logger(config):
    """
    Configure the queue_monitor logger hierarchy from the 'monitor' section

    Args:
        config: Configuration dictionary

    Returns:
        The root queue_monitor logger
    """
    settings = config.get('monitor', {})
    level = getattr(logging, str(settings.get('log_level', 'INFO')).upper(), logging.INFO)
    formatter = build_formatter(settings.get('log_format', 'text'))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    log_file = settings.get('log_file')
    try:
        handlers = build_handlers(log_file)
    except OSError as e:
        handlers = build_handlers()
        file_error = e
    else:
        file_error = None

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if file_error:
        logger.warning(f"Failed to setup file logging to {log_file}: {file_error}")

    # HTTP client debug output only when running at DEBUG
    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    return logger


def get_logger(name):
    """Get logger instance"""
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')
