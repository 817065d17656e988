"""
Centralized logging configuration for the giveaway services
Console output plus optional rotating file logs, level from LOG_LEVEL
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from roulette_system import config

DETAILED_FORMAT = '[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s'
SIMPLE_FORMAT = '[%(asctime)s] %(levelname)-8s %(message)s'


def _build_handlers(numeric_level, log_file):
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(fmt=SIMPLE_FORMAT, datefmt='%H:%M:%S'))
    handlers = [console_handler]

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # 10MB max, keep 5 backups
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(fmt=DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        handlers.append(file_handler)

    return handlers


def setup_logging(app_name='roulette_system', log_level=None, log_file=None, extra_loggers=()):
    """
    Setup logging with console and optional file handlers

    Args:
        app_name: Name of the application logger
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file (enables file logging)
        extra_loggers: Other logger names (e.g. 'roulette_system') that
            should share the same handlers

    Returns:
        logging.Logger: Configured application logger
    """
    if log_level is None:
        log_level = config.LOG_LEVEL
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        handlers = _build_handlers(numeric_level, log_file)
    except OSError as e:
        handlers = _build_handlers(numeric_level, None)
        logging.getLogger(app_name).error(f"Failed to setup file logging: {e}")

    for name in (app_name, *extra_loggers):
        configured = logging.getLogger(name)
        configured.setLevel(numeric_level)
        # Remove existing handlers to avoid duplicates
        configured.handlers.clear()
        for handler in handlers:
            configured.addHandler(handler)
        configured.propagate = False

    logger = logging.getLogger(app_name)
    if log_file and len(handlers) > 1:
        logger.info(f"File logging enabled: {log_file}")
    return logger


def log_route_access(logger, route, method='GET', giveaway_id=None):
    """Log route access with context"""
    context_str = f" [giveaway={giveaway_id}]" if giveaway_id else ""
    logger.info(f"{method} {route}{context_str}")
