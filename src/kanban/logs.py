import logging
import sys
from typing import Optional

from .config import KanbanConfig

def setup_logging(config: Optional[KanbanConfig] = None):
    """Set up logging configuration for the kanban package with environment-based levels."""
    if config is None:
        config = KanbanConfig.from_env()

    # Standardized log format with more detail
    log_format = '[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    detailed_formatter = logging.Formatter(log_format, date_format)
    console_formatter = logging.Formatter(
        '%(levelname)-8s [%(name)s] %(message)s' if config.debug
        else '%(levelname)s: %(message)s'
    )

    logger = logging.getLogger('kanban')
    logger.setLevel(logging.DEBUG)  # Logger accepts all, handlers filter
    logger.handlers.clear()

    # File handler (always detailed); skipped when the log directory is not writable
    try:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_dir / "kanban.log", encoding='utf-8')
    except OSError as e:
        file_handler = None
        print(f"WARNING: file logging disabled, cannot use {config.log_dir}: {e}", file=sys.stderr)
    if file_handler is not None:
        file_handler.setFormatter(detailed_formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(config.console_level)
    logger.addHandler(console_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger

def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'kanban.{name}')
    return logging.getLogger('kanban')
