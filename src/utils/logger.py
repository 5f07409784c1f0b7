"""
Centralized logging infrastructure for the Neural Pong project.

Usage:
    from src.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Corpus loaded")
    logger.debug("Cram pass finished")
    logger.warning("Skipping malformed record")
    logger.error("Failed to save training data")

Configuration:
    Pass --log-level to main.py to control verbosity:
    - DEBUG: All messages including per-point training details
    - INFO: Normal operation messages (default)
    - WARNING: Warnings and errors only
    - ERROR: Errors only
"""

import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class LogLevel(Enum):
    """Log levels for configuration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


ROOT_LOGGER_NAME = 'neuropong'

# Module-level state
_initialized = False
_auto_initialized = False


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_logging(
    log_dir: str = 'logs',
    level: LogLevel = LogLevel.INFO,
    console_output: bool = True,
    file_output: bool = True,
    log_filename: Optional[str] = None,
) -> None:
    """
    Initialize the logging system.

    Args:
        log_dir: Directory for log files
        level: Minimum log level to capture
        console_output: Whether to output to console
        file_output: Whether to output to file
        log_filename: Custom log filename (default: pong_YYYYMMDD_HHMMSS.log)
    """
    global _initialized, _auto_initialized

    # an explicit call replaces the console-only auto setup
    if _initialized and not _auto_initialized:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.value)
    root_logger.handlers.clear()

    # Console handler with colors
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level.value)
        console_fmt = ColoredFormatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            use_colors=True
        )
        console_handler.setFormatter(console_fmt)
        root_logger.addHandler(console_handler)

    # File handler without colors
    if file_output:
        log_path_dir = Path(log_dir)
        log_path_dir.mkdir(parents=True, exist_ok=True)

        if log_filename is None:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_filename = f'pong_{timestamp}.log'

        log_path = log_path_dir / log_filename
        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Capture everything in file
        file_fmt = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
        )
        file_handler.setFormatter(file_fmt)
        root_logger.addHandler(file_handler)

    _initialized = True
    _auto_initialized = False
    root_logger.info(f"Logging initialized (level={level.name}, file={file_output})")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance configured with project settings

    Example:
        logger = get_logger(__name__)
        logger.info("Message")
    """
    # Auto-initialize with console only; main.py opts into the log file
    global _auto_initialized
    if not _initialized:
        setup_logging(file_output=False)
        _auto_initialized = True

    # Strip 'src.' prefix for cleaner names
    if name.startswith('src.'):
        name = name[4:]

    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def log_point_scored(
    scorer: str,
    left_score: int,
    right_score: int,
    epoch: int,
    corpus_size: int,
    loss: Optional[float] = None,
) -> None:
    """
    Log a scoring event in a consistent format.

    Args:
        scorer: 'left' (the network) or 'right' (the trainer)
        left_score: Left player's score after the point
        right_score: Right player's score after the point
        epoch: Serves so far
        corpus_size: Training samples held
        loss: Mean loss of the last cram pass (if any ran)
    """
    logger = get_logger('training')

    metrics = [
        f"epoch={epoch}",
        f"point={scorer}",
        f"score={left_score}-{right_score}",
        f"samples={corpus_size}",
    ]

    if loss is not None:
        metrics.append(f"loss={loss:.6f}")

    logger.info(" | ".join(metrics))


def log_corpus_event(event: str, path: str, **kwargs) -> None:
    """
    Log training data events (load/save).

    Args:
        event: Event type ('load', 'save')
        path: Corpus file path
        **kwargs: Additional context (e.g., samples, skipped)
    """
    logger = get_logger('data')

    extra = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    if extra:
        logger.info(f"{event.upper()} | {path} | {extra}")
    else:
        logger.info(f"{event.upper()} | {path}")
