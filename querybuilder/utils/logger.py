"""
Logging system for the query builder engine.
Provides structured, human-readable logs with console and optional file output.
"""

import copy
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        # Copy so the file handler still sees plain text
        record = copy.copy(record)
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        record.msg = f"{color}{record.msg}{Colors.RESET}"
        return super().format(record)


class QueryBuilderLogger:
    """
    Central logging system for the engine.

    Features:
    - Console output with colors
    - Optional dated log file when a log directory is configured
    - Structured mutation lines for easy parsing
    """

    _instance: Optional['QueryBuilderLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, log_dir: str = "", log_level: str = "INFO"):
        if QueryBuilderLogger._initialized:
            return

        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = self._create_logger("querybuilder", log_level)

        QueryBuilderLogger._initialized = True

    def _create_logger(self, name: str, level: str) -> logging.Logger:
        """Create a configured logger instance."""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

        # File handler (plain text, no colors)
        if self.log_dir is not None:
            log_file = self.log_dir / f"querybuilder_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

        return logger

    def info(self, msg: str, *args, **kwargs):
        """Log info message."""
        self.main_logger.info(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message."""
        self.main_logger.debug(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message."""
        self.main_logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message."""
        self.main_logger.error(msg, *args, **kwargs)

    def mutation(self, action: str, **kwargs):
        """
        Log a tree mutation with structured format.

        Args:
            action: ADD_RULE, REMOVE_RULE, ADD_GROUP, REMOVE_GROUP,
                CHANGE_FIELD, CHANGE_OPERATOR, CHANGE_VALUE, ...
            **kwargs: Additional fields
        """
        if not self.main_logger.isEnabledFor(logging.DEBUG):
            return
        parts = [f"[{action}]"]
        for key, value in kwargs.items():
            parts.append(f"{key}={value!r}")
        self.main_logger.debug(" | ".join(parts))

    def rejected(self, action: str, reason: str, **kwargs):
        """Log a mutation that was refused or ignored."""
        parts = [f"[{action}:REJECTED]", reason]
        for key, value in kwargs.items():
            parts.append(f"{key}={value!r}")
        self.main_logger.warning(" | ".join(parts))


# Global logger instance
_logger: Optional[QueryBuilderLogger] = None


def get_logger(log_dir: Optional[str] = None, log_level: Optional[str] = None) -> QueryBuilderLogger:
    """Get or create the global logger instance (defaults from LogConfig)."""
    global _logger
    if _logger is None:
        if log_dir is None or log_level is None:
            from ..config import get_config
            log_config = get_config().log
            log_dir = log_config.log_dir if log_dir is None else log_dir
            log_level = log_config.level if log_level is None else log_level
        _logger = QueryBuilderLogger(log_dir, log_level)
    return _logger


def setup_logger(log_dir: str = "", log_level: str = "INFO") -> QueryBuilderLogger:
    """Initialize the logger with custom settings."""
    global _logger
    QueryBuilderLogger._initialized = False
    QueryBuilderLogger._instance = None
    _logger = QueryBuilderLogger(log_dir, log_level)
    return _logger
