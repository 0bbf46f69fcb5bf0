"""
Utility modules.
"""

from .logger import get_logger, setup_logger, QueryBuilderLogger

__all__ = [
    # Logger
    "get_logger",
    "setup_logger",
    "QueryBuilderLogger",
]
