"""Utility modules for ZappingTV"""

from .logging_setup import log_exception, setup_from_config, setup_logging

__all__ = [
    "log_exception",
    "setup_from_config",
    "setup_logging",
]
