"""Utility modules for treetrans."""
from .config import Config
from .logger import get_logger, setup_logging, set_level
from .exceptions import (
    TreeTransError,
    SetupError,
    ConfigError,
    TranslationError,
    FileOperationError,
    CheckpointError,
)

__all__ = [
    # Config
    'Config',
    # Logger
    'get_logger',
    'setup_logging',
    'set_level',
    # Exceptions
    'TreeTransError',
    'SetupError',
    'ConfigError',
    'TranslationError',
    'FileOperationError',
    'CheckpointError',
]
