"""
Custom exceptions for treetrans.

Usage:
    from treetrans.utils.exceptions import TranslationError, SetupError

    raise TranslationError("Empty response", source_file=path, api="gemini")

Setup-class errors abort a run before any file is touched. Translation and
file errors are recovered per file by the walker.
"""
from typing import Optional, Dict, Any


class TreeTransError(Exception):
    """Base exception for all treetrans errors."""

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class SetupError(TreeTransError):
    """Fatal error before processing starts (roots, provider, lock)."""


class ConfigError(SetupError):
    """Error in configuration."""

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.config_key = config_key
        self.expected_type = expected_type
        if config_key:
            self.details["config_key"] = config_key
        if expected_type:
            self.details["expected_type"] = expected_type


class TranslationError(TreeTransError):
    """Error during translation of one document."""

    def __init__(
        self,
        message: str,
        *,
        source_file: Optional[str] = None,
        api: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.source_file = source_file
        self.api = api
        if source_file:
            self.details["source_file"] = source_file
        if api:
            self.details["api"] = api


class FileOperationError(TreeTransError):
    """Error during file operations."""

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,  # stat, read, write, copy, mkdir
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.file_path = file_path
        self.operation = operation
        if file_path:
            self.details["file_path"] = file_path
        if operation:
            self.details["operation"] = operation


class CheckpointError(TreeTransError):
    """Persisted checkpoint document could not be parsed."""

    def __init__(
        self,
        message: str,
        *,
        checkpoint_path: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.checkpoint_path = checkpoint_path
        if checkpoint_path:
            self.details["checkpoint_path"] = checkpoint_path
