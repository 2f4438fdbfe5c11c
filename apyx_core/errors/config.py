"""Configuration errors."""

from typing import Any

from .recovery import UnrecoverableError


class ConfigValidationError(UnrecoverableError):
    """Configuration failed validation."""

    def __init__(self, message: str, errors: list[Any], **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors
