"""
Recovery strategy classifications for error handling.

These bases categorize errors by whether the core can recover locally
(fail open, return a sentinel) or must hand the failure to the caller.
"""

from typing import Any, Optional


class RecoverableError(Exception):
    """Base for errors the core recovers from without propagating."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class UnrecoverableError(Exception):
    """Base for errors that must abort the caller's operation."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False
