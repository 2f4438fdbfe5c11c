"""
Account store and decoding errors.

These are recovered locally by the reconciler (fail open) and only surface
from direct store or decoder calls.
"""

from typing import Optional

from .recovery import RecoverableError


class AccountDataError(RecoverableError):
    """Base class for account retrieval problems."""

    def __init__(self, message: str, address: Optional[bytes] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.address = address


class AccountFetchError(AccountDataError):
    """Transport or availability failure while fetching an account."""

    def __init__(self, message: str, timeout: bool = False, **kwargs):
        super().__init__(message, **kwargs)
        self.timeout = timeout


class AccountDecodeError(AccountDataError):
    """Account bytes do not match the expected layout."""

    def __init__(self, message: str, account_type: Optional[str] = None,
                 expected_len: Optional[int] = None, actual_len: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.account_type = account_type
        self.expected_len = expected_len
        self.actual_len = actual_len
