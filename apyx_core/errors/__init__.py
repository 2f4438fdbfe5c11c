"""
Error classification for the prediction core.

Local problems (zero results, "no bucket" sentinels, failed duel fetches)
are recovered without propagating. Curve completion and duel asset
mismatches propagate as typed failures.
"""

from .account_data import (
    AccountDataError,
    AccountDecodeError,
    AccountFetchError,
)
from .config import ConfigValidationError
from .prediction import (
    CurveCompleteError,
    DuelAssetMismatchError,
    PredictionError,
)
from .recovery import (
    RecoverableError,
    UnrecoverableError,
)

__all__ = [
    # Account data
    "AccountDataError",
    "AccountDecodeError",
    "AccountFetchError",
    # Prediction failures
    "PredictionError",
    "CurveCompleteError",
    "DuelAssetMismatchError",
    # Configuration
    "ConfigValidationError",
    # Recovery categories
    "RecoverableError",
    "UnrecoverableError",
]
