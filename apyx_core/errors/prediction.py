"""
Prediction failures that must propagate to the caller.

Building an instruction after one of these would produce a transaction the
remote program rejects.
"""

from typing import Optional

from .recovery import UnrecoverableError


class PredictionError(UnrecoverableError):
    """Base class for fatal prediction failures."""


class CurveCompleteError(PredictionError):
    """Pricing was requested on a curve that has already graduated."""

    def __init__(self, message: str = "Curve is complete", curve_address: Optional[bytes] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.curve_address = curve_address


class DuelAssetMismatchError(PredictionError):
    """An active duel was found that does not pair the traded asset."""

    def __init__(self, message: str, duel_address: Optional[bytes] = None,
                 asset_id: Optional[bytes] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.duel_address = duel_address
        self.asset_id = asset_id
