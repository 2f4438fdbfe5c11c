"""
Error handling tests for the prediction core.

Covers the recoverable / unrecoverable classification, the sentinel results
that replace exceptions for degenerate input, and fail-open recovery.
"""

import pytest

from conftest import make_address

from apyx_core.curve.pricing import market_cap, post_trade_market_cap, quote_for_base
from apyx_core.errors import (
    AccountDataError,
    AccountDecodeError,
    AccountFetchError,
    ConfigValidationError,
    CurveCompleteError,
    DuelAssetMismatchError,
    PredictionError,
    RecoverableError,
    UnrecoverableError,
)
from apyx_core.matchmaking.matchmaker import bucket_of
from apyx_core.models.accounts import CurveSnapshot, DuelStatus
from apyx_core.reconcile import DuelReconciler, ReconcileState


class TestErrorClassification:
    """Test error classification system."""

    def test_account_data_error_hierarchy(self):
        """Test that account data errors are recoverable."""
        base_error = AccountDataError("base error")
        assert base_error.recoverable is True
        assert base_error.context == {}
        assert base_error.address is None

        fetch_error = AccountFetchError("timed out", timeout=True, address=make_address(1))
        assert isinstance(fetch_error, RecoverableError)
        assert fetch_error.timeout is True
        assert fetch_error.address == make_address(1)

        decode_error = AccountDecodeError("short", account_type="duel", expected_len=10, actual_len=4)
        assert isinstance(decode_error, AccountDataError)
        assert decode_error.account_type == "duel"
        assert decode_error.expected_len == 10
        assert decode_error.actual_len == 4

    def test_prediction_error_hierarchy(self):
        """Test that prediction failures are unrecoverable."""
        complete = CurveCompleteError(curve_address=make_address(2))
        assert isinstance(complete, PredictionError)
        assert complete.recoverable is False
        assert str(complete) == "Curve is complete"
        assert complete.curve_address == make_address(2)

        mismatch = DuelAssetMismatchError("not in duel", asset_id=make_address(3), context={"bucket": 1})
        assert isinstance(mismatch, UnrecoverableError)
        assert mismatch.context == {"bucket": 1}

    def test_config_validation_error(self):
        """Test that config errors carry their validation errors."""
        error = ConfigValidationError("invalid", errors=["a", "b"])
        assert error.recoverable is False
        assert error.errors == ["a", "b"]


class TestSentinelResults:
    """Degenerate inputs return zero or None instead of raising."""

    def test_degenerate_reserves(self):
        curve = CurveSnapshot(
            virtual_quote_reserve=1000,
            virtual_base_reserve=0,
            real_quote_reserve=1000,
            real_base_reserve=0,
            total_supply=5000,
        )
        assert quote_for_base(curve, 100) == 0
        assert market_cap(curve) == 0
        assert post_trade_market_cap(curve, True, 10, 0) == 0

    def test_ineligible_and_overflow(self, program_config):
        assert bucket_of(0, program_config) is None
        assert bucket_of(2**64 - 1, program_config) is None

    def test_complete_curve_propagates(self):
        curve = CurveSnapshot(
            virtual_quote_reserve=1000,
            virtual_base_reserve=1000,
            real_quote_reserve=1000,
            real_base_reserve=0,
            total_supply=5000,
            complete=True,
        )
        with pytest.raises(CurveCompleteError):
            quote_for_base(curve, 1)


class TestFailOpenRecovery:
    """Duel fetch failures never surface from reconcile."""

    def test_repeated_failures_stay_inactive(self, store, active_duel):
        duel = make_address(0xD1)
        store.put_duel(duel, active_duel)
        for _ in range(3):
            store.fail_next(duel)

        reconciler = DuelReconciler(store)
        curve = CurveSnapshot(
            virtual_quote_reserve=1000,
            virtual_base_reserve=1000,
            real_quote_reserve=1000,
            real_base_reserve=1000,
            total_supply=5000,
            last_duel=duel,
            cached_duel_status=DuelStatus.PENDING,
        )

        states = [reconciler.reconcile(curve).state for _ in range(4)]

        assert states == [ReconcileState.TRUSTED_INACTIVE] * 3 + [ReconcileState.TRUSTED_ACTIVE]
