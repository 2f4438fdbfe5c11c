"""Tests for bonding curve pricing, fees and market cap."""

import pytest

from apyx_core.curve.pricing import (
    BuyDeltas,
    base_for_quote,
    buy_tokens_delta,
    fee_adjusted_buy,
    market_cap,
    post_trade_market_cap,
    price_based_market_cap,
    price_per_unit,
    quote_for_base,
    sell_quote_delta,
)
from apyx_core.errors import CurveCompleteError
from apyx_core.models.accounts import CurveSnapshot


def _curve(vq=1000, vb=1000, rq=1000, rb=1000, supply=5000, complete=False) -> CurveSnapshot:
    return CurveSnapshot(
        virtual_quote_reserve=vq,
        virtual_base_reserve=vb,
        real_quote_reserve=rq,
        real_base_reserve=rb,
        total_supply=supply,
        complete=complete,
    )


class TestBaseForQuote:
    """Buy-side quote: tokens for a quote input."""

    def test_buy_quote_example(self):
        # x = 100, denom = 1100, floor(100 * 1000 / 1100) = 90
        assert base_for_quote(_curve(rq=0, rb=1000, supply=1000), 101) == 90

    def test_capped_at_real_base_reserve(self):
        assert base_for_quote(_curve(rb=5), 101) == 5

    def test_non_positive_input_is_zero(self):
        curve = _curve()
        assert base_for_quote(curve, 0) == 0
        assert base_for_quote(curve, -10) == 0

    def test_single_unit_rounds_to_zero(self):
        assert base_for_quote(_curve(), 1) == 0

    def test_zero_denominator_is_zero(self):
        assert buy_tokens_delta(0, 1000, 1) == 0

    def test_complete_curve_raises(self):
        with pytest.raises(CurveCompleteError):
            base_for_quote(_curve(complete=True), 101)

    def test_bounded_by_real_reserve(self):
        curve = _curve(vq=30_000, vb=1_000_000, rb=700_000, supply=1_000_000)
        for quote_in in (1, 2, 50, 999, 10_000, 10**6, 10**9):
            tokens = base_for_quote(curve, quote_in)
            assert 0 <= tokens <= curve.real_base_reserve


class TestQuoteForBase:
    """Sell-side quote: quote for a token input."""

    def test_sell_quote_example(self):
        assert quote_for_base(_curve(rq=1000), 100) == 90

    def test_capped_at_real_quote_reserve(self):
        assert quote_for_base(_curve(rq=10), 100) == 10

    def test_zero_virtual_base_is_zero(self):
        assert quote_for_base(_curve(vb=0), 100) == 0

    def test_non_positive_input_is_zero(self):
        assert quote_for_base(_curve(), 0) == 0

    def test_complete_curve_raises(self):
        with pytest.raises(CurveCompleteError) as exc_info:
            quote_for_base(_curve(complete=True), 100)
        assert exc_info.value.recoverable is False

    def test_bounded_by_real_reserve(self):
        curve = _curve(vq=30_000, vb=1_000_000, rq=2_500, supply=1_000_000)
        for base_in in (1, 10, 5_000, 10**6, 10**12):
            quote = quote_for_base(curve, base_in)
            assert 0 <= quote <= curve.real_quote_reserve

    def test_uncapped_delta(self):
        assert sell_quote_delta(1000, 1000, 100) == 90
        assert sell_quote_delta(1000, 1000, 0) == 0


class TestFeeAdjustedBuy:
    """Fee split and token prediction for a buy."""

    def test_split_without_overshoot(self):
        deltas = fee_adjusted_buy(10_000, 1000, 1000, 95, 30)

        # net = floor(10000 * 10000 / 10125) = 9876
        assert deltas.adjusted_net_quote == 9876
        assert deltas.protocol_fee == 94
        assert deltas.creator_fee == 30
        assert deltas.total_spent == 10_000
        # floor(9875 * 1000 / 10875)
        assert deltas.tokens_out == 908

    def test_overshoot_clawed_back_from_net(self):
        # net = 1, both fees round up to 1, excess of 1 comes out of net
        deltas = fee_adjusted_buy(2, 1000, 1000, 5000, 4000)

        assert deltas == BuyDeltas(adjusted_net_quote=0, tokens_out=0, protocol_fee=1, creator_fee=1)
        assert deltas.total_spent == 2

    def test_zero_spendable(self):
        deltas = fee_adjusted_buy(0, 1000, 1000, 95, 30)
        assert deltas.total_spent == 0
        assert deltas.tokens_out == 0

    def test_tokens_out_ignores_real_reserve_cap(self):
        # Same formula as base_for_quote but without the real reserve cap
        deltas = fee_adjusted_buy(1_000_000, 1000, 1000, 0, 0)
        assert deltas.tokens_out == buy_tokens_delta(1000, 1000, 1_000_000)

    @pytest.mark.parametrize("protocol_bps,creator_bps", [(0, 0), (95, 30), (100, 100), (5000, 4000), (1, 9998)])
    def test_split_never_exceeds_spendable(self, protocol_bps, creator_bps):
        for spendable in list(range(1, 300)) + [10**9, 10**9 + 7, 2**64 - 1]:
            deltas = fee_adjusted_buy(spendable, 30_000_000_000, 1_073_000_000_000_000, protocol_bps, creator_bps)
            assert deltas.total_spent <= spendable
            assert deltas.adjusted_net_quote >= 0


class TestMarketCap:
    """Market cap and price per unit."""

    def test_market_cap_example(self):
        assert market_cap(_curve(vq=1000, vb=1000, supply=5000)) == 5000

    def test_zero_virtual_base(self):
        assert market_cap(_curve(vb=0)) == 0

    def test_price_based_market_cap_floors_twice(self):
        curve = _curve(vq=1, vb=3, rb=1000, supply=3_000_000_000)
        # price 333_333_333 loses a unit that the single floor keeps
        assert market_cap(curve) == 1_000_000_000
        assert price_based_market_cap(curve) == 999_999_999

    def test_price_based_market_cap_agrees_on_round_prices(self):
        assert price_based_market_cap(_curve(vq=1000, vb=1000, supply=5000)) == 5000
        assert price_based_market_cap(_curve(vq=1200, vb=1000, supply=5000)) == 6000
        assert price_based_market_cap(_curve(vb=0)) == 0

    def test_price_per_unit(self):
        assert price_per_unit(_curve(vq=1000, vb=1000)) == 1_000_000
        assert price_per_unit(_curve(vq=1, vb=3)) == 333_333
        assert price_per_unit(_curve(vb=0)) == 0

    def test_post_trade_buy(self):
        curve = _curve()
        # vq 1100, vb 910
        assert post_trade_market_cap(curve, True, 100, 90) == 5000 * 1100 // 910

    def test_post_trade_sell(self):
        curve = _curve()
        assert post_trade_market_cap(curve, False, 90, 100) == 5000 * 910 // 1100

    def test_post_trade_degenerate_reserves(self):
        curve = _curve()
        assert post_trade_market_cap(curve, True, 100, 1000) == 0
        assert post_trade_market_cap(curve, False, 2000, 100) == 0

    def test_post_trade_leaves_snapshot_untouched(self):
        curve = _curve()
        post_trade_market_cap(curve, True, 100, 90)
        assert curve.virtual_quote_reserve == 1000
        assert curve.virtual_base_reserve == 1000


class TestCurveSnapshot:
    """Construction checks on curve snapshots."""

    def test_real_base_above_supply_rejected(self):
        with pytest.raises(ValueError):
            _curve(rb=6000, supply=5000)

    def test_reserve_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            _curve(vq=2**64)

    def test_float_reserve_rejected(self):
        with pytest.raises(TypeError):
            _curve(vq=1000.0)
