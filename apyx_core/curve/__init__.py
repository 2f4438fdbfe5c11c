"""Bonding curve pricing and quote helpers"""

from .pricing import (
    BuyDeltas,
    base_for_quote,
    fee_adjusted_buy,
    market_cap,
    post_trade_market_cap,
    price_per_unit,
    quote_for_base,
)
from .quotes import TokenSummary, summarize_curve, with_slippage_buy, with_slippage_sell

__all__ = [
    "BuyDeltas",
    "TokenSummary",
    "base_for_quote",
    "fee_adjusted_buy",
    "market_cap",
    "post_trade_market_cap",
    "price_per_unit",
    "quote_for_base",
    "summarize_curve",
    "with_slippage_buy",
    "with_slippage_sell",
]
