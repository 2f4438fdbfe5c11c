"""Display-oriented quote helpers built on the pricing functions."""

from dataclasses import dataclass
from typing import Optional

from ..config.defaults import FeeParams
from ..models.accounts import BPS_DENOMINATOR, CurveSnapshot, ProgramConfig
from .pricing import fee_adjusted_buy, market_cap, price_per_unit

LAMPORTS_PER_SOL = 1_000_000_000


@dataclass(frozen=True)
class TokenSummary:
    """Point-in-time pricing summary for one curve."""
    price_per_unit: int                 # lamports per whole token (6 decimals)
    market_cap: int
    tokens_out_per_sol: int             # after fees, for 1 SOL spent
    net_quote_per_sol: int
    circulating_supply: int
    graduated: bool
    graduation_progress_bps: Optional[int] = None

    @property
    def price_in_sol(self) -> float:
        return lamports_to_sol(self.price_per_unit)

    @property
    def market_cap_in_sol(self) -> float:
        return lamports_to_sol(self.market_cap)


def with_slippage_buy(amount: int, slippage_bps: int) -> int:
    """Upper bound for a buy: amount plus the slippage buffer."""
    return amount + amount * slippage_bps // BPS_DENOMINATOR


def with_slippage_sell(amount: int, slippage_bps: int) -> int:
    """Lower bound for a sell: amount minus the slippage buffer."""
    return amount - amount * slippage_bps // BPS_DENOMINATOR


def lamports_to_sol(amount: int) -> float:
    """Presentation only; never feed the result back into pricing."""
    return amount / LAMPORTS_PER_SOL


def summarize_curve(
    curve: CurveSnapshot,
    config: Optional[ProgramConfig] = None,
    fees: Optional[FeeParams] = None
) -> TokenSummary:
    """
    Summarize price, market cap and supply for a curve.

    Fees come from the program config when given, else from the fee
    defaults.

    Args:
        curve: Curve snapshot to summarize
        config: Program config, used for fees and graduation progress
        fees: Fee fallback when no config is available

    Returns:
        TokenSummary for the curve
    """
    if config is not None:
        protocol_fee_bps, creator_fee_bps = config.protocol_fee_bps, config.creator_fee_bps
    else:
        fees = fees or FeeParams()
        protocol_fee_bps, creator_fee_bps = fees.protocol_fee_bps, fees.creator_fee_bps

    one_sol = fee_adjusted_buy(
        LAMPORTS_PER_SOL,
        curve.virtual_quote_reserve,
        curve.virtual_base_reserve,
        protocol_fee_bps,
        creator_fee_bps,
    )

    progress = None
    if config is not None and config.initial_real_base_reserve > 0:
        sold = max(config.initial_real_base_reserve - curve.real_base_reserve, 0)
        progress = min(sold * BPS_DENOMINATOR // config.initial_real_base_reserve, BPS_DENOMINATOR)

    return TokenSummary(
        price_per_unit=price_per_unit(curve),
        market_cap=market_cap(curve),
        tokens_out_per_sol=one_sol.tokens_out,
        net_quote_per_sol=one_sol.adjusted_net_quote,
        circulating_supply=curve.total_supply - curve.real_base_reserve,
        graduated=curve.complete,
        graduation_progress_bps=progress,
    )
