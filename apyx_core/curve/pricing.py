"""
Bonding curve pricing, fee and market cap arithmetic.

Every function here must agree with the remote program to the integer:
all division is floor division unless noted, and nothing is ever promoted to
floating point. Python ints are unbounded, so products of u128 reserves need
no special handling.
"""

from dataclasses import dataclass

from ..errors import CurveCompleteError
from ..logging.config import get_logger
from ..models.accounts import BPS_DENOMINATOR, CurveSnapshot

logger = get_logger(__name__)

PRICE_SCALE = 1_000_000                             # 6 implied decimal digits
ONE_BILLION = 1_000_000_000                         # price scale used for duel resolution


@dataclass(frozen=True)
class BuyDeltas:
    """Three-way split of a buy input plus the predicted token output."""
    adjusted_net_quote: int
    tokens_out: int
    protocol_fee: int
    creator_fee: int

    @property
    def total_spent(self) -> int:
        return self.adjusted_net_quote + self.protocol_fee + self.creator_fee


def ensure_open(curve: CurveSnapshot) -> None:
    if curve.complete:
        raise CurveCompleteError(curve_address=curve.address)


def _ceil_div(numerator: int, denominator: int) -> int:
    return (numerator + denominator - 1) // denominator


def sell_quote_delta(virtual_quote: int, virtual_base: int, base_in: int) -> int:
    """
    Uncapped sell output against virtual reserves.

    quote_out = floor(base_in * virtual_quote / (virtual_base + base_in))
    """
    if base_in <= 0 or virtual_base == 0:
        return 0

    denominator = virtual_base + base_in
    if denominator == 0:
        return 0

    return base_in * virtual_quote // denominator


def buy_tokens_delta(virtual_quote: int, virtual_base: int, quote_in: int) -> int:
    """
    Uncapped buy output against virtual reserves.

    tokens_out = floor((quote_in - 1) * virtual_base / (virtual_quote + quote_in - 1))

    The -1 biases rounding toward the protocol and must not be removed.
    """
    if quote_in <= 0:
        return 0

    quote_in_minus_one = quote_in - 1
    denominator = virtual_quote + quote_in_minus_one
    if denominator == 0:
        return 0

    return quote_in_minus_one * virtual_base // denominator


def quote_for_base(curve: CurveSnapshot, base_in: int) -> int:
    """
    Quote received for selling base_in tokens, capped at real quote reserves.

    Raises:
        CurveCompleteError: If the curve has graduated
    """
    ensure_open(curve)

    quote_out = sell_quote_delta(curve.virtual_quote_reserve, curve.virtual_base_reserve, base_in)
    return min(quote_out, curve.real_quote_reserve)


def base_for_quote(curve: CurveSnapshot, quote_in: int) -> int:
    """
    Tokens received for quote_in (fees ignored), capped at real base reserves.

    Raises:
        CurveCompleteError: If the curve has graduated
    """
    ensure_open(curve)

    tokens_out = buy_tokens_delta(curve.virtual_quote_reserve, curve.virtual_base_reserve, quote_in)
    return min(tokens_out, curve.real_base_reserve)


def fee_adjusted_buy(
    spendable: int,
    virtual_quote: int,
    virtual_base: int,
    protocol_fee_bps: int,
    creator_fee_bps: int
) -> BuyDeltas:
    """
    Split a buy input into net quote and fees, then predict tokens out.

    net = floor(spendable * 10000 / (10000 + total_fee_bps)); each fee is
    ceil(net * bps / 10000). Because fees round up while net rounds down,
    net + fees can exceed spendable by a few units; the excess comes out of
    net only, so the split never exceeds spendable.

    Args:
        spendable: Quote amount the user is willing to spend, fees included
        virtual_quote: Virtual quote reserve to price against
        virtual_base: Virtual base reserve to price against
        protocol_fee_bps: Protocol fee in basis points
        creator_fee_bps: Creator fee in basis points

    Returns:
        BuyDeltas with the adjusted net quote, token output and both fees
    """
    if spendable <= 0:
        return BuyDeltas(adjusted_net_quote=0, tokens_out=0, protocol_fee=0, creator_fee=0)

    total_fee_bps = protocol_fee_bps + creator_fee_bps
    net_quote = spendable * BPS_DENOMINATOR // (BPS_DENOMINATOR + total_fee_bps)

    protocol_fee = _ceil_div(net_quote * protocol_fee_bps, BPS_DENOMINATOR)
    creator_fee = _ceil_div(net_quote * creator_fee_bps, BPS_DENOMINATOR)

    adjusted_net_quote = net_quote
    overshoot = net_quote + protocol_fee + creator_fee - spendable
    if overshoot > 0:
        adjusted_net_quote = net_quote - overshoot
        logger.debug(
            "Clawed back fee rounding from net quote",
            spendable=spendable,
            net_quote=net_quote,
            overshoot=overshoot,
        )

    tokens_out = 0
    if adjusted_net_quote > 0:
        tokens_out = buy_tokens_delta(virtual_quote, virtual_base, adjusted_net_quote)

    return BuyDeltas(
        adjusted_net_quote=adjusted_net_quote,
        tokens_out=tokens_out,
        protocol_fee=protocol_fee,
        creator_fee=creator_fee,
    )


def market_cap_from_reserves(total_supply: int, virtual_quote: int, virtual_base: int) -> int:
    """floor(total_supply * virtual_quote / virtual_base), 0 on degenerate reserves."""
    if virtual_base <= 0 or virtual_quote < 0:
        return 0
    return total_supply * virtual_quote // virtual_base


def market_cap(curve: CurveSnapshot) -> int:
    """Market cap in quote units priced off the virtual reserves."""
    return market_cap_from_reserves(
        curve.total_supply, curve.virtual_quote_reserve, curve.virtual_base_reserve
    )


def price_based_market_cap(curve: CurveSnapshot) -> int:
    """
    Market cap derived from the per-token price, floored twice.

    price = floor(virtual_quote * 1e9 / virtual_base)
    market_cap = floor(price * total_supply / 1e9)

    Can come out one unit below market_cap(). Winner prediction compares
    against this value because the program resolves duels with it.
    """
    if curve.virtual_base_reserve == 0:
        return 0
    price = curve.virtual_quote_reserve * ONE_BILLION // curve.virtual_base_reserve
    return price * curve.total_supply // ONE_BILLION


def post_trade_market_cap(curve: CurveSnapshot, is_buy: bool, quote_delta: int, base_delta: int) -> int:
    """
    Predict the market cap after a trade is applied to the virtual reserves.

    A buy adds quote_delta to the virtual quote reserve and removes base_delta
    from the virtual base reserve; a sell does the inverse. The snapshot is
    not modified. Matchmaking buckets are derived from this post-trade value
    because the remote program enters the duel after executing the trade.
    """
    if is_buy:
        new_virtual_quote = curve.virtual_quote_reserve + quote_delta
        new_virtual_base = curve.virtual_base_reserve - base_delta
    else:
        new_virtual_quote = curve.virtual_quote_reserve - quote_delta
        new_virtual_base = curve.virtual_base_reserve + base_delta

    if new_virtual_base <= 0 or new_virtual_quote < 0:
        logger.debug(
            "Post-trade reserves degenerate, market cap is zero",
            is_buy=is_buy,
            new_virtual_quote=new_virtual_quote,
            new_virtual_base=new_virtual_base,
        )
        return 0

    return market_cap_from_reserves(curve.total_supply, new_virtual_quote, new_virtual_base)


def price_per_unit(curve: CurveSnapshot) -> int:
    """Price per base unit in quote units, fixed point with 6 decimals."""
    if curve.virtual_base_reserve == 0:
        return 0
    return curve.virtual_quote_reserve * PRICE_SCALE // curve.virtual_base_reserve
