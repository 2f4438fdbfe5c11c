"""
Market cap bucket, time window and match key derivation.

Two independent observers reading the same (asset, bucket, window, space)
derive the same match key, and therefore the same duel account, without
coordinating. Buckets are geometric bands over market cap starting at the
minimum duel-eligible market cap implied by the launch reserves.
"""

from dataclasses import dataclass
from typing import Optional

from blake3 import blake3

from ..logging.config import get_matchmaking_logger
from ..models.accounts import ADDRESS_LEN, BPS_DENOMINATOR, U64_MAX, ProgramConfig

logger = get_matchmaking_logger(__name__)

U8_MAX = 2**8 - 1


@dataclass(frozen=True)
class MatchSlot:
    """Deterministic pairing slot for one asset at one point in time."""
    bucket: int
    window: int
    key: int
    eligible: bool = True


def min_eligible_market_cap(config: ProgramConfig) -> int:
    """floor(initial_virtual_quote * total_supply / initial_virtual_base), 0 if undefined."""
    if config.initial_virtual_base_reserve == 0:
        return 0
    return config.initial_virtual_quote_reserve * config.total_supply // config.initial_virtual_base_reserve


def bucket_of(market_cap: int, config: ProgramConfig) -> Optional[int]:
    """
    Geometric band index containing market_cap.

    Bands are [b0, b1), [b1, b2), ... with b0 = min_eligible_market_cap and
    b(i+1) = floor(b(i) * gap_bps / 10000).

    Args:
        market_cap: Market cap in quote units
        config: Program config supplying the launch reserves and gap ratio

    Returns:
        Band index, or None when the market cap is below the minimum or the
        band walk cannot proceed (non-increasing or overflowing boundary)
    """
    lower = min_eligible_market_cap(config)
    if market_cap < lower:
        logger.debug("Market cap below duel minimum", market_cap=market_cap, min_market_cap=lower)
        return None

    gap_bps = config.mcap_bucket_gap_bps
    if gap_bps <= BPS_DENOMINATOR:
        logger.debug("Bucket gap does not grow", mcap_bucket_gap_bps=gap_bps)
        return None

    bound = lower
    crossed = 0
    while market_cap >= bound:
        next_bound = _next_bound(bound, gap_bps)
        if next_bound is None:
            logger.debug(
                "Bucket walk cannot proceed",
                market_cap=market_cap,
                bound=bound,
                mcap_bucket_gap_bps=gap_bps,
            )
            return None
        bound = next_bound
        crossed += 1

    return crossed - 1


def _next_bound(bound: int, gap_bps: int) -> Optional[int]:
    next_bound = bound * gap_bps // BPS_DENOMINATOR
    if next_bound <= bound or next_bound > U64_MAX:
        return None
    return next_bound


def band_bounds(bucket: int, config: ProgramConfig) -> Optional[tuple[int, int]]:
    """Inclusive lower and exclusive upper bound of a band, None if unreachable."""
    if bucket < 0:
        return None

    low = min_eligible_market_cap(config)
    high = _next_bound(low, config.mcap_bucket_gap_bps)
    for _ in range(bucket):
        if high is None:
            return None
        low, high = high, _next_bound(high, config.mcap_bucket_gap_bps)

    if high is None:
        return None
    return low, high


def is_eligible_market_cap(market_cap: int, config: ProgramConfig) -> bool:
    """Eligibility as far as the client can tell; the program checks again."""
    return bucket_of(market_cap, config) is not None


def window_of(slot: int, window_size_slots: int) -> int:
    """Time window containing slot."""
    if window_size_slots <= 0:
        raise ValueError(f"window_size_slots must be positive, got {window_size_slots}")
    return slot // window_size_slots


def match_key(asset_id: bytes, bucket: int, window: int, space: int) -> int:
    """
    Hash-derived pairing slot within a (bucket, window).

    Hash input is asset_id (32) || bucket (1) || window (8, little-endian),
    hashed with BLAKE3; the first two digest bytes are read as a
    little-endian u16 and reduced modulo space.
    """
    if len(asset_id) != ADDRESS_LEN:
        raise ValueError(f"asset_id must be {ADDRESS_LEN} bytes, got {len(asset_id)}")
    if not 0 <= bucket <= U8_MAX:
        raise ValueError(f"bucket must fit in a byte, got {bucket}")
    if not 0 <= window <= U64_MAX:
        raise ValueError(f"window out of u64 range: {window}")
    if space <= 0:
        raise ValueError(f"match key space must be positive, got {space}")

    data = bytes(asset_id) + bytes([bucket]) + window.to_bytes(8, "little")
    digest = blake3(data).digest()

    return int.from_bytes(digest[:2], "little") % space


def derive_match_slot(asset_id: bytes, market_cap: int, slot: int, config: ProgramConfig) -> MatchSlot:
    """
    Bucket, window and key for an asset trading at market_cap during slot.

    An ineligible market cap still addresses a bucket 0 duel account; the
    program makes its own eligibility decision when the trade executes.
    """
    bucket = bucket_of(market_cap, config)
    eligible = bucket is not None
    if bucket is None:
        bucket = 0

    window = window_of(slot, config.window_size_slots)
    key = match_key(asset_id, bucket, window, config.match_key_space)

    logger.debug(
        "Derived match slot",
        asset=asset_id.hex(),
        market_cap=market_cap,
        slot=slot,
        bucket=bucket,
        window=window,
        match_key=key,
        eligible=eligible,
    )

    return MatchSlot(bucket=bucket, window=window, key=key, eligible=eligible)
