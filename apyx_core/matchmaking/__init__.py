"""Matchmaking key derivation: buckets, windows and match keys"""

from .matchmaker import (
    MatchSlot,
    band_bounds,
    bucket_of,
    derive_match_slot,
    is_eligible_market_cap,
    match_key,
    min_eligible_market_cap,
    window_of,
)

__all__ = [
    "MatchSlot",
    "band_bounds",
    "bucket_of",
    "derive_match_slot",
    "is_eligible_market_cap",
    "match_key",
    "min_eligible_market_cap",
    "window_of",
]
