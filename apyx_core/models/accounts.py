"""
Point-in-time account snapshots for bonding curves, duels and program config.

This module defines immutable data structures that mirror the on-chain
accounts after decoding. No component mutates a snapshot; every computation
returns a new value.
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional

U16_MAX = 2**16 - 1
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1

BPS_DENOMINATOR = 10_000
ADDRESS_LEN = 32


class DuelStatus(IntEnum):
    """Duel lifecycle status, values are the wire discriminants."""
    PENDING = 0
    ACTIVE = 1
    RESOLVED = 2


def _check_range(name: str, value: int, upper: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0 or value > upper:
        raise ValueError(f"{name} out of range: {value}")


def _check_address(name: str, value: Optional[bytes]) -> None:
    if value is not None and len(value) != ADDRESS_LEN:
        raise ValueError(f"{name} must be {ADDRESS_LEN} bytes, got {len(value)}")


@dataclass(frozen=True)
class CurveSnapshot:
    """Bonding curve state as read from the account store."""

    # Pricing reserves
    virtual_quote_reserve: int                      # u64
    virtual_base_reserve: int                       # u128

    # Withdrawable reserves
    real_quote_reserve: int                         # u64
    real_base_reserve: int                          # u128

    total_supply: int                               # u128
    complete: bool = False

    # Duel linkage
    last_duel: Optional[bytes] = None
    cached_duel_status: Optional[DuelStatus] = None
    last_duel_slot: int = 0

    # Bookkeeping fields carried from the account layout
    creator: Optional[bytes] = None
    round_wins: int = 0
    bump: int = 0
    address: Optional[bytes] = None

    def __post_init__(self) -> None:
        _check_range("virtual_quote_reserve", self.virtual_quote_reserve, U64_MAX)
        _check_range("virtual_base_reserve", self.virtual_base_reserve, U128_MAX)
        _check_range("real_quote_reserve", self.real_quote_reserve, U64_MAX)
        _check_range("real_base_reserve", self.real_base_reserve, U128_MAX)
        _check_range("total_supply", self.total_supply, U128_MAX)
        if self.real_base_reserve > self.total_supply:
            raise ValueError(
                f"real_base_reserve {self.real_base_reserve} exceeds total_supply {self.total_supply}"
            )
        _check_address("last_duel", self.last_duel)
        _check_address("creator", self.creator)

    def is_in_duel(self) -> bool:
        """Cached status says the token is in an active, matched duel."""
        return self.cached_duel_status == DuelStatus.ACTIVE

    def has_pending_duel(self) -> bool:
        return self.cached_duel_status == DuelStatus.PENDING

    def has_resolved_duel(self) -> bool:
        return self.cached_duel_status == DuelStatus.RESOLVED


@dataclass(frozen=True)
class ProgramConfig:
    """Program-wide parameters read from the singleton config account."""

    # Fees
    protocol_fee_bps: int
    creator_fee_bps: int

    # Curve launch parameters
    initial_virtual_quote_reserve: int
    initial_virtual_base_reserve: int
    total_supply: int

    # Matchmaking
    mcap_bucket_gap_bps: int = 11_000
    window_size_slots: int = 1
    match_key_space: int = 1

    # Remaining account fields
    initial_real_base_reserve: int = 0
    target_mcap_growth_bps: int = 11_000
    graduate_tokens: bool = False
    graduation_fee: int = 0
    cooldown_slots: int = 0
    mercy_discount_bps: int = BPS_DENOMINATOR
    admin: Optional[bytes] = None
    protocol_fee_vault: Optional[bytes] = None
    delegated_claim_authority: Optional[bytes] = None
    delegated_resolve_authority: Optional[bytes] = None

    def __post_init__(self) -> None:
        # A zero mercy multiplier means "no discount"
        if self.mercy_discount_bps == 0:
            object.__setattr__(self, "mercy_discount_bps", BPS_DENOMINATOR)
        if self.delegated_resolve_authority is None and self.delegated_claim_authority is not None:
            object.__setattr__(self, "delegated_resolve_authority", self.delegated_claim_authority)

    @property
    def total_fee_bps(self) -> int:
        return self.protocol_fee_bps + self.creator_fee_bps

    def with_overrides(self, **overrides) -> 'ProgramConfig':
        """Copy with selected fields replaced."""
        return replace(self, **overrides)


@dataclass(frozen=True)
class DuelSnapshot:
    """Paired matchmaking record between two assets."""

    asset_a: bytes
    asset_b: Optional[bytes]
    bucket: int
    window: int
    status: DuelStatus
    winner: Optional[bytes] = None

    start_slot: int = 0
    target_market_cap: int = 0
    loser_circulating_snapshot: int = 0
    asset_a_mcap_at_start: int = 0
    asset_b_mcap_at_start: int = 0
    bump: int = 0
    address: Optional[bytes] = None

    def is_pending(self) -> bool:
        return self.status == DuelStatus.PENDING

    def is_active(self) -> bool:
        return self.status == DuelStatus.ACTIVE

    def is_resolved(self) -> bool:
        return self.status == DuelStatus.RESOLVED

    def is_matched(self) -> bool:
        """Both sides of the duel are filled."""
        return self.asset_b is not None

    def includes(self, asset_id: bytes) -> bool:
        return asset_id == self.asset_a or (self.asset_b is not None and asset_id == self.asset_b)

    def counterparty_of(self, asset_id: bytes) -> Optional[bytes]:
        """The other asset in the duel, None if unmatched or not a participant."""
        if self.asset_b is None:
            return None
        if asset_id == self.asset_a:
            return self.asset_b
        if asset_id == self.asset_b:
            return self.asset_a
        return None
