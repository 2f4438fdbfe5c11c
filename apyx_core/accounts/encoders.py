"""
Encoders producing account bytes in the on-chain layout.

Used to seed the in-memory store for offline simulation and replay; the
output round-trips through the decoders.
"""

from typing import Optional

from ..models.accounts import ADDRESS_LEN, CurveSnapshot, DuelSnapshot, DuelStatus, ProgramConfig
from .decoders import CONFIG_DISCRIMINATOR, CURVE_DISCRIMINATOR, DUEL_DISCRIMINATOR

ZERO_ADDRESS = bytes(ADDRESS_LEN)


def _uint(value: int, size: int) -> bytes:
    return int(value).to_bytes(size, "little")


def _flag(value: bool) -> bytes:
    return b"\x01" if value else b"\x00"


def _pubkey(value: Optional[bytes]) -> bytes:
    return bytes(value) if value is not None else ZERO_ADDRESS


def _option_pubkey(value: Optional[bytes]) -> bytes:
    if value is None:
        return b"\x00"
    return b"\x01" + bytes(value)


def _option_status(value: Optional[DuelStatus]) -> bytes:
    if value is None:
        return b"\x00"
    return b"\x01" + _uint(int(value), 1)


def encode_curve(curve: CurveSnapshot) -> bytes:
    """Serialize a curve snapshot in the account layout."""
    return b"".join([
        CURVE_DISCRIMINATOR,
        _pubkey(curve.creator),
        _uint(curve.virtual_quote_reserve, 8),
        _uint(curve.virtual_base_reserve, 16),
        _uint(curve.real_quote_reserve, 8),
        _uint(curve.real_base_reserve, 16),
        _uint(curve.total_supply, 16),
        _uint(curve.round_wins, 8),
        _flag(curve.complete),
        _uint(curve.bump, 1),
        _option_pubkey(curve.last_duel),
        _option_status(curve.cached_duel_status),
        _uint(curve.last_duel_slot, 8),
    ])


def encode_config(config: ProgramConfig) -> bytes:
    """Serialize a program config in the account layout."""
    return b"".join([
        CONFIG_DISCRIMINATOR,
        _pubkey(config.admin),
        _pubkey(config.protocol_fee_vault),
        _uint(config.protocol_fee_bps, 2),
        _uint(config.creator_fee_bps, 2),
        _uint(config.target_mcap_growth_bps, 2),
        _flag(config.graduate_tokens),
        _uint(config.graduation_fee, 8),
        _uint(config.initial_virtual_quote_reserve, 8),
        _uint(config.initial_virtual_base_reserve, 16),
        _uint(config.initial_real_base_reserve, 16),
        _uint(config.total_supply, 16),
        _uint(config.window_size_slots, 8),
        _uint(config.match_key_space, 2),
        _uint(config.cooldown_slots, 8),
        _pubkey(config.delegated_claim_authority),
        _pubkey(config.delegated_resolve_authority),
        _uint(config.mercy_discount_bps, 2),
    ])


def encode_duel(duel: DuelSnapshot) -> bytes:
    """Serialize a duel snapshot in the account layout."""
    return b"".join([
        DUEL_DISCRIMINATOR,
        _pubkey(duel.asset_a),
        _option_pubkey(duel.asset_b),
        _uint(duel.bucket, 1),
        _uint(duel.window, 8),
        _uint(duel.start_slot, 8),
        _uint(duel.target_market_cap, 8),
        _uint(int(duel.status), 1),
        _option_pubkey(duel.winner),
        _uint(duel.bump, 1),
        _uint(duel.loser_circulating_snapshot, 8),
        _uint(duel.asset_a_mcap_at_start, 8),
        _uint(duel.asset_b_mcap_at_start, 8),
    ])
