"""
Decoders for raw on-chain account bytes.

This is the single input adapter at the system boundary: whatever the
transport returns is turned into one canonical snapshot shape here, so the
pricing, matchmaking and reconciliation code never sees raw layouts.
All integers are little-endian; optional fields use a one-byte presence
flag followed by the value when present.
"""

from typing import Optional

from ..errors import AccountDecodeError
from ..models.accounts import ADDRESS_LEN, CurveSnapshot, DuelSnapshot, DuelStatus, ProgramConfig

DISCRIMINATOR_LEN = 8

CURVE_DISCRIMINATOR = bytes([143, 100, 193, 40, 52, 254, 111, 103])
CONFIG_DISCRIMINATOR = bytes([155, 12, 170, 224, 30, 250, 204, 130])
DUEL_DISCRIMINATOR = bytes([126, 229, 210, 60, 177, 135, 124, 224])


class _Reader:
    """Sequential little-endian reader over an account body."""

    def __init__(self, data: bytes, account_type: str, address: Optional[bytes] = None):
        self.data = data
        self.offset = 0
        self.account_type = account_type
        self.address = address

    def _take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise AccountDecodeError(
                f"{self.account_type} account truncated at offset {self.offset}",
                account_type=self.account_type,
                expected_len=end,
                actual_len=len(self.data),
                address=self.address,
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return bytes(chunk)

    def uint(self, size: int) -> int:
        return int.from_bytes(self._take(size), "little")

    def u8(self) -> int:
        return self.uint(1)

    def u16(self) -> int:
        return self.uint(2)

    def u64(self) -> int:
        return self.uint(8)

    def u128(self) -> int:
        return self.uint(16)

    def flag(self) -> bool:
        return self.u8() != 0

    def pubkey(self) -> bytes:
        return self._take(ADDRESS_LEN)

    def option_pubkey(self) -> Optional[bytes]:
        return self.pubkey() if self.flag() else None

    def status(self) -> DuelStatus:
        raw = self.u8()
        try:
            return DuelStatus(raw)
        except ValueError:
            raise AccountDecodeError(
                f"Unknown duel status discriminant {raw}",
                account_type=self.account_type,
                address=self.address,
            ) from None

    def option_status(self) -> Optional[DuelStatus]:
        return self.status() if self.flag() else None


def _body(data: bytes, discriminator: bytes, account_type: str, address: Optional[bytes]) -> _Reader:
    if len(data) < DISCRIMINATOR_LEN:
        raise AccountDecodeError(
            f"{account_type} account shorter than its discriminator",
            account_type=account_type,
            expected_len=DISCRIMINATOR_LEN,
            actual_len=len(data),
            address=address,
        )
    if bytes(data[:DISCRIMINATOR_LEN]) != discriminator:
        raise AccountDecodeError(
            f"Account is not a {account_type} account",
            account_type=account_type,
            address=address,
        )
    return _Reader(data[DISCRIMINATOR_LEN:], account_type, address)


def decode_curve(data: bytes, address: Optional[bytes] = None) -> CurveSnapshot:
    """Decode a bonding curve account."""
    reader = _body(data, CURVE_DISCRIMINATOR, "curve", address)

    creator = reader.pubkey()
    virtual_quote = reader.u64()
    virtual_base = reader.u128()
    real_quote = reader.u64()
    real_base = reader.u128()
    total_supply = reader.u128()
    round_wins = reader.u64()
    complete = reader.flag()
    bump = reader.u8()
    last_duel = reader.option_pubkey()
    cached_status = reader.option_status()
    last_duel_slot = reader.u64()

    try:
        return CurveSnapshot(
            virtual_quote_reserve=virtual_quote,
            virtual_base_reserve=virtual_base,
            real_quote_reserve=real_quote,
            real_base_reserve=real_base,
            total_supply=total_supply,
            complete=complete,
            last_duel=last_duel,
            cached_duel_status=cached_status,
            last_duel_slot=last_duel_slot,
            creator=creator,
            round_wins=round_wins,
            bump=bump,
            address=address,
        )
    except ValueError as e:
        raise AccountDecodeError(str(e), account_type="curve", address=address) from e


def decode_config(data: bytes, address: Optional[bytes] = None) -> ProgramConfig:
    """
    Decode the singleton program config account.

    The layout has no bucket gap field, so the decoded config keeps the
    default band ratio of 11000 bps. The growth target is a separate value
    and never feeds bucket derivation.
    """
    reader = _body(data, CONFIG_DISCRIMINATOR, "config", address)

    admin = reader.pubkey()
    fee_vault = reader.pubkey()
    protocol_fee_bps = reader.u16()
    creator_fee_bps = reader.u16()
    growth_bps = reader.u16()
    graduate = reader.flag()
    graduation_fee = reader.u64()
    initial_virtual_quote = reader.u64()
    initial_virtual_base = reader.u128()
    initial_real_base = reader.u128()
    total_supply = reader.u128()
    window_size_slots = reader.u64()
    match_key_space = reader.u16()
    cooldown_slots = reader.u64()
    claim_authority = reader.pubkey()
    resolve_authority = reader.pubkey()
    mercy_bps = reader.u16()

    return ProgramConfig(
        protocol_fee_bps=protocol_fee_bps,
        creator_fee_bps=creator_fee_bps,
        initial_virtual_quote_reserve=initial_virtual_quote,
        initial_virtual_base_reserve=initial_virtual_base,
        total_supply=total_supply,
        window_size_slots=window_size_slots,
        match_key_space=match_key_space,
        initial_real_base_reserve=initial_real_base,
        target_mcap_growth_bps=growth_bps,
        graduate_tokens=graduate,
        graduation_fee=graduation_fee,
        cooldown_slots=cooldown_slots,
        mercy_discount_bps=mercy_bps,
        admin=admin,
        protocol_fee_vault=fee_vault,
        delegated_claim_authority=claim_authority,
        delegated_resolve_authority=resolve_authority,
    )


def decode_duel(data: bytes, address: Optional[bytes] = None) -> DuelSnapshot:
    """Decode a duel account."""
    reader = _body(data, DUEL_DISCRIMINATOR, "duel", address)

    asset_a = reader.pubkey()
    asset_b = reader.option_pubkey()
    bucket = reader.u8()
    window = reader.u64()
    start_slot = reader.u64()
    target_market_cap = reader.u64()
    status = reader.status()
    winner = reader.option_pubkey()
    bump = reader.u8()
    loser_circulating = reader.u64()
    a_mcap_at_start = reader.u64()
    b_mcap_at_start = reader.u64()

    return DuelSnapshot(
        asset_a=asset_a,
        asset_b=asset_b,
        bucket=bucket,
        window=window,
        status=status,
        winner=winner,
        start_slot=start_slot,
        target_market_cap=target_market_cap,
        loser_circulating_snapshot=loser_circulating,
        asset_a_mcap_at_start=a_mcap_at_start,
        asset_b_mcap_at_start=b_mcap_at_start,
        bump=bump,
        address=address,
    )
