"""Pytest configuration and shared fixtures."""

from typing import Optional

import pytest

from apyx_core.accounts.decoders import CURVE_DISCRIMINATOR, DUEL_DISCRIMINATOR
from apyx_core.accounts.store import InMemoryAccountStore
from apyx_core.models.accounts import CurveSnapshot, DuelSnapshot, DuelStatus, ProgramConfig


def make_address(seed: int) -> bytes:
    """Deterministic 32-byte address for tests."""
    return bytes([seed % 256]) * 32


def fake_duel_address(bucket: int, window: int, key: int) -> bytes:
    """Stand-in for PDA derivation: unique per (bucket, window, key)."""
    raw = bytes([bucket]) + window.to_bytes(8, "little") + key.to_bytes(2, "little")
    return raw + bytes(32 - len(raw))


def curve_bytes(
    virtual_quote: int = 1000,
    virtual_base: int = 1000,
    real_quote: int = 1000,
    real_base: int = 1000,
    total_supply: int = 5000,
    complete: bool = False,
    last_duel: Optional[bytes] = None,
    status: Optional[int] = None,
    last_duel_slot: int = 0,
    creator: bytes = b"\x07" * 32,
    round_wins: int = 0,
    bump: int = 255,
) -> bytes:
    """Hand-assembled curve account bytes, independent of the encoders."""
    parts = [
        CURVE_DISCRIMINATOR,
        creator,
        virtual_quote.to_bytes(8, "little"),
        virtual_base.to_bytes(16, "little"),
        real_quote.to_bytes(8, "little"),
        real_base.to_bytes(16, "little"),
        total_supply.to_bytes(16, "little"),
        round_wins.to_bytes(8, "little"),
        bytes([1 if complete else 0, bump]),
    ]
    parts.append(b"\x00" if last_duel is None else b"\x01" + last_duel)
    parts.append(b"\x00" if status is None else bytes([1, status]))
    parts.append(last_duel_slot.to_bytes(8, "little"))
    return b"".join(parts)


def duel_bytes(
    asset_a: bytes,
    asset_b: Optional[bytes],
    status: int,
    bucket: int = 0,
    window: int = 0,
    winner: Optional[bytes] = None,
) -> bytes:
    """Hand-assembled duel account bytes."""
    parts = [
        DUEL_DISCRIMINATOR,
        asset_a,
        b"\x00" if asset_b is None else b"\x01" + asset_b,
        bytes([bucket]),
        window.to_bytes(8, "little"),
        (100).to_bytes(8, "little"),                # start slot
        (9000).to_bytes(8, "little"),               # target market cap
        bytes([status]),
        b"\x00" if winner is None else b"\x01" + winner,
        bytes([254]),
        (0).to_bytes(8, "little"),
        (5000).to_bytes(8, "little"),
        (5100).to_bytes(8, "little"),
    ]
    return b"".join(parts)


@pytest.fixture
def program_config() -> ProgramConfig:
    """Small config whose minimum eligible market cap is 5000."""
    return ProgramConfig(
        protocol_fee_bps=95,
        creator_fee_bps=30,
        initial_virtual_quote_reserve=1000,
        initial_virtual_base_reserve=1000,
        total_supply=5000,
        mcap_bucket_gap_bps=11_000,
        window_size_slots=10,
        match_key_space=16,
    )


@pytest.fixture
def open_curve() -> CurveSnapshot:
    """Open curve with no duel history, market cap 5000."""
    return CurveSnapshot(
        virtual_quote_reserve=1000,
        virtual_base_reserve=1000,
        real_quote_reserve=1000,
        real_base_reserve=1000,
        total_supply=5000,
    )


@pytest.fixture
def asset_a() -> bytes:
    return make_address(1)


@pytest.fixture
def asset_b() -> bytes:
    return make_address(2)


@pytest.fixture
def duel_address() -> bytes:
    return make_address(0xD0)


@pytest.fixture
def store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def active_duel(asset_a: bytes, asset_b: bytes, duel_address: bytes) -> DuelSnapshot:
    return DuelSnapshot(
        asset_a=asset_a,
        asset_b=asset_b,
        bucket=0,
        window=2,
        status=DuelStatus.ACTIVE,
        start_slot=20,
        address=duel_address,
    )
