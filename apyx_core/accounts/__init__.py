"""Account decoding boundary and account stores"""

from .decoders import (
    CONFIG_DISCRIMINATOR,
    CURVE_DISCRIMINATOR,
    DUEL_DISCRIMINATOR,
    decode_config,
    decode_curve,
    decode_duel,
)
from .encoders import encode_config, encode_curve, encode_duel
from .store import AccountStore, InMemoryAccountStore, MemcmpFilter

__all__ = [
    "AccountStore",
    "CONFIG_DISCRIMINATOR",
    "CURVE_DISCRIMINATOR",
    "DUEL_DISCRIMINATOR",
    "InMemoryAccountStore",
    "MemcmpFilter",
    "decode_config",
    "decode_curve",
    "decode_duel",
    "encode_config",
    "encode_curve",
    "encode_duel",
]
