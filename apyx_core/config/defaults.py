"""Default configuration parameters for the prediction core."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FeeParams:
    """Fee split used when the config account omits it."""
    protocol_fee_bps: int = 95
    creator_fee_bps: int = 30


@dataclass(frozen=True)
class MatchmakingParams:
    """Matchmaking parameters; zero means "use the value from chain"."""
    mcap_bucket_gap_bps: int = 11_000               # 10% growth per band
    window_size_slots: int = 0
    match_key_space: int = 0


@dataclass(frozen=True)
class ClientParams:
    """Client-side behaviour."""
    commitment: str = "confirmed"
    fetch_timeout_seconds: float = 10.0
    reconcile_workers: int = 8
    default_slippage_bps: int = 100                 # 1%


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    fees: FeeParams
    matchmaking: MatchmakingParams
    client: ClientParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        fees=FeeParams(),
        matchmaking=MatchmakingParams(),
        client=ClientParams(),
        logging=LoggingParams(),
    )
