"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..models.accounts import BPS_DENOMINATOR, U16_MAX, U64_MAX, ProgramConfig


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_fee_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate fee parameters."""
        errors = []

        for name in ("protocol_fee_bps", "creator_fee_bps"):
            if name in params:
                value = params[name]
                if not _is_int(value) or value < 0 or value > U16_MAX:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative integer basis point value",
                        value=value
                    ))

        protocol = params.get("protocol_fee_bps", 0)
        creator = params.get("creator_fee_bps", 0)
        if _is_int(protocol) and _is_int(creator) and protocol + creator >= BPS_DENOMINATOR:
            errors.append(ValidationError(
                field="total_fee_bps",
                message="Protocol and creator fees must sum to less than 10000",
                value=protocol + creator
            ))

        return errors

    @staticmethod
    def validate_matchmaking_params(params: dict[str, Any], allow_unset: bool = True) -> list[ValidationError]:
        """
        Validate matchmaking parameters.

        Args:
            params: Matchmaking parameter mapping
            allow_unset: Accept zero window size / key space as "read from chain"
        """
        errors = []

        if "mcap_bucket_gap_bps" in params:
            value = params["mcap_bucket_gap_bps"]
            if not _is_int(value) or value <= BPS_DENOMINATOR:
                errors.append(ValidationError(
                    field="mcap_bucket_gap_bps",
                    message="Must be an integer greater than 10000",
                    value=value
                ))

        if "window_size_slots" in params:
            value = params["window_size_slots"]
            floor = 0 if allow_unset else 1
            if not _is_int(value) or value < floor or value > U64_MAX:
                errors.append(ValidationError(
                    field="window_size_slots",
                    message="Must be a positive integer",
                    value=value
                ))

        if "match_key_space" in params:
            value = params["match_key_space"]
            floor = 0 if allow_unset else 1
            if not _is_int(value) or value < floor or value > U16_MAX:
                errors.append(ValidationError(
                    field="match_key_space",
                    message="Must be a positive integer no larger than 65535",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_client_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate client parameters."""
        errors = []

        if "commitment" in params:
            value = params["commitment"]
            if value not in ("processed", "confirmed", "finalized"):
                errors.append(ValidationError(
                    field="commitment",
                    message="Must be one of processed, confirmed, finalized",
                    value=value
                ))

        if "fetch_timeout_seconds" in params:
            value = params["fetch_timeout_seconds"]
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="fetch_timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "reconcile_workers" in params:
            value = params["reconcile_workers"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="reconcile_workers",
                    message="Must be a positive integer",
                    value=value
                ))

        if "default_slippage_bps" in params:
            value = params["default_slippage_bps"]
            if not _is_int(value) or value < 0 or value > BPS_DENOMINATOR:
                errors.append(ValidationError(
                    field="default_slippage_bps",
                    message="Must be an integer between 0 and 10000",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_program_config(config: ProgramConfig) -> list[ValidationError]:
        """Validate a fetched or assembled program config before it is used."""
        errors = ConfigValidator.validate_fee_params({
            "protocol_fee_bps": config.protocol_fee_bps,
            "creator_fee_bps": config.creator_fee_bps,
        })
        errors.extend(ConfigValidator.validate_matchmaking_params({
            "mcap_bucket_gap_bps": config.mcap_bucket_gap_bps,
            "window_size_slots": config.window_size_slots,
            "match_key_space": config.match_key_space,
        }, allow_unset=False))
        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "fees" in config:
            errors.extend(ConfigValidator.validate_fee_params(config["fees"]))

        if "matchmaking" in config:
            errors.extend(ConfigValidator.validate_matchmaking_params(config["matchmaking"]))

        if "client" in config:
            errors.extend(ConfigValidator.validate_client_params(config["client"]))

        return errors
