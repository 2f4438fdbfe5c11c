"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigValidationError
from ..models.accounts import ProgramConfig
from .defaults import DefaultConfig, get_default_config
from .validation import ConfigValidator

CONFIG_FILENAME = "apyx.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load the YAML config file, empty if absent."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        return file_config or {}

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. YAML file in config_dir
        3. Global defaults (lowest priority)

        Raises:
            ConfigValidationError: If the merged configuration is invalid
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            raise ConfigValidationError(
                "Invalid configuration: " + "; ".join(f"{e.field}: {e.message}" for e in errors),
                errors=errors,
            )

        return config

    def apply_program_overrides(
        self,
        program_config: ProgramConfig,
        overrides: Optional[dict[str, Any]] = None
    ) -> ProgramConfig:
        """
        Fill and override matchmaking fields of a fetched program config.

        Non-zero matchmaking values from the merged configuration replace the
        on-chain ones; fees are left as read from chain.

        Raises:
            ConfigValidationError: If the resulting program config is invalid
        """
        matchmaking = self.merge_config(overrides)["matchmaking"]
        replacements = {
            key: value for key, value in matchmaking.items()
            if value and value != getattr(program_config, key)
        }
        result = program_config.with_overrides(**replacements) if replacements else program_config

        errors = ConfigValidator.validate_program_config(result)
        if errors:
            raise ConfigValidationError(
                "Invalid program config: " + "; ".join(f"{e.field}: {e.message}" for e in errors),
                errors=errors,
            )
        return result

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
