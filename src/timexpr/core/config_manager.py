"""Configuration Management for timexpr

Handles loading and validation of parser, resolver and logging settings.
Supports hierarchical YAML configuration with environment overrides.
"""

import os
import re
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .error_handler import ConfigurationError
from .logging_manager import LoggingManager

ENV_PREFIX = "TIMEXPR_"


class ParserConfig(BaseModel):
    """Configuration for the grammar engine."""
    max_input_length: int = Field(default=256, ge=1, le=4096)


class ResolverConfig(BaseModel):
    """Configuration for the resolution facade."""
    treat_zero_reference_as_unset: bool = Field(default=True)


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    file_path: Optional[str] = None
    max_file_size: str = Field(default="10MB")
    backup_count: int = Field(default=5, ge=1, le=20)
    log_to_console: bool = Field(default=True)

    model_config = ConfigDict(validate_assignment=True)

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        """Accept lowercase level names"""
        return v.upper() if isinstance(v, str) else v

    @field_validator('max_file_size')
    @classmethod
    def validate_file_size(cls, v):
        """Validate file size format"""
        if not re.match(r'^\d+[KMG]B$', v.upper()):
            raise ValueError("File size must be in format: 10KB, 10MB, or 1GB")
        return v


class AppConfig(BaseModel):
    """Main timexpr configuration."""
    environment: str = Field(default="development", pattern="^(development|testing|staging|production)$")

    parser: ParserConfig = Field(default_factory=ParserConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(validate_assignment=True)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[Path] = None, environment: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional configuration directory
            environment: Environment name (development, testing, staging, production)
        """
        self.config_base_path = Path(config_path) if config_path else self._get_default_config_path()
        self.environment = environment or os.getenv('TIMEXPR_ENV', 'development')
        self._config: Optional[AppConfig] = None
        self._lock = threading.Lock()
        self.logger = LoggingManager.get_logger(__name__)

        self.config_files = self._get_config_files()

    def _get_default_config_path(self) -> Path:
        """Get the default configuration directory."""
        config_locations = [
            Path("config"),
            Path.home() / ".config" / "timexpr",
            Path("/etc/timexpr"),
        ]

        for location in config_locations:
            if location.exists() and location.is_dir():
                return location

        return Path("config")

    def _get_config_files(self) -> Dict[str, Path]:
        """Get configuration file paths for hierarchical loading."""
        base_dir = self.config_base_path

        return {
            'default': base_dir / 'default_config.yaml',
            'environment': base_dir / f'{self.environment}.yaml',
            'local': base_dir / 'local.yaml'
        }

    def load_config(self) -> AppConfig:
        """Load and validate configuration with hierarchical overrides.

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If a file cannot be read or validation fails
        """
        with self._lock:
            if self._config:
                return self._config

            config_data: Dict[str, Any] = {}

            for config_type, config_file in self.config_files.items():
                if config_file.exists():
                    self.logger.info(f"Loading {config_type} config from {config_file}")
                    self._deep_merge(config_data, self._load_yaml_file(config_file))

            env_overrides = self._get_env_overrides()
            if env_overrides:
                self.logger.info(f"Applying environment overrides: {list(env_overrides.keys())}")
                self._deep_merge(config_data, env_overrides)

            config_data.setdefault('environment', self.environment)

            try:
                self._config = AppConfig(**config_data)
            except ValidationError as e:
                self.logger.error(f"Configuration validation failed: {e}")
                raise ConfigurationError(f"Invalid configuration: {e}") from e

            return self._config

    def reload_config(self) -> AppConfig:
        """Discard the cached configuration and load it again."""
        with self._lock:
            self._config = None
        return self.load_config()

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file.

        Returns:
            Configuration dictionary
        """
        try:
            with open(file_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"Failed to parse YAML file {file_path}: {e}")
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping at the top of {file_path}")
        return data

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Get configuration overrides from environment variables.

        Environment variables follow pattern: TIMEXPR_<SECTION>_<KEY>
        Example: TIMEXPR_PARSER_MAX_INPUT_LENGTH -> parser.max_input_length
        """
        overrides: Dict[str, Any] = {}
        sections = set(AppConfig.model_fields) - {'environment'}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            section, _, field_name = key[len(ENV_PREFIX):].lower().partition('_')
            # Section names never contain underscores; field names may
            if section not in sections or not field_name:
                continue

            overrides.setdefault(section, {})[field_name] = self._convert_env_value(value)

        return overrides

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool]:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(self, base_dict: Dict[str, Any], update_dict: Dict[str, Any]):
        """Recursively merge nested dictionaries."""
        for key, value in update_dict.items():
            if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
                self._deep_merge(base_dict[key], value)
            else:
                base_dict[key] = value

    def save_config(self, target: str = "local") -> Path:
        """Write the current configuration to one of the hierarchy files.

        Args:
            target: Key of ``config_files`` to write

        Returns:
            Path of the written file
        """
        if target not in self.config_files:
            raise ValueError(f"Unknown config target: {target}")

        config = self.load_config()
        file_path = self.config_files[target]
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w') as f:
            yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)

        self.logger.info(f"Saved configuration to {file_path}")
        return file_path
