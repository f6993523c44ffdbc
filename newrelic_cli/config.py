"""Configuration management for the New Relic CLI."""

import json
import os
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any, NamedTuple
from pydantic import BaseModel, Field, validator
from dotenv import load_dotenv

from .exceptions import ConfigurationError, ValidationError, API_KEY_REQUIRED

# Load environment variables from .env file if it exists
load_dotenv()


DEFAULT_CONFIG_PATH = Path.home() / ".config" / "newrelic-cli" / "config.json"

# Keys persisted to the configuration file
STORED_KEYS = ("api_key", "account_id", "region")


class Region(str, Enum):
    """New Relic data center region."""
    US = "US"
    EU = "EU"


class Endpoints(NamedTuple):
    """Base URLs for one region."""
    rest: str
    nerdgraph: str
    synthetics: str


REGION_ENDPOINTS: Dict[Region, Endpoints] = {
    Region.US: Endpoints(
        rest="https://api.newrelic.com/v2",
        nerdgraph="https://api.newrelic.com/graphql",
        synthetics="https://synthetics.newrelic.com/synthetics/api/v3",
    ),
    Region.EU: Endpoints(
        rest="https://api.eu.newrelic.com/v2",
        nerdgraph="https://api.eu.newrelic.com/graphql",
        synthetics="https://synthetics.eu.newrelic.com/synthetics/api/v3",
    ),
}


def validate_region(value: str) -> Region:
    """Return the Region for a case-insensitive region string.

    Raises:
        ValidationError: If the region is not US or EU
    """
    try:
        return Region(value.strip().upper())
    except ValueError:
        raise ValidationError(
            f"invalid region {value!r}: must be US or EU", field_name="region", field_value=value
        ) from None


def default_config_path() -> Path:
    env_path = os.getenv("NEWRELIC_CONFIG_FILE")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


class NewRelicConfig(BaseModel):
    """Configuration for the New Relic CLI."""

    # Credentials
    api_key: str = Field(default="", description="New Relic User API key")
    account_id: str = Field(default="", description="New Relic account ID")
    region: str = Field(default="US", description="Data center region (US or EU)")

    # Client configuration
    timeout: int = Field(default=30, description="Request timeout in seconds")

    # Logging configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json or text)")

    # Presentation
    output: str = Field(default="table", description="Output format (table, json or plain)")

    @validator("region")
    def validate_region(cls, v: str) -> str:
        """Validate region."""
        v_upper = (v or "US").strip().upper()
        if v_upper not in {r.value for r in Region}:
            raise ValueError("Region must be one of: US, EU")
        return v_upper

    @validator("account_id")
    def validate_account_id(cls, v: str) -> str:
        """Normalize account ID; format checks happen where it is used."""
        return str(v).strip() if v is not None else ""

    @validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(valid_levels))}")
        return v_upper

    @validator("log_format")
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = {"json", "text"}
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Log format must be one of: {', '.join(sorted(valid_formats))}")
        return v_lower

    @validator("output")
    def validate_output(cls, v: str) -> str:
        """Validate output format."""
        valid_outputs = {"table", "json", "plain"}
        if v not in valid_outputs:
            raise ValueError(f"invalid output format {v!r}: must be one of table, json, plain")
        return v

    @validator("timeout")
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout value."""
        if v <= 0:
            raise ValueError("Timeout must be greater than 0")
        if v > 300:
            raise ValueError("Timeout must not exceed 300 seconds")
        return v

    @property
    def endpoints(self) -> Endpoints:
        return REGION_ENDPOINTS[Region(self.region)]

    def require_api_key(self) -> str:
        """Return the API key or raise if none is configured."""
        if not self.api_key:
            raise ConfigurationError(API_KEY_REQUIRED, config_key="api_key")
        return self.api_key

    @classmethod
    def from_file(cls, config_path: Path) -> Dict[str, Any]:
        """Read stored values from a JSON configuration file.

        A missing file yields no values.

        Raises:
            ConfigurationError: If the file is not a JSON object
        """
        if not config_path.exists():
            return {}

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file {config_path}: {e}") from e
        except IOError as e:
            raise ConfigurationError(f"Error reading configuration file {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a JSON object, got {type(file_config).__name__}"
            )
        return file_config

    @classmethod
    def from_env_and_file(cls, config_path: Optional[Path] = None) -> "NewRelicConfig":
        """Create configuration from environment variables and the config file.

        Environment variables take precedence over config file values.

        Raises:
            ConfigurationError: If the file is unreadable or an environment value has the wrong type
        """
        config_data: Dict[str, Any] = {}
        config_data.update(cls.from_file(config_path or default_config_path()))

        env_mappings = {
            "NEWRELIC_API_KEY": ("api_key", str),
            "NEWRELIC_ACCOUNT_ID": ("account_id", str),
            "NEWRELIC_REGION": ("region", str),
            "NEWRELIC_TIMEOUT": ("timeout", int),
            "NEWRELIC_LOG_LEVEL": ("log_level", str),
            "NEWRELIC_LOG_FORMAT": ("log_format", str),
        }

        for env_var, (config_key, value_type) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is None or env_value.strip() == "":
                continue
            try:
                config_data[config_key] = value_type(env_value.strip())
            except (ValueError, TypeError) as e:
                raise ConfigurationError(
                    f"Invalid value for {env_var}: '{env_value}' (expected {value_type.__name__})",
                    config_key=config_key
                ) from e

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> "NewRelicConfig":
        """Create configuration from environment variables only."""
        return cls(
            api_key=os.getenv("NEWRELIC_API_KEY", ""),
            account_id=os.getenv("NEWRELIC_ACCOUNT_ID", ""),
            region=os.getenv("NEWRELIC_REGION", "US"),
        )


class CredentialStore:
    """Reads and writes stored credentials in the JSON configuration file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or default_config_path()

    def load(self) -> Dict[str, Any]:
        return NewRelicConfig.from_file(self.path)

    def set(self, key: str, value: str) -> None:
        self._write({**self.load(), key: value})

    def delete(self, key: str) -> bool:
        """Remove a stored key; returns False when it was not stored."""
        data = self.load()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True

    def status(self) -> Dict[str, bool]:
        """Report where each credential currently comes from."""
        stored = self.load()
        return {
            "api_key_stored": bool(stored.get("api_key")),
            "account_id_stored": bool(stored.get("account_id")),
            "region_stored": bool(stored.get("region")),
            "api_key_env": bool(os.getenv("NEWRELIC_API_KEY")),
            "account_id_env": bool(os.getenv("NEWRELIC_ACCOUNT_ID")),
            "region_env": bool(os.getenv("NEWRELIC_REGION")),
        }

    def _write(self, data: Dict[str, Any]) -> None:
        stored = {k: v for k, v in data.items() if k in STORED_KEYS}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(stored, f, indent=2)
            os.chmod(self.path, 0o600)
        except OSError as e:
            raise ConfigurationError(f"Error writing configuration file {self.path}: {e}") from e
