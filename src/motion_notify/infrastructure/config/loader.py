"""Configuration loading and validation."""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, fields

from motion_notify.domain.exceptions import ConfigurationError
from motion_notify.shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "http://localhost:8787"
DEFAULT_B2_ENDPOINT = "https://s3.us-west-004.backblazeb2.com"


@dataclass
class SinkCredentials:
    """Credentials for the S3-compatible storage the worker uploads to."""

    key_id: str
    application_key: str
    bucket: str
    endpoint: str = DEFAULT_B2_ENDPOINT
    region: Optional[str] = None

    def validate(self) -> bool:
        """Check if credentials are set."""
        return bool(self.key_id and self.application_key and self.bucket)


@dataclass
class UploaderSettings:
    """Settings shared by the client and the worker it may spawn."""

    folder_id: str
    config_path: Path
    endpoint: str = DEFAULT_ENDPOINT
    unlink: bool = True
    pid_path: Optional[Path] = None
    log_path: Optional[Path] = None

    # Client handshake
    retry_attempts: int = 5
    retry_interval: float = 1.0

    # Worker
    poll_interval: float = 1.0
    shutdown_timeout: float = 5.0

    reclaim_stale_marker: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.config_path = Path(self.config_path)
        if self.pid_path is not None:
            self.pid_path = Path(self.pid_path)
        if self.log_path is not None:
            self.log_path = Path(self.log_path)
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        if not self.folder_id:
            raise ConfigurationError("folder_id is required")

        if not self.endpoint:
            raise ConfigurationError("endpoint is required")

        if self.retry_attempts < 1:
            raise ConfigurationError(f"retry_attempts must be at least 1, got: {self.retry_attempts}")

        if self.retry_interval < 0:
            raise ConfigurationError(f"retry_interval cannot be negative, got: {self.retry_interval}")

        if self.poll_interval <= 0:
            raise ConfigurationError(f"poll_interval must be positive, got: {self.poll_interval}")

        if self.shutdown_timeout < 0:
            raise ConfigurationError(f"shutdown_timeout cannot be negative, got: {self.shutdown_timeout}")


class ConfigLoader:
    """Loads settings from environment and CLI, credentials from a YAML file."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config loader.

        Args:
            config_path: Path to the YAML credentials file
        """
        self.config_path = Path(config_path) if config_path else None
        self._logger = get_logger(__name__)

    def load_settings(self, overrides: Optional[Dict[str, Any]] = None) -> UploaderSettings:
        """
        Build uploader settings.

        CLI overrides take precedence over environment variables.

        Raises:
            ConfigurationError: If settings are missing or invalid
        """
        config_dict: Dict[str, Any] = {}
        if self.config_path is not None:
            config_dict["config_path"] = self.config_path

        config_dict.update(self._settings_from_env())

        if overrides:
            for k, v in overrides.items():
                if v is None:
                    continue
                config_dict[k] = v

        if "folder_id" not in config_dict:
            raise ConfigurationError("--folder-id is required")
        if "config_path" not in config_dict:
            raise ConfigurationError("--config is required")

        valid_fields = {f.name for f in fields(UploaderSettings)}
        filtered_config = {k: v for k, v in config_dict.items() if k in valid_fields}

        try:
            return UploaderSettings(**filtered_config)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    def load_credentials(self) -> SinkCredentials:
        """
        Load storage credentials from the YAML file and environment.

        Environment variables take precedence over the file.

        Raises:
            ConfigurationError: If the file is unreadable or credentials are incomplete
        """
        data: Dict[str, Any] = {}

        if self.config_path is not None:
            if not self.config_path.exists():
                raise ConfigurationError(f"Config file not found: {self.config_path}")
            try:
                with open(self.config_path, 'r') as f:
                    loaded = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Cannot read config {self.config_path}: {e}") from e
            if not isinstance(loaded, dict):
                raise ConfigurationError(f"Config {self.config_path} must be a mapping")
            # Credentials may sit at top level or under a "b2" section
            section = loaded.get("b2", loaded)
            if isinstance(section, dict):
                data.update(section)

        data.update(self._credentials_from_env())

        creds = SinkCredentials(
            key_id=str(data.get("key_id") or ""),
            application_key=str(data.get("application_key") or ""),
            bucket=str(data.get("bucket") or ""),
            endpoint=str(data.get("endpoint") or DEFAULT_B2_ENDPOINT),
            region=data.get("region"),
        )
        if not creds.validate():
            raise ConfigurationError(
                "Storage credentials incomplete (key_id, application_key, bucket)"
            )
        return creds

    def _settings_from_env(self) -> Dict[str, Any]:
        """Load settings from environment variables."""
        env_config: Dict[str, Any] = {}

        if endpoint := os.getenv("MOTION_NOTIFY_ENDPOINT"):
            env_config["endpoint"] = endpoint

        if pid_path := os.getenv("MOTION_NOTIFY_PID"):
            env_config["pid_path"] = Path(pid_path)

        if log_path := os.getenv("MOTION_NOTIFY_LOG"):
            env_config["log_path"] = Path(log_path)

        if attempts := os.getenv("MOTION_NOTIFY_RETRY_ATTEMPTS"):
            try:
                env_config["retry_attempts"] = int(attempts)
            except ValueError:
                self._logger.warning(f"Invalid MOTION_NOTIFY_RETRY_ATTEMPTS value: {attempts}")

        if interval := os.getenv("MOTION_NOTIFY_RETRY_INTERVAL"):
            try:
                env_config["retry_interval"] = float(interval)
            except ValueError:
                self._logger.warning(f"Invalid MOTION_NOTIFY_RETRY_INTERVAL value: {interval}")

        if reclaim := os.getenv("MOTION_NOTIFY_RECLAIM_STALE"):
            env_config["reclaim_stale_marker"] = reclaim.lower() in ("true", "1", "yes")

        return env_config

    def _credentials_from_env(self) -> Dict[str, Any]:
        """Load credential overrides from environment variables."""
        env_config: Dict[str, Any] = {}

        if key := os.getenv("B2_KEY"):
            env_config["key_id"] = key

        if secret := os.getenv("B2_SECRET"):
            env_config["application_key"] = secret

        if bucket := os.getenv("B2_BUCKET"):
            env_config["bucket"] = bucket

        if endpoint := os.getenv("B2_ENDPOINT"):
            env_config["endpoint"] = endpoint

        if region := os.getenv("B2_REGION"):
            env_config["region"] = region

        return env_config
