"""Configuration package."""

from motion_notify.infrastructure.config.loader import (
    ConfigLoader,
    SinkCredentials,
    UploaderSettings,
    DEFAULT_ENDPOINT,
)

__all__ = ["ConfigLoader", "SinkCredentials", "UploaderSettings", "DEFAULT_ENDPOINT"]
