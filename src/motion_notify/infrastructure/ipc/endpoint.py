"""Worker endpoint addressing."""

from dataclasses import dataclass
from urllib.parse import urlsplit

from motion_notify.domain.exceptions import ConfigurationError


@dataclass(frozen=True)
class RemoteEndpoint:
    """Address the worker listens on, shared by client and worker."""

    host: str = "localhost"
    port: int = 8787
    scheme: str = "http"

    @classmethod
    def parse(cls, uri: str) -> 'RemoteEndpoint':
        """
        Parse ``http://host:port`` (the scheme may be omitted).

        Raises:
            ConfigurationError: On unsupported scheme or missing port
        """
        if "://" not in uri:
            uri = f"http://{uri}"
        parts = urlsplit(uri)
        if parts.scheme != "http":
            raise ConfigurationError(f"Unsupported endpoint scheme: {parts.scheme}")
        try:
            port = parts.port
        except ValueError as e:
            raise ConfigurationError(f"Invalid endpoint port in {uri}") from e
        if not parts.hostname or port is None:
            raise ConfigurationError(f"Endpoint must be host:port, got: {uri}")
        return cls(host=parts.hostname, port=port, scheme=parts.scheme)

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def __str__(self) -> str:
        return self.url
