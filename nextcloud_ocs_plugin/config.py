import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from nextcloud_ocs_plugin.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# Connection keys in the order they are validated
REQUIRED_FIELDS = ("server_url", "username", "password")


def normalize_server_url(server_url: str) -> str:
    """Return the server URL with exactly one trailing slash."""
    return server_url.rstrip("/") + "/"


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection settings for a Nextcloud server.

    Only Basic Auth (username/password or app password) is supported.
    Instances are immutable once validated and are passed explicitly to
    every client and table handler.
    """

    server_url: str
    username: str
    password: str

    # Optional transport settings
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True

    def __post_init__(self):
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(name)

        if self.timeout <= 0:
            raise ConfigurationError("timeout", "timeout must be positive")

        # Frozen dataclass, so bypass __setattr__ for normalization
        object.__setattr__(
            self, "server_url", normalize_server_url(self.server_url)
        )

    def __repr__(self) -> str:
        return (
            f"ConnectionConfig(server_url={self.server_url!r}, "
            f"username={self.username!r}, password='***', "
            f"timeout={self.timeout!r}, verify_ssl={self.verify_ssl!r})"
        )

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "ConnectionConfig":
        """Build a config from the host's connection object.

        Missing keys are treated as empty strings so that validation reports
        the first missing field by name.
        """
        mapping = mapping or {}
        kwargs: dict[str, Any] = {
            name: mapping.get(name) or "" for name in REQUIRED_FIELDS
        }
        if mapping.get("timeout") is not None:
            kwargs["timeout"] = float(mapping["timeout"])
        if mapping.get("verify_ssl") is not None:
            verify_ssl = mapping["verify_ssl"]
            if isinstance(verify_ssl, str):
                verify_ssl = verify_ssl.lower() == "true"
            kwargs["verify_ssl"] = bool(verify_ssl)
        return cls(**kwargs)


def get_connection_config() -> ConnectionConfig:
    """Get connection settings from environment variables.

    Returns:
        ConnectionConfig built from NEXTCLOUD_HOST, NEXTCLOUD_USERNAME and
        NEXTCLOUD_PASSWORD (plus optional NEXTCLOUD_TIMEOUT and
        NEXTCLOUD_VERIFY_SSL)

    Raises:
        ConfigurationError: If a required variable is unset or empty
    """
    logger.debug("Loading Nextcloud connection config from environment")
    return ConnectionConfig(
        server_url=os.getenv("NEXTCLOUD_HOST", ""),
        username=os.getenv("NEXTCLOUD_USERNAME", ""),
        password=os.getenv("NEXTCLOUD_PASSWORD", ""),
        timeout=float(os.getenv("NEXTCLOUD_TIMEOUT", str(DEFAULT_TIMEOUT))),
        verify_ssl=os.getenv("NEXTCLOUD_VERIFY_SSL", "true").lower() == "true",
    )
