import logging
from typing import Any

from httpx import (
    AsyncBaseTransport,
    AsyncClient,
    AsyncHTTPTransport,
    BasicAuth,
    Request,
    Response,
    Timeout,
)

from nextcloud_ocs_plugin import __version__
from nextcloud_ocs_plugin.config import ConnectionConfig
from nextcloud_ocs_plugin.exceptions import (
    NextcloudConnectionError,
    NextcloudPluginError,
)

from .activity import ActivityClient
from .base import OCS_HEADERS, BaseNextcloudClient
from .sharing import SharingClient

logger = logging.getLogger(__name__)

USER_AGENT = f"nextcloud-ocs-plugin/{__version__}"

CAPABILITIES_ENDPOINT = "ocs/v1.php/cloud/capabilities"


async def log_request(request: Request):
    logger.debug("Request event hook: %s %s", request.method, request.url)
    logger.debug("Headers: %s", request.headers)


async def log_response(response: Response):
    await response.aread()
    logger.debug("Response [%s] %s", response.status_code, response.text)


class AsyncDisableCookieTransport(AsyncBaseTransport):
    """This Transport disable cookies from accumulating in the httpx AsyncClient

    Nextcloud sets session cookies on OCS responses; with Basic Auth on every
    request they are not needed.
    """

    def __init__(self, transport: AsyncBaseTransport):
        self.transport = transport

    async def handle_async_request(self, request: Request) -> Response:
        response = await self.transport.handle_async_request(request)
        response.headers.pop("set-cookie", None)
        return response

    async def aclose(self) -> None:
        await self.transport.aclose()


class NextcloudClient(BaseNextcloudClient):
    """Nextcloud OCS client that owns the HTTP session and the app clients.

    Constructing a client directly does not talk to the server, so such a
    client is unverified. Use :meth:`connect` to get a client whose
    credentials and URL have been checked with a capabilities call.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        transport: AsyncBaseTransport | None = None,
    ):
        self.config = config
        http_client = AsyncClient(
            base_url=config.server_url,
            auth=BasicAuth(config.username, config.password),
            headers={**OCS_HEADERS, "User-Agent": USER_AGENT},
            transport=AsyncDisableCookieTransport(
                transport or AsyncHTTPTransport(verify=config.verify_ssl)
            ),
            event_hooks={"request": [log_request], "response": [log_response]},
            timeout=Timeout(timeout=config.timeout),
        )
        super().__init__(http_client, config.username)

        # Initialize app clients
        self.activity = ActivityClient(self._client, config.username)
        self.sharing = SharingClient(self._client, config.username)

    @property
    def base_url(self) -> str:
        return self.config.server_url

    @classmethod
    async def connect(
        cls,
        config: ConnectionConfig,
        transport: AsyncBaseTransport | None = None,
    ) -> "NextcloudClient":
        """Create a client and verify the connection before returning it.

        Args:
            config: Validated connection settings
            transport: Optional httpx transport (used by tests)

        Returns:
            A verified NextcloudClient

        Raises:
            NextcloudConnectionError: If the capabilities probe fails
        """
        client = cls(config, transport=transport)
        try:
            await client.test_connection()
        except NextcloudPluginError as e:
            await client.close()
            raise NextcloudConnectionError(
                f"unable to connect to Nextcloud: connection test failed: {e}"
            ) from e
        except BaseException:
            await client.close()
            raise

        logger.debug(
            f"Connected to Nextcloud at {config.server_url} as {config.username}"
        )
        return client

    async def capabilities(self) -> dict[str, Any]:
        """Get the server capabilities (version and enabled app features)."""
        return await self._get_ocs_data(CAPABILITIES_ENDPOINT, dict[str, Any])

    async def test_connection(self) -> None:
        """Verify URL and credentials with a lightweight capabilities call."""
        await self.capabilities()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit - closes the HTTP client."""
        await self.close()
        return False  # Don't suppress exceptions

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()


__all__ = [
    "ActivityClient",
    "AsyncDisableCookieTransport",
    "NextcloudClient",
    "SharingClient",
]
