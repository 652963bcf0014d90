"""Base client for Nextcloud OCS operations with shared authentication."""

import logging
import time
from abc import ABC
from typing import Any

from httpx import AsyncClient, RequestError, Response

from nextcloud_ocs_plugin.client.ocs import decode_ocs_response
from nextcloud_ocs_plugin.exceptions import NextcloudHTTPError, NextcloudRequestError
from nextcloud_ocs_plugin.observability.metrics import record_nextcloud_api_call
from nextcloud_ocs_plugin.observability.tracing import trace_nextcloud_api_call

logger = logging.getLogger(__name__)

OCS_HEADERS = {
    "OCS-APIRequest": "true",
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class BaseNextcloudClient(ABC):
    """Base class for all Nextcloud app clients."""

    # Subclasses should set this to identify the app for metrics/tracing
    app_name: str = "core"

    def __init__(self, http_client: AsyncClient, username: str):
        """Initialize with shared HTTP client and username.

        Args:
            http_client: Authenticated AsyncClient instance
            username: Nextcloud username
        """
        self._client = http_client
        self.username = username

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Response:
        """Common request wrapper with logging, tracing, and error handling.

        Args:
            method: HTTP method
            endpoint: Endpoint relative to the server URL, e.g.
                "ocs/v2.php/apps/files_sharing/api/v1/shares"
            params: Additional query parameters (format=json is always sent)
            json: Optional JSON request body

        Returns:
            Response object with status < 400

        Raises:
            NextcloudRequestError: If no response was received
            NextcloudHTTPError: If the response status is >= 400
        """
        logger.debug(f"Making {method} request to {endpoint}")

        query = {"format": "json"}
        if params:
            query.update(params)

        start_time = time.time()
        status_code = 0

        try:
            with trace_nextcloud_api_call(
                app=self.app_name, method=method, path=endpoint
            ):
                try:
                    response = await self._client.request(
                        method, endpoint, params=query, json=json
                    )
                except RequestError as e:
                    logger.warning(f"RequestError {method} {endpoint}: {e}")
                    raise NextcloudRequestError(f"request failed: {e}") from e

                status_code = response.status_code
                if status_code >= 400:
                    body = response.text
                    logger.debug(f"HTTP {status_code} from {endpoint}: {body}")
                    raise NextcloudHTTPError(status_code, body)

                return response
        finally:
            record_nextcloud_api_call(
                app=self.app_name,
                method=method,
                status_code=status_code,
                duration=time.time() - start_time,
            )

    async def _get_ocs_data(
        self, endpoint: str, data_type: Any = Any, params: dict[str, Any] | None = None
    ):
        """GET an OCS endpoint and return its decoded `data` member."""
        response = await self._make_request("GET", endpoint, params=params)
        return decode_ocs_response(response, data_type)
