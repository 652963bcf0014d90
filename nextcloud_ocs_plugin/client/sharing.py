"""Client for Nextcloud Files Sharing app operations."""

import logging

from nextcloud_ocs_plugin.client.base import BaseNextcloudClient
from nextcloud_ocs_plugin.exceptions import (
    NextcloudHTTPError,
    NotFoundError,
    OCSAPIError,
)
from nextcloud_ocs_plugin.models.sharing import Share

logger = logging.getLogger(__name__)


class SharingClient(BaseNextcloudClient):
    """Client for the Files Sharing OCS API (v1 over ocs/v2.php)."""

    app_name = "sharing"
    SHARES_ENDPOINT = "ocs/v2.php/apps/files_sharing/api/v1/shares"

    async def list_shares(self) -> list[Share]:
        """List all shares created by the authenticated user."""
        shares = await self._get_ocs_data(self.SHARES_ENDPOINT, list[Share])
        logger.debug(f"Fetched {len(shares)} shares")
        return shares

    async def get_share(self, share_id: int) -> Share:
        """Get a single share by ID.

        The endpoint returns a one-element list. A missing share shows up as
        HTTP 404, an OCS 404 status, or an empty list depending on the
        server version.

        Raises:
            NotFoundError: If the share does not exist
        """
        try:
            shares = await self._get_ocs_data(
                f"{self.SHARES_ENDPOINT}/{share_id}", list[Share]
            )
        except NextcloudHTTPError as e:
            if e.status_code == 404:
                raise NotFoundError("share", share_id) from e
            raise
        except OCSAPIError as e:
            if e.statuscode == 404:
                raise NotFoundError("share", share_id) from e
            raise

        if not shares:
            raise NotFoundError("share", share_id)
        return shares[0]
