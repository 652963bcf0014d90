"""Client for Nextcloud Activity app operations."""

import logging

from nextcloud_ocs_plugin.client.base import BaseNextcloudClient
from nextcloud_ocs_plugin.client.ocs import decode_ocs_response
from nextcloud_ocs_plugin.exceptions import NotFoundError
from nextcloud_ocs_plugin.models.activity import Activity

logger = logging.getLogger(__name__)


class ActivityClient(BaseNextcloudClient):
    """Client for the Activity app's OCS API (v2)."""

    app_name = "activity"
    ACTIVITY_ENDPOINT = "ocs/v2.php/apps/activity/api/v2/activity"

    async def list_activities(self) -> list[Activity]:
        """Fetch the activity feed of the authenticated user.

        The Activity app answers 304 Not Modified with an empty body when the
        feed has no entries; that is returned as an empty list.
        """
        response = await self._make_request("GET", self.ACTIVITY_ENDPOINT)
        if response.status_code == 304:
            logger.debug("Activity feed is empty (304 Not Modified)")
            return []

        activities = decode_ocs_response(response, list[Activity])
        logger.debug(f"Fetched {len(activities)} activities")
        return activities

    async def get_activity(self, activity_id: int) -> Activity:
        """Get a single activity by ID.

        The Activity API has no single-item endpoint, so the full feed is
        fetched and scanned for an exact ID match.

        Raises:
            NotFoundError: If no activity has the given ID
        """
        for activity in await self.list_activities():
            if activity.activity_id == activity_id:
                return activity
        raise NotFoundError("activity", activity_id)
