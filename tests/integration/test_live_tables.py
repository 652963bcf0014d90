"""Integration tests against a live Nextcloud server.

Requires NEXTCLOUD_HOST, NEXTCLOUD_USERNAME and NEXTCLOUD_PASSWORD.
"""

import logging
import os

import pytest

from nextcloud_ocs_plugin.client import NextcloudClient
from nextcloud_ocs_plugin.config import get_connection_config
from nextcloud_ocs_plugin.exceptions import NotFoundError
from nextcloud_ocs_plugin.plugin import get_plugin

logger = logging.getLogger(__name__)

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not os.getenv("NEXTCLOUD_HOST"), reason="NEXTCLOUD_HOST is not set"
    ),
]


@pytest.fixture
def live_config():
    return get_connection_config()


async def test_connect(live_config):
    async with await NextcloudClient.connect(live_config) as client:
        capabilities = await client.capabilities()

    assert "version" in capabilities


async def test_list_shares(live_config):
    rows = []
    count = await get_plugin().execute("nextcloud_share", live_config, {}, rows.append)

    logger.info(f"Found {count} shares")
    assert count == len(rows)


async def test_list_activity_for_user(live_config):
    rows = []
    await get_plugin().execute(
        "nextcloud_activity", live_config, {"user": live_config.username}, rows.append
    )

    assert all(row["user"] == live_config.username for row in rows)


async def test_missing_share_is_not_found(live_config):
    with pytest.raises(NotFoundError):
        await get_plugin().execute(
            "nextcloud_share", live_config, {"id": 2**31 - 1}, lambda row: None
        )
