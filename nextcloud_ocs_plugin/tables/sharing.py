"""The nextcloud_share table."""

import logging

from nextcloud_ocs_plugin.exceptions import QualifierError
from nextcloud_ocs_plugin.models.sharing import Share

from .base import Column, ColumnType, QueryData, Table, parse_id

logger = logging.getLogger(__name__)


async def list_shares(d: QueryData) -> None:
    """Stream every share of the authenticated user."""
    async with await d.get_client() as client:
        shares = await client.sharing.list_shares()

    for share in shares:
        if SHARE_TABLE.matches_quals(share, d.equals_quals):
            d.stream_list_item(share)


async def get_share(d: QueryData) -> Share:
    """Fetch a single share from its dedicated endpoint."""
    qual = d.qual("id")
    if qual is None:
        raise QualifierError("id qualifier not provided")
    share_id = parse_id(qual)

    async with await d.get_client() as client:
        return await client.sharing.get_share(share_id)


SHARE_TABLE = Table(
    name="nextcloud_share",
    description="Nextcloud file shares (including public links)",
    list_hydrate=list_shares,
    get_hydrate=get_share,
    get_key_columns=("id",),
    list_key_columns=("owner", "share_type", "path", "share_with"),
    columns=[
        Column("id", ColumnType.INT, "Share ID"),
        Column("path", ColumnType.STRING, "Path of the shared object"),
        Column(
            "name_owner",
            ColumnType.STRING,
            "Display name of the owner",
            field="displayname_owner",
        ),
        Column("password", ColumnType.STRING, "Password protecting the share, if any"),
        Column(
            "time_created",
            ColumnType.INT,
            "Creation time of the share",
            field="stime",
        ),
        Column(
            "time_modified",
            ColumnType.INT,
            "Modification time of the shared item",
            field="item_mtime",
        ),
        Column(
            "expire_date",
            ColumnType.STRING,
            "Expiration date of the share, if set",
        ),
        Column(
            "share_with",
            ColumnType.STRING,
            "User or group ID the resource is shared with",
        ),
        Column(
            "share_with_displayname",
            ColumnType.STRING,
            "User or group the resource is shared with",
        ),
        Column(
            "share_type",
            ColumnType.INT,
            "Type of the share (0=user, 1=group, 3=public link)",
        ),
        Column("permissions", ColumnType.INT, "Permission mask"),
        Column("public_upload", ColumnType.BOOL, "Whether public upload is allowed"),
        Column("url", ColumnType.STRING, "Public URL of the share"),
        Column(
            "owner",
            ColumnType.STRING,
            "User ID of the share owner",
            field="uid_owner",
        ),
        Column(
            "item_type",
            ColumnType.STRING,
            "Type of the shared item (file or folder)",
        ),
        Column("token", ColumnType.STRING, "Public link token"),
        Column("note", ColumnType.STRING, "Note attached to the share"),
        Column("label", ColumnType.STRING, "Label of a link share"),
    ],
)
