"""The nextcloud_activity table."""

import logging

from nextcloud_ocs_plugin.exceptions import QualifierError
from nextcloud_ocs_plugin.models.activity import Activity

from .base import Column, ColumnType, QueryData, Table, parse_id, to_string, to_wire

logger = logging.getLogger(__name__)


async def list_activity(d: QueryData) -> None:
    """Stream every activity, filtered client-side by the query qualifiers."""
    async with await d.get_client() as client:
        activities = await client.activity.list_activities()

    for activity in activities:
        if ACTIVITY_TABLE.matches_quals(activity, d.equals_quals):
            d.stream_list_item(activity)


async def get_activity(d: QueryData) -> Activity:
    """Look up a single activity by its ID."""
    qual = d.qual("id")
    if qual is None:
        raise QualifierError("id qualifier not provided")
    activity_id = parse_id(qual)

    async with await d.get_client() as client:
        return await client.activity.get_activity(activity_id)


ACTIVITY_TABLE = Table(
    name="nextcloud_activity",
    description="Nextcloud activity events (from the Activity app)",
    list_hydrate=list_activity,
    get_hydrate=get_activity,
    get_key_columns=("id",),
    list_key_columns=("user", "app", "type", "object_type"),
    columns=[
        Column(
            "id",
            ColumnType.STRING,
            "Activity ID",
            field="activity_id",
            transform=to_string,
        ),
        Column("app", ColumnType.STRING, "Originating app"),
        Column("type", ColumnType.STRING, "Activity type"),
        Column("subject", ColumnType.STRING, "Unformatted subject"),
        Column("time", ColumnType.TIMESTAMP, "Timestamp of the activity"),
        Column(
            "subject_rich",
            ColumnType.JSON,
            "Rich subject as sent by the server",
            transform=to_wire,
        ),
        Column("subject_params", ColumnType.JSON, "Parameters for the subject"),
        Column("message", ColumnType.STRING, "Optional longer message"),
        Column("object_type", ColumnType.STRING, "Type of object acted upon"),
        Column("object_id", ColumnType.INT, "ID of the object"),
        Column("object_name", ColumnType.STRING, "Name of the object"),
        Column("user", ColumnType.STRING, "User who performed the action"),
        Column(
            "affected_user",
            ColumnType.STRING,
            "User whose stream holds the activity",
            field="affecteduser",
        ),
        Column("link", ColumnType.STRING, "Link to the affected object"),
    ],
)
