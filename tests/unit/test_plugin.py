"""Unit tests for the plugin definition and query dispatch."""

import pytest
from conftest import ACTIVITY_PATH, SHARES_PATH, ocs_envelope

from nextcloud_ocs_plugin.exceptions import ConfigurationError, NotFoundError
from nextcloud_ocs_plugin.plugin import (
    CONNECTION_CONFIG_SCHEMA,
    UnknownTableError,
    get_plugin,
)


@pytest.mark.unit
def test_plugin_exposes_tables():
    plugin = get_plugin()
    assert plugin.name == "nextcloud"
    assert set(plugin.table_map) == {"nextcloud_activity", "nextcloud_share"}


@pytest.mark.unit
def test_connection_schema():
    assert set(CONNECTION_CONFIG_SCHEMA) == {"server_url", "username", "password"}
    assert all(attribute.required for attribute in CONNECTION_CONFIG_SCHEMA.values())
    assert CONNECTION_CONFIG_SCHEMA["password"].sensitive


@pytest.mark.unit
def test_unknown_table():
    with pytest.raises(UnknownTableError, match="nextcloud_files"):
        get_plugin().get_table("nextcloud_files")


@pytest.mark.unit
async def test_execute_list(config, fake_nextcloud, activity_payload):
    fake_nextcloud.routes[ACTIVITY_PATH] = ocs_envelope(
        [activity_payload, {**activity_payload, "activity_id": 2, "user": "bob"}]
    )
    rows = []

    count = await get_plugin().execute(
        "nextcloud_activity",
        config,
        {"user": "bob"},
        rows.append,
        transport=fake_nextcloud.transport,
    )

    assert count == 1
    assert rows[0]["id"] == "2"


@pytest.mark.unit
async def test_execute_get_when_id_qualified(config, fake_nextcloud, share_payload):
    fake_nextcloud.routes[f"{SHARES_PATH}/17"] = ocs_envelope([share_payload])
    rows = []

    count = await get_plugin().execute(
        "nextcloud_share",
        config,
        {"id": "17"},
        rows.append,
        transport=fake_nextcloud.transport,
    )

    assert count == 1
    assert rows[0]["id"] == 17
    assert SHARES_PATH not in fake_nextcloud.paths()


@pytest.mark.unit
async def test_execute_get_not_found_emits_nothing(config, fake_nextcloud):
    fake_nextcloud.routes[ACTIVITY_PATH] = ocs_envelope([])
    rows = []

    with pytest.raises(NotFoundError):
        await get_plugin().execute(
            "nextcloud_activity",
            config,
            {"id": 999},
            rows.append,
            transport=fake_nextcloud.transport,
        )

    assert rows == []


@pytest.mark.unit
async def test_execute_with_connection_mapping(fake_nextcloud, share_payload):
    fake_nextcloud.routes[SHARES_PATH] = ocs_envelope([share_payload])
    rows = []

    await get_plugin().execute(
        "nextcloud_share",
        {"server_url": "https://cloud.example.com", "username": "a", "password": "b"},
        None,
        rows.append,
        transport=fake_nextcloud.transport,
    )

    assert len(rows) == 1


@pytest.mark.unit
async def test_execute_with_incomplete_connection(fake_nextcloud):
    with pytest.raises(ConfigurationError, match="username must be configured"):
        await get_plugin().execute(
            "nextcloud_share",
            {"server_url": "https://cloud.example.com"},
            None,
            lambda row: None,
            transport=fake_nextcloud.transport,
        )

    assert fake_nextcloud.requests == []


@pytest.mark.unit
async def test_execute_get_with_matching_list_qualifier(
    config, fake_nextcloud, activity_payload
):
    fake_nextcloud.routes[ACTIVITY_PATH] = ocs_envelope([activity_payload])
    rows = []

    count = await get_plugin().execute(
        "nextcloud_activity",
        config,
        {"id": "1234", "user": "alice"},
        rows.append,
        transport=fake_nextcloud.transport,
    )

    assert count == 1
    assert rows[0]["id"] == "1234"


@pytest.mark.unit
async def test_execute_get_with_mismatched_list_qualifier(
    config, fake_nextcloud, activity_payload
):
    fake_nextcloud.routes[ACTIVITY_PATH] = ocs_envelope([activity_payload])
    rows = []

    count = await get_plugin().execute(
        "nextcloud_activity",
        config,
        {"id": "1234", "user": "bob"},
        rows.append,
        transport=fake_nextcloud.transport,
    )

    assert count == 0
    assert rows == []
