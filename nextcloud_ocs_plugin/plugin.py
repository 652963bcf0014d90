"""Plugin definition: connection schema and the tables it exposes."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from httpx import AsyncBaseTransport

from nextcloud_ocs_plugin.config import ConnectionConfig
from nextcloud_ocs_plugin.tables import ACTIVITY_TABLE, SHARE_TABLE, Table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigAttribute:
    type: str = "string"
    required: bool = True
    sensitive: bool = False


CONNECTION_CONFIG_SCHEMA: dict[str, ConfigAttribute] = {
    "server_url": ConfigAttribute(),
    "username": ConfigAttribute(),
    "password": ConfigAttribute(sensitive=True),
}


class UnknownTableError(KeyError):
    """Raised when a query names a table the plugin does not expose."""

    def __str__(self) -> str:
        return f"unknown table: {self.args[0]}"


@dataclass
class Plugin:
    """Entry point the host uses to discover and query tables."""

    name: str = "nextcloud"
    connection_config_schema: dict[str, ConfigAttribute] = field(
        default_factory=lambda: dict(CONNECTION_CONFIG_SCHEMA)
    )
    table_map: dict[str, Table] = field(
        default_factory=lambda: {
            ACTIVITY_TABLE.name: ACTIVITY_TABLE,
            SHARE_TABLE.name: SHARE_TABLE,
        }
    )

    def get_table(self, name: str) -> Table:
        try:
            return self.table_map[name]
        except KeyError:
            raise UnknownTableError(name) from None

    async def execute(
        self,
        table_name: str,
        connection: ConnectionConfig | Mapping[str, Any],
        quals: Optional[Mapping[str, Any]],
        emit: Callable[[dict[str, Any]], None],
        transport: Optional[AsyncBaseTransport] = None,
    ) -> int:
        """Run a query against a table and emit its rows.

        When every get key column is qualified the get handler is used and
        the fetched record is checked against any list key qualifiers,
        otherwise the list handler streams all matching rows.

        Args:
            table_name: Name of the table to query
            connection: ConnectionConfig or the host's raw connection mapping
            quals: Equality qualifiers keyed by column name
            emit: Callback receiving each row as a dict
            transport: Optional httpx transport (used by tests)

        Returns:
            Number of rows emitted
        """
        table = self.get_table(table_name)
        if not isinstance(connection, ConnectionConfig):
            connection = ConnectionConfig.from_mapping(connection)
        quals = dict(quals or {})

        if table.is_get_query(quals):
            logger.debug(f"Executing get on {table_name} with {sorted(quals)}")
            row = await table.get_row(connection, quals, transport=transport)
            if row is None:
                return 0
            emit(row)
            return 1

        logger.debug(f"Executing list on {table_name} with {sorted(quals)}")
        return await table.list_rows(connection, quals, emit, transport=transport)


def get_plugin() -> Plugin:
    return Plugin()
