"""Table definitions and the query boundary shared with the host.

A table handler receives its connection settings and qualifiers through
:class:`QueryData`, along with the callback that streams rows back.
Nothing is read from global state.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence

from httpx import AsyncBaseTransport

from nextcloud_ocs_plugin.client import NextcloudClient
from nextcloud_ocs_plugin.config import ConnectionConfig
from nextcloud_ocs_plugin.exceptions import QualifierError
from nextcloud_ocs_plugin.observability.metrics import record_table_query
from nextcloud_ocs_plugin.observability.tracing import trace_table_query

logger = logging.getLogger(__name__)


class ColumnType(Enum):
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    TIMESTAMP = "timestamp"
    JSON = "json"


@dataclass(frozen=True)
class Column:
    """A table column read from one attribute of a record.

    Attributes:
        name: Column name exposed to the host
        type: Column type
        description: Human-readable description
        field: Record attribute to read (defaults to the column name)
        transform: Optional function applied to the attribute value
    """

    name: str
    type: ColumnType
    description: str = ""
    field: Optional[str] = None
    transform: Optional[Callable[[Any], Any]] = None

    def value(self, item: Any) -> Any:
        value = getattr(item, self.field or self.name, None)
        if self.transform is not None and value is not None:
            value = self.transform(value)
        return value


@dataclass
class QueryData:
    """Per-invocation query context handed to table handlers.

    Attributes:
        connection: Connection settings for this query
        equals_quals: Equality qualifiers keyed by column name
        stream_list_item: Callback receiving each matching record
        transport: Optional httpx transport for the client (used by tests)
    """

    connection: ConnectionConfig
    equals_quals: dict[str, Any] = field(default_factory=dict)
    stream_list_item: Callable[[Any], None] = lambda item: None
    transport: Optional[AsyncBaseTransport] = None

    def qual(self, name: str) -> Any:
        return self.equals_quals.get(name)

    async def get_client(self) -> NextcloudClient:
        """Create a verified client for this query's connection."""
        return await NextcloudClient.connect(self.connection, transport=self.transport)


ListHydrate = Callable[[QueryData], Awaitable[None]]
GetHydrate = Callable[[QueryData], Awaitable[Any]]


def to_string(value: Any) -> str:
    return str(value)


def to_wire(value: Any) -> Any:
    """Serialize a model back to its JSON-compatible wire form."""
    if hasattr(value, "to_wire"):
        return value.to_wire()
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return value


def parse_id(value: Any) -> int:
    """Parse a numeric identifier from its string or int form, exactly."""
    if isinstance(value, bool):
        raise QualifierError(f"invalid ID format: {value}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip(), 10)
    except ValueError as e:
        raise QualifierError(f"invalid ID format: {value}") from e


def _coerce_qual(column: Column, value: Any) -> Any:
    """Bring a qualifier value to the column's type for comparison."""
    if value is None:
        return None
    if column.type == ColumnType.INT:
        return parse_id(value)
    if column.type == ColumnType.BOOL and isinstance(value, str):
        return value.lower() in ("true", "t", "1", "yes")
    if column.type == ColumnType.STRING:
        return str(value)
    return value


@dataclass
class Table:
    """A queryable table backed by list and get handlers.

    List handlers stream every matching record through
    `QueryData.stream_list_item`; get handlers return a single record.
    Qualifiers on `list_key_columns` are evaluated client-side after the
    collection has been fetched.
    """

    name: str
    description: str
    columns: Sequence[Column]
    list_hydrate: ListHydrate
    get_hydrate: Optional[GetHydrate] = None
    get_key_columns: Sequence[str] = ("id",)
    list_key_columns: Sequence[str] = ()

    def column(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise QualifierError(f"table {self.name} has no column {name!r}")

    def row(self, item: Any) -> dict[str, Any]:
        """Map a record onto a `{column: value}` dict."""
        return {column.name: column.value(item) for column in self.columns}

    def matches_quals(self, item: Any, quals: Mapping[str, Any]) -> bool:
        """Test a record against the qualifiers on the list key columns."""
        for name in self.list_key_columns:
            if name not in quals or quals[name] is None:
                continue
            column = self.column(name)
            if column.value(item) != _coerce_qual(column, quals[name]):
                return False
        return True

    def _check_quals(self, quals: Mapping[str, Any], allowed: Sequence[str]) -> None:
        for name in quals:
            self.column(name)
            if name not in allowed:
                raise QualifierError(
                    f"column {name!r} of table {self.name} "
                    "cannot be used as a qualifier"
                )

    def is_get_query(self, quals: Mapping[str, Any]) -> bool:
        return self.get_hydrate is not None and all(
            quals.get(name) is not None for name in self.get_key_columns
        )

    async def list_rows(
        self,
        connection: ConnectionConfig,
        quals: Optional[Mapping[str, Any]],
        emit: Callable[[dict[str, Any]], None],
        transport: Optional[AsyncBaseTransport] = None,
    ) -> int:
        """Run the list handler and emit each row.

        Rows emitted before a failure stay emitted; the error propagates.

        Returns:
            Number of rows emitted
        """
        quals = dict(quals or {})
        self._check_quals(quals, self.list_key_columns)
        emitted = 0

        def stream_list_item(item: Any) -> None:
            nonlocal emitted
            emit(self.row(item))
            emitted += 1

        data = QueryData(connection, quals, stream_list_item, transport)
        start_time = time.time()
        try:
            with trace_table_query(self.name, "list", quals):
                await self.list_hydrate(data)
        except Exception:
            record_table_query(self.name, "list", emitted, status="error")
            raise

        record_table_query(self.name, "list", emitted)
        logger.info(
            f"{self.name}: listed {emitted} rows in {time.time() - start_time:.3f}s"
        )
        return emitted

    async def get_row(
        self,
        connection: ConnectionConfig,
        quals: Mapping[str, Any],
        transport: Optional[AsyncBaseTransport] = None,
    ) -> Optional[dict[str, Any]]:
        """Run the get handler and return the row for the matching record.

        Qualifiers on list key columns are checked against the fetched
        record; None is returned when it does not satisfy them.
        """
        if self.get_hydrate is None:
            raise QualifierError(f"table {self.name} does not support get")

        quals = dict(quals)
        self._check_quals(quals, (*self.get_key_columns, *self.list_key_columns))
        data = QueryData(connection, quals, transport=transport)
        try:
            with trace_table_query(self.name, "get", quals):
                item = await self.get_hydrate(data)
        except Exception:
            record_table_query(self.name, "get", status="error")
            raise

        if not self.matches_quals(item, quals):
            record_table_query(self.name, "get")
            return None

        record_table_query(self.name, "get", 1)
        return self.row(item)
