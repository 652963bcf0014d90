from .activity import ACTIVITY_TABLE
from .base import Column, ColumnType, QueryData, Table
from .sharing import SHARE_TABLE

__all__ = [
    "ACTIVITY_TABLE",
    "SHARE_TABLE",
    "Column",
    "ColumnType",
    "QueryData",
    "Table",
]
