from __future__ import annotations

import abc
from typing import Any, ContextManager, List, Optional, Sequence, Tuple

from hive_sync.metadata.describe import DEFAULT_LOCATION_PREFIXES


class StoreConnection(abc.ABC):
    """A live connection to the table store."""

    location_prefixes: Sequence[str] = DEFAULT_LOCATION_PREFIXES

    @abc.abstractmethod
    def list_table_names(self, database: Optional[str] = None) -> List[str]:
        ...

    @abc.abstractmethod
    def execute_query(self, sql: str) -> List[Tuple[Any, ...]]:
        ...

    @abc.abstractmethod
    def execute(self, sql: str) -> None:
        ...

    def describe_table(self, table_name: str) -> List[Tuple[Any, ...]]:
        return self.execute_query(f"DESC FORMATTED {table_name}")


class ExecutionTool(abc.ABC):
    """Hands out scoped store connections."""

    @abc.abstractmethod
    def connect(self, query_timeout: int = 0) -> ContextManager[StoreConnection]:
        ...

    def stop(self) -> None:
        return None


def split_table_name(table_name: str) -> Tuple[Optional[str], str]:
    """Split ``db.table`` into its database and bare table name."""

    cleaned = table_name.strip().replace("`", "")
    if "." in cleaned:
        database, _, table = cleaned.rpartition(".")
        return (database or None), table
    return None, cleaned


__all__ = ["ExecutionTool", "StoreConnection", "split_table_name"]
