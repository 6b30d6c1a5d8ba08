from __future__ import annotations

from typing import Optional, Sequence


class TableSyncError(RuntimeError):
    """Base class for failures that route a unit of work to failure."""


class SchemaDiscoveryError(TableSyncError):
    """The incoming schema could not be determined."""


class ReconcileError(TableSyncError):
    """Raised when the table and the incoming schema cannot be reconciled."""


class TableNotFoundError(ReconcileError):
    def __init__(self, table: str) -> None:
        super().__init__(f"Table {table} does not exist and table creation is disabled")
        self.table = table


class MissingPartitionValuesError(ReconcileError):
    def __init__(self, table: str, partition_columns: Sequence[str]) -> None:
        super().__init__(
            f"Found {len(partition_columns)} partition columns but no Static Partition Values were supplied"
        )
        self.table = table
        self.partition_columns = tuple(partition_columns)


class InsufficientPartitionValuesError(ReconcileError):
    def __init__(self, table: str, partition_columns: Sequence[str], supplied: int) -> None:
        super().__init__(
            f"Found {len(partition_columns)} partition columns but only {supplied} "
            "Static Partition Values were supplied"
        )
        self.table = table
        self.partition_columns = tuple(partition_columns)
        self.supplied = supplied


class MetadataParseError(ReconcileError):
    """The store's table description did not contain a usable location."""


class StoreExecutionError(TableSyncError):
    """The store rejected a statement or the connection failed mid-sequence."""

    def __init__(
        self,
        message: str,
        *,
        statement: Optional[str] = None,
        applied: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.statement = statement
        self.applied = tuple(applied)


class DiscontinuedError(Exception):
    """Processing must stop; the unit of work is kept for a later attempt."""


__all__ = [
    "DiscontinuedError",
    "InsufficientPartitionValuesError",
    "MetadataParseError",
    "MissingPartitionValuesError",
    "ReconcileError",
    "SchemaDiscoveryError",
    "StoreExecutionError",
    "TableNotFoundError",
    "TableSyncError",
]
