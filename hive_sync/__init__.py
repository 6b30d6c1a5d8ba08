"""
Hive table synchronization.

Given a target table, an incoming record schema and optional static partition
values, create the table when it is missing or evolve it (new columns, new
partition) when it exists, and report where the data for the unit of work
belongs.
"""

from .metadata import SchemaField, TableMetadata, parse_describe_output
from .processor import ProcessOutcome, UpdateTableProcessor, WorkUnit
from .reconcile import reconcile
from .synchronizer import SyncResult, TableSynchronizer

__all__ = [
    "ProcessOutcome",
    "SchemaField",
    "SyncResult",
    "TableMetadata",
    "TableSynchronizer",
    "UpdateTableProcessor",
    "WorkUnit",
    "parse_describe_output",
    "reconcile",
]
