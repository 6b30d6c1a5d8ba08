from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .common import PrintLogger
from .ddl.types import type_to_ddl as default_type_to_ddl
from .errors import DiscontinuedError, MetadataParseError, ReconcileError, StoreExecutionError, TableSyncError
from .events import Emitter, emit_log
from .metadata.describe import parse_describe_output
from .metadata.schema import SchemaField, TableMetadata
from .reconcile import TypeMapper, reconcile
from .tools.base import ExecutionTool, StoreConnection, split_table_name


class TableLockRegistry:
    """One mutual-exclusion gate per table name, created on first use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def lock_for(self, table_name: str) -> threading.Lock:
        database, bare = split_table_name(table_name)
        key = f"{database or ''}.{bare}".lower()
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, table_name: str) -> Iterator[None]:
        lock = self.lock_for(table_name)
        with lock:
            yield


@dataclass
class SyncResult:
    table: str
    output_path: str
    statements: List[str] = field(default_factory=list)
    created: bool = False


class TableSynchronizer:
    """Bring one store table in line with an incoming schema.

    The read-metadata, plan and execute sequence for a table runs under that
    table's lock, so concurrent callers never plan against stale metadata.
    """

    def __init__(
        self,
        tool: ExecutionTool,
        logger: PrintLogger,
        *,
        emitter: Optional[Emitter] = None,
        type_to_ddl: TypeMapper = default_type_to_ddl,
        locks: Optional[TableLockRegistry] = None,
    ) -> None:
        self.tool = tool
        self.logger = logger
        self.emitter = emitter
        self.type_to_ddl = type_to_ddl
        self.locks = locks or TableLockRegistry()

    def synchronize(
        self,
        table_name: str,
        schema: Sequence[SchemaField],
        partition_values: Optional[Sequence[str]] = None,
        *,
        create_if_missing: bool = False,
        storage_format: str = "TEXTFILE",
        query_timeout: int = 0,
    ) -> SyncResult:
        with self.locks.hold(table_name):
            try:
                with self.tool.connect(query_timeout=query_timeout) as conn:
                    return self._synchronize(
                        conn,
                        table_name,
                        schema,
                        partition_values,
                        create_if_missing=create_if_missing,
                        storage_format=storage_format,
                    )
            except (TableSyncError, DiscontinuedError):
                raise
            except Exception as exc:
                raise StoreExecutionError(f"Store interaction failed for table {table_name}: {exc}") from exc

    # ------------------------------------------------------------------ internals
    def _synchronize(
        self,
        conn: StoreConnection,
        table_name: str,
        schema: Sequence[SchemaField],
        partition_values: Optional[Sequence[str]],
        *,
        create_if_missing: bool,
        storage_format: str,
    ) -> SyncResult:
        existing: Optional[TableMetadata] = None
        if self._table_exists(conn, table_name):
            existing = self._describe(conn, table_name)
            if partition_values and not existing.is_partitioned:
                self.logger.debug(
                    "partition_values_ignored",
                    table=table_name,
                    values=",".join(partition_values),
                )
        try:
            plan = reconcile(
                existing,
                schema,
                partition_values,
                create_if_missing=create_if_missing,
                storage_format=storage_format,
                table_name=table_name,
                type_to_ddl=self.type_to_ddl,
            )
        except TableSyncError:
            raise
        except (ValueError, TypeError, KeyError) as exc:
            raise ReconcileError(f"Cannot plan DDL for table {table_name}: {exc}") from exc
        applied = self._execute(conn, table_name, plan.statements)
        output_path = plan.output_path
        if output_path is None:
            output_path = self._describe(conn, table_name).location
            if not output_path:
                raise MetadataParseError(f"No location found for table {table_name} after creation")
        result = SyncResult(
            table=table_name,
            output_path=output_path,
            statements=applied,
            created=existing is None,
        )
        emit_log(
            self.emitter,
            level="INFO",
            msg="table_synchronized",
            logger=self.logger,
            table=table_name,
            created=result.created,
            statements=len(applied),
            output_path=output_path,
        )
        return result

    def _table_exists(self, conn: StoreConnection, table_name: str) -> bool:
        database, bare = split_table_name(table_name)
        lowered = bare.lower()
        return any(str(name).lower() == lowered for name in conn.list_table_names(database))

    def _describe(self, conn: StoreConnection, table_name: str) -> TableMetadata:
        rows = conn.describe_table(table_name)
        return parse_describe_output(rows, location_prefixes=conn.location_prefixes)

    def _execute(self, conn: StoreConnection, table_name: str, statements: Tuple[str, ...]) -> List[str]:
        applied: List[str] = []
        for statement in statements:
            self.logger.info("executing_ddl", table=table_name, sql=statement)
            try:
                conn.execute(statement)
            except Exception as exc:
                self.logger.error("ddl_failed", table=table_name, sql=statement, err=str(exc), applied=len(applied))
                raise StoreExecutionError(
                    f"Failed to execute '{statement}': {exc}",
                    statement=statement,
                    applied=applied,
                ) from exc
            applied.append(statement)
            if self.emitter is not None:
                self.emitter.emit("ddl_executed", table=table_name, sql=statement)
        return applied


__all__ = ["SyncResult", "TableLockRegistry", "TableSynchronizer"]
