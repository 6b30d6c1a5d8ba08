from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .common import PrintLogger
from .errors import DiscontinuedError, SchemaDiscoveryError, TableSyncError
from .events import Emitter, emit_log
from .schema_source import SchemaReader
from .settings import ATTR_OUTPUT_PATH, ATTR_OUTPUT_TABLE, TableSettings
from .synchronizer import SyncResult, TableSynchronizer
from .tools.base import ExecutionTool

ROUTE_SUCCESS = "success"
ROUTE_FAILURE = "failure"
ROUTE_RETRY = "retry"


@dataclass
class WorkUnit:
    """One incoming item: its attributes and an optional payload (e.g. a dataset path)."""

    attributes: Dict[str, str] = field(default_factory=dict)
    payload: Any = None


@dataclass
class ProcessOutcome:
    route: str
    unit: WorkUnit
    result: Optional[SyncResult] = None
    error: Optional[BaseException] = None

    @property
    def attributes(self) -> Dict[str, str]:
        return self.unit.attributes

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "route": self.route,
            "attributes": dict(self.unit.attributes),
        }
        if self.result is not None:
            payload["statements"] = list(self.result.statements)
            payload["created"] = self.result.created
        if self.error is not None:
            payload["error"] = str(self.error)
            payload["error_type"] = type(self.error).__name__
        return payload


class UpdateTableProcessor:
    """Creates or evolves the target table for each unit of work and routes the unit."""

    def __init__(
        self,
        tool: ExecutionTool,
        settings: TableSettings,
        schema_reader: SchemaReader,
        logger: PrintLogger,
        *,
        emitter: Optional[Emitter] = None,
        synchronizer: Optional[TableSynchronizer] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        self.settings = settings
        self.schema_reader = schema_reader
        self.logger = logger
        self.emitter = emitter
        self.synchronizer = synchronizer or TableSynchronizer(tool, logger, emitter=emitter)
        self.stop_event = stop_event

    def _check_running(self) -> None:
        if self.stop_event is not None and self.stop_event.is_set():
            raise DiscontinuedError("processing has been stopped")

    def process(self, unit: WorkUnit) -> ProcessOutcome:
        try:
            return self._process(unit)
        except DiscontinuedError as exc:
            self.logger.warn("processing_discontinued", err=str(exc))
            return ProcessOutcome(route=ROUTE_RETRY, unit=unit, error=exc)

    def _process(self, unit: WorkUnit) -> ProcessOutcome:
        self._check_running()
        settings = self.settings
        table_name = settings.resolve_table_name(unit.attributes)
        partition_values = settings.resolve_partition_values(unit.attributes)
        try:
            if not table_name:
                raise TableSyncError(f"Table name template '{settings.table_name}' resolved to an empty value")
            schema = self._read_schema(unit)
            self._check_running()
            result = self.synchronizer.synchronize(
                table_name,
                schema,
                partition_values,
                create_if_missing=settings.create_if_missing,
                storage_format=settings.storage_format,
                query_timeout=settings.query_timeout,
            )
        except TableSyncError as exc:
            unit.attributes[ATTR_OUTPUT_TABLE] = table_name
            emit_log(
                self.emitter,
                level="ERROR",
                msg="table_update_failed",
                logger=self.logger,
                table=table_name,
                error_type=type(exc).__name__,
                err=str(exc),
            )
            return ProcessOutcome(route=ROUTE_FAILURE, unit=unit, error=exc)
        unit.attributes[ATTR_OUTPUT_TABLE] = table_name
        unit.attributes[ATTR_OUTPUT_PATH] = result.output_path
        return ProcessOutcome(route=ROUTE_SUCCESS, unit=unit, result=result)

    def _read_schema(self, unit: WorkUnit):
        try:
            return self.schema_reader.read_schema(unit)
        except (DiscontinuedError, SchemaDiscoveryError):
            raise
        except Exception as exc:
            raise SchemaDiscoveryError(f"Unable to determine the record schema: {exc}") from exc


__all__ = [
    "ProcessOutcome",
    "ROUTE_FAILURE",
    "ROUTE_RETRY",
    "ROUTE_SUCCESS",
    "UpdateTableProcessor",
    "WorkUnit",
]
