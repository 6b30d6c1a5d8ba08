from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence

from .ddl.plan import (
    ColumnDef,
    DdlPlan,
    PartitionValue,
    add_columns_sql,
    add_partition_sql,
    create_table_sql,
    partition_path,
)
from .ddl.types import type_to_ddl as default_type_to_ddl
from .errors import (
    InsufficientPartitionValuesError,
    MetadataParseError,
    MissingPartitionValuesError,
    SchemaDiscoveryError,
    TableNotFoundError,
)
from .metadata.schema import SchemaField, TableMetadata

TypeMapper = Callable[[Any], str]


def missing_columns(
    existing: TableMetadata,
    schema: Sequence[SchemaField],
    type_to_ddl: TypeMapper = default_type_to_ddl,
) -> List[ColumnDef]:
    """Schema fields absent from both the table's columns and its partition columns."""

    known = {col.lower() for col in existing.columns}
    known.update(col.lower() for col in existing.partition_columns)
    pending: List[ColumnDef] = []
    for field in schema:
        key = field.key
        if key in known:
            continue
        known.add(key)
        pending.append(ColumnDef(name=key, ddl_type=type_to_ddl(field.data_type)))
    return pending


def partition_values_for(
    table_name: str,
    partition_columns: Sequence[str],
    partition_values: Optional[Sequence[str]],
) -> List[PartitionValue]:
    if not partition_columns:
        return []
    if partition_values is None:
        raise MissingPartitionValuesError(table_name, partition_columns)
    if len(partition_values) < len(partition_columns):
        raise InsufficientPartitionValuesError(table_name, partition_columns, len(partition_values))
    return [PartitionValue(column=col, value=partition_values[idx]) for idx, col in enumerate(partition_columns)]


def _plan_create(
    schema: Sequence[SchemaField],
    *,
    create_if_missing: bool,
    storage_format: str,
    table_name: str,
    type_to_ddl: TypeMapper,
) -> DdlPlan:
    if not create_if_missing:
        raise TableNotFoundError(table_name)
    if not schema:
        raise SchemaDiscoveryError(f"Cannot create table {table_name} from an empty schema")
    columns = [ColumnDef(name=field.name, ddl_type=type_to_ddl(field.data_type)) for field in schema]
    return DdlPlan(statements=(create_table_sql(table_name, columns, storage_format),), output_path=None)


def _plan_evolve(
    existing: TableMetadata,
    schema: Sequence[SchemaField],
    partition_values: Optional[Sequence[str]],
    *,
    table_name: str,
    type_to_ddl: TypeMapper,
) -> DdlPlan:
    if not existing.location:
        raise MetadataParseError(f"No location found in the description of table {table_name}")
    partitions = partition_values_for(table_name, existing.partition_columns, partition_values)
    plan = DdlPlan(output_path=partition_path(existing.location, partitions))
    plan = plan.with_statement(add_columns_sql(table_name, missing_columns(existing, schema, type_to_ddl)))
    return plan.with_statement(add_partition_sql(table_name, partitions))


def reconcile(
    existing: Optional[TableMetadata],
    schema: Sequence[SchemaField],
    partition_values: Optional[Sequence[str]],
    *,
    create_if_missing: bool,
    storage_format: str,
    table_name: str,
    type_to_ddl: TypeMapper = default_type_to_ddl,
) -> DdlPlan:
    """Decide the DDL that brings ``table_name`` in line with ``schema``.

    ``existing`` is ``None`` when the table is absent. Validation failures are
    raised before any statement is produced. When both are needed, the column
    ALTER precedes the partition ALTER. Partition values supplied for an
    unpartitioned table are ignored.
    """

    if existing is None:
        return _plan_create(
            schema,
            create_if_missing=create_if_missing,
            storage_format=storage_format,
            table_name=table_name,
            type_to_ddl=type_to_ddl,
        )
    return _plan_evolve(
        existing,
        schema,
        partition_values,
        table_name=table_name,
        type_to_ddl=type_to_ddl,
    )


__all__ = ["TypeMapper", "missing_columns", "partition_values_for", "reconcile"]
