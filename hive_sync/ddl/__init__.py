from .plan import (
    ColumnDef,
    DdlPlan,
    PartitionValue,
    add_columns_sql,
    add_partition_sql,
    create_table_sql,
    partition_path,
)
from .types import parse_type_name, type_to_ddl

__all__ = [
    "ColumnDef",
    "DdlPlan",
    "PartitionValue",
    "add_columns_sql",
    "add_partition_sql",
    "create_table_sql",
    "parse_type_name",
    "partition_path",
    "type_to_ddl",
]
