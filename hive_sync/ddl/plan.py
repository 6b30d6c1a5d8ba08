from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class ColumnDef:
    name: str
    ddl_type: str

    def render(self) -> str:
        return f"{self.name} {self.ddl_type}"


@dataclass(frozen=True)
class PartitionValue:
    column: str
    value: str

    def render_spec(self) -> str:
        escaped = self.value.replace("\\", "\\\\").replace("'", "\\'")
        return f"{self.column}='{escaped}'"

    def render_path(self) -> str:
        return f"{self.column}={self.value}"


@dataclass(frozen=True)
class DdlPlan:
    """Statements to run, in order, and the path to report once they have run.

    ``output_path`` is ``None`` when the store assigns the location (new tables);
    callers resolve it by describing the table after execution.
    """

    statements: Tuple[str, ...] = ()
    output_path: Optional[str] = None

    @property
    def is_noop(self) -> bool:
        return not self.statements

    def with_statement(self, statement: Optional[str]) -> "DdlPlan":
        if not statement:
            return self
        return DdlPlan(statements=(*self.statements, statement), output_path=self.output_path)


def create_table_sql(table_name: str, columns: Sequence[ColumnDef], storage_format: str) -> str:
    cols = ", ".join(col.render() for col in columns)
    return f"CREATE TABLE IF NOT EXISTS {table_name} ({cols}) STORED AS {storage_format}"


def add_columns_sql(table_name: str, columns: Sequence[ColumnDef]) -> Optional[str]:
    if not columns:
        return None
    cols = ", ".join(col.render() for col in columns)
    return f"ALTER TABLE {table_name} ADD COLUMNS ({cols})"


def add_partition_sql(table_name: str, values: Sequence[PartitionValue]) -> Optional[str]:
    if not values:
        return None
    spec = ", ".join(value.render_spec() for value in values)
    return f"ALTER TABLE {table_name} ADD IF NOT EXISTS PARTITION ({spec})"


def partition_path(location: str, values: Sequence[PartitionValue]) -> str:
    if not values:
        return location
    return location + "/" + "/".join(value.render_path() for value in values)


__all__ = [
    "ColumnDef",
    "DdlPlan",
    "PartitionValue",
    "add_columns_sql",
    "add_partition_sql",
    "create_table_sql",
    "partition_path",
]
