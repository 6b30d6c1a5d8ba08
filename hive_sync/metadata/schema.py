from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple


@dataclass(frozen=True)
class SchemaField:
    """One field of an incoming record schema, in declaration order."""

    name: str
    data_type: Any

    @property
    def key(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class TableMetadata:
    """Structured view of a store's ``DESC FORMATTED`` output for an existing table."""

    columns: Tuple[str, ...] = ()
    partition_columns: Tuple[str, ...] = ()
    location: str = ""

    @property
    def exists(self) -> bool:
        return True

    @property
    def is_partitioned(self) -> bool:
        return bool(self.partition_columns)


def fields_from_struct(schema: Any) -> List[SchemaField]:
    """Convert a Spark ``StructType`` (or anything exposing ``fields``) into schema fields."""

    results: List[SchemaField] = []
    for field in getattr(schema, "fields", []) or []:
        name = getattr(field, "name", None)
        if not name:
            continue
        results.append(SchemaField(name=str(name), data_type=getattr(field, "dataType", None)))
    return results


__all__ = ["SchemaField", "TableMetadata", "fields_from_struct"]
