from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

CREATE_IF_NOT_EXISTS = "Create If Not Exists"
FAIL_IF_NOT_EXISTS = "Fail If Not Exists"

_CREATE_STRATEGIES = {
    "create if not exists": CREATE_IF_NOT_EXISTS,
    "createifnotexists": CREATE_IF_NOT_EXISTS,
    "fail if not exists": FAIL_IF_NOT_EXISTS,
    "failifnotexists": FAIL_IF_NOT_EXISTS,
}

STORAGE_FORMATS = ("TEXTFILE", "SEQUENCEFILE", "ORC", "PARQUET", "AVRO", "RCFILE")

ATTR_OUTPUT_TABLE = "output.table"
ATTR_OUTPUT_PATH = "output.path"

_PLACEHOLDER = re.compile(r"\$\{\s*([^}]+?)\s*\}")


def resolve(template: Optional[str], attributes: Mapping[str, Any]) -> Optional[str]:
    """Substitute ``${name}`` placeholders from a unit's attributes.

    Unknown attributes resolve to the empty string.
    """

    if template is None:
        return None

    def replacer(match: re.Match[str]) -> str:
        value = attributes.get(match.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(replacer, str(template))


def parse_partition_values(raw: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated partition value list; ``None`` when nothing was supplied."""

    if raw is None or raw == "":
        return None
    entries = raw.split(",")
    while entries and entries[-1] == "":
        entries.pop()
    return [entry.strip() for entry in entries]


def normalize_create_strategy(value: Any) -> str:
    if value is None:
        return FAIL_IF_NOT_EXISTS
    key = str(value).strip().lower()
    strategy = _CREATE_STRATEGIES.get(key) or _CREATE_STRATEGIES.get(key.replace("_", "").replace(" ", ""))
    if strategy is None:
        raise ValueError(
            f"Unsupported create table strategy '{value}'; expected '{CREATE_IF_NOT_EXISTS}' or '{FAIL_IF_NOT_EXISTS}'"
        )
    return strategy


def normalize_storage_format(value: Any) -> str:
    fmt = str(value or "TEXTFILE").strip().upper()
    if fmt not in STORAGE_FORMATS:
        raise ValueError(f"Unsupported storage format '{value}'; expected one of {', '.join(STORAGE_FORMATS)}")
    return fmt


def normalize_query_timeout(value: Any) -> int:
    try:
        timeout = int(value if value is not None else 0)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"query_timeout must be an integer number of seconds, got '{value}'") from exc
    if timeout < 0:
        raise ValueError("query_timeout must be zero or a positive number of seconds")
    return timeout


@dataclass(frozen=True)
class TableSettings:
    """Per-table configuration; templates are resolved per unit of work."""

    table_name: str
    create_strategy: str = FAIL_IF_NOT_EXISTS
    storage_format: str = "TEXTFILE"
    partition_values: Optional[str] = None
    query_timeout: int = 0

    @property
    def create_if_missing(self) -> bool:
        return self.create_strategy == CREATE_IF_NOT_EXISTS

    @staticmethod
    def from_config(config: Optional[Dict[str, Any]]) -> "TableSettings":
        cfg = dict(config or {})
        table_name = cfg.get("table") or cfg.get("table_name") or cfg.get("tableName")
        if not table_name or not str(table_name).strip():
            raise ValueError("tables[].table must be a non-empty string")
        partition_values = cfg.get("partition_values", cfg.get("partitionValues"))
        if isinstance(partition_values, (list, tuple)):
            partition_values = ",".join(str(value) for value in partition_values)
        return TableSettings(
            table_name=str(table_name).strip(),
            create_strategy=normalize_create_strategy(cfg.get("create_table", cfg.get("createTable"))),
            storage_format=normalize_storage_format(cfg.get("storage_format", cfg.get("storageFormat"))),
            partition_values=str(partition_values) if partition_values not in (None, "") else None,
            query_timeout=normalize_query_timeout(cfg.get("query_timeout", cfg.get("queryTimeout", 0))),
        )

    def resolve_table_name(self, attributes: Mapping[str, Any]) -> str:
        return (resolve(self.table_name, attributes) or "").strip()

    def resolve_partition_values(self, attributes: Mapping[str, Any]) -> Optional[List[str]]:
        return parse_partition_values(resolve(self.partition_values, attributes))


__all__ = [
    "ATTR_OUTPUT_PATH",
    "ATTR_OUTPUT_TABLE",
    "CREATE_IF_NOT_EXISTS",
    "FAIL_IF_NOT_EXISTS",
    "STORAGE_FORMATS",
    "TableSettings",
    "normalize_create_strategy",
    "normalize_query_timeout",
    "normalize_storage_format",
    "parse_partition_values",
    "resolve",
]
