from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from .settings import (
    normalize_create_strategy,
    normalize_query_timeout,
    normalize_storage_format,
)


def validate_config(cfg: Dict[str, Any]) -> None:
    def _validate_schema_cfg(entry: Any, context: str) -> None:
        if not isinstance(entry, dict):
            raise ValueError(f"{context}.schema must be an object")
        sources = [key for key in ("fields", "json", "path", "from_payload") if entry.get(key)]
        if not sources:
            raise ValueError(f"{context}.schema requires one of 'fields', 'json', 'path' or 'from_payload'")
        fields = entry.get("fields")
        if fields is not None and not isinstance(fields, (list, dict)):
            raise ValueError(f"{context}.schema.fields must be a list or a struct document")
        options = entry.get("options")
        if options is not None and not isinstance(options, dict):
            raise ValueError(f"{context}.schema.options must be an object")

    for key in ["runtime", "tables"]:
        if key not in cfg:
            raise ValueError(f"Missing config key: {key}")
    runtime = cfg["runtime"]
    if not isinstance(runtime, dict):
        raise ValueError("runtime must be an object")
    engine = str(runtime.get("engine", "sqlalchemy")).lower()
    if engine not in {"sqlalchemy", "spark"}:
        raise ValueError(f"Unsupported runtime.engine: {engine}")
    if engine == "sqlalchemy":
        sa_cfg = runtime.get("sqlalchemy")
        if not isinstance(sa_cfg, dict) or not sa_cfg.get("url"):
            raise ValueError("runtime.sqlalchemy.url required for the sqlalchemy engine")
    spark_cfg = runtime.get("spark")
    if spark_cfg is not None and not isinstance(spark_cfg, dict):
        raise ValueError("runtime.spark must be an object when provided")

    tables = cfg["tables"]
    if not isinstance(tables, list) or not tables:
        raise ValueError("tables must be a non-empty list")
    for idx, tbl in enumerate(tables):
        context = f"tables[{idx}]"
        if not isinstance(tbl, dict):
            raise ValueError(f"{context} must be an object")
        if not str(tbl.get("table") or "").strip():
            raise ValueError(f"{context}.table must be a non-empty string")
        normalize_create_strategy(tbl.get("create_table"))
        normalize_storage_format(tbl.get("storage_format"))
        normalize_query_timeout(tbl.get("query_timeout", 0))
        partition_values = tbl.get("partition_values")
        if partition_values is not None and not isinstance(partition_values, (str, list)):
            raise ValueError(f"{context}.partition_values must be a string or a list of strings")
        _validate_schema_cfg(tbl.get("schema"), context)


def filter_tables(tables: Iterable[Dict[str, Any]], only_tables: Optional[str]) -> List[Dict[str, Any]]:
    if not only_tables:
        return list(tables)
    allow = {s.strip().lower() for s in only_tables.split(",") if s.strip()}
    return [tbl for tbl in tables if str(tbl.get("table", "")).strip().lower() in allow]


def parse_attributes(pairs: Optional[Sequence[str]]) -> Dict[str, str]:
    attributes: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Attributes must be given as key=value, got '{pair}'")
        attributes[key.strip()] = value
    return attributes


def summarize_run(outcomes: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    counts: Dict[str, int] = {}
    for outcome in outcomes:
        route = str(outcome.get("route", "unknown"))
        counts[route] = counts.get(route, 0) + 1
    return {"total": len(outcomes), "routes": counts}


__all__ = ["filter_tables", "parse_attributes", "summarize_run", "validate_config"]
