from __future__ import annotations

import abc
import json
from typing import Any, Dict, Iterable, List, Optional, Union

from .ddl.types import parse_type_name, type_from_json
from .errors import SchemaDiscoveryError
from .metadata.schema import SchemaField, fields_from_struct
from .settings import resolve


class SchemaReader(abc.ABC):
    """Discovers the record schema of one unit of work without materializing records."""

    @abc.abstractmethod
    def read_schema(self, unit: Any) -> List[SchemaField]:
        ...


def _field_from_entry(entry: Any) -> SchemaField:
    if not isinstance(entry, dict):
        raise SchemaDiscoveryError(f"Schema field entries must be objects, got {entry!r}")
    name = entry.get("name")
    raw_type = entry.get("type", entry.get("data_type"))
    if not name or raw_type is None:
        raise SchemaDiscoveryError(f"Schema field entries require 'name' and 'type': {entry!r}")
    try:
        data_type = type_from_json(raw_type) if isinstance(raw_type, dict) else parse_type_name(raw_type)
    except (ValueError, KeyError, TypeError) as exc:
        raise SchemaDiscoveryError(f"Unsupported type {raw_type!r} for field '{name}'") from exc
    return SchemaField(name=str(name), data_type=data_type)


class StaticSchemaReader(SchemaReader):
    """The same schema for every unit of work."""

    def __init__(self, fields: Iterable[SchemaField]) -> None:
        self.fields = list(fields)

    def read_schema(self, unit: Any) -> List[SchemaField]:
        return list(self.fields)

    @classmethod
    def from_json(cls, source: Union[str, Dict[str, Any], List[Any]]) -> "StaticSchemaReader":
        """Build from a Spark ``StructType`` JSON document, a list of fields, or a path to either."""

        document: Any = source
        if isinstance(source, str):
            try:
                with open(source, "r", encoding="utf-8") as handle:
                    document = json.load(handle)
            except (OSError, ValueError) as exc:
                raise SchemaDiscoveryError(f"Unable to load schema from {source}: {exc}") from exc
        if isinstance(document, dict):
            document = document.get("fields")
        if not isinstance(document, list):
            raise SchemaDiscoveryError("Schema JSON must be a struct document or a list of fields")
        return cls(_field_from_entry(entry) for entry in document)


class SparkSchemaReader(SchemaReader):
    """Reads the schema of the dataset a unit points to through a Spark session."""

    def __init__(
        self,
        tool: Any,
        path_template: Optional[str] = None,
        fmt: str = "parquet",
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not hasattr(tool, "read_schema"):
            raise RuntimeError("Execution tool must expose a Spark session to read dataset schemas")
        self.tool = tool
        self.path_template = path_template
        self.fmt = fmt
        self.options = dict(options or {})

    def read_schema(self, unit: Any) -> List[SchemaField]:
        attributes = getattr(unit, "attributes", {}) or {}
        path = resolve(self.path_template, attributes) if self.path_template else getattr(unit, "payload", None)
        if not path:
            raise SchemaDiscoveryError("No dataset path available to read the schema from")
        struct = self.tool.read_schema(str(path), self.fmt, self.options)
        return fields_from_struct(struct)


def build_schema_reader(schema_cfg: Optional[Dict[str, Any]], tool: Any = None) -> SchemaReader:
    cfg = schema_cfg or {}
    if "fields" in cfg:
        return StaticSchemaReader.from_json(cfg["fields"])
    if cfg.get("json"):
        return StaticSchemaReader.from_json(str(cfg["json"]))
    if "path" in cfg or cfg.get("from_payload"):
        return SparkSchemaReader(tool, cfg.get("path"), cfg.get("format", "parquet"), cfg.get("options"))
    raise ValueError("tables[].schema must define 'fields', 'json' or 'path'")


__all__ = ["SchemaReader", "SparkSchemaReader", "StaticSchemaReader", "build_schema_reader"]
