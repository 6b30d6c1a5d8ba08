from __future__ import annotations

from typing import Any, Dict

from pyspark.sql.types import ArrayType, DataType, DecimalType, MapType, StructType

_HIVE_TYPE_MAP = {
    "ByteType": "TINYINT",
    "ShortType": "SMALLINT",
    "IntegerType": "INT",
    "LongType": "BIGINT",
    "FloatType": "FLOAT",
    "DoubleType": "DOUBLE",
    "BinaryType": "BINARY",
    "BooleanType": "BOOLEAN",
    "StringType": "STRING",
    "DateType": "DATE",
    "TimestampType": "TIMESTAMP",
    "TimestampNTZType": "TIMESTAMP",
}

# Hive spellings that Spark's JSON type names do not cover
_TYPE_NAME_ALIASES: Dict[str, str] = {
    "int": "integer",
    "bigint": "long",
    "smallint": "short",
    "tinyint": "byte",
    "bool": "boolean",
    "text": "string",
    "varchar": "string",
    "char": "string",
}


def parse_type_name(type_name: str) -> DataType:
    """Resolve a simple type name (``"int"``, ``"decimal(10,2)"``) into a Spark data type."""

    normalized = str(type_name).strip().lower()
    normalized = _TYPE_NAME_ALIASES.get(normalized, normalized)
    return type_from_json(normalized)


def type_from_json(value: Any) -> DataType:
    """Parse a Spark JSON type value: a type name or a nested ``{"type": ...}`` object."""

    wrapper = StructType.fromJson(
        {"type": "struct", "fields": [{"name": "value", "type": value, "nullable": True, "metadata": {}}]}
    )
    return wrapper.fields[0].dataType


def type_to_ddl(data_type: Any) -> str:
    """Render a Spark data type as a Hive column type."""

    if isinstance(data_type, str):
        data_type = parse_type_name(data_type)
    if isinstance(data_type, DecimalType):
        return f"DECIMAL({data_type.precision},{data_type.scale})"
    if isinstance(data_type, ArrayType):
        return f"ARRAY<{type_to_ddl(data_type.elementType)}>"
    if isinstance(data_type, MapType):
        return f"MAP<{type_to_ddl(data_type.keyType)},{type_to_ddl(data_type.valueType)}>"
    if isinstance(data_type, StructType):
        members = ",".join(f"{field.name.lower()}:{type_to_ddl(field.dataType)}" for field in data_type.fields)
        return f"STRUCT<{members}>"
    class_name = data_type.__class__.__name__
    if class_name in {"CharType", "VarcharType"}:
        return f"{class_name[:-4].upper()}({data_type.length})"
    return _HIVE_TYPE_MAP.get(class_name, "STRING")


__all__ = ["parse_type_name", "type_from_json", "type_to_ddl"]
