from .describe import DescribeScanner, ScanState, parse_describe_output
from .schema import SchemaField, TableMetadata, fields_from_struct

__all__ = [
    "DescribeScanner",
    "ScanState",
    "SchemaField",
    "TableMetadata",
    "fields_from_struct",
    "parse_describe_output",
]
