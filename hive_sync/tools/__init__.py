from .base import ExecutionTool, StoreConnection, split_table_name

__all__ = ["ExecutionTool", "StoreConnection", "split_table_name"]
