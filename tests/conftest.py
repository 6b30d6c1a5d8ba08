from contextlib import contextmanager
from typing import Dict, List, Optional

import pytest

from hive_sync.common import PrintLogger
from hive_sync.tools.base import ExecutionTool, StoreConnection


def hive_describe_rows(columns, partition_columns=(), location="/warehouse/t"):
    rows = [("# col_name", "data_type", "comment"), ("", None, None)]
    rows.extend((name, dtype, "") for name, dtype in columns)
    rows.append(("", None, None))
    if partition_columns:
        rows.append(("# Partition Information", None, None))
        rows.append(("# col_name", "data_type", "comment"))
        rows.append(("", None, None))
        rows.extend((name, dtype, "") for name, dtype in partition_columns)
        rows.append(("", None, None))
    rows.append(("# Detailed Table Information", None, None))
    rows.append(("Database:", "default", None))
    rows.append(("Owner:", "hive", None))
    if location:
        rows.append(("Location:", location, None))
    rows.append(("Table Type:", "MANAGED_TABLE", None))
    return rows


class _FakeTable:
    def __init__(self, columns, partition_columns=(), location="/warehouse/t"):
        self.columns = list(columns)
        self.partition_columns = list(partition_columns)
        self.location = location


class FakeConnection(StoreConnection):
    def __init__(self, store: "FakeStore") -> None:
        self.store = store

    def list_table_names(self, database: Optional[str] = None) -> List[str]:
        self.store.calls.append(("list_tables", database))
        return list(self.store.tables)

    def execute_query(self, sql: str):
        self.store.calls.append(("query", sql))
        if sql.startswith("DESC FORMATTED "):
            name = sql[len("DESC FORMATTED "):].strip()
            table = self.store.tables[name]
            return hive_describe_rows(table.columns, table.partition_columns, table.location)
        raise RuntimeError(f"unexpected query {sql}")

    def execute(self, sql: str) -> None:
        self.store.calls.append(("execute", sql))
        if any(marker in sql for marker in self.store.fail_on):
            raise RuntimeError("store rejected statement")
        self.store.executed.append(sql)
        if sql.startswith("CREATE TABLE IF NOT EXISTS "):
            name = sql[len("CREATE TABLE IF NOT EXISTS "):].split(" ", 1)[0]
            location = self.store.created_location.format(name=name) if self.store.created_location else ""
            self.store.tables.setdefault(name, _FakeTable([], (), location))


class FakeStore(ExecutionTool):
    def __init__(self) -> None:
        self.tables: Dict[str, _FakeTable] = {}
        self.calls: List[tuple] = []
        self.executed: List[str] = []
        self.fail_on: List[str] = []
        self.timeouts: List[int] = []
        self.created_location = "/warehouse/{name}"
        self.stopped = False

    def add_table(self, name, columns, partition_columns=(), location="/warehouse/t"):
        self.tables[name] = _FakeTable(columns, partition_columns, location)

    @contextmanager
    def connect(self, query_timeout: int = 0):
        self.timeouts.append(query_timeout)
        yield FakeConnection(self)

    def stop(self) -> None:
        self.stopped = True


class _NullStream:
    def write(self, _text):
        return 0

    def flush(self):
        pass


@pytest.fixture
def describe_rows():
    return hive_describe_rows


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def logger():
    return PrintLogger(job_name="test", level="DEBUG", stream=_NullStream())
