import pytest

from hive_sync.orchestrator_helpers import filter_tables, parse_attributes, summarize_run, validate_config
from hive_sync.settings import (
    CREATE_IF_NOT_EXISTS,
    FAIL_IF_NOT_EXISTS,
    TableSettings,
    parse_partition_values,
    resolve,
)


def _cfg(**table):
    entry = {"table": "t", "schema": {"fields": [{"name": "id", "type": "int"}]}}
    entry.update(table)
    return {"runtime": {"engine": "sqlalchemy", "sqlalchemy": {"url": "sqlite://"}}, "tables": [entry]}


def test_resolve_substitutes_attributes():
    assert resolve("${db}.${ table }_raw", {"db": "sales", "table": "orders"}) == "sales.orders_raw"


def test_resolve_unknown_attribute_is_empty():
    assert resolve("x_${missing}", {}) == "x_"
    assert resolve(None, {"a": "b"}) is None


def test_partition_values_are_trimmed_and_split():
    assert parse_partition_values(" 2024-01-01 , eu ") == ["2024-01-01", "eu"]
    assert parse_partition_values("a,,b") == ["a", "", "b"]
    assert parse_partition_values("a,b,,") == ["a", "b"]
    assert parse_partition_values("a, ,") == ["a", ""]
    assert parse_partition_values("  ") == [""]
    assert parse_partition_values("") is None
    assert parse_partition_values(None) is None


def test_table_settings_defaults():
    settings = TableSettings.from_config({"table": "${tbl}"})

    assert settings.create_strategy == FAIL_IF_NOT_EXISTS
    assert settings.create_if_missing is False
    assert settings.storage_format == "TEXTFILE"
    assert settings.partition_values is None
    assert settings.query_timeout == 0


def test_table_settings_accepts_camel_case_and_lists():
    settings = TableSettings.from_config(
        {
            "tableName": "events",
            "createTable": "CreateIfNotExists",
            "storageFormat": "orc",
            "partitionValues": ["${dt}", "eu"],
            "queryTimeout": "15",
        }
    )

    assert settings.create_strategy == CREATE_IF_NOT_EXISTS
    assert settings.storage_format == "ORC"
    assert settings.query_timeout == 15
    assert settings.resolve_partition_values({"dt": "2024-01-01"}) == ["2024-01-01", "eu"]


@pytest.mark.parametrize(
    "entry",
    [
        {"table": ""},
        {"table": "t", "create_table": "maybe"},
        {"table": "t", "storage_format": "DELTA"},
        {"table": "t", "query_timeout": -1},
        {"table": "t", "query_timeout": "soon"},
    ],
)
def test_table_settings_rejects_invalid_entries(entry):
    with pytest.raises(ValueError):
        TableSettings.from_config(entry)


def test_validate_config_accepts_minimal_config():
    validate_config(_cfg(partition_values="${dt}"))


def test_validate_config_requires_sqlalchemy_url():
    cfg = _cfg()
    cfg["runtime"] = {"engine": "sqlalchemy"}

    with pytest.raises(ValueError, match="runtime.sqlalchemy.url"):
        validate_config(cfg)


def test_validate_config_rejects_unknown_engine():
    cfg = _cfg()
    cfg["runtime"]["engine"] = "presto"

    with pytest.raises(ValueError, match="Unsupported runtime.engine"):
        validate_config(cfg)


def test_validate_config_requires_schema_source():
    with pytest.raises(ValueError, match="schema"):
        validate_config(_cfg(schema={}))


def test_validate_config_rejects_bad_storage_format():
    with pytest.raises(ValueError, match="storage format"):
        validate_config(_cfg(storage_format="DELTA"))


def test_filter_tables_and_attributes():
    tables = [{"table": "a"}, {"table": "B"}, {"table": "c"}]

    assert filter_tables(tables, "b, c") == [{"table": "B"}, {"table": "c"}]
    assert filter_tables(tables, None) == tables
    assert parse_attributes(["dt=2024-01-01", "path=a=b"]) == {"dt": "2024-01-01", "path": "a=b"}
    with pytest.raises(ValueError):
        parse_attributes(["novalue"])


def test_summarize_run_counts_routes():
    summary = summarize_run([{"route": "success"}, {"route": "failure"}, {"route": "success"}])

    assert summary == {"total": 3, "routes": {"success": 2, "failure": 1}}
