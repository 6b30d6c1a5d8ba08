import json

import pytest

from hive_sync.cli import parse_args, run, run_cli


def _table_cfg(**overrides):
    cfg = {
        "table": "${tbl}",
        "partition_values": "${dt}",
        "schema": {"fields": [{"name": "id", "type": "int"}, {"name": "age", "type": "int"}]},
    }
    cfg.update(overrides)
    return cfg


def test_parse_args_collects_repeated_attributes():
    args = parse_args(["--config", "c.json", "--attr", "tbl=events", "--attr", "dt=2024-01-01", "--engine", "spark"])

    assert args.attr == ["tbl=events", "dt=2024-01-01"]
    assert args.engine == "spark"
    assert args.only_tables is None


def test_run_processes_each_table(fake_store, logger):
    fake_store.add_table("events", [("id", "int")], [("dt", "string")], "/wh/events")
    tables = [_table_cfg(), _table_cfg(table="missing_${tbl}")]

    outcomes = run(fake_store, {}, tables, {"tbl": "events", "dt": "2024-01-01"}, logger)

    assert [item["route"] for item in outcomes] == ["success", "failure"]
    assert outcomes[0]["attributes"]["output.path"] == "/wh/events/dt=2024-01-01"
    assert outcomes[0]["statements"] == [
        "ALTER TABLE events ADD COLUMNS (age INT)",
        "ALTER TABLE events ADD IF NOT EXISTS PARTITION (dt='2024-01-01')",
    ]
    assert outcomes[1]["error_type"] == "TableNotFoundError"
    assert outcomes[1]["attributes"]["output.table"] == "missing_events"


def test_run_cli_writes_outcomes_and_fails_on_unrouted_units(tmp_path):
    config = {
        "runtime": {
            "engine": "sqlalchemy",
            "log_file": str(tmp_path / "run.log"),
            "sqlalchemy": {"url": f"sqlite:///{tmp_path / 'store.db'}", "timeout_statement": None},
        },
        "tables": [_table_cfg()],
    }
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(config), encoding="utf-8")
    output = tmp_path / "out.json"

    with pytest.raises(SystemExit) as exc:
        run_cli(["--config", str(config_path), "--attr", "tbl=events", "--output-json", str(output)])

    assert exc.value.code == 2
    results = json.loads(output.read_text(encoding="utf-8"))
    assert results["summary"] == {"total": 1, "routes": {"failure": 1}}
    assert results["outcomes"][0]["error_type"] == "TableNotFoundError"


def test_run_cli_without_matching_tables(tmp_path, capsys):
    config = {
        "runtime": {"sqlalchemy": {"url": "sqlite://"}},
        "tables": [_table_cfg(table="events")],
    }
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(config), encoding="utf-8")

    run_cli(["--config", str(config_path), "--only-tables", "other"])

    assert json.loads(capsys.readouterr().out) == {"status": "no_tables"}


def test_run_cli_rejects_invalid_config(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"runtime": {"engine": "sqlalchemy"}, "tables": []}), encoding="utf-8")

    with pytest.raises(ValueError):
        run_cli(["--config", str(config_path)])
