import io
import json

from hive_sync.common import RUN_ID, PrintLogger
from hive_sync.events import Emitter, StructuredLogSubscriber, emit_log


def _records(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_logger_writes_structured_records_above_threshold(tmp_path):
    stream = io.StringIO()
    log_file = tmp_path / "run.log"
    logger = PrintLogger(job_name="sync", file_path=str(log_file), level="INFO", stream=stream)

    logger.debug("hidden")
    logger.info("table_synchronized", table="t", output_path=None)

    records = _records(stream)
    assert len(records) == 1
    assert records[0]["msg"] == "table_synchronized"
    assert records[0]["job"] == "sync"
    assert records[0]["run_id"] == RUN_ID
    assert records[0]["table"] == "t"
    assert "output_path" not in records[0]
    assert json.loads(log_file.read_text(encoding="utf-8").strip())["msg"] == "table_synchronized"


def test_emit_log_logs_once_and_notifies_subscribers():
    stream = io.StringIO()
    logger = PrintLogger(level="DEBUG", stream=stream)
    emitter = Emitter()
    seen = []
    emitter.subscribe(seen.append)
    emitter.subscribe(StructuredLogSubscriber(logger))

    emit_log(emitter, level="ERROR", msg="table_update_failed", logger=logger, table="t")
    emitter.emit("ddl_executed", table="t", sql="ALTER TABLE t ADD COLUMNS (a INT)")

    assert [event.kind for event in seen] == ["log", "ddl_executed"]
    assert seen[0].payload == {"level": "ERROR", "msg": "table_update_failed", "table": "t"}
    assert [record["msg"] for record in _records(stream)] == ["table_update_failed", "event_ddl_executed"]


def test_emit_log_without_emitter_only_logs():
    stream = io.StringIO()

    emit_log(None, level="INFO", msg="hello", logger=PrintLogger(stream=stream))

    assert _records(stream)[0]["msg"] == "hello"
