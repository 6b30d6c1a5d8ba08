from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List, Optional

from .common import PrintLogger
from .events import Emitter, StructuredLogSubscriber
from .orchestrator_helpers import filter_tables, parse_attributes, summarize_run, validate_config
from .processor import ROUTE_SUCCESS, UpdateTableProcessor, WorkUnit
from .schema_source import build_schema_reader
from .settings import TableSettings
from .synchronizer import TableSynchronizer
from .tools.base import ExecutionTool


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hive-sync")
    parser.add_argument("--config", required=True, help="Path to the JSON configuration file")
    parser.add_argument("--only-tables", help="Comma separated table name templates to run", default=None)
    parser.add_argument(
        "--attr",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Attribute of the unit of work, used to resolve ${KEY} templates (repeatable)",
    )
    parser.add_argument("--payload", help="Dataset path handed to schema readers without a path template", default=None)
    parser.add_argument(
        "--engine",
        choices=["spark", "sqlalchemy"],
        default=None,
        help="Store engine override (default: runtime.engine from the config)",
    )
    parser.add_argument("--output-json", help="Optional path to write the outcomes as JSON", default=None)
    return parser.parse_args(argv)


def build_tool(cfg: Dict[str, Any], logger: PrintLogger) -> ExecutionTool:
    engine = str(cfg["runtime"].get("engine", "sqlalchemy")).lower()
    if engine == "spark":
        from .tools.spark import SparkTool

        return SparkTool.from_config(cfg, logger=logger)
    from .tools.sqlalchemy import SQLAlchemyTool

    return SQLAlchemyTool.from_config(cfg, logger=logger)


def run(
    tool: ExecutionTool,
    cfg: Dict[str, Any],
    tables: List[Dict[str, Any]],
    attributes: Dict[str, str],
    logger: PrintLogger,
    payload: Any = None,
) -> List[Dict[str, Any]]:
    emitter = Emitter()
    emitter.subscribe(StructuredLogSubscriber(logger))
    synchronizer = TableSynchronizer(tool, logger, emitter=emitter)
    outcomes: List[Dict[str, Any]] = []
    for table_cfg in tables:
        processor = UpdateTableProcessor(
            tool,
            TableSettings.from_config(table_cfg),
            build_schema_reader(table_cfg.get("schema"), tool),
            logger,
            emitter=emitter,
            synchronizer=synchronizer,
        )
        outcome = processor.process(WorkUnit(attributes=dict(attributes), payload=payload))
        outcomes.append(outcome.to_dict())
    return outcomes


def run_cli(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    with open(args.config, "r", encoding="utf-8") as handle:
        cfg: Dict[str, Any] = json.load(handle)
    if args.engine:
        cfg.setdefault("runtime", {})["engine"] = args.engine
    validate_config(cfg)
    runtime = cfg["runtime"]
    attributes = parse_attributes(args.attr)
    tables = filter_tables(cfg["tables"], args.only_tables)
    if not tables:
        print(json.dumps({"status": "no_tables"}))
        return
    logger = PrintLogger(
        job_name=runtime.get("job_name", "hive_sync"),
        file_path=runtime.get("log_file"),
        level=runtime.get("log_level", "INFO"),
    )
    tool = build_tool(cfg, logger)
    try:
        outcomes = run(tool, cfg, tables, attributes, logger, payload=args.payload)
    finally:
        tool.stop()
    results = {"summary": summarize_run(outcomes), "outcomes": outcomes}
    if args.output_json:
        with open(args.output_json, "w", encoding="utf-8") as handle:
            json.dump(results, handle, indent=2, sort_keys=True)
    else:
        print(json.dumps(results, indent=2, sort_keys=True))
    if any(item.get("route") != ROUTE_SUCCESS for item in outcomes):
        raise SystemExit(2)


__all__ = ["build_tool", "parse_args", "run", "run_cli"]
