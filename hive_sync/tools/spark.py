from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pyspark.sql import SparkSession
from pyspark.sql.types import StructType

from hive_sync.common import PrintLogger

from .base import ExecutionTool, StoreConnection


class SparkStoreConnection(StoreConnection):
    # Spark's DESC FORMATTED labels the row "Location" without a colon
    location_prefixes = ("Location:", "Location")

    def __init__(self, spark: SparkSession) -> None:
        self.spark = spark

    def list_table_names(self, database: Optional[str] = None) -> List[str]:
        sql = f"SHOW TABLES IN `{database}`" if database else "SHOW TABLES"
        names: List[str] = []
        for row in self.spark.sql(sql).collect():
            values = row.asDict()
            if values.get("isTemporary"):
                continue
            names.append(str(values.get("tableName")))
        return names

    def execute_query(self, sql: str) -> List[Tuple[Any, ...]]:
        return [tuple(row) for row in self.spark.sql(sql).collect()]

    def execute(self, sql: str) -> None:
        self.spark.sql(sql)


class SparkTool(ExecutionTool):
    def __init__(self, spark: SparkSession, logger: Optional[PrintLogger] = None) -> None:
        self.spark = spark
        self.logger = logger

    @contextmanager
    def connect(self, query_timeout: int = 0) -> Iterator[SparkStoreConnection]:
        if query_timeout and query_timeout > 0 and self.logger is not None:
            self.logger.debug("query_timeout_ignored", engine="spark", timeout=query_timeout)
        yield SparkStoreConnection(self.spark)

    def read_schema(self, path: str, fmt: str = "parquet", options: Optional[Dict[str, Any]] = None) -> StructType:
        reader = self.spark.read.format(fmt)
        for key, value in (options or {}).items():
            reader = reader.option(key, value)
        return reader.load(path).schema

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], logger: Optional[PrintLogger] = None) -> "SparkTool":
        runtime = cfg.get("runtime", {})
        spark_cfg = runtime.get("spark") or {}
        builder = SparkSession.builder.appName(runtime.get("job_name", "hive_sync"))
        if spark_cfg.get("master"):
            builder = builder.master(spark_cfg["master"])
        for key, value in (spark_cfg.get("conf") or {}).items():
            builder = builder.config(key, value)
        if spark_cfg.get("enable_hive_support", True):
            builder = builder.enableHiveSupport()
        return cls(builder.getOrCreate(), logger=logger)

    def stop(self) -> None:
        if self.spark is not None:
            self.spark.stop()


__all__ = ["SparkStoreConnection", "SparkTool"]
