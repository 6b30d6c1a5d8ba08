from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

try:
    from sqlalchemy import create_engine, inspect
    from sqlalchemy.engine import Connection, Engine
except ImportError as exc:  # pragma: no cover - dependency guard
    raise RuntimeError("SQLAlchemy support requires the 'sqlalchemy' package") from exc

from hive_sync.common import PrintLogger

from .base import ExecutionTool, StoreConnection

DEFAULT_TIMEOUT_STATEMENT = "SET hive.query.timeout.seconds={seconds}s"


class SQLAlchemyStoreConnection(StoreConnection):
    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def list_table_names(self, database: Optional[str] = None) -> List[str]:
        return list(inspect(self._conn).get_table_names(schema=database))

    def execute_query(self, sql: str) -> List[Tuple[Any, ...]]:
        result = self._conn.exec_driver_sql(sql)
        return [tuple(row) for row in result]

    def execute(self, sql: str) -> None:
        self._conn.exec_driver_sql(sql)
        self._conn.commit()


class SQLAlchemyTool(ExecutionTool):
    def __init__(
        self,
        engine: Engine,
        *,
        timeout_statement: Optional[str] = DEFAULT_TIMEOUT_STATEMENT,
        logger: Optional[PrintLogger] = None,
    ) -> None:
        self._engine = engine
        self.timeout_statement = timeout_statement
        self.logger = logger

    @contextmanager
    def connect(self, query_timeout: int = 0) -> Iterator[SQLAlchemyStoreConnection]:
        with self._engine.connect() as conn:
            store = SQLAlchemyStoreConnection(conn)
            if query_timeout and query_timeout > 0:
                if self.timeout_statement:
                    store.execute(self.timeout_statement.format(seconds=int(query_timeout)))
                elif self.logger is not None:
                    self.logger.warn("query_timeout_unsupported", engine="sqlalchemy", timeout=query_timeout)
            yield store

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], logger: Optional[PrintLogger] = None) -> "SQLAlchemyTool":
        runtime = cfg.get("runtime", {})
        sa_cfg = dict(runtime.get("sqlalchemy") or {})
        url = sa_cfg.pop("url", None)
        if not url:
            raise ValueError("runtime.sqlalchemy.url must be provided for SQLAlchemy tool")
        timeout_statement = sa_cfg.pop("timeout_statement", DEFAULT_TIMEOUT_STATEMENT)
        engine = create_engine(url, **sa_cfg)
        return cls(engine, timeout_statement=timeout_statement, logger=logger)

    def stop(self) -> None:
        if self._engine:
            self._engine.dispose()


__all__ = ["SQLAlchemyStoreConnection", "SQLAlchemyTool"]
