from __future__ import annotations

import json
import sys
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

RUN_ID = uuid.uuid4().hex

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "WARNING": 30, "ERROR": 40}


class PrintLogger:
    """Structured line logger: one JSON object per call, tagged with job and run id."""

    def __init__(
        self,
        job_name: str = "hive_sync",
        file_path: Optional[str] = None,
        level: str = "INFO",
        stream: Optional[TextIO] = None,
    ) -> None:
        self.job_name = job_name
        self.file_path = file_path
        self.level = str(level or "INFO").upper()
        self.stream = stream
        self._threshold = _LEVELS.get(self.level, 20)
        self._lock = threading.Lock()

    def log(self, level: str, msg: str, **fields: Any) -> None:
        level = str(level).upper()
        if _LEVELS.get(level, 20) < self._threshold:
            return
        record: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": level,
            "job": self.job_name,
            "run_id": RUN_ID,
            "msg": msg,
        }
        record.update({k: v for k, v in fields.items() if v is not None})
        line = json.dumps(record, default=str)
        with self._lock:
            print(line, file=self.stream or sys.stdout, flush=True)
            if self.file_path:
                with open(self.file_path, "a", encoding="utf-8") as handle:
                    handle.write(line + "\n")

    def debug(self, msg: str, **fields: Any) -> None:
        self.log("DEBUG", msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        self.log("INFO", msg, **fields)

    def warn(self, msg: str, **fields: Any) -> None:
        self.log("WARN", msg, **fields)

    warning = warn

    def error(self, msg: str, **fields: Any) -> None:
        self.log("ERROR", msg, **fields)


__all__ = ["PrintLogger", "RUN_ID"]
