"""
Scanner for ``DESC FORMATTED <table>`` output.

The store answers with ordered two-column rows and no schema of its own:

    # col_name            data_type
    id                    int
    name                  string
                          (blank)
    # Partition Information
    # col_name            data_type
    dt                    string
                          (blank)
    # Detailed Table Information
    Database:             default
    Location:             hdfs://nn/warehouse/t

Section headers start with ``#`` and may be followed by a blank spacer row;
a blank row closes a section. The scanner walks the rows once, in order.
"""

from __future__ import annotations

import enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .schema import TableMetadata

PARTITION_MARKER = "# Partition Information"
DETAILED_MARKER = "# Detailed Table Information"
DEFAULT_LOCATION_PREFIXES: Tuple[str, ...] = ("Location:",)


class ScanState(enum.Enum):
    HEADER = "header"
    HEADER_SKIP = "header_skip"
    COLUMNS = "columns"
    SEEK_PARTITION_MARKER = "seek_partition_marker"
    PARTITION_HEADER = "partition_header"
    PARTITION_HEADER_SKIP = "partition_header_skip"
    PARTITION_COLUMNS = "partition_columns"
    SEEK_LOCATION = "seek_location"
    DONE = "done"


def _cell(row: Any, index: int) -> str:
    if row is None:
        return ""
    try:
        value = row[index]
    except (IndexError, KeyError, TypeError):
        return ""
    return "" if value is None else str(value).strip()


class DescribeScanner:
    """Finite-state scanner that folds describe rows into :class:`TableMetadata`."""

    def __init__(self, location_prefixes: Sequence[str] = DEFAULT_LOCATION_PREFIXES) -> None:
        self.location_prefixes = tuple(location_prefixes) or DEFAULT_LOCATION_PREFIXES
        self.state = ScanState.HEADER
        self.columns: List[str] = []
        self.partition_columns: List[str] = []
        self.location = ""

    # ------------------------------------------------------------------ transitions
    def feed(self, name: str, value: str) -> ScanState:
        handler = getattr(self, f"_on_{self.state.value}")
        self.state = handler(name, value)
        return self.state

    def _is_location(self, name: str) -> bool:
        return any(name.startswith(prefix) for prefix in self.location_prefixes)

    def _section_marker(self, name: str) -> Optional[ScanState]:
        if name == PARTITION_MARKER:
            return ScanState.PARTITION_HEADER
        if name == DETAILED_MARKER:
            return ScanState.SEEK_LOCATION
        return None

    def _on_header(self, name: str, value: str) -> ScanState:
        if not name:
            return ScanState.COLUMNS
        return self._on_header_skip(name, value)

    def _on_header_skip(self, name: str, value: str) -> ScanState:
        if not name:
            return ScanState.COLUMNS
        marker = self._section_marker(name)
        if marker is not None:
            return marker
        if name.startswith("#"):
            return ScanState.HEADER_SKIP
        self.columns.append(name)
        return ScanState.COLUMNS

    def _on_columns(self, name: str, value: str) -> ScanState:
        if not name:
            return ScanState.SEEK_PARTITION_MARKER
        return self._on_header_skip(name, value)

    def _on_seek_partition_marker(self, name: str, value: str) -> ScanState:
        marker = self._section_marker(name)
        if marker is not None:
            return marker
        if self._is_location(name):
            self.location = value
            return ScanState.DONE
        return ScanState.SEEK_PARTITION_MARKER

    def _on_partition_header(self, name: str, value: str) -> ScanState:
        if not name:
            return ScanState.PARTITION_COLUMNS
        return self._on_partition_header_skip(name, value)

    def _on_partition_header_skip(self, name: str, value: str) -> ScanState:
        if not name:
            return ScanState.PARTITION_COLUMNS
        if name == DETAILED_MARKER:
            return ScanState.SEEK_LOCATION
        if name.startswith("#"):
            return ScanState.PARTITION_HEADER_SKIP
        self.partition_columns.append(name)
        return ScanState.PARTITION_COLUMNS

    def _on_partition_columns(self, name: str, value: str) -> ScanState:
        if not name or name == DETAILED_MARKER:
            return ScanState.SEEK_LOCATION
        return self._on_partition_header_skip(name, value)

    def _on_seek_location(self, name: str, value: str) -> ScanState:
        if self._is_location(name):
            self.location = value
            return ScanState.DONE
        return ScanState.SEEK_LOCATION

    def _on_done(self, name: str, value: str) -> ScanState:
        return ScanState.DONE

    # ------------------------------------------------------------------ result
    def result(self) -> TableMetadata:
        partition_keys = {col.lower() for col in self.partition_columns}
        columns = [col for col in self.columns if col.lower() not in partition_keys]
        return TableMetadata(
            columns=tuple(columns),
            partition_columns=tuple(self.partition_columns),
            location=self.location,
        )


def parse_describe_output(
    rows: Iterable[Any],
    *,
    location_prefixes: Sequence[str] = DEFAULT_LOCATION_PREFIXES,
) -> TableMetadata:
    """Parse ``(col_name, data_type, ...)`` rows into :class:`TableMetadata`.

    Spark lists partition columns in the column section as well; they are
    removed from ``columns`` so the two collections never overlap.
    """

    scanner = DescribeScanner(location_prefixes)
    for row in rows:
        if scanner.feed(_cell(row, 0), _cell(row, 1)) is ScanState.DONE:
            break
    return scanner.result()


__all__ = [
    "DEFAULT_LOCATION_PREFIXES",
    "DETAILED_MARKER",
    "DescribeScanner",
    "PARTITION_MARKER",
    "ScanState",
    "parse_describe_output",
]
