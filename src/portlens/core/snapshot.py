"""Process table snapshots via psutil."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

import psutil

from portlens.errors import SnapshotError
from portlens.models.runtime import ProcessRecord

logger = logging.getLogger("portlens.snapshot")

_ATTRS = ["pid", "name", "exe", "cmdline"]

ProcessTableSource = Callable[[], Iterable[ProcessRecord]]


def psutil_process_table() -> list[ProcessRecord]:
    """Read every visible process into a ProcessRecord.

    Attributes psutil cannot read (AccessDenied) come back as None and are
    mapped to empty values; processes that exit mid-iteration are skipped.
    """
    records: list[ProcessRecord] = []
    for proc in psutil.process_iter(attrs=_ATTRS, ad_value=None):
        try:
            info = proc.info
            records.append(
                ProcessRecord(
                    pid=info["pid"],
                    name=info.get("name") or "",
                    exe_path=info.get("exe") or None,
                    cmd=tuple(info.get("cmdline") or ()),
                )
            )
        except (psutil.NoSuchProcess, psutil.ZombieProcess):
            continue
    return records


class ProcessSnapshotProvider:
    """Caller-owned, refreshable view of the process table.

    Not synchronized: concurrent callers should each hold their own
    provider rather than share one across threads.
    """

    def __init__(self, source: ProcessTableSource = psutil_process_table) -> None:
        self._source = source
        self._by_pid: dict[int, ProcessRecord] = {}
        self._refreshed = False

    @property
    def has_snapshot(self) -> bool:
        """True once at least one refresh has succeeded."""
        return self._refreshed

    def __len__(self) -> int:
        return len(self._by_pid)

    def refresh(self) -> None:
        """Re-read the whole process table.

        On failure the previous snapshot is kept and SnapshotError is raised.
        """
        try:
            table = {rec.pid: rec for rec in self._source()}
        except Exception as exc:
            logger.warning("Process table refresh failed, keeping previous snapshot: %s", exc)
            raise SnapshotError(f"Cannot read process table: {exc}") from exc

        self._by_pid = table
        self._refreshed = True
        logger.debug("Snapshot refreshed: %d processes", len(table))

    def by_pid(self, pid: int) -> ProcessRecord | None:
        """Return the process captured at the last refresh, if any."""
        return self._by_pid.get(pid)
