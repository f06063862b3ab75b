"""Search and grouping over port records."""

from __future__ import annotations

from collections.abc import Iterable

from portlens.models.enums import PortKind
from portlens.models.runtime import PortRecord

DEVELOPMENT_TYPES = frozenset({"React", "Vue", "Next.js", "Node.js"})
DOCKER_TYPE = "Docker"


def port_kind(record: PortRecord) -> PortKind | None:
    """Coarse group of a record; ports without a project count as system.

    Projects outside the known groups (Spring, Flask, ...) have no kind.
    """
    if record.project is None:
        return PortKind.SYSTEM
    if record.project.project_type == DOCKER_TYPE:
        return PortKind.DOCKER
    if record.project.project_type in DEVELOPMENT_TYPES:
        return PortKind.DEVELOPMENT
    return None


def matches_search(record: PortRecord, search: str) -> bool:
    """Port digits, process name or project name contain ``search``."""
    if not search:
        return True
    needle = search.lower()
    if search in str(record.port):
        return True
    if needle in record.process.name.lower():
        return True
    return record.project is not None and needle in record.project.name.lower()


def filter_ports(
    records: Iterable[PortRecord],
    search: str = "",
    kind: PortKind = PortKind.ALL,
) -> list[PortRecord]:
    result = []
    for record in records:
        if not matches_search(record, search):
            continue
        if kind is not PortKind.ALL and port_kind(record) is not kind:
            continue
        result.append(record)
    return result


def port_stats(records: Iterable[PortRecord]) -> dict[str, int]:
    """Counts per kind, plus the total."""
    stats = {"total": 0, "development": 0, "docker": 0, "system": 0}
    for record in records:
        stats["total"] += 1
        kind = port_kind(record)
        if kind is not None:
            stats[kind.value] += 1
    return stats
