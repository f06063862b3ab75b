"""Listing parser: netstat text -> (port, pid) pairs for listening TCP sockets.

Column positions are fixed per platform and selected by the caller; the
text itself is never sniffed. This is the only place platform differences
are encoded.

Windows (``netstat -ano``; UDP lines have no state column and are dropped)::

    TCP    0.0.0.0:3000    0.0.0.0:0    LISTENING    4321

POSIX (``netstat -tlnp``)::

    tcp   0   0 0.0.0.0:22   0.0.0.0:*   LISTEN   812/sshd
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from portlens.models.enums import ListingSchema

logger = logging.getLogger("portlens.parser")

MAX_PORT = 65535


@dataclass(frozen=True, slots=True)
class ColumnSchema:
    """Fixed column layout of one listing flavour."""

    protocol: int
    local_address: int
    state: int
    pid: int
    min_tokens: int
    protocols: frozenset[str]
    listen_state: str
    # POSIX prints "pid/program"
    pid_separator: str | None = None


WINDOWS_COLUMNS = ColumnSchema(
    protocol=0,
    local_address=1,
    state=3,
    pid=4,
    min_tokens=5,
    protocols=frozenset({"TCP"}),
    listen_state="LISTENING",
)

POSIX_COLUMNS = ColumnSchema(
    protocol=0,
    local_address=3,
    state=5,
    pid=6,
    min_tokens=7,
    protocols=frozenset({"tcp", "tcp6"}),
    listen_state="LISTEN",
    pid_separator="/",
)

SCHEMAS: dict[ListingSchema, ColumnSchema] = {
    ListingSchema.WINDOWS: WINDOWS_COLUMNS,
    ListingSchema.POSIX: POSIX_COLUMNS,
}


def extract_port(address: str) -> int | None:
    """Port after the last colon of ``host:port``, or None if invalid."""
    _, sep, tail = address.rpartition(":")
    if not sep or not tail.isascii() or not tail.isdigit():
        return None
    port = int(tail)
    if not 1 <= port <= MAX_PORT:
        return None
    return port


def _extract_pid(token: str, separator: str | None) -> int | None:
    if separator is not None:
        token = token.split(separator, 1)[0]
    if not token.isascii() or not token.isdigit():
        return None
    return int(token)


def parse_line(line: str, columns: ColumnSchema) -> tuple[int, int] | None:
    """Parse one listing line; None if it is not a listening TCP socket."""
    parts = line.split()
    if len(parts) < columns.min_tokens:
        return None
    if parts[columns.protocol] not in columns.protocols:
        return None
    if parts[columns.state] != columns.listen_state:
        return None

    port = extract_port(parts[columns.local_address])
    if port is None:
        logger.debug("Skipping line with bad local address: %r", line)
        return None

    pid = _extract_pid(parts[columns.pid], columns.pid_separator)
    if pid is None:
        logger.debug("Skipping line with bad pid: %r", line)
        return None

    return port, pid


def parse_listing(
    text: str, schema: ListingSchema | ColumnSchema
) -> Iterator[tuple[int, int]]:
    """Lazily yield ``(port, pid)`` for each listening TCP line in ``text``."""
    columns = schema if isinstance(schema, ColumnSchema) else SCHEMAS[schema]
    for line in text.splitlines():
        entry = parse_line(line, columns)
        if entry is not None:
            yield entry
