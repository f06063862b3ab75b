"""Exception taxonomy for portlens.

Only whole-snapshot failures and refused process actions are raised.
Malformed listing lines and pids that vanished before lookup are dropped
quietly by the parser and engine.
"""

from __future__ import annotations


class PortlensError(Exception):
    """Base class for all portlens errors."""


class SourceError(PortlensError):
    """A data source could not produce a snapshot."""


class ListingError(SourceError):
    """The connection listing command failed to run."""


class SnapshotError(SourceError):
    """The process table could not be read."""


class CatalogueError(PortlensError):
    """A rule or signature file is malformed."""


class ProcessActionError(PortlensError):
    """An action against a process was refused or failed."""

    def __init__(self, pid: int, message: str) -> None:
        super().__init__(message)
        self.pid = pid


class ProcessNotFoundError(ProcessActionError):
    """No process with the requested pid exists."""


class ProtectedProcessError(ProcessActionError):
    """The process is a core OS process and must not be terminated."""
