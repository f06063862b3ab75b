"""Shared fixtures: fake listing and process-table sources."""

import pytest

from portlens.core.engine import PortEngine
from portlens.core.snapshot import ProcessSnapshotProvider
from portlens.models.enums import ListingSchema
from portlens.models.runtime import ProcessRecord

WINDOWS_LISTING = """
Active Connections

  Proto  Local Address          Foreign Address        State           PID
  TCP    0.0.0.0:3000           0.0.0.0:0              LISTENING       4321
  TCP    0.0.0.0:135            0.0.0.0:0              LISTENING       900
  TCP    127.0.0.1:3000         127.0.0.1:52100        ESTABLISHED     4321
  TCP    0.0.0.0:7777           0.0.0.0:0              LISTENING       5555
"""

NODE_REACT = ProcessRecord(
    pid=4321,
    name="node.exe",
    exe_path="C:\\Program Files\\nodejs\\node.exe",
    cmd=("node", "C:\\proj\\react-scripts\\start.js"),
)
SVCHOST = ProcessRecord(pid=900, name="svchost.exe", cmd=("svchost.exe", "-k", "RPCSS"))


class FakeProcessTable:
    """Process-table source that counts reads and can be told to fail."""

    def __init__(self, processes=(), error=None):
        self.processes = list(processes)
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.processes)


@pytest.fixture
def process_table():
    return FakeProcessTable([NODE_REACT, SVCHOST])


@pytest.fixture
def make_engine():
    """Factory building a PortEngine over fake sources."""

    def _make(listing=WINDOWS_LISTING, processes=None, schema=ListingSchema.WINDOWS, **kwargs):
        table = processes if isinstance(processes, FakeProcessTable) else FakeProcessTable(
            [NODE_REACT, SVCHOST] if processes is None else processes
        )
        source = listing if callable(listing) else (lambda: listing)
        return PortEngine(
            snapshot=ProcessSnapshotProvider(table),
            listing_source=source,
            schema=schema,
            **kwargs,
        )

    return _make


@pytest.fixture
def node_react():
    return NODE_REACT


@pytest.fixture
def svchost():
    return SVCHOST


@pytest.fixture
def windows_listing():
    return WINDOWS_LISTING
