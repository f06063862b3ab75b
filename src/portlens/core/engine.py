"""Port/process correlation: listing -> process -> project -> suggestions."""

from __future__ import annotations

import logging

from portlens.config import PortlensConfig
from portlens.core.listing import ListingSource, listing_source_for, resolve_schema
from portlens.core.loader import read_catalogue, rules_from_catalogue, signatures_from_catalogue
from portlens.core.parser import parse_listing
from portlens.core.rules import RuleCatalogue
from portlens.core.signatures import SignatureCatalogue
from portlens.core.snapshot import ProcessSnapshotProvider
from portlens.core.suggestions import suggest
from portlens.errors import SnapshotError
from portlens.models.enums import ListingSchema
from portlens.models.runtime import PortRecord, ProcessRecord

logger = logging.getLogger("portlens.engine")


class PortEngine:
    """Builds PortRecords for every listening TCP port.

    Each call takes a fresh snapshot; nothing is cached between calls.
    The snapshot provider is owned by this engine, so concurrent callers
    need separate engines.
    """

    def __init__(
        self,
        snapshot: ProcessSnapshotProvider | None = None,
        listing_source: ListingSource | None = None,
        schema: ListingSchema | None = None,
        rules: RuleCatalogue | None = None,
        signatures: SignatureCatalogue | None = None,
    ) -> None:
        self.schema = resolve_schema(schema)
        self.snapshot = snapshot if snapshot is not None else ProcessSnapshotProvider()
        self.listing_source = (
            listing_source if listing_source is not None else listing_source_for(self.schema)
        )
        self.rules = rules if rules is not None else RuleCatalogue()
        self.signatures = signatures if signatures is not None else SignatureCatalogue()

    @classmethod
    def from_config(cls, config: PortlensConfig | None = None) -> PortEngine:
        """Engine using the configured schema and extra catalogue file."""
        config = config or PortlensConfig.load()
        rules = RuleCatalogue()
        signatures = SignatureCatalogue()

        rules_path = config.rules_path
        if rules_path is not None:
            catalogue = read_catalogue(rules_path)
            rules = RuleCatalogue.with_overrides(rules_from_catalogue(catalogue))
            signatures = SignatureCatalogue.with_overrides(signatures_from_catalogue(catalogue))
            logger.debug("Loaded extra catalogue from %s", rules_path)

        return cls(
            schema=resolve_schema(config.listing.schema),
            rules=rules,
            signatures=signatures,
        )

    def _refresh_snapshot(self) -> None:
        try:
            self.snapshot.refresh()
        except SnapshotError:
            if not self.snapshot.has_snapshot:
                raise
            logger.warning("Using stale process snapshot (%d processes)", len(self.snapshot))

    def build_record(self, port: int, process: ProcessRecord) -> PortRecord:
        """Classify ``process`` and attach suggestions for ``port``."""
        project = self.signatures.detect(process, port)
        return PortRecord(
            port=port,
            process=process,
            project=project,
            suggestions=suggest(process, project, self.rules),
        )

    def list_listening_ports(self) -> list[PortRecord]:
        """Snapshot processes, read the listing and correlate.

        Raises ListingError if the listing cannot be obtained, and
        SnapshotError if no process snapshot has ever been taken.
        """
        self._refresh_snapshot()
        text = self.listing_source()

        records: list[PortRecord] = []
        for port, pid in parse_listing(text, self.schema):
            process = self.snapshot.by_pid(pid)
            if process is None:
                logger.debug("Port %d: pid %d not in snapshot, dropped", port, pid)
                continue
            records.append(self.build_record(port, process))

        logger.debug("Found %d listening ports", len(records))
        return records

    def get_port_info(self, port: int) -> PortRecord | None:
        """The first listening record for ``port``, if any."""
        for record in self.list_listening_ports():
            if record.port == port:
                return record
        return None
