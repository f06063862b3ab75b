"""Frozen dataclass models for port/process observations."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from portlens.models.enums import RiskLevel


@dataclass(frozen=True, slots=True)
class PortRange:
    """Inclusive range of port numbers."""

    start: int
    end: int

    def contains(self, port: int) -> bool:
        return self.start <= port <= self.end


def in_ranges(port: int, ranges: tuple[PortRange, ...] | None) -> bool:
    """True if ``port`` falls in at least one of ``ranges``."""
    if not ranges:
        return False
    return any(r.contains(port) for r in ranges)


@dataclass(frozen=True, slots=True)
class ProcessRecord:
    """An OS process as captured by the last snapshot refresh."""

    pid: int
    name: str
    exe_path: str | None = None
    cmd: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ProjectClassification:
    """What kind of project a process appears to be serving."""

    name: str
    project_type: str
    description: str
    path: str | None = None


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A recommended action for a port/process pair."""

    action: str
    description: str
    risk_level: RiskLevel


@dataclass(frozen=True, slots=True)
class PortRecord:
    """One listening TCP port with its owning process and advice."""

    port: int
    process: ProcessRecord
    protocol: str = "TCP"
    status: str = "LISTENING"
    project: ProjectClassification | None = None
    suggestions: tuple[Suggestion, ...] = ()

    def to_dict(self) -> dict:
        """Plain dict suitable for ``json.dumps``."""
        data = asdict(self)
        data["process"]["cmd"] = list(self.process.cmd)
        data["suggestions"] = [
            {**s, "risk_level": RiskLevel(s["risk_level"]).value}
            for s in data["suggestions"]
        ]
        return data
