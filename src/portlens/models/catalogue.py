"""Static catalogue entries: exact-name rules, signatures and families."""

from __future__ import annotations

from dataclasses import dataclass

from portlens.models.enums import ProcessCategory
from portlens.models.runtime import PortRange


@dataclass(frozen=True, slots=True)
class ProcessRule:
    """Curated knowledge about a process, keyed by its exact name."""

    process_name: str
    app_name: str
    description: str
    category: ProcessCategory = ProcessCategory.OTHER
    port_ranges: tuple[PortRange, ...] | None = None
    actions: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ProjectSignature:
    """Substring heuristic identifying a project behind a process."""

    name: str
    project_type: str
    description: str
    process_names: tuple[str, ...]
    command_patterns: tuple[str, ...]
    port_ranges: tuple[PortRange, ...] | None = None


@dataclass(frozen=True, slots=True)
class ProcessFamily:
    """Last-resort classification for a runtime, by exact process name.

    ``markers`` are ``(command substring, project type)`` pairs checked in
    order; the first hit borrows the signature registered for that project
    type. Without a hit the family default applies.
    """

    process_names: frozenset[str]
    name: str
    project_type: str
    description: str
    markers: tuple[tuple[str, str], ...] = ()
    derive_path: bool = True
