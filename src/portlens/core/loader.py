"""Load extra rules and signatures from a TOML catalogue file.

Example::

    [[rules]]
    process_name = "caddy"
    app_name = "Caddy"
    description = "Caddy web server"
    category = "system"
    port_ranges = [[80, 80], [443, 443]]
    actions = ["停止服务", "重启", "查看日志"]

    [[signatures]]
    name = "Astro开发服务器"
    project_type = "Astro"
    description = "Astro静态站点开发服务"
    process_names = ["node"]
    command_patterns = ["astro"]
    port_ranges = [[4321, 4321]]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

try:
    import tomllib  # 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from portlens.errors import CatalogueError
from portlens.models.catalogue import ProcessRule, ProjectSignature
from portlens.models.enums import ProcessCategory
from portlens.models.runtime import PortRange


def read_catalogue(path: Path) -> dict[str, Any]:
    """Parse a catalogue TOML file, wrapping I/O and syntax errors."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except OSError as exc:
        raise CatalogueError(f"Cannot read catalogue file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise CatalogueError(f"Invalid TOML in {path}: {exc}") from exc


def parse_port_ranges(raw: Any) -> tuple[PortRange, ...] | None:
    """``[[start, end], ...]`` (or bare ints) -> PortRange tuple."""
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)):
        raise CatalogueError(f"port_ranges must be a list, got {raw!r}")
    ranges: list[PortRange] = []
    for item in raw:
        if isinstance(item, int):
            start = end = item
        else:
            try:
                start, end = item
            except (TypeError, ValueError):
                raise CatalogueError(f"Bad port range {item!r}") from None
        if not (isinstance(start, int) and isinstance(end, int)) or not 0 < start <= end <= 65535:
            raise CatalogueError(f"Bad port range {item!r}")
        ranges.append(PortRange(start, end))
    return tuple(ranges)


def _require(entry: dict[str, Any], key: str, kind: str) -> Any:
    try:
        return entry[key]
    except KeyError:
        raise CatalogueError(f"{kind} entry missing {key!r}: {entry!r}") from None


def _string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise CatalogueError(f"{key} must be a string, got {value!r}")
    return value


def _strings(value: Any, key: str) -> tuple[str, ...]:
    # a bare string would otherwise iterate as characters
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise CatalogueError(f"{key} must be a list of strings, got {value!r}")
    return tuple(value)


def _entries(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    entries = data.get(key, [])
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise CatalogueError(f"{key} must be an array of tables ([[{key}]])")
    return entries


def rule_from_dict(entry: dict[str, Any]) -> ProcessRule:
    category = entry.get("category", ProcessCategory.OTHER.value)
    try:
        category = ProcessCategory(str(category).lower())
    except ValueError:
        raise CatalogueError(f"Unknown category {category!r}") from None

    return ProcessRule(
        process_name=_string(_require(entry, "process_name", "rule"), "process_name"),
        app_name=_string(_require(entry, "app_name", "rule"), "app_name"),
        description=_string(entry.get("description", ""), "description"),
        category=category,
        port_ranges=parse_port_ranges(entry.get("port_ranges")),
        actions=_strings(entry.get("actions", ()), "actions"),
    )


def signature_from_dict(entry: dict[str, Any]) -> ProjectSignature:
    return ProjectSignature(
        name=_string(_require(entry, "name", "signature"), "name"),
        project_type=_string(_require(entry, "project_type", "signature"), "project_type"),
        description=_string(entry.get("description", ""), "description"),
        process_names=_strings(_require(entry, "process_names", "signature"), "process_names"),
        command_patterns=_strings(
            _require(entry, "command_patterns", "signature"), "command_patterns"
        ),
        port_ranges=parse_port_ranges(entry.get("port_ranges")),
    )


def rules_from_catalogue(data: dict[str, Any]) -> list[ProcessRule]:
    """``[[rules]]`` entries of parsed catalogue data, in file order."""
    return [rule_from_dict(entry) for entry in _entries(data, "rules")]


def signatures_from_catalogue(data: dict[str, Any]) -> list[ProjectSignature]:
    """``[[signatures]]`` entries of parsed catalogue data, in file order."""
    return [signature_from_dict(entry) for entry in _entries(data, "signatures")]


def load_rules(path: Path) -> list[ProcessRule]:
    return rules_from_catalogue(read_catalogue(path))


def load_signatures(path: Path) -> list[ProjectSignature]:
    return signatures_from_catalogue(read_catalogue(path))
