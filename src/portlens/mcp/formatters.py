"""Markdown and JSON formatters for LLM-friendly output."""

from __future__ import annotations

import json
from collections.abc import Iterable

from portlens.core.rules import RuleCatalogue
from portlens.models.catalogue import ProcessRule
from portlens.models.runtime import PortRange, PortRecord

_RISK_MARK = {"none": "○", "low": "◔", "medium": "◑", "high": "●"}


def format_port_ranges(ranges: tuple[PortRange, ...] | None) -> str:
    if not ranges:
        return "—"
    return ", ".join(
        str(r.start) if r.start == r.end else f"{r.start}-{r.end}" for r in ranges
    )


def format_port(record: PortRecord, rules: RuleCatalogue | None = None) -> str:
    """Format a single port record as markdown."""
    proc = record.process
    app = rules.friendly_name(proc.name) if rules is not None else proc.name
    lines = [
        f"## Port {record.port} ({record.protocol} {record.status})",
        f"**Process:** {app} (`{proc.name}`, PID {proc.pid})  ",
    ]
    if proc.exe_path:
        lines.append(f"**Executable:** `{proc.exe_path}`  ")
    if proc.cmd:
        lines.append(f"**Command:** `{' '.join(proc.cmd)}`  ")

    if record.project:
        p = record.project
        lines.append(f"**Project:** {p.name} [{p.project_type}] — {p.description}  ")
        if p.path:
            lines.append(f"**Path:** `{p.path}`  ")
    else:
        lines.append("*No project detected*  ")

    lines.append("")
    if record.suggestions:
        lines.extend([
            "| Action | Description | Risk |",
            "|--------|-------------|------|",
        ])
        for s in record.suggestions:
            risk = s.risk_level.value
            lines.append(f"| {s.action} | {s.description} | {_RISK_MARK[risk]} {risk} |")
    else:
        lines.append("*No suggested actions*")

    return "\n".join(lines)


def format_ports(records: list[PortRecord], rules: RuleCatalogue | None = None) -> str:
    """Summary table followed by per-port details."""
    if not records:
        return "No listening ports found."

    lines = [
        "## Listening Ports",
        "",
        "| Port | PID | Process | Project |",
        "|------|-----|---------|---------|",
    ]
    for r in records:
        project = f"{r.project.name} [{r.project.project_type}]" if r.project else "—"
        lines.append(f"| {r.port} | {r.process.pid} | {r.process.name} | {project} |")

    details = "\n\n---\n\n".join(format_port(r, rules) for r in records)
    return "\n".join(lines) + "\n\n" + details


def format_ports_json(records: Iterable[PortRecord], indent: int | None = 2) -> str:
    """Serialize records for a presentation layer."""
    return json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=indent)


def format_stats(stats: dict[str, int]) -> str:
    return " · ".join(f"{k}: {v}" for k, v in stats.items())


def format_rules(rules: Iterable[ProcessRule], title: str = "Known Processes") -> str:
    """Format catalogue rules as a table."""
    rules = list(rules)
    if not rules:
        return f"## {title}\n\nNo matching rules."

    lines = [
        f"## {title}",
        "",
        "| Process | Application | Category | Ports | Actions |",
        "|---------|-------------|----------|-------|---------|",
    ]
    for r in rules:
        actions = ", ".join(r.actions) if r.actions else "—"
        lines.append(
            f"| {r.process_name} | {r.app_name} | {r.category.value} "
            f"| {format_port_ranges(r.port_ranges)} | {actions} |"
        )
    return "\n".join(lines)
