"""Typer CLI for portlens."""

from __future__ import annotations

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from portlens.config import PortlensConfig
from portlens.core.actions import terminate_process
from portlens.core.engine import PortEngine
from portlens.core.filters import filter_ports, port_stats
from portlens.errors import PortlensError, ProcessActionError, SourceError
from portlens.logging_setup import setup_logging
from portlens.mcp.formatters import format_port_ranges, format_ports_json
from portlens.models.enums import PortKind, RiskLevel
from portlens.models.runtime import PortRecord

app = typer.Typer(
    name="portlens",
    help="Explain which process owns each listening port, and what to do about it.",
    no_args_is_help=True,
)
console = Console(stderr=True)

_RISK_STYLE = {
    RiskLevel.NONE: "dim",
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
}


def _engine() -> PortEngine:
    return PortEngine.from_config(PortlensConfig.load())


def _build_engine() -> PortEngine:
    try:
        return _engine()
    except (PortlensError, ValueError) as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(1) from exc


def _collect() -> tuple[PortEngine, list[PortRecord]]:
    engine = _build_engine()
    try:
        return engine, engine.list_listening_ports()
    except SourceError as exc:
        console.print(f"[red]Cannot take port snapshot:[/red] {exc}")
        raise typer.Exit(1) from exc


def _suggestion_text(record: PortRecord) -> str:
    if not record.suggestions:
        return "—"
    return ", ".join(
        f"[{_RISK_STYLE[s.risk_level]}]{s.action}[/{_RISK_STYLE[s.risk_level]}]"
        for s in record.suggestions
    )


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging to stderr")] = False,
) -> None:
    if verbose:
        setup_logging(logging.DEBUG)


@app.command()
def ports(
    search: Annotated[Optional[str], typer.Option("--search", "-s", help="Port, process or project substring")] = None,
    kind: Annotated[PortKind, typer.Option("--type", "-t", help="Filter by kind")] = PortKind.ALL,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON records to stdout")] = False,
) -> None:
    """List listening TCP ports with their owning processes."""
    engine, records = _collect()
    selected = filter_ports(records, search=search or "", kind=kind)

    if as_json:
        typer.echo(format_ports_json(selected))
        return

    if not selected:
        console.print("[dim]No listening ports found.[/dim]")
        return

    table = Table(title="Listening Ports")
    table.add_column("Port", justify="right", style="bold")
    table.add_column("PID", justify="right")
    table.add_column("Process")
    table.add_column("Project")
    table.add_column("Suggestions")

    for r in selected:
        project = f"{r.project.name} ({r.project.project_type})" if r.project else "—"
        table.add_row(
            str(r.port),
            str(r.process.pid),
            escape(engine.rules.friendly_name(r.process.name)),
            escape(project),
            _suggestion_text(r),
        )
    console.print(table)

    stats = port_stats(records)
    console.print(
        f"[dim]{stats['total']} ports · {stats['development']} development · "
        f"{stats['docker']} docker · {stats['system']} system[/dim]"
    )


@app.command()
def port(
    number: Annotated[int, typer.Argument(help="Port number", min=1, max=65535)],
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON record to stdout")] = False,
) -> None:
    """Explain what is listening on a single port."""
    engine, records = _collect()
    record = next((r for r in records if r.port == number), None)

    if record is None:
        rule = engine.rules.by_port(number)
        console.print(f"[yellow]Nothing is listening on port {number}.[/yellow]")
        if rule:
            console.print(f"  Usually used by {escape(rule.app_name)} ({escape(rule.process_name)})")
        raise typer.Exit(1)

    if as_json:
        typer.echo(format_ports_json([record]))
        return

    proc = record.process
    console.print(f"\n[bold]Port {record.port}[/bold] — {record.protocol} {record.status}")
    console.print(f"  Process: {escape(engine.rules.friendly_name(proc.name))} ({escape(proc.name)}, PID {proc.pid})")
    if proc.exe_path:
        console.print(f"  Executable: {escape(proc.exe_path)}")
    if proc.cmd:
        console.print(f"  Command: {escape(' '.join(proc.cmd))}")
    if record.project:
        console.print(f"  Project: {escape(record.project.name)} ({escape(record.project.project_type)})")
        console.print(f"    {escape(record.project.description)}")
        if record.project.path:
            console.print(f"    Path: {escape(record.project.path)}")

    for s in record.suggestions:
        style = _RISK_STYLE[s.risk_level]
        console.print(f"  [{style}]• {s.action}[/{style}] — {s.description} ({s.risk_level.value})")


@app.command()
def rules(
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Show the rule for this port")] = None,
) -> None:
    """Show the catalogue of known processes."""
    engine = _build_engine()

    if port is not None:
        rule = engine.rules.by_port(port)
        if rule is None:
            console.print(f"[dim]No known process uses port {port}.[/dim]")
            return
        selected = [rule]
    else:
        selected = list(engine.rules)

    table = Table(title="Known Processes")
    table.add_column("Process", style="bold")
    table.add_column("Application")
    table.add_column("Category")
    table.add_column("Ports")
    table.add_column("Actions")

    for r in selected:
        table.add_row(
            escape(r.process_name),
            escape(r.app_name),
            r.category.value,
            format_port_ranges(r.port_ranges),
            ", ".join(r.actions) or "—",
        )
    console.print(table)


@app.command()
def kill(
    pid: int,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
) -> None:
    """Terminate the process owning a port (core OS processes are refused)."""
    if not yes:
        typer.confirm(f"Terminate process {pid}?", abort=True)

    try:
        exited = terminate_process(pid)
    except ProcessActionError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc

    if exited:
        console.print(f"[green]Terminated process {pid}[/green]")
    else:
        console.print(f"[yellow]Process {pid} did not exit in time[/yellow]")
        raise typer.Exit(1)


def main() -> None:
    """Entry point for the portlens CLI."""
    app()


if __name__ == "__main__":
    main()
