"""FastMCP server factory with read-only port inspection tools."""

from __future__ import annotations

import logging

from portlens.config import PortlensConfig
from portlens.core.engine import PortEngine
from portlens.core.filters import filter_ports, port_stats
from portlens.errors import PortlensError
from portlens.mcp.formatters import (
    format_port,
    format_ports,
    format_ports_json,
    format_rules,
    format_stats,
)
from portlens.models.enums import PortKind

logger = logging.getLogger("portlens.mcp")


def render_ports(
    engine: PortEngine,
    search: str = "",
    kind: str = "all",
    as_json: bool = False,
) -> str:
    """Body of the ``portlens_ports`` tool."""
    try:
        port_kind = PortKind(kind.lower())
    except ValueError:
        return f"Invalid kind '{kind}'. Must be: all, development, docker, system."

    try:
        records = engine.list_listening_ports()
    except PortlensError as exc:
        logger.warning("Port listing failed: %s", exc)
        return f"Error listing ports: {exc}"

    selected = filter_ports(records, search=search, kind=port_kind)
    if as_json:
        return format_ports_json(selected)
    return format_stats(port_stats(records)) + "\n\n" + format_ports(selected, engine.rules)


def render_port(engine: PortEngine, port: int) -> str:
    """Body of the ``portlens_port`` tool."""
    if not 1 <= port <= 65535:
        return f"Invalid port {port}. Must be 1-65535."
    try:
        record = engine.get_port_info(port)
    except PortlensError as exc:
        logger.warning("Port lookup failed: %s", exc)
        return f"Error inspecting port {port}: {exc}"

    if record is None:
        rule = engine.rules.by_port(port)
        hint = f" Usually used by {rule.app_name} (`{rule.process_name}`)." if rule else ""
        return f"Nothing is listening on port {port}.{hint}"
    return format_port(record, engine.rules)


def render_rules(engine: PortEngine, port: int | None = None) -> str:
    """Body of the ``portlens_rules`` tool."""
    if port is None:
        return format_rules(engine.rules)
    rule = engine.rules.by_port(port)
    return format_rules([rule] if rule else [], title=f"Known Processes for Port {port}")


def create_server(config: PortlensConfig | None = None):
    """Create and return a configured FastMCP server instance.

    Args:
        config: Optional pre-loaded config. If None, loads from cwd.
    """
    from mcp.server.fastmcp import FastMCP

    mcp = FastMCP("portlens", instructions="Explain which process owns each listening port")
    _config = config or PortlensConfig.load()

    def _engine() -> PortEngine:
        # fresh engine per call: snapshot providers are not shared
        return PortEngine.from_config(_config)

    @mcp.tool()
    def portlens_ports(search: str = "", kind: str = "all", as_json: bool = False) -> str:
        """List listening TCP ports with owning process, project and suggested actions.

        Args:
            search: Match against port number, process name or project name (optional)
            kind: Filter: all, development, docker, system (default: all)
            as_json: Return JSON records instead of markdown
        """
        try:
            return render_ports(_engine(), search=search, kind=kind, as_json=as_json)
        except (PortlensError, ValueError) as exc:
            return f"Configuration error: {exc}"

    @mcp.tool()
    def portlens_port(port: int) -> str:
        """Explain what is listening on a single port and what can be done about it.

        Args:
            port: TCP port number (1-65535)
        """
        try:
            return render_port(_engine(), port)
        except (PortlensError, ValueError) as exc:
            return f"Configuration error: {exc}"

    @mcp.tool()
    def portlens_rules(port: int | None = None) -> str:
        """Show the catalogue of known processes.

        Args:
            port: Only show the first rule whose port ranges include this port (optional)
        """
        try:
            return render_rules(_engine(), port)
        except (PortlensError, ValueError) as exc:
            return f"Configuration error: {exc}"

    return mcp


def main() -> None:
    """Entry point for portlens-mcp (stdio transport)."""
    server = create_server()
    server.run()


if __name__ == "__main__":
    main()
