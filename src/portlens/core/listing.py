"""Raw connection listing from the platform's netstat."""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Callable

from portlens.errors import ListingError
from portlens.models.enums import ListingSchema

logger = logging.getLogger("portlens.listing")

ListingSource = Callable[[], str]

NETSTAT_ARGS: dict[ListingSchema, list[str]] = {
    # both address families; UDP lines are dropped by the parser
    ListingSchema.WINDOWS: ["netstat", "-ano"],
    ListingSchema.POSIX: ["netstat", "-tlnp"],
}


def default_schema() -> ListingSchema:
    """Column layout produced by netstat on this host."""
    return ListingSchema.WINDOWS if sys.platform == "win32" else ListingSchema.POSIX


def resolve_schema(value: str | ListingSchema | None) -> ListingSchema:
    """Map a config value ("auto", "windows", "posix") to a schema."""
    if isinstance(value, ListingSchema):
        return value
    if value is None or value.lower() == "auto":
        return default_schema()
    try:
        return ListingSchema(value.lower())
    except ValueError:
        raise ValueError(
            f"Unknown listing schema {value!r}; expected auto, windows or posix"
        ) from None


def netstat_listing(schema: ListingSchema) -> str:
    """Run netstat and return its stdout.

    Blocks until netstat exits; callers needing a deadline must wrap the call.
    """
    args = NETSTAT_ARGS[schema]
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            errors="replace",
            check=True,
        )
    except FileNotFoundError as exc:
        raise ListingError(f"{args[0]} not found on PATH") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        raise ListingError(
            f"{' '.join(args)} exited with status {exc.returncode}: {stderr}"
        ) from exc
    except OSError as exc:
        raise ListingError(f"Cannot run {' '.join(args)}: {exc}") from exc

    if result.stderr:
        # netstat -p without root warns that some pids are hidden
        logger.debug("netstat stderr: %s", result.stderr.strip())
    return result.stdout


def listing_source_for(schema: ListingSchema) -> ListingSource:
    """Bind ``netstat_listing`` to a schema as a zero-argument source."""

    def _source() -> str:
        return netstat_listing(schema)

    return _source
