"""Layered configuration: .portlens/config.toml -> PORTLENS_* env vars -> defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib  # 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]


@dataclass(frozen=True, slots=True)
class ListingConfig:
    """Raw listing settings."""

    # "auto", "windows" or "posix"
    schema: str = "auto"


@dataclass(frozen=True, slots=True)
class CatalogueConfig:
    """Extra rule/signature definitions layered over the built-in catalogue."""

    rules_file: str | None = None


@dataclass(frozen=True, slots=True)
class PortlensConfig:
    """Top-level configuration container."""

    project_path: Path = field(default_factory=Path.cwd)
    listing: ListingConfig = field(default_factory=ListingConfig)
    catalogue: CatalogueConfig = field(default_factory=CatalogueConfig)

    @property
    def portlens_dir(self) -> Path:
        return self.project_path / ".portlens"

    @property
    def rules_path(self) -> Path | None:
        """Absolute path of the extra catalogue file, if one is configured."""
        if not self.catalogue.rules_file:
            return None
        path = Path(self.catalogue.rules_file).expanduser()
        if not path.is_absolute():
            path = self.portlens_dir / path
        return path

    @classmethod
    def load(cls, project_path: Path | None = None) -> PortlensConfig:
        """Load config with layering: TOML file -> env vars -> defaults."""
        project = Path(project_path) if project_path else Path.cwd()
        toml_path = project / ".portlens" / "config.toml"

        toml_data: dict = {}
        if toml_path.is_file():
            with open(toml_path, "rb") as f:
                toml_data = tomllib.load(f)

        listing_data = toml_data.get("listing", {})
        catalogue_data = toml_data.get("catalogue", {})

        _listing_defaults = ListingConfig()
        _catalogue_defaults = CatalogueConfig()

        listing = ListingConfig(
            schema=str(
                os.environ.get(
                    "PORTLENS_LISTING_SCHEMA",
                    listing_data.get("schema", _listing_defaults.schema),
                )
            ).lower(),
        )

        catalogue = CatalogueConfig(
            rules_file=os.environ.get(
                "PORTLENS_RULES_FILE",
                catalogue_data.get("rules_file", _catalogue_defaults.rules_file),
            )
            or None,
        )

        return cls(project_path=project, listing=listing, catalogue=catalogue)
