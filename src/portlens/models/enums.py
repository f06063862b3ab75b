"""Enumerations for portlens models."""

from enum import Enum


class ProcessCategory(str, Enum):
    """Broad category of a known application."""

    DEVELOPMENT = "development"
    BROWSER = "browser"
    DATABASE = "database"
    SYSTEM = "system"
    DOCKER = "docker"
    OFFICE = "office"
    MEDIA = "media"
    OTHER = "other"


class RiskLevel(str, Enum):
    """How disruptive a suggested action is."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ListingSchema(str, Enum):
    """Column layout of the raw connection listing."""

    WINDOWS = "windows"
    POSIX = "posix"


class PortKind(str, Enum):
    """Coarse grouping used when filtering port records."""

    ALL = "all"
    DEVELOPMENT = "development"
    DOCKER = "docker"
    SYSTEM = "system"
