"""portlens data models."""

from portlens.models.catalogue import ProcessFamily, ProcessRule, ProjectSignature
from portlens.models.enums import ListingSchema, PortKind, ProcessCategory, RiskLevel
from portlens.models.runtime import (
    PortRange,
    PortRecord,
    ProcessRecord,
    ProjectClassification,
    Suggestion,
    in_ranges,
)

__all__ = [
    "ProcessCategory",
    "RiskLevel",
    "ListingSchema",
    "PortKind",
    "PortRange",
    "in_ranges",
    "ProcessRecord",
    "ProjectClassification",
    "Suggestion",
    "PortRecord",
    "ProcessRule",
    "ProjectSignature",
    "ProcessFamily",
]
