"""Structured integrity findings from maintenance scans."""

from dataclasses import dataclass, field
from enum import StrEnum


class Severity(StrEnum):
    """How urgently a finding needs repair."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class IntegrityViolation:
    """One finding of a data health scan. Reported, never raised."""

    severity: Severity
    table: str
    issue: str
    count: int
    fix: str
    details: list[dict] = field(default_factory=list)
