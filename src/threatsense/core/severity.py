"""Severity levels, the threat-code severity table and presentation helpers."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class Severity(str, Enum):
    """Ordered impact level of a threat event: low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    @classmethod
    def _coerce(cls, other):
        # Plain strings are read as severity names; unknown names raise ValueError
        if isinstance(other, Severity):
            return other
        if isinstance(other, str):
            return cls(other)
        return None

    # str already defines ordering; compare by rank, not alphabetically
    def __lt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_ORDER = (Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL)

# Known threat codes. Append entries as codes are catalogued; anything
# missing here is classified as medium.
THREAT_SEVERITY_MAP: Dict[str, Severity] = {
    "A7QJ3W": Severity.MEDIUM,  # Developer Options Enabled
}

# Known external IDs with a short human-readable description
THREAT_TYPE_DESCRIPTIONS: Dict[str, str] = {
    "DeveloperOptionsEnabled": "Developer options are enabled on the device",
}

SEVERITY_COLORS: Dict[Severity, str] = {
    Severity.LOW: "#28a745",
    Severity.MEDIUM: "#ffc107",
    Severity.HIGH: "#fd7e14",
    Severity.CRITICAL: "#dc3545",
}


def determine_severity(threat_code: str) -> Severity:
    """Map a threat code to its severity, defaulting to medium for unknown codes."""
    return THREAT_SEVERITY_MAP.get(threat_code, Severity.MEDIUM)


def get_threat_description(external_id: str) -> str:
    return THREAT_TYPE_DESCRIPTIONS.get(external_id, external_id)


def get_severity_color(severity: Severity) -> str:
    return SEVERITY_COLORS[Severity(severity)]


def get_severity_text(severity: Severity) -> str:
    """Capitalized display text, e.g. ``"Critical"``."""
    return Severity(severity).value.capitalize()
