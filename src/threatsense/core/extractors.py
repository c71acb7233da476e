"""Payload validation and projection of a payload into its sub-records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List

from threatsense.core.models import (
    BuildInfo,
    DeviceInfo,
    SecurityInfo,
    ThreatDetails,
    ThreatEventPayload,
    ThreatIdentifiers,
    ThreatMessages,
)

REQUIRED_FIELDS = (
    "reasonCode",
    "threatCode",
    "externalID",
    "deviceID",
    "deviceModel",
    "timestamp",
    "UUID",
    "message",
)


def missing_required_fields(payload: Any) -> List[str]:
    """Return the required wire keys that are absent (or None) on ``payload``."""
    if isinstance(payload, ThreatEventPayload):
        payload = payload.model_dump(by_alias=True)
    if not isinstance(payload, Mapping):
        return list(REQUIRED_FIELDS)
    return [field for field in REQUIRED_FIELDS if payload.get(field) is None]


def validate_payload(payload: Any) -> bool:
    """True iff every required field is present and not None.

    Values are not inspected here; any non-None value is read as text when the
    payload is processed.
    """
    return not missing_required_fields(payload)


def _project(model_cls, payload: ThreatEventPayload):
    return model_cls(**{name: getattr(payload, name) for name in model_cls.model_fields})


def extract_device_info(payload: ThreatEventPayload) -> DeviceInfo:
    return _project(DeviceInfo, payload)


def extract_build_info(payload: ThreatEventPayload) -> BuildInfo:
    return _project(BuildInfo, payload)


def extract_security_info(payload: ThreatEventPayload) -> SecurityInfo:
    return _project(SecurityInfo, payload)


def extract_threat_details(payload: ThreatEventPayload) -> ThreatDetails:
    return _project(ThreatDetails, payload)


def extract_messages(payload: ThreatEventPayload) -> ThreatMessages:
    return _project(ThreatMessages, payload)


def extract_identifiers(payload: ThreatEventPayload) -> ThreatIdentifiers:
    return _project(ThreatIdentifiers, payload)
