"""Threat handler capability set and the descriptor record implementing it."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, List, Optional, Protocol, Tuple, runtime_checkable

from pydantic import BaseModel, ConfigDict

from threatsense.core.models import ThreatEventPayload
from threatsense.core.severity import Severity

logger = logging.getLogger(__name__)

# Event-type identifiers are open strings; ThreatEventType only names the known ones.
EventTypeIdentifier = str


class ThreatEventType(str, Enum):
    ROOTED_DEVICE = "RootedDevice"
    UNKNOWN_SOURCES_ENABLED = "UnknownSourcesEnabled"
    SSL_CERTIFICATE_VALIDATION_FAILED = "SslCertificateValidationFailed"
    SSL_NON_SSL_CONNECTION = "SslNonSslConnection"
    SSL_INCOMPATIBLE_VERSION = "SslIncompatibleVersion"
    NETWORK_PROXY_CONFIGURED = "NetworkProxyConfigured"
    DEBUGGER_THREAT_DETECTED = "DebuggerThreatDetected"
    APP_IS_DEBUGGABLE = "AppIsDebuggable"
    APP_INTEGRITY_ERROR = "AppIntegrityError"
    EMULATOR_FOUND = "EmulatorFound"
    GOOGLE_EMULATOR_DETECTED = "GoogleEmulatorDetected"
    DEVELOPER_OPTIONS_ENABLED = "DeveloperOptionsEnabled"


@runtime_checkable
class ThreatHandler(Protocol):
    def can_handle(self, payload: Any) -> bool: ...
    def get_severity(self) -> Severity: ...
    def get_title(self) -> str: ...
    def get_description(self) -> str: ...
    def get_user_guidance(self) -> str: ...
    def get_recommended_actions(self) -> List[str]: ...
    def process_event(self, payload: Any) -> None: ...


def external_id_of(payload: Any) -> Optional[str]:
    """Read the event-type identifier from a payload model or mapping.

    Returns None when the payload has no usable string identifier.
    """
    if isinstance(payload, ThreatEventPayload):
        return payload.external_id
    if isinstance(payload, Mapping):
        value = payload.get("externalID")
        return value if isinstance(value, str) else None
    return None


def describe_device(payload: Any) -> str:
    """Short device line, e.g. ``"samsung SM-S911B (Android 14)"``."""
    if isinstance(payload, ThreatEventPayload):
        payload = payload.model_dump(by_alias=True)
    if not isinstance(payload, Mapping):
        return "unknown device"
    return "{} {} (Android {})".format(
        payload.get("deviceManufacturer") or "",
        payload.get("deviceModel") or "",
        payload.get("osVersion") or "?",
    ).strip()


class HandlerDescriptor(BaseModel):
    """Static guidance for one event type.

    ``event_type`` is None only for the fallback descriptor, which handles
    every payload.
    """

    model_config = ConfigDict(frozen=True)

    event_type: Optional[EventTypeIdentifier] = None
    severity: Severity
    title: str
    description: str
    user_guidance: str
    recommended_actions: Tuple[str, ...]

    @property
    def is_default(self) -> bool:
        return self.event_type is None

    def can_handle(self, payload: Any) -> bool:
        if self.is_default:
            return True
        return external_id_of(payload) == self.event_type

    def get_severity(self) -> Severity:
        return self.severity

    def get_title(self) -> str:
        return self.title

    def get_description(self) -> str:
        return self.description

    def get_user_guidance(self) -> str:
        return self.user_guidance

    def get_recommended_actions(self) -> List[str]:
        return list(self.recommended_actions)

    def process_event(self, payload: Any) -> None:
        """Emit a log record for the event. Never raises."""
        try:
            if isinstance(payload, ThreatEventPayload):
                fields = payload.model_dump(by_alias=True)
            elif isinstance(payload, Mapping):
                fields = payload
            else:
                fields = {}
            logger.info(
                "Processing threat event: %s (threatCode=%s, timestamp=%s, deviceID=%s, device=%s)",
                fields.get("externalID"),
                fields.get("threatCode"),
                fields.get("timestamp"),
                fields.get("deviceID"),
                describe_device(fields),
            )
        except Exception:  # noqa: BLE001 - handler hooks must not break callers
            logger.exception("Failed to record threat event for handler %r", self.title)
