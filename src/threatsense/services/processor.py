"""Turns raw threat event payloads into processed, display-ready records."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from threatsense.core.errors import InvalidPayloadError
from threatsense.core.extractors import (
    extract_build_info,
    extract_device_info,
    extract_identifiers,
    extract_messages,
    extract_security_info,
    extract_threat_details,
    missing_required_fields,
)
from threatsense.core.models import ProcessedThreatEvent, ThreatEventPayload, ThreatSummary
from threatsense.core.severity import determine_severity, get_threat_description

logger = logging.getLogger(__name__)

APP_NAME_PLACEHOLDER = "{app_display_name}"

# Only the leading integer is read; fractional seconds are dropped
_UNIX_SECONDS = re.compile(r"\s*([+-]?\d+)")


def parse_timestamp(timestamp: Optional[str]) -> datetime:
    """Convert a Unix-seconds string to an aware UTC datetime.

    Falls back to the current time (with a warning) when no integer can be read
    or the value is out of range.
    """
    match = _UNIX_SECONDS.match(timestamp) if isinstance(timestamp, str) else None
    if match:
        try:
            return datetime.fromtimestamp(int(match.group(1)), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    logger.warning("Invalid timestamp provided (%r), using current date", timestamp)
    return datetime.now(timezone.utc)


def format_user_message(message: str, app_name: str = "This app") -> str:
    """Replace every ``{app_display_name}`` placeholder in ``message``."""
    return message.replace(APP_NAME_PLACEHOLDER, app_name)


def coerce_payload(payload: Union[ThreatEventPayload, Mapping[str, Any]]) -> ThreatEventPayload:
    """Validate ``payload`` and return it as a ThreatEventPayload.

    Raises InvalidPayloadError when a required field is missing. Field values
    of any other type are read as text by the payload model.
    """
    missing = missing_required_fields(payload)
    if missing:
        raise InvalidPayloadError(missing)
    if isinstance(payload, ThreatEventPayload):
        return payload
    return ThreatEventPayload.model_validate(payload)


def process_payload(
    payload: Union[ThreatEventPayload, Mapping[str, Any]],
    app_name: Optional[str] = None,
) -> ProcessedThreatEvent:
    """Validate, split and classify a payload into a ProcessedThreatEvent.

    Args:
        payload: Raw payload mapping (wire field names) or a ThreatEventPayload.
        app_name: Optional display name substituted into both message fields.

    Raises:
        InvalidPayloadError: if any required field is missing.
    """
    event = coerce_payload(payload)

    messages = extract_messages(event)
    if app_name:
        messages = messages.model_copy(update={
            "message": format_user_message(messages.message, app_name),
            "default_message": (
                format_user_message(messages.default_message, app_name)
                if messages.default_message is not None else None
            ),
        })

    return ProcessedThreatEvent(
        payload=event,
        device_info=extract_device_info(event),
        build_info=extract_build_info(event),
        security_info=extract_security_info(event),
        threat_details=extract_threat_details(event),
        messages=messages,
        identifiers=extract_identifiers(event),
        severity=determine_severity(event.threat_code),
        detected_at=parse_timestamp(event.timestamp),
        resolved=False,
    )


def create_summary(processed: ProcessedThreatEvent) -> ThreatSummary:
    """Condensed view of a processed event for list displays."""
    device = processed.device_info
    return ThreatSummary(
        title=get_threat_description(processed.threat_details.external_id),
        description=processed.threat_details.reason_data,
        severity=processed.severity,
        timestamp=processed.detected_at.isoformat(),
        device_info=f"{device.device_manufacturer or ''} {device.device_model}".strip(),
    )
