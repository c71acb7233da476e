"""In-process delivery of threat events from the monitoring agent to listeners."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Mapping

from pydantic import BaseModel, Field

from threatsense.core.models import as_text

logger = logging.getLogger(__name__)

ThreatEventListener = Callable[[Dict[str, Any]], Any]

# Fallback values for fields the agent did not populate
_NATIVE_DEFAULTS: Dict[str, str] = {
    "reasonCode": "UNKNOWN",
    "deviceID": "UNKNOWN",
    "kernelInfo": "",
    "sdkVersion": "",
    "deviceModel": "",
    "fusedAppToken": "",
    "isProcReadable": "false",
    "reasonData": "",
    "buildHost": "",
    "UUID": "",
    "carrierPlmn": "no data",
    "Arch": "",
    "isAAB": "false",
    "UID": "",
    "deviceManufacturer": "",
    "threatCode": "",
    "sandboxPath": "",
    "osVersion": "",
    "buildNumber": "",
    "buildUser": "",
    "isSandboxPathWritable": "false",
    "defaultMessage": "Security threat detected",
    "deviceBoard": "",
    "basebandVersion": "",
    "deviceBrand": "",
}


def normalize_native_event(native_data: Mapping[str, Any]) -> Dict[str, Any]:
    """Fill in the payload fields the agent left empty.

    Known fields are converted to text. Any additional keys from the agent are
    passed through unchanged.
    """
    payload: Dict[str, Any] = dict(native_data)
    for field, default in _NATIVE_DEFAULTS.items():
        value = native_data.get(field)
        payload[field] = as_text(value) if value not in (None, "") else default

    payload["externalID"] = as_text(
        native_data.get("externalID") or native_data.get("threatType") or "UNKNOWN"
    )
    payload["message"] = as_text(
        native_data.get("message") or native_data.get("defaultMessage") or "Threat detected"
    )
    timestamp = native_data.get("timestamp")
    payload["timestamp"] = as_text(timestamp) if timestamp not in (None, "") else str(int(time.time()))
    return payload


class Delivery(BaseModel):
    """Outcome of one emitted event: the normalized payload plus what listeners did with it."""

    payload: Dict[str, Any]
    results: List[Any] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @property
    def delivered(self) -> bool:
        """True when at least one listener took the event and none failed."""
        return bool(self.results) and not self.errors


class ThreatEventBridge:
    """Fan-out of normalized threat events to registered listeners.

    A listener that raises is logged and skipped; the remaining listeners
    still receive the event.
    """

    def __init__(self):
        self._listeners: List[ThreatEventListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: ThreatEventListener) -> Callable[[], None]:
        """Register ``listener`` and return a function that unsubscribes it."""
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            self.remove_listener(listener)

        return unsubscribe

    def remove_listener(self, listener: ThreatEventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, native_data: Mapping[str, Any]) -> Delivery:
        """Normalize ``native_data`` and deliver it to every listener.

        Each listener's return value is collected in ``Delivery.results``;
        a listener that raises adds an entry to ``Delivery.errors`` instead.
        """
        payload = normalize_native_event(native_data)
        logger.info("Received threat event %s (%s)", payload["externalID"], payload["UUID"])

        delivery = Delivery(payload=payload)
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                delivery.results.append(listener(payload))
            except Exception as exc:  # noqa: BLE001 - one listener must not starve the others
                logger.exception("Error in threat event listener %r", listener)
                delivery.errors.append(f"{type(exc).__name__}: {exc}")
        return delivery

    def destroy(self) -> None:
        self._listeners.clear()
        logger.info("Threat event bridge destroyed")
