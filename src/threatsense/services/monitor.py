"""In-memory tracking of received threat events."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Deque, List, Mapping, Optional, Union

from threatsense.config.settings import settings
from threatsense.core.models import ProcessedThreatEvent, ThreatEventPayload
from threatsense.core.severity import Severity
from threatsense.handlers.registry import ThreatHandlerRegistry
from threatsense.services.processor import process_payload

logger = logging.getLogger(__name__)


class ThreatMonitor:
    """Keeps the current threat and a bounded, newest-first history.

    History lives only in memory and is lost when the process exits. The
    monitor is shared by request threads, so the history and the current
    threat are only touched while holding ``_lock``.
    """

    def __init__(
        self,
        registry: ThreatHandlerRegistry,
        history_limit: Optional[int] = None,
        app_name: Optional[str] = None,
        auto_dismiss_low_threats: Optional[bool] = None,
        escalation_severity: Union[Severity, str, None] = None,
        auto_dismiss_delay_seconds: Optional[float] = None,
    ):
        self.registry = registry
        self.app_name = app_name if app_name is not None else settings.APP_DISPLAY_NAME
        self.auto_dismiss_low_threats = (
            auto_dismiss_low_threats
            if auto_dismiss_low_threats is not None
            else settings.AUTO_DISMISS_LOW_THREATS
        )
        self.auto_dismiss_delay_seconds = (
            auto_dismiss_delay_seconds
            if auto_dismiss_delay_seconds is not None
            else settings.AUTO_DISMISS_DELAY_SECONDS
        )
        self.escalation_severity = Severity(escalation_severity or settings.ESCALATION_SEVERITY)
        limit = history_limit if history_limit is not None else settings.THREAT_HISTORY_LIMIT
        self._lock = threading.Lock()
        self._history: Deque[ProcessedThreatEvent] = deque(maxlen=max(limit, 1))
        self._current: Optional[ProcessedThreatEvent] = None

    @property
    def current_threat(self) -> Optional[ProcessedThreatEvent]:
        with self._lock:
            return self._current

    @property
    def history(self) -> List[ProcessedThreatEvent]:
        with self._lock:
            return list(self._history)

    def handle_payload(
        self,
        payload: Union[ThreatEventPayload, Mapping[str, Any]],
        app_name: Optional[str] = None,
    ) -> ProcessedThreatEvent:
        """Process ``payload``, notify its handler and record it.

        Raises InvalidPayloadError for payloads missing required fields; nothing
        is recorded in that case.
        """
        processed = process_payload(payload, app_name=app_name or self.app_name)
        handler = self.registry.create_handler(processed.payload)
        handler.process_event(processed.payload)

        with self._lock:
            self._history.appendleft(processed)
            self._current = processed

        logger.warning(
            "[THREAT DETECTED] %s - Severity: %s (handler severity: %s, threatCode=%s, deviceID=%s)",
            processed.threat_details.external_id,
            processed.severity.value,
            handler.get_severity().value,
            processed.threat_details.threat_code,
            processed.device_info.device_id,
        )
        return processed

    def dismiss_current_threat(self) -> None:
        with self._lock:
            self._current = None

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()

    def find(self, uuid: str) -> Optional[ProcessedThreatEvent]:
        with self._lock:
            for event in self._history:
                if event.identifiers.uuid == uuid:
                    return event
        return None

    def resolve(self, uuid: str) -> Optional[ProcessedThreatEvent]:
        """Mark the most recent event with ``uuid`` as resolved.

        Records are immutable, so the stored record is replaced by a resolved copy.
        Returns the copy, or None if no such event is in the history.
        """
        with self._lock:
            for index, event in enumerate(self._history):
                if event.identifiers.uuid != uuid:
                    continue
                resolved = event.model_copy(update={"resolved": True})
                self._history[index] = resolved
                if self._current is event:
                    self._current = resolved
                break
            else:
                return None
        logger.info("Threat event %s marked as resolved", uuid)
        return resolved

    # Alert policy follows the event type's handler, not the threat-code table
    def handler_severity(self, event: ProcessedThreatEvent) -> Severity:
        return Severity(self.registry.create_handler(event.payload).get_severity())

    def should_auto_dismiss(self, event: ProcessedThreatEvent) -> bool:
        return self.auto_dismiss_low_threats and self.handler_severity(event) == Severity.LOW

    def auto_dismiss_after(self, event: ProcessedThreatEvent) -> Optional[float]:
        """Seconds a client should wait before dismissing ``event``, or None to keep it."""
        if self.should_auto_dismiss(event):
            return self.auto_dismiss_delay_seconds
        return None

    def requires_escalation(self, event: ProcessedThreatEvent) -> bool:
        return self.handler_severity(event) >= self.escalation_severity
