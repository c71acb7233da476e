"""Registry mapping event-type identifiers to handler factories."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from threatsense.handlers.base import EventTypeIdentifier, ThreatHandler, external_id_of
from threatsense.handlers.catalog import BUILTIN_HANDLERS, DEFAULT_HANDLER

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[], ThreatHandler]


def constant_factory(handler: ThreatHandler) -> HandlerFactory:
    """Wrap an immutable handler so it can be registered as a factory."""
    def factory() -> ThreatHandler:
        return handler
    return factory


class ThreatHandlerRegistry:
    """Total mapping from event-type identifier to handler.

    Built-in handlers are registered on construction. Lookups for anything
    unregistered resolve to ``default_handler``. Registration is meant to
    happen during application setup; the registry does no locking.
    """

    def __init__(self, default_handler: ThreatHandler = DEFAULT_HANDLER, register_builtins: bool = True):
        self._factories: Dict[str, HandlerFactory] = {}
        self.default_handler = default_handler
        if register_builtins:
            for event_type, handler in BUILTIN_HANDLERS.items():
                self.register(event_type, constant_factory(handler))

    def register(self, event_type: EventTypeIdentifier, factory: HandlerFactory) -> None:
        """Add or replace the factory for ``event_type`` (last write wins)."""
        if not callable(factory):
            raise TypeError(f"Handler factory for {event_type!r} must be callable")
        if isinstance(event_type, Enum):
            event_type = event_type.value
        if event_type in self._factories:
            logger.info("Overriding threat handler for event type %s", event_type)
        self._factories[event_type] = factory

    def create_handler(self, payload: Any) -> ThreatHandler:
        """Resolve the handler for ``payload``'s externalID, falling back to the default."""
        event_type = external_id_of(payload)
        factory = self._factories.get(event_type) if event_type is not None else None
        if factory is None:
            if event_type is not None:
                logger.debug("No handler registered for %r; using default handler", event_type)
            return self.default_handler

        try:
            handler = factory()
        except Exception:  # noqa: BLE001 - lookup must stay total
            logger.exception("Handler factory for %r failed; using default handler", event_type)
            return self.default_handler
        if handler is None:
            logger.warning("Handler factory for %r returned None; using default handler", event_type)
            return self.default_handler
        return handler

    def get_supported_types(self) -> List[str]:
        return list(self._factories)

    def is_supported(self, event_type: Any) -> bool:
        try:
            return event_type in self._factories
        except TypeError:
            return False

    def get_handler_factory(self, event_type: EventTypeIdentifier) -> Optional[HandlerFactory]:
        return self._factories.get(event_type)
