from fastapi import APIRouter, Security, HTTPException, Depends, Request, Query, Body
from typing import Any, Dict, Optional
import secrets
from fastapi.security import APIKeyHeader
from threatsense.config.settings import settings
from threatsense.core.errors import InvalidPayloadError
from threatsense.core.models import ProcessedThreatEvent
from threatsense.core.severity import Severity, get_severity_color, get_severity_text
from threatsense.handlers.base import ThreatHandler
from threatsense.handlers.registry import ThreatHandlerRegistry
from threatsense.services.bridge import ThreatEventBridge
from threatsense.services.monitor import ThreatMonitor
from threatsense.services.processor import create_summary

router = APIRouter()
api_key_header = APIKeyHeader(name='X-API-KEY')

def get_registry(request: Request) -> ThreatHandlerRegistry:
    """
    Dependency to get the shared handler registry from the app state.
    The registry is created once in create_app() and injected from there.
    """
    return request.app.state.registry

def get_monitor(request: Request) -> ThreatMonitor:
    return request.app.state.monitor

def get_bridge(request: Request) -> ThreatEventBridge:
    return request.app.state.bridge

def get_api_key(api_key: str = Security(api_key_header)):
    # Use secrets.compare_digest to prevent timing attacks
    if settings.API_KEY and secrets.compare_digest(api_key, settings.API_KEY):
        return api_key
    else:
        raise HTTPException(
            status_code=403,
            detail='Could not validate credentials',
        )

def serialize_handler(handler: ThreatHandler, supported: bool = True) -> Dict[str, Any]:
    return {
        'supported': supported,
        'severity': handler.get_severity().value,
        'title': handler.get_title(),
        'description': handler.get_description(),
        'userGuidance': handler.get_user_guidance(),
        'recommendedActions': handler.get_recommended_actions(),
    }

def serialize_event(event: ProcessedThreatEvent, registry: ThreatHandlerRegistry) -> Dict[str, Any]:
    external_id = event.threat_details.external_id
    return {
        'event': event.model_dump(mode='json', by_alias=True),
        'summary': create_summary(event).model_dump(mode='json'),
        'handler': serialize_handler(registry.create_handler(event.payload), registry.is_supported(external_id)),
    }

@router.get('/health', tags=['Monitoring'])
def health_check():
    return {'status': 'ok'}

@router.post('/threat-events', tags=['Threat Events'], dependencies=[Security(get_api_key)])
def submit_threat_event(
    payload: Dict[str, Any] = Body(...),
    app_name: Optional[str] = Query(None, description="Display name substituted into messages"),
    monitor: ThreatMonitor = Depends(get_monitor),
    registry: ThreatHandlerRegistry = Depends(get_registry),
):
    """Process a threat event payload and return it with its handler guidance."""
    try:
        processed = monitor.handle_payload(payload, app_name=app_name)
    except InvalidPayloadError as e:
        raise HTTPException(
            status_code=422,
            detail={'message': str(e), 'missing_fields': e.missing_fields},
        )
    return serialize_event(processed, registry)

@router.post('/threat-events/native', tags=['Threat Events'], dependencies=[Security(get_api_key)])
def submit_native_threat_event(
    native_data: Dict[str, Any] = Body(...),
    bridge: ThreatEventBridge = Depends(get_bridge),
    registry: ThreatHandlerRegistry = Depends(get_registry),
):
    """Deliver a raw agent record through the bridge to its listeners.

    The event in the response is the one a listener returned for this request.
    """
    delivery = bridge.emit(native_data)
    recorded = next((r for r in delivery.results if isinstance(r, ProcessedThreatEvent)), None)
    if recorded is None:
        reason = '; '.join(delivery.errors) or 'No listener recorded the event'
        return {'delivered': False, 'event': None, 'reason': reason, 'errors': delivery.errors}
    return {'delivered': delivery.delivered, 'errors': delivery.errors, **serialize_event(recorded, registry)}

@router.get('/threat-events/latest', tags=['Threat Events'], dependencies=[Security(get_api_key)])
def get_latest_events(
    limit: int = Query(10, gt=0, le=settings.API_EVENT_LIMIT),
    monitor: ThreatMonitor = Depends(get_monitor),
    registry: ThreatHandlerRegistry = Depends(get_registry),
):
    return [serialize_event(event, registry) for event in monitor.history[:limit]]

@router.get('/threat-events/current', tags=['Threat Events'], dependencies=[Security(get_api_key)])
def get_current_event(
    monitor: ThreatMonitor = Depends(get_monitor),
    registry: ThreatHandlerRegistry = Depends(get_registry),
):
    current = monitor.current_threat
    if current is None:
        return {'event': None}
    return {
        **serialize_event(current, registry),
        'autoDismiss': monitor.should_auto_dismiss(current),
        'autoDismissAfterSeconds': monitor.auto_dismiss_after(current),
        'escalate': monitor.requires_escalation(current),
    }

@router.delete('/threat-events/current', tags=['Threat Events'], dependencies=[Security(get_api_key)])
def dismiss_current_event(monitor: ThreatMonitor = Depends(get_monitor)):
    monitor.dismiss_current_threat()
    return {'status': 'dismissed'}

@router.post('/threat-events/{uuid}/resolve', tags=['Threat Events'], dependencies=[Security(get_api_key)])
def resolve_event(
    uuid: str,
    monitor: ThreatMonitor = Depends(get_monitor),
    registry: ThreatHandlerRegistry = Depends(get_registry),
):
    resolved = monitor.resolve(uuid)
    if resolved is None:
        raise HTTPException(status_code=404, detail=f'Threat event {uuid} not found')
    return serialize_event(resolved, registry)

@router.delete('/threat-events', tags=['Threat Events'], dependencies=[Security(get_api_key)])
def clear_events(monitor: ThreatMonitor = Depends(get_monitor)):
    monitor.clear_history()
    return {'status': 'cleared'}

@router.get('/handlers', tags=['Handlers'], dependencies=[Security(get_api_key)])
def list_handlers(registry: ThreatHandlerRegistry = Depends(get_registry)):
    return {'supportedTypes': registry.get_supported_types()}

@router.get('/handlers/{event_type}', tags=['Handlers'], dependencies=[Security(get_api_key)])
def get_handler(event_type: str, registry: ThreatHandlerRegistry = Depends(get_registry)):
    handler = registry.create_handler({'externalID': event_type})
    return {'eventType': event_type, **serialize_handler(handler, registry.is_supported(event_type))}

@router.get('/severities', tags=['Handlers'])
def list_severities():
    return [
        {'severity': s.value, 'color': get_severity_color(s), 'text': get_severity_text(s)}
        for s in Severity
    ]
