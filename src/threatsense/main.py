# src/threatsense/main.py
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from threatsense.api import endpoints
from threatsense.config.settings import settings
from threatsense.handlers.registry import ThreatHandlerRegistry
from threatsense.services.bridge import ThreatEventBridge
from threatsense.services.monitor import ThreatMonitor

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages the application's startup and shutdown events.
    Detaches bridge listeners on shutdown.
    """
    logger.info(
        "Application startup: %d threat handlers registered.",
        len(app.state.registry.get_supported_types()),
    )

    yield

    # --- Shutdown ---
    logger.info("Application shutdown: Cleaning up resources.")
    app.state.bridge.destroy()

def create_app(registry: ThreatHandlerRegistry | None = None) -> FastAPI:
    """Build the API with its own registry, monitor and bridge."""
    app = FastAPI(
        title='ThreatSense API',
        description='An API for classifying mobile threat events and serving remediation guidance.',
        version='1.0.0',
        lifespan=lifespan
    )

    registry = registry or ThreatHandlerRegistry()
    monitor = ThreatMonitor(registry)
    bridge = ThreatEventBridge()
    bridge.add_listener(monitor.handle_payload)

    app.state.registry = registry
    app.state.monitor = monitor
    app.state.bridge = bridge

    app.include_router(endpoints.router, prefix='/api/v1')

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": "Welcome to the ThreatSense API. Visit /docs for API documentation."}

    return app

app = create_app()
