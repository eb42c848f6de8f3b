"""Notification hub FastAPI application.

Serves the notification history and settings API, the WebSocket push
endpoint, and runs the event bus consumer for the lifetime of the process.
Each HTTP request is wrapped in the notifications domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay of domain.toml is applied.
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from notifications.domain import notifications
from protean.integrations.fastapi import register_exception_handlers

notifications.init()

from notifications.api.routes import router as notifications_router  # noqa: E402
from notifications.api.routes import settings_router  # noqa: E402
from notifications.auth.tokens import TokenVerifier  # noqa: E402
from notifications.channel.registry import ConnectionRegistry  # noqa: E402
from notifications.channel.websocket import router as websocket_router  # noqa: E402
from notifications.config import get_settings  # noqa: E402
from notifications.enrichment.client import AccommodationClient  # noqa: E402
from notifications.inbound.consumer import StreamConsumer  # noqa: E402
from notifications.inbound.router import TopicRouter  # noqa: E402
from notifications.utils.logging import clear_context, get_logger  # noqa: E402

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: registry, verifier, enrichment client, bus consumer
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    registry = ConnectionRegistry()
    accommodations = AccommodationClient(
        base_url=settings.accommodation_service_url,
        timeout=settings.accommodation_timeout,
    )
    event_router = TopicRouter.build(accommodations, registry)

    app.state.registry = registry
    app.state.token_verifier = TokenVerifier.from_settings(settings)
    app.state.event_router = event_router

    consumer = None
    if settings.consumer_enabled:
        consumer = StreamConsumer.from_settings(settings, event_router, notifications)
        consumer.start()
    else:
        logger.info("Event bus consumer disabled")

    yield

    if consumer is not None:
        consumer.stop()
    registry.close()
    accommodations.close()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Notification Hub API",
    description="Per-user notifications for reservations and reviews",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the notifications domain context for each request."""
    clear_context()
    with notifications.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(notifications_router)
app.include_router(settings_router)
app.include_router(websocket_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health(request: Request):
    registry = getattr(request.app.state, "registry", None)
    return JSONResponse(
        content={
            "status": "ok",
            "domain": notifications.name,
            "live_users": registry.user_count() if registry is not None else 0,
        }
    )
