# backend/farmdirect/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .core.config import settings
from .core.request_context import LOG_FORMAT, RequestIdFormatter, attach_request_id_filter
from .database import Base, engine, get_db_session
from .errors import register_error_handlers
from .middleware.security_headers import SecurityHeadersMiddlewareASGI
from .middleware.timing_asgi import TimingMiddlewareASGI
from .routes import health, prometheus
from .routes.v1 import auth as auth_v1, messages as messages_v1, users as users_v1, ws as ws_v1
from .services.messaging import relay
from .services.session_service import SessionService

# Configure logging
_log_handler = logging.StreamHandler()
_log_handler.setFormatter(RequestIdFormatter(LOG_FORMAT))
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    handlers=[_log_handler],
)
attach_request_id_filter()

logger = logging.getLogger(__name__)


def _purge_expired_sessions() -> None:
    with get_db_session() as db:
        SessionService(db).purge_expired()


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"Starting {settings.app_name} ({settings.environment})")
    Base.metadata.create_all(bind=engine)
    _purge_expired_sessions()
    logger.info(f"Relay broadcast scope: {settings.message_broadcast_scope}")

    yield

    logger.info(f"Shutting down with {relay.connection_count} relay sockets open")


app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)
# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s allow_credentials=%s", settings.cors_allowed_origins, True)

app.add_middleware(SecurityHeadersMiddlewareASGI, enable_hsts=settings.is_production)
app.add_middleware(TimingMiddlewareASGI)

api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(auth_v1.router, prefix="/auth")
api_v1.include_router(messages_v1.router, prefix="/messages")
api_v1.include_router(users_v1.router, prefix="/users")

app.include_router(api_v1)
app.include_router(ws_v1.router)
app.include_router(health.router)
app.include_router(prometheus.router)


def run() -> None:
    import uvicorn

    uvicorn.run("farmdirect.main:app", host="0.0.0.0", port=8000, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()

__all__ = ["app"]
