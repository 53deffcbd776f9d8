"""SkillSwap API entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import API_VERSION
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.v1.dependencies import get_change_listener, get_directory_service
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine

logger = structlog.get_logger()

setup_logging()

DESCRIPTION = """\
## Peer-to-peer Skill Exchange

Publish the skills you offer and the ones you want, browse other members'
public profiles and trade swap requests.

### Authentication
Every endpoint except `/health`, sign-up and sign-in expects a Supabase
access token:
```
Authorization: Bearer <your_token>
```

### Rate Limits
| Endpoints | Limit |
|-----------|-------|
| GET | 30/minute |
| POST, PUT, DELETE | 10/minute |
| Sign-up, sign-in | 5/minute |
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Liveness and database reachability"},
    {"name": "auth", "description": "Account registration and sessions"},
    {"name": "profiles", "description": "Own profile, picture upload and the public directory"},
    {"name": "swap-requests", "description": "Send, answer and withdraw swap requests"},
    {"name": "admin", "description": "Platform statistics and moderation (admins only)"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Wire the directory cache to the change feed for the app's lifetime."""
    directory = get_directory_service()
    listener = get_change_listener()
    if settings.realtime_listen_enabled:
        await listener.start()
    logger.info("app_started", environment=settings.app_env, version=API_VERSION)
    try:
        yield
    finally:
        await listener.stop()
        directory.close()
        await engine.dispose()
        logger.info("app_stopped")


def _add_middleware(app: FastAPI) -> None:
    # Starlette wraps in reverse: the last one added runs first.
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )


def create_app() -> FastAPI:
    """Build the application with routers, middleware and error handlers."""
    app = FastAPI(
        title=settings.app_name,
        description=DESCRIPTION,
        version=API_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        openapi_tags=OPENAPI_TAGS,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    _add_middleware(app)
    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
