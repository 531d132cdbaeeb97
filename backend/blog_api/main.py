"""Blog API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to {success: false, message, details?}
    - CORS configured from settings, with credentials so auth cookies flow
    - Database pool created on startup and disposed on shutdown via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blog_api.api.error_handlers import register_error_handlers
from blog_api.api.routes import auth, health, posts, users
from blog_api.config import get_settings
from blog_api.infrastructure.database import close_db, init_db
from blog_api.infrastructure.observability import RequestLoggingMiddleware, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    logger.info(f"Blog API started ({settings.environment})")
    try:
        yield
    finally:
        await close_db()
        logger.info("Blog API shut down")


app = FastAPI(title="Blog API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(posts.router)

register_error_handlers(app)
