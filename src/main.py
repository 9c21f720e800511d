from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from starlette.middleware.base import BaseHTTPMiddleware

from src.blog.domain.media import MediaStorage
from src.blog.infrastructure.adapters.cloudinary_storage import CloudinaryMediaStorage
from src.config import Settings, get_settings
from src.dependencies import extract_bearer_token
from src.shared import security
from src.shared.database import Database, close_database_engine, create_database_engine
from src.shared.exceptions import DomainError, register_exception_handlers  # central mapping
from src.shared.http.middleware.logging_middleware import LoggingMiddleware
from src.shared.logging import get_logger, setup_logging

# Admin routers
from src.admin.api.routes.doctors import router as doctors_router
from src.admin.api.routes.facilities import router as facilities_router
from src.admin.api.routes.patients import router as patients_router
from src.admin.api.routes.users import router as admin_users_router

# Blog routers
from src.blog.api.routes.blogs import router as blogs_router
from src.blog.api.routes.media import router as blog_media_router

from src.catalog.api.routes.millets import router as millets_router
from src.referral.api.routes.referrals import router as referrals_router
from src.subscription.api.routes.plans import router as plans_router
# Health router
from src.shared.health import router as health_router

log = get_logger("app")


class JwtContextMiddleware(BaseHTTPMiddleware):
    """
    Parses the Bearer JWT and attaches TokenClaims to request.state.user_claims.
    A token that fails verification leaves the claims empty and records the
    error on request.state.token_error; routes that need a caller raise it.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.user_claims = None
        request.state.token_error = None
        token = extract_bearer_token(request)
        if token:
            try:
                request.state.user_claims = security.decode_claims(token, request.app.state.settings)
            except DomainError as e:
                request.state.token_error = e

        return await call_next(request)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    media_storage: Optional[MediaStorage] = None,
) -> FastAPI:
    """
    Build the application. A database handle or media storage passed in is used
    as-is and left open on shutdown; otherwise both are created at startup from
    settings and closed on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings)
        engine = None
        owned_storage = None
        if database is None:
            engine = await create_database_engine(settings)
            app.state.db = Database(engine)
        if media_storage is None:
            owned_storage = CloudinaryMediaStorage(settings)
            app.state.media_storage = owned_storage
        log.info("app_started", environment=settings.ENVIRONMENT, version=settings.PROJECT_VERSION)
        try:
            yield
        finally:
            if owned_storage is not None:
                await owned_storage.aclose()
            if engine is not None:
                await close_database_engine(engine)
            log.info("app_stopped")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
        swagger_ui_parameters={"persistAuthorization": True},
    )
    app.state.settings = settings
    if database is not None:
        app.state.db = database
    if media_storage is not None:
        app.state.media_storage = media_storage

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    # JWT → request.state.user_claims
    app.add_middleware(JwtContextMiddleware)

    # Outermost: correlation id + access log
    app.add_middleware(LoggingMiddleware)

    # Routers
    app.include_router(admin_users_router)
    app.include_router(doctors_router)
    app.include_router(facilities_router)
    app.include_router(patients_router)
    app.include_router(referrals_router)
    app.include_router(millets_router)
    app.include_router(blogs_router)
    app.include_router(blog_media_router)
    app.include_router(plans_router)
    app.include_router(health_router)

    # Centralized error handling → {code, message, details?, correlation_id?}
    register_exception_handlers(app)

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"{settings.PROJECT_NAME} API",
            "docs": "/docs",
            "health": "/_health/db",
        }

    # ---- Custom OpenAPI to add Bearer auth ----
    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )
        schema.setdefault("components", {}).setdefault("securitySchemes", {})["bearerAuth"] = {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
        schema["security"] = [{"bearerAuth": []}]
        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi

    return app


app = create_app()
