"""
ProjectNinjas API

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from projectninjas.api.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from projectninjas.api.routes import router as api_router
from projectninjas.config import Settings, get_settings
from projectninjas.database import Database
from projectninjas.exceptions import ProjectNinjasError
from projectninjas.kernel.files.storage import ContentStore
from projectninjas.kernel.identity.jwt import JWTManager
from projectninjas.logging_config import configure_logging, get_logger
from projectninjas.schemas.common import HealthResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    settings: Settings = app.state.settings
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    app.state.content_store.ensure_root()
    await app.state.database.create_all()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await app.state.database.dispose()


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    headers: Optional[dict] = None,
    **extra,
) -> JSONResponse:
    req_id = getattr(request.state, "request_id", None)
    headers = dict(headers or {})
    content = {"message": message, **extra}
    if req_id:
        headers[REQUEST_ID_HEADER] = req_id
        content["request_id"] = req_id
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers.setdefault("WWW-Authenticate", "Bearer")
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(ProjectNinjasError)
    async def domain_exception_handler(request: Request, exc: ProjectNinjasError):
        if exc.status_code >= 500:
            logger.error("Request failed: %s", exc.message, exc_info=exc)
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed."
        return _error_response(request, exc.status_code, message, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        errors = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            errors.append({
                "field": field,
                "message": error["msg"],
                "type": error["type"],
            })
        return _error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "Validation error",
            errors=errors,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        if settings.debug:
            return _error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                str(exc),
                type=type(exc).__name__,
            )
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and its long-lived collaborators.

    The Database, JWTManager and ContentStore are stored on ``app.state``;
    request dependencies read them from there.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.project_name,
        description="""
    ProjectNinjas API

    Owners publish projects and upload files; other users request access and
    download once the owner approves.

    - **Projects**: public listing, owner-only edits and cascading delete
    - **Files**: images become PDFs, every PDF is watermarked on upload
    - **Access requests**: pending until the owner approves or denies
    """,
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.state.settings = settings
    app.state.database = Database(settings.database_url, echo=settings.debug)
    app.state.jwt_manager = JWTManager(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        access_token_expire_minutes=settings.access_token_expire_minutes,
    )
    app.state.content_store = ContentStore(Path(settings.upload_dir))

    # Last added is outermost; CORS wraps everything
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Content-Disposition"],
    )

    _register_exception_handlers(app, settings)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Check application health."""
        database: Database = request.app.state.database
        try:
            async with database.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            db_status = "connected"
        except Exception as e:
            logger.warning("Health check database probe failed", extra={"error": str(e)})
            db_status = "unavailable"
        return HealthResponse(
            status="ok" if db_status == "connected" else "degraded",
            version=settings.version,
            database=db_status,
        )

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.project_name,
            "version": settings.version,
            "docs": "/docs" if settings.debug else "disabled",
            "api": settings.api_prefix,
        }

    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "projectninjas.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug,
    )
