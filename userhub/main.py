"""
UserHub

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userhub.api.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from userhub.api.v1 import router as api_router
from userhub.config import Settings, get_settings
from userhub.kernel.errors import UserHubError
from userhub.logging_config import configure_logging, get_logger
from userhub.schemas.common import HealthResponse, first_error_message
from userhub.services import AppServices

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"


def _error_headers(request: Request, origins: List[str]) -> dict:
    """CORS and correlation headers for error responses (500s bypass CORS middleware)."""
    headers = {}
    origin = request.headers.get("origin") or ""
    if origin in origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Access-Control-Allow-Credentials"] = "true"
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers[REQUEST_ID_HEADER] = req_id
    return headers


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    origins = settings.cors_origins

    @app.exception_handler(UserHubError)
    async def domain_error_handler(request: Request, exc: UserHubError):
        headers = _error_headers(request, origins)
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers["WWW-Authenticate"] = "Bearer"
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=_error_headers(request, origins),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": first_error_message(list(exc.errors()))},
            headers=_error_headers(request, origins),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Primary store failures and anything unexpected end up here."""
        logger.exception("Unhandled exception: %s", exc)
        content = {"message": INTERNAL_ERROR_MESSAGE}
        if settings.debug:
            content["type"] = type(exc).__name__
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
            headers=_error_headers(request, origins),
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Services are created by the lifespan handler."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        configure_logging(settings)
        logger.info("Starting %s v%s", settings.project_name, settings.version)
        app.state.services = await AppServices.start(settings)

        yield

        logger.info("Shutting down...")
        await app.state.services.close()

    app = FastAPI(
        title=settings.project_name,
        description="Authenticated user directory: registration, login and user CRUD.",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings

    # Last added = outermost; CORS wraps everything
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app, settings)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Check application health."""
        return HealthResponse(status="ok", version=settings.version)

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "userhub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug,
    )
