"""
FastAPI application entry point.

Configures the API with all routes and error handling.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from otp_auth import __version__
from otp_auth.config import load_config
from otp_auth.errors import DomainError, ErrorKind
from otp_auth.services import Services

from .v1.router import router as v1_router
from .deps import get_services, close_services

logger = logging.getLogger(__name__)

SERVICE_NAME = "otp-auth-service"


def error_response(error: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=error.http_status,
        content={"error": error.to_dict()}
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("Starting OTP Auth Service...")

    get_services(app)

    yield

    logger.info("Shutting down...")
    close_services(app)


def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        services: Pre-built services (tests inject these); created from the
            environment on first use otherwise
    """
    app = FastAPI(
        title="OTP Authentication Service",
        description="A backend service for OTP-based authentication and user management",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )
    app.state.services = services

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        if exc.http_status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return error_response(DomainError(ErrorKind.INVALID_REQUEST, details=details))

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return error_response(DomainError(ErrorKind.INTERNAL_ERROR))

    # Health check
    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": SERVICE_NAME}

    @app.get("/", tags=["System"])
    async def root():
        """API root endpoint."""
        return {
            "name": "OTP Authentication Service",
            "version": __version__,
            "docs": "/docs"
        }

    # Include API v1 routes
    app.include_router(v1_router, prefix="/api/v1")

    return app


def main():
    """Run the API with uvicorn."""
    config = load_config()

    # Configure logging
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    logger.info(f"Server starting on port {config.port}")
    uvicorn.run(create_app(), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
