"""
API dependencies.

Provides dependency injection for services and bearer token authentication.
"""

import logging
from typing import Optional, Annotated

from fastapi import Depends, FastAPI, Header, Request

from otp_auth.auth import TokenClaims
from otp_auth.errors import DomainError, ErrorKind
from otp_auth.services import Services, create_services

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_services(app: FastAPI) -> Services:
    """
    Get the services attached to the application.

    Services are created on first use when the app was built without them.
    """
    services = getattr(app.state, "services", None)

    if services is None:
        logger.info("Initializing services...")
        services = create_services()
        app.state.services = services

    return services


def close_services(app: FastAPI):
    """Close and cleanup services."""
    services = getattr(app.state, "services", None)
    if services:
        services.close()
        app.state.services = None
        logger.info("Services closed")


# Dependency for getting services
def services_dep(request: Request) -> Services:
    """FastAPI dependency for services."""
    return get_services(request.app)


ServicesDep = Annotated[Services, Depends(services_dep)]


# Authentication dependencies

def get_token_claims(
    services: ServicesDep,
    authorization: Annotated[Optional[str], Header()] = None
) -> TokenClaims:
    """
    Validate the ``Authorization: Bearer <token>`` header.

    Raises:
        DomainError: MISSING_AUTH_HEADER, INVALID_AUTH_FORMAT or INVALID_TOKEN
    """
    if not authorization:
        raise DomainError(ErrorKind.MISSING_AUTH_HEADER)

    if not authorization.startswith(BEARER_PREFIX):
        raise DomainError(ErrorKind.INVALID_AUTH_FORMAT)

    token = authorization[len(BEARER_PREFIX):].strip()
    return services.auth.validate_token(token)


# Type aliases for dependencies
CurrentClaims = Annotated[TokenClaims, Depends(get_token_claims)]
