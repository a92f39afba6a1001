"""
Main application entry point for the contact book API.

This module initializes the FastAPI application, configures logging and
CORS, checks the signing key at startup, maps core errors to HTTP
responses and includes the users and contacts routers.

Modules:
- FastAPI: Web framework
- CORSMiddleware: Middleware for handling CORS
- contactbook.database: Database engine
- contactbook.models: SQLAlchemy models
- contactbook.contacts: Contacts router
- contactbook.users: Users router
- contactbook.core: Application settings
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from contactbook import contacts, models, users
from contactbook.auth import get_token_service
from contactbook.core import configure_logging, get_settings
from contactbook.database import engine
from contactbook.errors import (
    AuthError,
    ConflictError,
    HashingError,
    NotFoundError,
    RepositoryError,
    TokenError,
    UnauthorizedError,
    ValidationError,
)

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("contactbook.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup and shutdown.

    Loads the signing key (a missing key raises ``ConfigurationError`` and
    aborts startup) and creates tables for development databases.
    """
    get_token_service()
    models.Base.metadata.create_all(bind=engine)
    logger.info("Contact book API started")
    yield


# Initialize FastAPI application
app = FastAPI(title="Contact Book API", lifespan=lifespan)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": exc.violations},
    )


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message}
    )


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": exc.message}
    )


@app.exception_handler(TokenError)
async def token_error_handler(request: Request, exc: TokenError):
    # Malformed, forged and expired tokens look the same to the client.
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": "Could not validate credentials"},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(NotFoundError)
@app.exception_handler(UnauthorizedError)
async def not_found_handler(request: Request, exc: Exception):
    # Another user's record is reported exactly like a missing one.
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Not found"}
    )


@app.exception_handler(RepositoryError)
@app.exception_handler(HashingError)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Include routers for application areas
app.include_router(users.router)
app.include_router(contacts.router)


@app.get("/")
def root():
    """
    Root endpoint for the API.

    Returns a simple JSON message directing users to the Swagger UI.

    Returns:
        dict: JSON message with information about the API
    """
    return {"msg": "Contact Book API. Visit /docs for Swagger UI"}
