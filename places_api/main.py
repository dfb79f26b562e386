"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from places_api.api import places, users
from places_api.config import get_settings
from places_api.exceptions import (
    PlacesAPIError,
    http_exception_handler,
    places_api_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"Starting places API ({settings.environment})")
    yield
    logger.info("Places API shut down")


app = FastAPI(
    title="Places API",
    description="Share places with geocoded locations",
    version="0.1.0",
    lifespan=lifespan,
)

# Browsers negotiate cross-origin access with an OPTIONS pre-flight; the
# middleware answers it before any route or auth dependency runs.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
)

app.add_exception_handler(PlacesAPIError, places_api_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Register routers
app.include_router(places.router)
app.include_router(users.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
