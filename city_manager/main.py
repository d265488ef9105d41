"""
City Manager API - Main application entry point.

Lists, searches, paginates and edits city records stored in MongoDB.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from city_manager.core.config import get_settings
from city_manager.core.database import Database
from city_manager.core.exceptions import AppException
from city_manager.core.middleware import MaxBodySizeMiddleware
from city_manager.cities.service import CitiesService
from city_manager.cities.views import router as cities_router, search_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    await Database.connect()
    await CitiesService.ensure_indexes()
    yield
    # Shutdown
    await Database.disconnect()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## City Manager API

- Search cities by name (case-insensitive substring), five per page
- Create, read, update and delete cities
- City names are unique ignoring letter case
    """,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MaxBodySizeMiddleware)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    return JSONResponse(status_code=exc.status_code, content={exc.key: exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(p for p in first.get("loc", ()) if isinstance(p, str) and p != "body")
        detail = f"Invalid {field}: {first.get('msg')}" if field else first.get("msg")
    else:
        detail = "Invalid request"
    return JSONResponse(status_code=400, content={"error": detail})


app.include_router(search_router)
app.include_router(cities_router)


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if Database.client else "disconnected",
        "version": settings.APP_VERSION,
    }


def run():
    """Console entry point."""
    uvicorn.run(
        "city_manager.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
