# app/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.db import init_models
from app.utils.logger import setup_app_logging, get_logger
# Local application imports - Routes
from app.trips.router import router as trip_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create missing tables on startup when configured to
    """
    if settings.create_tables_on_startup:
        await init_models()
    yield


# Create the FastAPI app
fleet_app = FastAPI(
    title=f"Fleet Back Office - {settings.environment}",
    description="Fleet Back Office API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure logging
setup_app_logging(
    fleet_app,
    log_level=settings.log_level,
    use_json=settings.environment.lower() == "production",
    log_file=settings.log_file,
    app_name="Fleet Back Office",
    environment=settings.environment,
)
logger = get_logger(__name__)

# Add CORS middleware
fleet_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_cors_urls.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
fleet_app.include_router(trip_routes)


# Root API to check if the server is up
@fleet_app.get("/", tags=["Base"])
async def health_check():
    """
    Root API to check if the server is up
    """
    logger.info("Calling root API for testing")
    return {"status": "ok"}
