"""
SquadStats FastAPI Backend - Main Application Entry Point
"""

import asyncio

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables before imports that might use them
load_dotenv()

# Now import app modules that require environment variables
from app.dependencies import records, stat_cache_store, stat_cache_writer
from app.models.common import HealthResponse, ReadinessResponse
from app.routers import dashboard, matches, statistics
from app.services.seeder import seed_records
from app.utils.config import settings, verify_env_variables
from app.utils.logger import logger

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Match statistics backend for the SquadStats roster manager",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    debug=settings.APP_DEBUG,
)

# Log that app is initialized
logger.info("Environment variables loaded")

# Configure CORS - allow the dashboard frontend to communicate with backend
frontend_urls = [
    "http://localhost:3000",  # Local development
    "http://localhost:5173",  # Vite dev server
    "http://localhost:8080",  # Docker development
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=frontend_urls,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    max_age=86400,  # 24 hours cache for preflight requests
)


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint to verify API is running.
    Returns current API version and status.
    """
    return {
        "status": "ok",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


# Readiness check - validates essential connections
@app.get("/ready", response_model=ReadinessResponse)
async def ready_check():
    """
    Readiness check to verify that the application can serve requests.
    Validates the record store and the stat cache store.
    """
    status = {
        "records": records.ping(),
        "statCache": stat_cache_store.ping(),
    }

    is_ready = all(status.values())
    return {"ready": is_ready, "services": status}


# Register routers
app.include_router(matches.router, prefix="/matches", tags=["matches"])
app.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])


# Startup event
@app.on_event("startup")
async def startup_event():
    """
    Executes when the FastAPI application starts.
    Validate configuration and seed the record store when SEED_DATA is set.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Stat cache: mode={settings.STAT_CACHE_MODE} backend={settings.STAT_CACHE_BACKEND}")

    if settings.APP_DEBUG:
        logger.warning("Running in DEBUG mode - not recommended for production")

    # Verify environment variables
    if not verify_env_variables():
        logger.warning(
            "Some environment variables are missing or invalid. "
            "Some features may not work correctly."
        )

    if settings.SEED_DATA:
        try:
            await asyncio.to_thread(seed_records, records, settings.SEED_DATA, stat_cache_writer)
        except (OSError, ValueError) as e:
            logger.error(f"Seeding from {settings.SEED_DATA} failed, starting with an empty record store: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Executes when the FastAPI application shuts down.
    """
    logger.info(f"Shutting down {settings.APP_NAME}")


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=settings.APP_DEBUG)
