"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ro_service.config import get_settings
from ro_service.database import AsyncSessionLocal, init_db
from ro_service.notifications.dispatcher import build_notifier
from ro_service.notifications.scheduler import create_scheduler
from ro_service.routers import customers, records, notifications, technicians

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("🚀 Starting RO Service Manager...")
    await init_db()
    logger.info("✅ Database initialized successfully")

    app.state.notifier = build_notifier(settings, AsyncSessionLocal)
    scheduler = None
    if settings.scheduler_enabled:
        scheduler = create_scheduler(app.state.notifier, settings)
        scheduler.start()
        logger.info(
            "🔔 Service reminders scheduled daily at %02d:%02d (%s)",
            settings.scheduler_hour, settings.scheduler_minute, settings.scheduler_timezone,
        )
    logger.info("🌐 API available at: %s", settings.api_v1_prefix)

    yield

    # Shutdown
    if scheduler is not None:
        scheduler.shutdown(wait=False)
    logger.info("👋 Shutting down RO Service Manager...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## RO Service Manager API

    Customer, service record and reminder management for RO water purifier maintenance.

    ### Entities:
    * **Customers**: Subscribers and their installed units
    * **Records**: Service visits and next due dates
    * **Notifications**: Reminder log and manual reminder runs
    * **Technicians**: Field staff (admin only)
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(customers.router, prefix=settings.api_v1_prefix)
app.include_router(records.router, prefix=settings.api_v1_prefix)
app.include_router(notifications.router, prefix=settings.api_v1_prefix)
app.include_router(technicians.router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to RO Service Manager API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ro_service.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
